"""
StateCell: a holder for one nested state value.

The cell owns the current root value and delegates every write to the path
resolver and the tree updater. Each successful write installs a brand-new
root (the previous root is never mutated), bumps the cell version and
notifies observers with a StateChange.

Thread safety: read-current / compute-next / install-next runs under a
per-cell RLock, so overlapping writers are applied one after another, each
against the latest committed root. Changes are queued in commit order
under the same lock and delivered outside it, one at a time: an observer
that writes to the cell sees its own change delivered after the current one
has reached every observer. Delivery runs on whichever thread is draining
the queue.
"""
from collections import deque
from contextlib import contextmanager
import logging
import threading
from typing import Any, Callable, Deque, Generator, List, Optional

from deepstate.path_resolver import PathLike, join_path, resolve_path
from deepstate.state_change import StateChange
from deepstate.tree_updater import CloneStrategy, update_tree

logger = logging.getLogger(__name__)


class _Unset:
    """Sentinel type for an uninitialised cell."""
    _instance: Optional['_Unset'] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'UNSET'

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> '_Unset':
        return self

    def __deepcopy__(self, memo) -> '_Unset':
        return self

    def __reduce__(self):
        return (_Unset, ())


UNSET = _Unset()

# Marks "no write yet" inside a batch (UNSET is a legal previous root).
_NO_WRITES = object()


class StateCell:
    """Holder of a nested state value with path-based, copy-on-write updates.

    Example:
        cell = StateCell({'user': {'name': 'A', 'age': 1}})
        cell.set('user.name', 'B', merge=False)
        cell.get()  # {'user': {'name': 'B', 'age': 1}}
    """

    def __init__(
        self,
        initial_value: Any = UNSET,
        *,
        name: Optional[str] = None,
        clone_strategy: Optional[CloneStrategy] = None,
    ):
        """
        Args:
            initial_value: Starting root value (UNSET if omitted).
            name: Label used in logs and repr.
            clone_strategy: Per-cell clone strategy; None uses the configured one.
        """
        self.name = name
        self._value = initial_value
        self._version = 0
        self._clone_strategy = clone_strategy
        self._lock = threading.RLock()
        self._on_change_callbacks: List[Callable[[StateChange], None]] = []
        self._batch_depth = 0
        self._batch_start: Any = _NO_WRITES
        self._pending: Deque[StateChange] = deque()
        self._notifying = False

    def __repr__(self) -> str:
        return f"StateCell(name={self.name!r}, version={self._version}, value={self._value!r})"

    @property
    def value(self) -> Any:
        return self.get()

    @property
    def version(self) -> int:
        """Number of successful writes since construction."""
        return self._version

    def get(self) -> Any:
        """Return the current root value."""
        return self._value

    def set(self, path: PathLike = None, value: Any = None, merge: Optional[bool] = None) -> StateChange:
        """Write value at path and install the resulting root.

        Args:
            path: Dotted path (or pre-split segments); None/"" targets the root.
            value: New value.
            merge: Shallow-merge mappings instead of replacing. None uses the
                   configured default (True unless reconfigured).

        Returns:
            The StateChange that was (or, inside a batch, will be) reported.

        Raises:
            UnsupportedKeyKindError: If the path has a non-string segment. The
                stored value and version are left untouched.
        """
        segments = resolve_path(path)
        if merge is None:
            from deepstate.config import get_config
            merge = get_config().default_merge

        with self._lock:
            previous = self._value
            current = update_tree(previous, segments, value, merge, self._clone_strategy)
            self._value = current
            self._version += 1
            change = StateChange(
                previous=previous,
                current=current,
                path=join_path(segments),
                merge=merge,
                version=self._version,
            )
            logger.debug(f"StateCell {self.name!r}: set path={change.path!r} merge={merge} version={self._version}")
            if self._batch_depth:
                if self._batch_start is _NO_WRITES:
                    self._batch_start = previous
                return change
            self._pending.append(change)

        self._drain()
        return change

    @contextmanager
    def batch(self) -> Generator['StateCell', None, None]:
        """Defer observer notification until the outermost batch exits.

        Writes inside the block are committed immediately (get() sees them);
        observers receive a single StateChange for the net transition. No
        notification is sent if nothing was written. Writes are not rolled
        back if the block raises.

        The batch is cell-wide, not per thread: writes made by other threads
        while a batch is open are committed as usual but folded into the
        same batch notification.
        """
        with self._lock:
            self._batch_depth += 1

        change = None
        try:
            yield self
        finally:
            with self._lock:
                self._batch_depth -= 1
                if self._batch_depth == 0 and self._batch_start is not _NO_WRITES:
                    change = StateChange(
                        previous=self._batch_start,
                        current=self._value,
                        path=None,
                        merge=None,
                        version=self._version,
                    )
                    self._batch_start = _NO_WRITES
                    self._pending.append(change)
            if change is not None:
                self._drain()

    # ========== OBSERVERS ==========

    def on_change(self, callback: Callable[[StateChange], None]) -> None:
        """Subscribe to committed changes."""
        if callback not in self._on_change_callbacks:
            self._on_change_callbacks.append(callback)
            logger.debug(f"StateCell {self.name!r}: connected change listener {callback}")

    def off_change(self, callback: Callable[[StateChange], None]) -> None:
        """Unsubscribe from committed changes."""
        if callback in self._on_change_callbacks:
            self._on_change_callbacks.remove(callback)
            logger.debug(f"StateCell {self.name!r}: disconnected change listener {callback}")

    def _notify(self, change: StateChange) -> None:
        """Fire change callbacks (best-effort)."""
        for callback in list(self._on_change_callbacks):
            try:
                callback(change)
            except Exception as e:
                logger.warning(f"Error in change callback for StateCell {self.name!r}: {e}")

    def _drain(self) -> None:
        """Deliver queued changes in commit order.

        Re-entrant calls (an observer writing to the cell) and concurrent
        calls return immediately; the active drainer delivers their changes.
        """
        with self._lock:
            if self._notifying:
                return
            self._notifying = True
        try:
            while True:
                with self._lock:
                    if not self._pending:
                        self._notifying = False
                        return
                    change = self._pending.popleft()
                self._notify(change)
        except BaseException:
            with self._lock:
                self._notifying = False
            raise
