"""
Dot-notated path resolution.

Turns a path such as ``"user.profile.name"`` into the ordered tuple of key
segments the tree updater walks. The empty path (``None`` or ``""``) means
"the root itself" and resolves to an empty tuple.

Segments are never trimmed or validated for content: ``"a..b"`` resolves to
``("a", "", "b")``. The only rejected input is a segment that is not a plain
string key.
"""
import logging
from typing import Iterable, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

PathLike = Union[None, str, Sequence[str]]


class DeepStateError(Exception):
    """Base class for all deepstate errors."""


class UnsupportedKeyKindError(DeepStateError, TypeError):
    """Raised when a path segment cannot be used as a plain string key."""

    def __init__(self, segment, path=None):
        self.segment = segment
        self.path = path
        super().__init__(
            f"Unsupported key kind {type(segment).__name__} ({segment!r}) in path {path!r}; "
            f"only string keys are supported"
        )


def _get_separator(separator: Optional[str]) -> str:
    if separator is not None:
        if not separator or not isinstance(separator, str):
            raise ValueError(f"separator must be a non-empty string, got {separator!r}")
        return separator
    from deepstate.config import get_config
    return get_config().separator


def resolve_path(path: PathLike, separator: Optional[str] = None) -> Tuple[str, ...]:
    """Resolve a path into its ordered key segments.

    Args:
        path: Dotted path string, an already-split sequence of string
              segments, or None/"" for the root.
        separator: Segment separator. Defaults to the configured separator.

    Returns:
        Tuple of segments; empty for the root.

    Raises:
        UnsupportedKeyKindError: If any segment (or the path itself) is not
            a string. No partial result is produced.
    """
    if path is None:
        return ()

    if isinstance(path, str):
        if not path:
            return ()
        return tuple(path.split(_get_separator(separator)))

    if not isinstance(path, (list, tuple)):
        raise UnsupportedKeyKindError(path, path)

    segments = tuple(path)
    for segment in segments:
        if not isinstance(segment, str):
            raise UnsupportedKeyKindError(segment, path)
    return segments


def join_path(segments: Iterable[str], separator: Optional[str] = None) -> Optional[str]:
    """Join segments back into a dotted path (None for the root)."""
    segments = tuple(segments)
    if not segments:
        return None
    return _get_separator(separator).join(segments)
