"""
Copy-on-write updates of nested mappings.

``update_tree`` takes a root value, a resolved path, a new value and a merge
flag and returns a new root. The input root is never mutated.

Value kinds:
    Only mappings are traversed or merged. Lists and tuples (ARRAY), None
    (NULL) and everything else (SCALAR) are opaque: a write that needs to
    drill through one of them replaces it with a fresh empty dict
    (auto-vivification).

Clone strategies:
    DEEP   Deep-copy the whole root on every path write. O(size of root).
    SPINE  Shallow-copy only the containers from the root down to the
           written leaf and share every untouched branch by reference.
           O(depth * width of the spine).

    Both produce value-equal results; they differ only in the identity of
    untouched branches.
"""
import copy
import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)


class ValueKind(Enum):
    """Closed classification of state values for merge/traversal rules."""
    MAPPING = "mapping"
    ARRAY = "array"
    NULL = "null"
    SCALAR = "scalar"


class CloneStrategy(Enum):
    """How a path write copies the root before walking it."""
    DEEP = "deep"
    SPINE = "spine"


def classify(value: Any) -> ValueKind:
    """Classify a value into its ValueKind."""
    if value is None:
        return ValueKind.NULL
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if isinstance(value, (list, tuple)):
        return ValueKind.ARRAY
    return ValueKind.SCALAR


def is_mapping(value: Any) -> bool:
    return classify(value) is ValueKind.MAPPING


def shallow_merge(base: Any, overlay: Mapping) -> Dict[str, Any]:
    """Return a new dict with base's items overlaid by overlay's items.

    A non-mapping (or absent) base contributes no keys. Nested mappings in
    overlay replace the corresponding entries of base wholesale.
    """
    merged: Dict[str, Any] = dict(base) if is_mapping(base) else {}
    merged.update(overlay)
    return merged


def deep_clone(value: Any, _memo: Optional[Dict[int, Any]] = None) -> Any:
    """Deep-copy a state value.

    Every mapping (including read-only ones such as MappingProxyType) is
    rebuilt as a plain dict; lists and tuples are rebuilt element by element;
    everything else goes through copy.deepcopy. Shared and cyclic references
    are preserved via the memo.
    """
    if _memo is None:
        _memo = {}
    key = id(value)
    if key in _memo:
        return _memo[key]

    if isinstance(value, Mapping):
        clone: Dict[Any, Any] = {}
        _memo[key] = clone
        for child_key, child in value.items():
            clone[child_key] = deep_clone(child, _memo)
        return clone
    if type(value) is list:
        items: List[Any] = []
        _memo[key] = items
        items.extend(deep_clone(child, _memo) for child in value)
        return items
    if type(value) is tuple:
        return tuple(deep_clone(child, _memo) for child in value)
    return copy.deepcopy(value, _memo)


def _resolve_clone_strategy(clone_strategy: Optional[CloneStrategy]) -> CloneStrategy:
    if clone_strategy is not None:
        return clone_strategy
    from deepstate.config import get_config
    return get_config().clone_strategy


def update_tree(
    root: Any,
    segments: Sequence[str],
    value: Any,
    merge: bool,
    clone_strategy: Optional[CloneStrategy] = None,
) -> Any:
    """Produce a new root with ``value`` written at ``segments``.

    Args:
        root: Current root value. Never mutated.
        segments: Resolved path segments; empty means the root itself.
        value: Value to write. Placed into the result by reference.
        merge: Shallow-merge instead of replace when both the original root
               and value are mappings.
        clone_strategy: DEEP or SPINE. Defaults to the configured strategy.

    Returns:
        The new root value.
    """
    # Merge eligibility is decided once, against the original root, and not
    # re-checked against whatever sits at the leaf.
    can_merge = merge and is_mapping(root) and is_mapping(value)

    if not segments:
        if can_merge:
            return shallow_merge(root, value)
        return value

    if not is_mapping(root):
        logger.debug(f"Root is {classify(root).value}, replacing wholesale instead of writing at {list(segments)}")
        return value

    strategy = _resolve_clone_strategy(clone_strategy)
    if strategy is CloneStrategy.DEEP:
        new_root = deep_clone(root)
        scope = new_root
        for index, key in enumerate(segments[:-1]):
            if not is_mapping(scope.get(key)):
                logger.debug(f"Auto-vivifying {list(segments[:index + 1])} (was {classify(scope.get(key)).value})")
                scope[key] = {}
            scope = scope[key]
    else:
        new_root = dict(root)
        scope = new_root
        for index, key in enumerate(segments[:-1]):
            child = scope.get(key)
            if is_mapping(child):
                scope[key] = dict(child)
            else:
                logger.debug(f"Auto-vivifying {list(segments[:index + 1])} (was {classify(child).value})")
                scope[key] = {}
            scope = scope[key]

    leaf_key = segments[-1]
    if can_merge:
        scope[leaf_key] = shallow_merge(scope.get(leaf_key), value)
    else:
        scope[leaf_key] = value
    return new_root
