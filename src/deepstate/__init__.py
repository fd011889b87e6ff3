"""
Copy-on-write updates for deeply nested state.

Given a nested dict and a dot-delimited path, deepstate produces a new dict
with the value at that path replaced or shallow-merged. The previous value is
never mutated, so callers holding on to it always see the old state.

Quick Start:
    >>> from deepstate import StateCell
    >>>
    >>> cell = StateCell({'user': {'profile': {'a': 1, 'b': 2}}})
    >>> before = cell.get()
    >>>
    >>> # Shallow-merge at a path (merge defaults to True)
    >>> change = cell.set('user.profile', {'b': 3, 'c': 4})
    >>> cell.get()
    {'user': {'profile': {'a': 1, 'b': 3, 'c': 4}}}
    >>>
    >>> # Missing intermediate containers are created on the way down
    >>> change = cell.set('settings.theme.color', 'dark')
    >>> before  # untouched
    {'user': {'profile': {'a': 1, 'b': 2}}}

Rules:
    - An empty path targets the root.
    - Merge happens only when the flag is set and both the current root and
      the new value are mappings; otherwise the target is overwritten.
    - Lists and tuples are opaque values: never merged, never drilled into.
    - Drilling through a non-mapping replaces it with an empty dict.

Modules:
    - path_resolver: dotted path -> key segments
    - tree_updater: copy-on-write write/merge of a nested mapping
    - state_cell: value holder with observers and batching
    - state_change: change record delivered to observers
    - config: framework defaults (separator, clone strategy, default merge)
"""

# Resolver
from deepstate.path_resolver import (
    DeepStateError,
    UnsupportedKeyKindError,
    resolve_path,
    join_path,
)

# Updater
from deepstate.tree_updater import (
    ValueKind,
    CloneStrategy,
    classify,
    is_mapping,
    shallow_merge,
    deep_clone,
    update_tree,
)

# Configuration
from deepstate.config import (
    DeepStateConfig,
    set_config,
    get_config,
    reset_config,
    config_override,
)

# Cell
from deepstate.state_change import StateChange
from deepstate.state_cell import StateCell, UNSET

__all__ = [
    # Errors
    'DeepStateError',
    'UnsupportedKeyKindError',
    # Resolver
    'resolve_path',
    'join_path',
    # Updater
    'ValueKind',
    'CloneStrategy',
    'classify',
    'is_mapping',
    'shallow_merge',
    'deep_clone',
    'update_tree',
    # Configuration
    'DeepStateConfig',
    'set_config',
    'get_config',
    'reset_config',
    'config_override',
    # Cell
    'StateChange',
    'StateCell',
    'UNSET',
]

__version__ = '1.0.0'
__description__ = 'Copy-on-write updates for deeply nested state'
