"""
Change record delivered to StateCell observers.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class StateChange:
    """Immutable description of one committed transition of a StateCell.

    For a batch, previous is the root before the first write, current is the
    root after the last write and path is None.
    """
    previous: Any
    current: Any
    path: Optional[str]  # None for root writes and batches
    merge: Optional[bool]  # None for batches
    version: int  # cell version after the transition

    def changed(self) -> bool:
        """True if the transition altered the value."""
        return self.previous != self.current

    def to_dict(self) -> Dict:
        return {
            'previous': self.previous,
            'current': self.current,
            'path': self.path,
            'merge': self.merge,
            'version': self.version,
        }
