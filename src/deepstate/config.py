"""
Framework configuration for deepstate.

Holds the process-wide defaults that the resolver, updater and cells fall
back to when a call does not say otherwise:

- separator: path segment separator (default ".")
- clone_strategy: how path writes copy the root (default DEEP)
- default_merge: merge flag used by StateCell.set when merge is omitted

Resolution order for every knob: explicit argument > per-cell setting >
this module's config.
"""
from contextlib import contextmanager
from dataclasses import dataclass, replace
import logging
from typing import Generator

from deepstate.tree_updater import CloneStrategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeepStateConfig:
    """Immutable framework configuration."""
    separator: str = "."
    clone_strategy: CloneStrategy = CloneStrategy.DEEP
    default_merge: bool = True

    def __post_init__(self):
        if not self.separator:
            raise ValueError("separator must be a non-empty string")
        if not isinstance(self.clone_strategy, CloneStrategy):
            # Accept the enum's string value ("deep"/"spine")
            object.__setattr__(self, 'clone_strategy', CloneStrategy(self.clone_strategy))


_config: DeepStateConfig = DeepStateConfig()


def set_config(config: DeepStateConfig) -> None:
    """Install a new framework configuration."""
    global _config
    _config = config
    logger.debug(f"deepstate config set: {config}")


def get_config() -> DeepStateConfig:
    """Get the current framework configuration."""
    return _config


def reset_config() -> None:
    """Restore the default configuration."""
    set_config(DeepStateConfig())


@contextmanager
def config_override(**changes) -> Generator[DeepStateConfig, None, None]:
    """Temporarily replace configuration fields.

    Example:
        with config_override(separator="/"):
            cell.set("user/name", "B")
    """
    previous = get_config()
    set_config(replace(previous, **changes))
    try:
        yield get_config()
    finally:
        set_config(previous)
