"""Pytest configuration and shared fixtures."""
import pytest

import deepstate.config as config_module
from deepstate import StateCell


@pytest.fixture(autouse=True)
def reset_framework_config():
    """Restore the framework configuration after each test."""
    original_config = config_module._config

    yield

    config_module._config = original_config


@pytest.fixture
def user_state():
    """Provide a nested user state."""
    return {'user': {'name': 'A', 'age': 1, 'profile': {'a': 1, 'b': 2}}, 'tags': ['x', 'y']}


@pytest.fixture
def cell(user_state):
    """Provide a StateCell holding the user state."""
    return StateCell(user_state, name='test')


@pytest.fixture
def recorder():
    """Provide a callback that records every StateChange it receives."""
    changes = []

    def record(change):
        changes.append(change)

    record.changes = changes
    return record
