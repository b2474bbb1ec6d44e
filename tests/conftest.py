"""
Pytest configuration for entity-logic tests.
"""

import copy
from datetime import datetime, timezone

import pytest

from entity_logic import EntityLogic, EntitySchema
from entity_logic.config import get_config
from tests.fixtures import SCHEMA, build_entities


@pytest.fixture
def now() -> datetime:
    return datetime.now(timezone.utc)


@pytest.fixture
def schema_dict() -> dict:
    """Raw schema declaration; each test gets its own copy to edit."""
    return copy.deepcopy(SCHEMA)


@pytest.fixture
def schema(schema_dict) -> EntitySchema:
    return EntitySchema.from_dict(schema_dict)


@pytest.fixture
def logic(schema_dict) -> EntityLogic:
    return EntityLogic(schema_dict)


@pytest.fixture
def entities(now):
    return build_entities(now)


@pytest.fixture
def env_config(monkeypatch):
    """
    Reload the global Config from patched environment variables.

    Usage:
        cfg = env_config(ENTITY_LOGIC_STRICT_READONLY="true")

    The config is reloaded from the real environment on teardown.
    """
    def _load(**env):
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        return get_config().reload()

    yield _load
    monkeypatch.undo()
    get_config().reload()
