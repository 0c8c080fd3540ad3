"""The pytest configuration for cognitive memory testing.

Every test gets its own memory root under ``tmp_path`` and a frozen clock, so
document contents (timestamps, archive names) are fully deterministic.
"""

import datetime
import os

import pytest

from cognitive_memory.config import Settings
from cognitive_memory.config import reset_settings
from cognitive_memory.logger_config import configure_logging
from cognitive_memory.mcp_client import MemoryToolClient
from cognitive_memory.memory import CognitiveMemory
from cognitive_memory.server import create_server
from cognitive_memory.store import DocumentStore

FIXED_NOW = datetime.datetime(2026, 10, 18, 9, 30, tzinfo=datetime.timezone.utc)


@pytest.fixture(scope="session", autouse=True)
def isolate_logs_and_metrics(tmp_path_factory):
    """Send call and error logs to a temp directory and keep metrics off."""
    original_value = os.environ.get("COGNITIVE_MEMORY_ENABLE_METRICS")
    os.environ["COGNITIVE_MEMORY_ENABLE_METRICS"] = "false"
    configure_logging(tmp_path_factory.mktemp("logs"))
    yield
    if original_value is not None:
        os.environ["COGNITIVE_MEMORY_ENABLE_METRICS"] = original_value
    else:
        os.environ.pop("COGNITIVE_MEMORY_ENABLE_METRICS", None)


@pytest.fixture(autouse=True)
def clean_settings():
    """Never let one test's cached settings leak into another."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def memory_root(tmp_path):
    root = tmp_path / "memory"
    root.mkdir()
    return root


@pytest.fixture
def fixed_clock():
    """Clock that always returns 2026-10-18T09:30:00Z."""
    return lambda: FIXED_NOW


@pytest.fixture
def settings(memory_root):
    return Settings(path=str(memory_root), enable_metrics=False)


@pytest.fixture
def store(memory_root):
    return DocumentStore(memory_root)


@pytest.fixture
def memory(store, fixed_clock):
    return CognitiveMemory(store, clock=fixed_clock)


@pytest.fixture
def mcp_server(settings, fixed_clock):
    return create_server(settings, clock=fixed_clock)


@pytest.fixture
def client(mcp_server):
    """In-process client calling the registered tool functions."""
    return MemoryToolClient(mcp_server)


@pytest.fixture
def entity_factory(memory_root):
    """Write raw entity files directly, bypassing the store."""

    def _create_entity(entity_path: str, content: str):
        file_path = memory_root / f"{entity_path}.md"
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
        return file_path

    return _create_entity
