"""Shared test fixtures for the Farmstead test suite."""

from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from farmstead.audit.models import Actor
from farmstead.cache.repository import ReadThroughRepository
from farmstead.cache.stores.inmemory import InMemoryKeyValueStore
from farmstead.catalog.models import PRICE_FIELDS
from farmstead.connectivity.monitor import StaticConnectivityMonitor
from farmstead.remote.inmemory import AuditTrigger, InMemoryRemoteService


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "app_name = 'test'",
                "development.toml": "debug = true",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            (test_config_dir / filename).write_text(content)

    return _create_toml_files


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test."""
    from farmstead.config import get_settings
    from farmstead.config.settings import set_toml_config

    get_settings.cache_clear()
    set_toml_config({})
    yield
    get_settings.cache_clear()
    set_toml_config({})


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    """Fresh in-memory key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def monitor() -> StaticConnectivityMonitor:
    """Connectivity monitor reporting online until switched."""
    return StaticConnectivityMonitor(online=True)


@pytest.fixture
def repository(kv_store, monitor) -> ReadThroughRepository:
    """Repository over the in-memory store and static monitor."""
    return ReadThroughRepository(kv_store, monitor)


@pytest.fixture
def remote() -> InMemoryRemoteService:
    """In-memory backend with the products audit trigger installed."""
    return InMemoryRemoteService(
        triggers={
            "products": AuditTrigger(
                audit_table="products_audit",
                audited_fields=PRICE_FIELDS,
            )
        }
    )


@pytest.fixture
def actor() -> Actor:
    """The acting user."""
    return Actor(id="user-1", name="alice")
