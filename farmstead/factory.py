"""Process-level wiring of the data-access core from settings."""

import structlog

from farmstead.audit.history import AuditHistory
from farmstead.audit.recorder import AuditRecorder
from farmstead.cache.factory import create_key_value_store
from farmstead.cache.repository import ReadThroughRepository
from farmstead.catalog.service import ProductCatalog
from farmstead.config.settings import Settings
from farmstead.connectivity.monitor import build_connectivity_monitor
from farmstead.ids.allocator import RpcIdentifierAllocator
from farmstead.observability.logging import get_logger, setup_logging
from farmstead.observability.metrics import start_metrics_server
from farmstead.remote.postgrest import PostgrestRemoteService
from farmstead.remote.service import RemoteService

logger = get_logger(__name__)


def configure_observability(settings: Settings, *, serve_metrics: bool = False) -> None:
    """Apply the observability section of settings.

    settings.debug lowers the level to DEBUG, and settings.app_name is
    bound as app on every event logged from this context.

    Args:
        settings: Loaded settings
        serve_metrics: Also start the Prometheus exposition server
    """
    logging_config = settings.observability.logging
    setup_logging(
        level="DEBUG" if settings.debug else logging_config.level,
        format=logging_config.format,
        redact_pii=logging_config.redact_pii,
    )
    structlog.contextvars.bind_contextvars(app=settings.app_name)
    if serve_metrics:
        start_metrics_server(settings.observability.metrics)


def create_repository(settings: Settings) -> ReadThroughRepository:
    """Build the read-through repository with its store and monitor."""
    return ReadThroughRepository(
        create_key_value_store(settings.storage.cache),
        build_connectivity_monitor(settings.connectivity, settings.remote.base_url),
    )


def create_catalog(
    settings: Settings,
    remote: RemoteService | None = None,
) -> ProductCatalog:
    """Build a ProductCatalog wired according to settings.

    Args:
        settings: Loaded settings
        remote: Backend to use instead of the configured PostgREST client
    """
    remote = remote or PostgrestRemoteService.from_config(settings.remote)
    audit = settings.audit
    logger.info(
        "creating_catalog",
        remote=type(remote).__name__,
        cache_backend=settings.storage.cache.backend,
    )
    return ProductCatalog(
        remote=remote,
        repository=create_repository(settings),
        recorder=AuditRecorder(
            remote,
            audit_table=audit.audit_table,
            announce_rpc=audit.announce_rpc,
        ),
        allocator=RpcIdentifierAllocator(remote, rpc_name=audit.allocator_rpc),
        history=AuditHistory(remote, audit_table=audit.audit_table),
    )
