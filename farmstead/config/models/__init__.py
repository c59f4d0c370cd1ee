"""Configuration model exports.

    from farmstead.config.models import StorageConfig, RemoteConfig
"""

from farmstead.config.models.audit import AuditConfig
from farmstead.config.models.connectivity import ConnectivityConfig
from farmstead.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
)
from farmstead.config.models.remote import RemoteConfig
from farmstead.config.models.storage import KeyValueStoreConfig, StorageConfig

__all__ = [
    # Audit
    "AuditConfig",
    # Connectivity
    "ConnectivityConfig",
    # Observability
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    # Remote
    "RemoteConfig",
    # Storage
    "KeyValueStoreConfig",
    "StorageConfig",
]
