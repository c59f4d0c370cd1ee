"""Root settings model for Farmstead configuration."""

from typing import Any

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from farmstead.config.models.audit import AuditConfig
from farmstead.config.models.connectivity import ConnectivityConfig
from farmstead.config.models.observability import ObservabilityConfig
from farmstead.config.models.remote import RemoteConfig
from farmstead.config.models.storage import StorageConfig

# TOML config handed to the settings source by get_settings()
_toml_config: dict[str, Any] = {}


def set_toml_config(config: dict[str, Any]) -> None:
    """Set the TOML configuration to be used by Settings."""
    global _toml_config
    _toml_config = config


class TomlConfigSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that reads from TOML configuration."""

    def get_field_value(
        self, field: Any, field_name: str  # noqa: ARG002
    ) -> tuple[Any, str, bool]:
        """Get field value from TOML config."""
        value = _toml_config.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        """Return the TOML config values."""
        return _toml_config.copy()


class Settings(BaseSettings):
    """Root configuration object containing all nested configuration sections.

    Configuration is loaded in this order:
    1. Pydantic model defaults (in code)
    2. config/default.toml (base configuration)
    3. config/{FARMSTEAD_ENV}.toml (environment overrides)
    4. FARMSTEAD_* environment variables (runtime overrides)
    """

    model_config = SettingsConfigDict(
        env_prefix="FARMSTEAD_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(
        default="farmstead",
        description="Bound as app on every log event",
    )
    debug: bool = Field(
        default=False,
        description="Log at DEBUG regardless of observability.logging.level",
    )

    storage: StorageConfig = Field(
        default_factory=StorageConfig,
        description="Cache storage configuration",
    )
    connectivity: ConnectivityConfig = Field(
        default_factory=ConnectivityConfig,
        description="Connectivity monitor configuration",
    )
    remote: RemoteConfig = Field(
        default_factory=RemoteConfig,
        description="Remote query/mutation service configuration",
    )
    audit: AuditConfig = Field(
        default_factory=AuditConfig,
        description="Change auditing configuration",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Observability configuration",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include TOML config.

        Priority order (highest to lowest):
        1. init_settings (constructor arguments)
        2. env_settings (FARMSTEAD_* environment variables)
        3. toml_settings (config/*.toml files)
        4. (defaults from model)
        """
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls),
        )
