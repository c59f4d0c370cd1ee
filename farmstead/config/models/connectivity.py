"""Connectivity monitor configuration."""

from pydantic import BaseModel, Field


class ConnectivityConfig(BaseModel):
    """Connectivity monitor configuration.

    Leave force_online unset to check the remote service; set it to
    pin the reachability signal (deterministic tests, kiosk setups).
    """

    force_online: bool | None = Field(
        default=None,
        description="Override the reachability check with a fixed value",
    )
    check_url: str | None = Field(
        default=None,
        description="URL checked with HEAD; defaults to the remote base URL",
    )
    check_timeout: float = Field(
        default=2.0,
        gt=0,
        description="Reachability check timeout in seconds",
    )
