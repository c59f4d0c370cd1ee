"""Remote query/mutation service configuration."""

from pydantic import BaseModel, Field


class RemoteConfig(BaseModel):
    """PostgREST-compatible backend configuration.

    Note: the API key should come from the FARMSTEAD_REMOTE__API_KEY
    environment variable, not from config files.
    """

    base_url: str = Field(
        default="http://localhost:54321",
        description="Backend base URL",
    )
    api_key: str | None = Field(
        default=None,
        description="API key sent as apikey and bearer token",
    )
    rest_path: str = Field(
        default="/rest/v1",
        description="Path prefix of the REST endpoint",
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Request timeout in seconds",
    )
