"""Response models of the remote query/mutation service."""

from typing import Any

from pydantic import BaseModel, Field

from farmstead.exceptions import RemoteServiceError


class RemoteError(BaseModel):
    """Error reported by the remote service or its transport."""

    message: str = Field(..., description="Human-readable message")
    code: str | None = Field(default=None, description="Backend error code")
    status_code: int | None = Field(default=None, description="HTTP status, if any")
    details: Any = Field(default=None, description="Backend-provided details")


class RemoteResponse(BaseModel):
    """The {data, error} envelope every remote call returns.

    A non-null error means the call failed, whatever data holds.
    """

    data: Any = None
    error: RemoteError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, message: str, **kwargs: Any) -> "RemoteResponse":
        return cls(error=RemoteError(message=message, **kwargs))

    def unwrap(self) -> Any:
        """Return data, raising RemoteServiceError when the call failed."""
        if self.error is not None:
            raise RemoteServiceError(
                self.error.message,
                status_code=self.error.status_code,
                details=self.error.details,
            )
        return self.data
