"""PostgREST implementation of RemoteService.

Talks to a Supabase-style REST endpoint:

    GET    {base}/rest/v1/{table}?col=eq.value&order=col.desc&limit=n
    POST   {base}/rest/v1/{table}
    PATCH  {base}/rest/v1/{table}?id=eq.{id}
    POST   {base}/rest/v1/rpc/{name}

Usage:
    async with PostgrestRemoteService(base_url, api_key=key) as remote:
        response = await remote.select("products", order_by="name")
"""

from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from farmstead.config.models.remote import RemoteConfig
from farmstead.observability.logging import get_logger
from farmstead.remote.models import RemoteError, RemoteResponse
from farmstead.remote.service import RemoteService

logger = get_logger(__name__)


def _literal(value: Any) -> str:
    """Render a filter value the way PostgREST expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _eq(value: Any) -> str:
    if value is None:
        return "is.null"
    return f"eq.{_literal(value)}"


def _cs(values: Sequence[Any]) -> str:
    return "cs.{" + ",".join(_literal(v) for v in values) + "}"


class PostgrestRemoteService(RemoteService):
    """Async PostgREST client returning {data, error} envelopes.

    HTTP errors and transport failures are converted into
    RemoteResponse.error; nothing raises out of the public methods.
    """

    def __init__(
        self,
        base_url: str,
        *,
        api_key: str | None = None,
        rest_path: str = "/rest/v1",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Backend base URL
            api_key: API key sent as apikey header and bearer token
            rest_path: Path prefix of the REST endpoint
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._client = httpx.AsyncClient(
            base_url=self.base_url + rest_path,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_config(cls, config: RemoteConfig) -> "PostgrestRemoteService":
        return cls(
            config.base_url,
            api_key=config.api_key,
            rest_path=config.rest_path,
            timeout=config.timeout,
        )

    async def __aenter__(self) -> "PostgrestRemoteService":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    def _headers(self, *, representation: bool = False) -> dict[str, str]:
        """Build request headers."""
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["apikey"] = self._api_key
            headers["Authorization"] = f"Bearer {self._api_key}"
        if representation:
            headers["Prefer"] = "return=representation"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, str] | None = None,
        representation: bool = False,
    ) -> RemoteResponse:
        """Make a request and wrap the outcome in a RemoteResponse."""
        try:
            response = await self._client.request(
                method=method,
                url=path,
                headers=self._headers(representation=representation),
                json=json,
                params=params,
            )
        except httpx.HTTPError as e:
            logger.warning("remote_transport_error", method=method, path=path, error=str(e))
            return RemoteResponse.failure(str(e) or type(e).__name__, code="transport")

        if response.status_code >= 400:
            error_data: Any = None
            try:
                error_data = response.json()
                message = error_data.get("message", response.text)
                code = error_data.get("code")
            except (ValueError, AttributeError):
                message = response.text
                code = None
            logger.warning(
                "remote_request_failed",
                method=method,
                path=path,
                status_code=response.status_code,
                error=message,
            )
            return RemoteResponse(
                error=RemoteError(
                    message=message or f"HTTP {response.status_code}",
                    code=code,
                    status_code=response.status_code,
                    details=error_data,
                )
            )

        if response.status_code == 204 or not response.content:
            return RemoteResponse(data=None)

        return RemoteResponse(data=response.json())

    async def select(
        self,
        table: str,
        *,
        filters: Mapping[str, Any] | None = None,
        contains: Mapping[str, Sequence[Any]] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> RemoteResponse:
        params: dict[str, str] = {"select": "*"}
        for column, value in (filters or {}).items():
            params[column] = _eq(value)
        for column, values in (contains or {}).items():
            params[column] = _cs(values)
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"
        if limit is not None:
            params["limit"] = str(limit)
        return await self._request("GET", f"/{table}", params=params)

    async def insert(self, table: str, row: Mapping[str, Any]) -> RemoteResponse:
        response = await self._request(
            "POST", f"/{table}", json=[dict(row)], representation=True
        )
        return self._single(response)

    async def update(
        self,
        table: str,
        entity_id: Any,
        values: Mapping[str, Any],
        *,
        id_column: str = "id",
    ) -> RemoteResponse:
        response = await self._request(
            "PATCH",
            f"/{table}",
            json=dict(values),
            params={id_column: _eq(entity_id)},
            representation=True,
        )
        if response.ok and response.data == []:
            return RemoteResponse.failure(
                f"No {table} row with {id_column}={entity_id}", code="not_found"
            )
        return self._single(response)

    async def rpc(self, name: str, params: Mapping[str, Any]) -> RemoteResponse:
        return await self._request("POST", f"/rpc/{name}", json=dict(params))

    @staticmethod
    def _single(response: RemoteResponse) -> RemoteResponse:
        """Unpack the one-row array returned with return=representation."""
        if response.ok and isinstance(response.data, list):
            return RemoteResponse(data=response.data[0] if response.data else None)
        return response
