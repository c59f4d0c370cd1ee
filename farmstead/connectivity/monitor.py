"""Network reachability signal for the read-through cache."""

from abc import ABC, abstractmethod

import httpx

from farmstead.config.models.connectivity import ConnectivityConfig
from farmstead.observability.logging import get_logger

logger = get_logger(__name__)


class ConnectivityMonitor(ABC):
    """Abstract reachability signal.

    The signal is only an approximation: a monitor may report online
    while the backend is unreachable, or the reverse. When status cannot
    be determined, implementations report online so that a live fetch is
    attempted and only a real failure degrades to the cache.

    is_online is a coroutine so that network-bound implementations never block
    the event loop serving other screens.
    """

    @abstractmethod
    async def is_online(self) -> bool:
        """Return the current reachability estimate."""
        pass


class StaticConnectivityMonitor(ConnectivityMonitor):
    """Monitor pinned to a fixed value, switchable at runtime."""

    def __init__(self, online: bool = True) -> None:
        self.online = online

    async def is_online(self) -> bool:
        return self.online


class HttpConnectivityMonitor(ConnectivityMonitor):
    """Monitor backed by an async HTTP HEAD request against the backend.

    Any HTTP response counts as reachable, including error statuses.
    Transport failures (DNS, refused connection, timeout) count as
    offline. Anything else is ambiguous and reported as online.

    Usage:
        async with HttpConnectivityMonitor(url) as monitor:
            online = await monitor.is_online()
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 2.0,
        force_online: bool | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the monitor.

        Args:
            url: URL to check
            timeout: Request timeout in seconds
            force_online: Fixed answer that bypasses the request
            client: Optional preconfigured async client (tests)
        """
        self._url = url
        self._timeout = timeout
        self._force_online = force_online
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> "HttpConnectivityMonitor":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def is_online(self) -> bool:
        if self._force_online is not None:
            return self._force_online

        try:
            await self._client.head(self._url, timeout=self._timeout)
        except httpx.TransportError as e:
            logger.info("connectivity_check_offline", url=self._url, error=str(e))
            return False
        except Exception as e:
            logger.warning(
                "connectivity_check_undetermined",
                url=self._url,
                error=str(e),
            )
            return True
        return True


def build_connectivity_monitor(
    config: ConnectivityConfig,
    default_url: str,
) -> ConnectivityMonitor:
    """Create the monitor described by configuration.

    Args:
        config: Connectivity configuration section
        default_url: URL checked when config.check_url is unset
    """
    if config.force_online is not None and config.check_url is None:
        return StaticConnectivityMonitor(config.force_online)
    return HttpConnectivityMonitor(
        config.check_url or default_url,
        timeout=config.check_timeout,
        force_online=config.force_online,
    )
