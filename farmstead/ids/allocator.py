"""Identifier allocation for human-readable entity codes."""

from abc import ABC, abstractmethod

from farmstead.exceptions import AllocationError
from farmstead.observability.logging import get_logger
from farmstead.observability.metrics import ID_ALLOCATIONS
from farmstead.remote.service import RemoteService

logger = get_logger(__name__)


class IdentifierAllocator(ABC):
    """Abstract allocator of codes unique within a category."""

    @abstractmethod
    async def allocate(self, category_code: str) -> str:
        """Return a new code for category_code.

        Raises:
            AllocationError: If no code could be allocated
        """
        pass


class RpcIdentifierAllocator(IdentifierAllocator):
    """Allocator delegating to a backend RPC.

    The RPC owns uniqueness; this class only validates the answer.
    """

    def __init__(
        self,
        remote: RemoteService,
        rpc_name: str = "generate_product_id",
        param_name: str = "category_code_param",
    ) -> None:
        self._remote = remote
        self._rpc_name = rpc_name
        self._param_name = param_name

    async def allocate(self, category_code: str) -> str:
        if not category_code:
            raise AllocationError("category code is required", category_code=category_code)

        try:
            response = await self._remote.rpc(
                self._rpc_name, {self._param_name: category_code}
            )
        except Exception as e:
            ID_ALLOCATIONS.labels(outcome="error").inc()
            logger.error(
                "id_allocation_failed",
                category_code=category_code,
                error=str(e),
            )
            raise AllocationError(
                f"Identifier allocation failed: {e}", category_code=category_code
            ) from e

        if response.error is not None:
            ID_ALLOCATIONS.labels(outcome="error").inc()
            logger.error(
                "id_allocation_failed",
                category_code=category_code,
                error=response.error.message,
            )
            raise AllocationError(
                f"Identifier allocation failed: {response.error.message}",
                category_code=category_code,
            )

        if not isinstance(response.data, str) or not response.data:
            ID_ALLOCATIONS.labels(outcome="empty").inc()
            raise AllocationError(
                f"Allocator returned no identifier for {category_code}",
                category_code=category_code,
            )

        ID_ALLOCATIONS.labels(outcome="ok").inc()
        logger.debug("id_allocated", category_code=category_code, value=response.data)
        return response.data
