"""Product catalog operations used by the inventory and pricing screens."""

from collections.abc import Awaitable, Callable
from typing import Any

from farmstead.audit.history import AuditHistory
from farmstead.audit.models import Actor, AuditOutcome, FieldChange
from farmstead.audit.recorder import AuditRecorder
from farmstead.cache.keys import cache_key
from farmstead.cache.models import FetchResult
from farmstead.cache.repository import ReadThroughRepository
from farmstead.catalog.models import PRICE_FIELDS, NewProduct, Prices, Product
from farmstead.ids.allocator import IdentifierAllocator
from farmstead.observability.logging import get_logger
from farmstead.remote.loaders import remote_loader
from farmstead.remote.service import RemoteService

logger = get_logger(__name__)


class ProductCatalog:
    """Reads products through the cache and writes them through the auditor.

    Reads degrade to cached data; writes require the backend.
    """

    def __init__(
        self,
        remote: RemoteService,
        repository: ReadThroughRepository,
        recorder: AuditRecorder,
        allocator: IdentifierAllocator,
        history: AuditHistory,
    ) -> None:
        self._remote = remote
        self._repository = repository
        self._recorder = recorder
        self._allocator = allocator
        self._history = history

    async def list_products(self) -> FetchResult[list[Product]]:
        """All products ordered by name."""
        return await self._repository.fetch(
            cache_key(Product.table_name),
            self._product_loader(order_by="name"),
            schema=list[Product],
        )

    async def list_by_category(self, category_id: str | None) -> FetchResult[list[Product]]:
        """Products of one category; None lists every product."""
        filters = {"category_id": category_id} if category_id else None
        return await self._repository.fetch(
            cache_key(Product.table_name, "category", category_id),
            self._product_loader(filters=filters, order_by="name"),
            schema=list[Product],
        )

    def _product_loader(self, **query: Any) -> Callable[[], Awaitable[list[Product]]]:
        load_rows = remote_loader(self._remote, Product.table_name, **query)

        async def load() -> list[Product]:
            return [Product.model_validate(row) for row in await load_rows()]

        return load

    async def create_product(
        self,
        category_code: str,
        product: NewProduct,
        actor: Actor,
    ) -> Product:
        """Allocate a code for the product, then insert it.

        Raises:
            AllocationError: If no code could be allocated; nothing is inserted
            EntityUpdateError: If the insert fails
        """
        code = await self._allocator.allocate(category_code)
        row = {
            "product_id": code,
            "sku": f"SKU-{code}",
            "name": product.name,
            "category_id": product.category_id,
            "quantity": product.quantity,
            "threshold": max(1, product.quantity // 10),
            **product.prices.model_dump(),
        }
        outcome = await self._recorder.record_create(Product, row, actor)
        logger.info(
            "product_created",
            product_id=code,
            audit_strategy=outcome.strategy.value,
        )
        return Product.model_validate(outcome.entity)

    async def update_prices(
        self,
        product: Product,
        prices: Prices,
        actor: Actor,
    ) -> AuditOutcome:
        """Write new prices for product and audit the tiers that changed.

        Raises:
            EntityUpdateError: If the price update fails
        """
        return await self._recorder.record_change(
            product,
            product.audited_state(),
            prices.model_dump(),
            actor,
        )

    async def price_history(self, product: Product) -> dict[str, FieldChange | None]:
        """Who last changed each price tier, and when."""
        return await self._history.latest_changes(product.id, PRICE_FIELDS)
