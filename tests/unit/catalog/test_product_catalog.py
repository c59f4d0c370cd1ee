"""Tests for ProductCatalog wiring of cache, auditing and allocation."""

from datetime import UTC, datetime

import pytest

from farmstead.audit.history import AuditHistory
from farmstead.audit.models import AuditStrategy
from farmstead.audit.recorder import AuditRecorder
from farmstead.cache.models import FetchSource
from farmstead.catalog.models import PRICE_FIELDS, NewProduct, Prices, Product
from farmstead.catalog.service import ProductCatalog
from farmstead.exceptions import AllocationError, EntityUpdateError
from farmstead.ids.allocator import RpcIdentifierAllocator

PRICES = {
    "price_dealer_cash": 100,
    "price_dealer_credit": 110,
    "price_hotel_cash": 90,
    "price_hotel_credit": 95,
}


@pytest.fixture
def catalog(remote, repository) -> ProductCatalog:
    return ProductCatalog(
        remote=remote,
        repository=repository,
        recorder=AuditRecorder(remote),
        allocator=RpcIdentifierAllocator(remote),
        history=AuditHistory(remote),
    )


@pytest.fixture
def seeded(remote) -> None:
    remote.seed("products", [
        {"id": "p-1", "name": "Layer Feed", "category_id": "feed", **PRICES},
        {"id": "p-2", "name": "Broiler Starter", "category_id": "feed", **PRICES},
        {"id": "p-3", "name": "Dewormer", "category_id": "vet", "price_dealer_cash": None},
    ])


class TestReads:
    """Tests for cached product listings."""

    @pytest.mark.asyncio
    async def test_list_products_live(self, catalog, seeded, kv_store):
        result = await catalog.list_products()

        assert result.source == FetchSource.LIVE
        assert [p.name for p in result.data] == ["Broiler Starter", "Dewormer", "Layer Feed"]
        assert all(isinstance(p, Product) for p in result.data)
        assert kv_store.get("products_all") is not None

    @pytest.mark.asyncio
    async def test_null_price_loads_as_zero(self, catalog, seeded):
        result = await catalog.list_products()

        dewormer = next(p for p in result.data if p.id == "p-3")
        assert dewormer.price_dealer_cash == 0

    @pytest.mark.asyncio
    async def test_backend_failure_serves_cache(self, catalog, seeded, remote):
        await catalog.list_products()
        remote.fail("select", "products")

        result = await catalog.list_products()

        assert result.source == FetchSource.CACHE
        assert len(result.data) == 3
        assert isinstance(result.data[0], Product)

    @pytest.mark.asyncio
    async def test_offline_skips_backend(self, catalog, seeded, remote, monitor):
        await catalog.list_products()
        monitor.online = False
        remote.calls.clear()

        result = await catalog.list_products()

        assert result.source == FetchSource.CACHE
        assert remote.calls == []

    @pytest.mark.asyncio
    async def test_backend_failure_without_cache_is_empty(self, catalog, remote):
        remote.fail("select", "products")

        result = await catalog.list_products()

        assert result.source == FetchSource.EMPTY
        assert result.data == []

    @pytest.mark.asyncio
    async def test_list_by_category(self, catalog, seeded, kv_store):
        result = await catalog.list_by_category("vet")

        assert [p.id for p in result.data] == ["p-3"]
        assert kv_store.get("products_category_vet") is not None

    @pytest.mark.asyncio
    async def test_category_caches_are_separate(self, catalog, seeded, remote):
        await catalog.list_by_category("feed")
        remote.fail("select", "products")

        result = await catalog.list_by_category("vet")

        assert result.source == FetchSource.EMPTY

    @pytest.mark.asyncio
    async def test_no_category_lists_everything(self, catalog, seeded, kv_store):
        result = await catalog.list_by_category(None)

        assert len(result.data) == 3
        assert kv_store.get("products_category_all") is not None


class TestCreateProduct:
    """Tests for product creation."""

    @pytest.mark.asyncio
    async def test_allocates_code_and_inserts(self, catalog, remote, actor):
        new = NewProduct(
            name="Grower Mash",
            category_id="feed",
            quantity=45,
            prices=Prices(price_dealer_cash=50),
        )

        product = await catalog.create_product("FD", new, actor)

        code = f"FD-00001-{datetime.now(UTC).year}"
        assert product.product_id == code
        assert product.sku == f"SKU-{code}"
        assert product.threshold == 4
        assert product.price_dealer_cash == 50
        assert remote.calls.index(("rpc", "generate_product_id")) < remote.calls.index(
            ("insert", "products")
        )

    @pytest.mark.asyncio
    async def test_small_stock_threshold_is_one(self, catalog, actor):
        product = await catalog.create_product("FD", NewProduct(name="Lime", quantity=3), actor)

        assert product.threshold == 1

    @pytest.mark.asyncio
    async def test_creation_is_audited(self, catalog, remote, actor):
        new = NewProduct(name="Grower Mash", prices=Prices(price_hotel_cash=20))

        product = await catalog.create_product("FD", new, actor)

        [row] = remote.rows("products_audit")
        assert row["action"] == "CREATE"
        assert row["product_id"] == product.id
        assert row["changed_columns"] == sorted(PRICE_FIELDS)
        assert row["new_price_hotel_cash"] == 20

    @pytest.mark.asyncio
    async def test_allocation_failure_inserts_nothing(self, catalog, remote, actor):
        remote.fail("rpc", "generate_product_id")

        with pytest.raises(AllocationError):
            await catalog.create_product("FD", NewProduct(name="Lime"), actor)

        assert remote.rows("products") == []
        assert ("insert", "products") not in remote.calls

    @pytest.mark.asyncio
    async def test_insert_failure_raises(self, catalog, remote, actor):
        remote.fail("insert", "products")

        with pytest.raises(EntityUpdateError):
            await catalog.create_product("FD", NewProduct(name="Lime"), actor)


class TestUpdatePrices:
    """Tests for audited price edits."""

    @pytest.fixture
    def product(self, remote, seeded) -> Product:
        return Product.model_validate(remote.rows("products")[0])

    @pytest.mark.asyncio
    async def test_audits_changed_tiers(self, catalog, remote, product, actor):
        prices = product.prices().model_copy(update={"price_hotel_cash": 85})

        outcome = await catalog.update_prices(product, prices, actor)

        assert outcome.strategy == AuditStrategy.TRIGGER_ASSISTED
        assert outcome.changed_fields == {"price_hotel_cash"}
        assert remote.rows("products")[0]["price_hotel_cash"] == 85
        assert len(remote.rows("products_audit")) == 1

    @pytest.mark.asyncio
    async def test_unchanged_prices_are_not_audited(self, catalog, remote, product, actor):
        outcome = await catalog.update_prices(product, product.prices(), actor)

        assert outcome.changed_fields == frozenset()
        assert remote.rows("products_audit") == []

    @pytest.mark.asyncio
    async def test_fallback_when_announce_fails(self, catalog, remote, product, actor):
        remote.fail("rpc", "set_current_user_info")
        prices = product.prices().model_copy(update={"price_dealer_credit": 120})

        outcome = await catalog.update_prices(product, prices, actor)

        assert outcome.strategy == AuditStrategy.MANUAL_FALLBACK
        [row] = remote.rows("products_audit")
        assert row["changed_by_username"] == "alice"
        assert row["old_price_dealer_credit"] == 110
        assert row["new_price_dealer_credit"] == 120

    @pytest.mark.asyncio
    async def test_price_history(self, catalog, product, actor):
        prices = product.prices().model_copy(update={"price_dealer_cash": 101})
        await catalog.update_prices(product, prices, actor)

        history = await catalog.price_history(product)

        assert history["price_dealer_cash"].username == "alice"
        assert history["price_hotel_credit"] is None
