"""Product catalog models."""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from farmstead.audit.models import AuditableEntity

PRICE_FIELDS: frozenset[str] = frozenset({
    "price_dealer_cash",
    "price_dealer_credit",
    "price_hotel_cash",
    "price_hotel_credit",
})


class Prices(BaseModel):
    """Values of the four price tiers of a product."""

    model_config = ConfigDict(frozen=True)

    price_dealer_cash: float = Field(default=0, ge=0)
    price_dealer_credit: float = Field(default=0, ge=0)
    price_hotel_cash: float = Field(default=0, ge=0)
    price_hotel_credit: float = Field(default=0, ge=0)


class Product(AuditableEntity):
    """A stocked product with its four audited price tiers.

    Rows with unset prices load as 0.
    """

    model_config = ConfigDict(extra="ignore")

    table_name: ClassVar[str] = "products"
    audited_fields: ClassVar[frozenset[str]] = PRICE_FIELDS

    product_id: str | None = Field(default=None, description="Allocated display code")
    name: str = Field(..., description="Product name")
    sku: str | None = Field(default=None, description="Stock keeping unit")
    category_id: str | None = Field(default=None, description="Owning category")
    quantity: int = Field(default=0, ge=0, description="Units in stock")
    threshold: int = Field(default=1, ge=0, description="Low-stock threshold")
    price_dealer_cash: float = Field(default=0, ge=0)
    price_dealer_credit: float = Field(default=0, ge=0)
    price_hotel_cash: float = Field(default=0, ge=0)
    price_hotel_credit: float = Field(default=0, ge=0)

    @field_validator(*sorted(PRICE_FIELDS), mode="before")
    @classmethod
    def _null_price_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    def prices(self) -> Prices:
        return Prices(**self.audited_state())


class NewProduct(BaseModel):
    """Fields entered for a product before it has a code."""

    name: str = Field(..., min_length=1)
    category_id: str | None = None
    quantity: int = Field(default=0, ge=0)
    prices: Prices = Field(default_factory=Prices)
