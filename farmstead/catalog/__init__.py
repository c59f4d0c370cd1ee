"""Product catalog: cached product reads and audited price writes."""

from farmstead.catalog.models import PRICE_FIELDS, NewProduct, Prices, Product
from farmstead.catalog.service import ProductCatalog

__all__ = [
    "NewProduct",
    "PRICE_FIELDS",
    "Prices",
    "Product",
    "ProductCatalog",
]
