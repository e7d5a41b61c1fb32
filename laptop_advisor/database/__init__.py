"""SQLite storage layer for products, specs, prices and the LLM cache."""

from .connection import get_connection, init_db
from .models import Product, ProductPage, ProductSort
from .repository import ProductRepository

__all__ = [
    "get_connection",
    "init_db",
    "Product",
    "ProductPage",
    "ProductRepository",
    "ProductSort",
]
