"""Exceptions raised by the advisor service."""

from __future__ import annotations


class AdvisorError(Exception):
    """Base class for advisor lookup failures."""


class ProductNotFoundError(AdvisorError, LookupError):
    def __init__(self, product_id: int) -> None:
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class MissingSpecError(AdvisorError):
    """The product exists but has no parsed spec yet."""

    def __init__(self, product_id: int) -> None:
        super().__init__(f"Product {product_id} has no spec")
        self.product_id = product_id
