"""Advisor orchestration service and CLI."""

from .errors import AdvisorError, MissingSpecError, ProductNotFoundError
from .service import LaptopAdvisor

__all__ = ["AdvisorError", "LaptopAdvisor", "MissingSpecError", "ProductNotFoundError"]
