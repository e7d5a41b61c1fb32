"""Data models for the storage layer."""

from __future__ import annotations

import math
import sqlite3
from dataclasses import dataclass
from datetime import date
from enum import Enum


@dataclass
class Product:
    """A tracked laptop listing."""

    naver_id: str
    name: str
    brand: str = ""
    image_url: str | None = None
    mall_url: str | None = None
    release_date: date | None = None
    current_lowest: int | None = None  # KRW
    id: int | None = None

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> Product:
        release = row["release_date"]
        return cls(
            id=row["id"],
            naver_id=row["naver_id"],
            name=row["name"],
            brand=row["brand"],
            image_url=row["image_url"],
            mall_url=row["mall_url"],
            release_date=date.fromisoformat(release) if release else None,
            current_lowest=row["current_lowest"],
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "naver_id": self.naver_id,
            "name": self.name,
            "brand": self.brand,
            "image_url": self.image_url,
            "mall_url": self.mall_url,
            "release_date": self.release_date.isoformat() if self.release_date else None,
            "current_lowest": self.current_lowest,
        }


class ProductSort(str, Enum):
    """Catalog orderings. RELEVANCE lists recently updated products first."""

    RELEVANCE = "relevance"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    NEWEST = "newest"


@dataclass
class ProductPage:
    """One page of a catalog search. ``total`` counts every matching product."""

    products: list[Product]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0
