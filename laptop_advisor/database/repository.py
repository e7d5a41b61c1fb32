"""Product, spec and price persistence.

Budget filtering happens here, in SQL, so the recommendation ranker only
ever sees candidates already inside the requested price range.
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

from ..analysis.models import PriceRecord
from ..common.models import Budget, ParsedSpec
from .connection import get_connection
from .models import Product, ProductPage, ProductSort

logger = logging.getLogger(__name__)

# Unknown prices and release dates sort last; id keeps ties deterministic
_ORDER_BY: dict[ProductSort, str] = {
    ProductSort.RELEVANCE: "updated_at DESC, id DESC",
    ProductSort.PRICE_ASC: "current_lowest IS NULL, current_lowest ASC, id",
    ProductSort.PRICE_DESC: "current_lowest IS NULL, current_lowest DESC, id",
    ProductSort.NEWEST: "release_date IS NULL, release_date DESC, id",
}


def _contains(text: str) -> str:
    """LIKE pattern matching ``text`` anywhere, with wildcards escaped."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class ProductRepository:
    """CRUD over products, specs and daily prices.

    Usage:
        repo = ProductRepository("data/laptop_advisor.db")
        product_id = repo.upsert_product(Product(naver_id="123", name="LG 그램 16"))
        repo.save_spec(product_id, ParsedSpec(cpu="Intel Core Ultra 7 155H"))
        repo.record_price(product_id, date.today(), 1_590_000, "쿠팡")
    """

    def __init__(self, db_path: str | Path | None = None) -> None:
        self.db_path = db_path

    def _connect(self):
        return get_connection(self.db_path)

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def upsert_product(self, product: Product) -> int:
        """Insert or update a product keyed by naver_id. Returns its row id."""
        conn = self._connect()
        try:
            conn.execute(
                """
                INSERT INTO products
                    (naver_id, name, brand, image_url, mall_url, release_date, current_lowest)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(naver_id) DO UPDATE SET
                    name = excluded.name,
                    brand = excluded.brand,
                    image_url = excluded.image_url,
                    mall_url = excluded.mall_url,
                    release_date = COALESCE(excluded.release_date, products.release_date),
                    current_lowest = COALESCE(excluded.current_lowest, products.current_lowest),
                    updated_at = datetime('now')
                """,
                (
                    product.naver_id,
                    product.name,
                    product.brand,
                    product.image_url,
                    product.mall_url,
                    product.release_date.isoformat() if product.release_date else None,
                    product.current_lowest,
                ),
            )
            row = conn.execute(
                "SELECT id FROM products WHERE naver_id = ?", (product.naver_id,)
            ).fetchone()
            conn.commit()
        finally:
            conn.close()

        product.id = row["id"]
        return product.id

    def get_product(self, product_id: int) -> Product | None:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT * FROM products WHERE id = ?", (product_id,)
            ).fetchone()
        finally:
            conn.close()
        return Product.from_row(row) if row else None

    def list_products(self, limit: int = 100, offset: int = 0) -> list[Product]:
        conn = self._connect()
        try:
            rows = conn.execute(
                "SELECT * FROM products ORDER BY id LIMIT ? OFFSET ?",
                (limit, offset),
            ).fetchall()
        finally:
            conn.close()
        return [Product.from_row(r) for r in rows]

    def search_products(
        self,
        query: str | None = None,
        brand: str | None = None,
        budget: Budget | None = None,
        sort: ProductSort | str = ProductSort.RELEVANCE,
        page: int = 1,
        limit: int = 20,
    ) -> ProductPage:
        """Catalog search with pagination.

        Args:
            query: Case-insensitive substring of the name or the brand.
            brand: Case-insensitive substring of the brand.
            budget: Inclusive range on current_lowest. Unpriced products
                are excluded when a budget is given.
            sort: One of ProductSort.
            page: 1-based page number.
            limit: Page size.

        Returns:
            ProductPage holding the requested page and the total match count.

        Raises:
            ValueError: If page or limit is below 1, or sort is unknown.
        """
        if page < 1 or limit < 1:
            raise ValueError(f"page and limit must be >= 1 (got page={page}, limit={limit})")
        sort = ProductSort(sort)

        clauses: list[str] = []
        params: list = []
        if query:
            clauses.append("(name LIKE ? ESCAPE '\\' OR brand LIKE ? ESCAPE '\\')")
            params.extend([_contains(query)] * 2)
        if brand:
            clauses.append("brand LIKE ? ESCAPE '\\'")
            params.append(_contains(brand))
        if budget is not None:
            clauses.append("current_lowest BETWEEN ? AND ?")
            params.extend([budget.min, budget.max])
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        conn = self._connect()
        try:
            total = conn.execute(
                f"SELECT COUNT(*) FROM products {where}", params
            ).fetchone()[0]
            rows = conn.execute(
                f"SELECT * FROM products {where} ORDER BY {_ORDER_BY[sort]} LIMIT ? OFFSET ?",
                [*params, limit, (page - 1) * limit],
            ).fetchall()
        finally:
            conn.close()

        logger.debug(
            "Catalog search q=%r brand=%r budget=%s sort=%s: %d total",
            query, brand, budget, sort.value, total,
        )
        return ProductPage(
            products=[Product.from_row(r) for r in rows],
            total=total,
            page=page,
            limit=limit,
        )

    def set_current_lowest(self, product_id: int, price: int) -> None:
        conn = self._connect()
        try:
            conn.execute(
                "UPDATE products SET current_lowest = ?, updated_at = datetime('now') WHERE id = ?",
                (price, product_id),
            )
            conn.commit()
        finally:
            conn.close()

    # ------------------------------------------------------------------
    # Specs
    # ------------------------------------------------------------------

    def save_spec(self, product_id: int, spec: ParsedSpec) -> None:
        conn = self._connect()
        try:
            conn.execute(
                """
                INSERT OR REPLACE INTO specs (product_id, spec_json, gpu_tier, updated_at)
                VALUES (?, ?, ?, datetime('now'))
                """,
                (product_id, spec.model_dump_json(), spec.gpu_tier),
            )
            conn.commit()
        finally:
            conn.close()

    def get_spec(self, product_id: int) -> ParsedSpec | None:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT spec_json FROM specs WHERE product_id = ?", (product_id,)
            ).fetchone()
        finally:
            conn.close()
        return ParsedSpec.model_validate_json(row["spec_json"]) if row else None

    # ------------------------------------------------------------------
    # Prices
    # ------------------------------------------------------------------

    def record_price(
        self,
        product_id: int,
        day: date,
        price: int,
        mall_name: str = "",
    ) -> None:
        """Store one observation; the same day keeps the lower price."""
        conn = self._connect()
        try:
            conn.execute(
                """
                INSERT INTO prices (product_id, date, price, mall_name)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(product_id, date) DO UPDATE SET
                    mall_name = CASE WHEN excluded.price < prices.price
                                     THEN excluded.mall_name ELSE prices.mall_name END,
                    price = MIN(prices.price, excluded.price)
                """,
                (product_id, day.isoformat(), price, mall_name),
            )
            conn.commit()
        finally:
            conn.close()

    def get_price_history(
        self,
        product_id: int,
        since: date | None = None,
    ) -> list[PriceRecord]:
        """Daily prices, oldest first. ``since`` is inclusive."""
        query = "SELECT date, price, mall_name FROM prices WHERE product_id = ?"
        params: list = [product_id]
        if since is not None:
            query += " AND date >= ?"
            params.append(since.isoformat())
        query += " ORDER BY date"

        conn = self._connect()
        try:
            rows = conn.execute(query, params).fetchall()
        finally:
            conn.close()

        return [
            PriceRecord(
                price=r["price"],
                date=date.fromisoformat(r["date"]),
                mall_name=r["mall_name"],
            )
            for r in rows
        ]

    # ------------------------------------------------------------------
    # Recommendation candidates
    # ------------------------------------------------------------------

    def find_candidates(
        self,
        budget: Budget | None = None,
        limit: int = 100,
    ) -> list[tuple[Product, ParsedSpec]]:
        """Products with a spec and a current price, inside the budget if given."""
        query = """
            SELECT p.*, s.spec_json
            FROM products p
            JOIN specs s ON s.product_id = p.id
            WHERE p.current_lowest IS NOT NULL
        """
        params: list = []
        if budget is not None:
            query += " AND p.current_lowest BETWEEN ? AND ?"
            params.extend([budget.min, budget.max])
        query += " ORDER BY p.id LIMIT ?"
        params.append(limit)

        conn = self._connect()
        try:
            rows = conn.execute(query, params).fetchall()
        finally:
            conn.close()

        logger.debug("Found %d recommendation candidates (budget=%s)", len(rows), budget)
        return [
            (Product.from_row(r), ParsedSpec.model_validate_json(r["spec_json"]))
            for r in rows
        ]

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def reset(self) -> dict[str, int]:
        """Delete every row from every table. Returns deleted counts per table."""
        counts: dict[str, int] = {}
        conn = self._connect()
        try:
            for table in ("llm_cache", "prices", "specs", "products"):
                cursor = conn.execute(f"DELETE FROM {table}")
                counts[table] = cursor.rowcount
            conn.commit()
        finally:
            conn.close()
        logger.info("Database reset: %s", counts)
        return counts
