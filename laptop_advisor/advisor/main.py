"""CLI entry point for the laptop advisor.

Usage:
    python -m laptop_advisor.advisor.main init-db
    python -m laptop_advisor.advisor.main products -q 그램 --sort price_asc --page 2
    python -m laptop_advisor.advisor.main analyze 42
    python -m laptop_advisor.advisor.main price-trend 42 --days 30
    python -m laptop_advisor.advisor.main games 42
    python -m laptop_advisor.advisor.main should-buy 42
    python -m laptop_advisor.advisor.main compare 42 43 44
    python -m laptop_advisor.advisor.main recommend --budget-max 1500000 --usage gaming work \\
        --priority performance
    python -m laptop_advisor.advisor.main clean-cache
    python -m laptop_advisor.advisor.main reset-db --yes
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from pydantic import ValidationError

from ..common.config import settings
from ..common.logging import setup_logging
from ..common.models import Budget, RecommendRequest, Usage
from ..database.connection import init_db
from ..database.models import ProductSort
from ..database.repository import ProductRepository
from ..llm.cache import SQLiteLLMCache
from ..llm.client import NarrativeClient
from .errors import AdvisorError
from .service import LaptopAdvisor

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Laptop Advisor: analysis & recommendation")
    parser.add_argument("--db", type=str, help="SQLite database path (default: settings)")
    parser.add_argument("--no-llm", action="store_true", help="Skip LLM narratives")
    parser.add_argument("--output", type=str, help="Write JSON result to this file")
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help="Logging level name (default: settings.log_level)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create the database schema")

    products = sub.add_parser("products", help="Search and browse the catalog")
    products.add_argument("--query", "-q", help="Text matched against name and brand")
    products.add_argument("--brand")
    products.add_argument("--budget-min", type=int, default=0)
    products.add_argument("--budget-max", type=int, help="Upper price in KRW")
    products.add_argument("--usage", choices=[u.value for u in Usage])
    products.add_argument(
        "--sort",
        choices=[s.value for s in ProductSort],
        default=ProductSort.RELEVANCE.value,
    )
    products.add_argument("--page", type=int, default=1)
    products.add_argument("--limit", type=int, default=20)

    analyze = sub.add_parser("analyze", help="Full analysis of one product")
    analyze.add_argument("product_id", type=int)

    trend = sub.add_parser("price-trend", help="Price points and analysis for a window")
    trend.add_argument("product_id", type=int)
    trend.add_argument("--days", type=int, default=90)

    games = sub.add_parser("games", help="Per-game FPS estimates")
    games.add_argument("product_id", type=int)

    should_buy = sub.add_parser("should-buy", help="Buy-now-or-wait verdict")
    should_buy.add_argument("product_id", type=int)

    compare = sub.add_parser("compare", help="Compare 2-3 products")
    compare.add_argument("product_ids", type=int, nargs="+")

    recommend = sub.add_parser("recommend", help="Recommend laptops for a query")
    recommend.add_argument("--budget-min", type=int, default=0)
    recommend.add_argument("--budget-max", type=int, help="Upper budget in KRW")
    recommend.add_argument(
        "--usage",
        nargs="*",
        default=[],
        choices=["gaming", "work", "student", "video", "portable"],
    )
    recommend.add_argument(
        "--priority",
        choices=["value", "performance", "portable", "latest"],
    )
    recommend.add_argument("--limit", type=int, default=settings.recommend.default_limit)

    sub.add_parser("clean-cache", help="Delete expired LLM cache entries")

    reset = sub.add_parser("reset-db", help="Delete all products, prices and cache")
    reset.add_argument("--yes", action="store_true", help="Confirm the reset")

    return parser


def _run(args: argparse.Namespace, parser: argparse.ArgumentParser) -> dict | list | None:
    db_path = args.db or settings.database.db_path
    init_db(db_path)

    if args.command == "init-db":
        return None

    repository = ProductRepository(db_path)

    if args.command == "reset-db":
        if not args.yes:
            parser.error("reset-db deletes every row; pass --yes to confirm")
        return repository.reset()

    narrator = None if args.no_llm else NarrativeClient(
        SQLiteLLMCache(db_path),
        llm_settings=settings.llm,
        cache_settings=settings.cache,
    )

    if args.command == "clean-cache":
        if narrator is None:
            parser.error("clean-cache cannot be combined with --no-llm")
        return {"removed": narrator.clean_expired()}

    advisor = LaptopAdvisor(repository, narrator, recommend_settings=settings.recommend)

    if args.command == "products":
        try:
            budget = None
            if args.budget_max is not None:
                budget = Budget(min=args.budget_min, max=args.budget_max)
            return advisor.list_products(
                query=args.query,
                brand=args.brand,
                budget=budget,
                usage=args.usage,
                sort=args.sort,
                page=args.page,
                limit=args.limit,
            )
        except (ValidationError, ValueError) as e:
            parser.error(f"invalid catalog query: {e}")

    if args.command == "analyze":
        return advisor.analyze_product(args.product_id)
    if args.command == "price-trend":
        return advisor.price_trend(args.product_id, days=args.days)
    if args.command == "games":
        return advisor.game_estimates(args.product_id)
    if args.command == "should-buy":
        return advisor.should_buy(args.product_id).to_dict()
    if args.command == "compare":
        try:
            return advisor.compare(args.product_ids)
        except ValueError as e:
            parser.error(str(e))

    # recommend
    budget = None
    if args.budget_max is not None:
        budget = {"min": args.budget_min, "max": args.budget_max}
    try:
        request = RecommendRequest(budget=budget, usage=args.usage, priority=args.priority)
    except ValidationError as e:
        parser.error(f"invalid recommend query: {e}")
    return advisor.recommend(request, limit=args.limit)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        setup_logging(args.log_level)
    except ValueError as e:
        parser.error(str(e))

    try:
        result = _run(args, parser)
    except AdvisorError as e:
        logger.error("%s", e)
        return 1

    if result is None:
        logger.info("Database ready at %s", args.db or settings.database.db_path)
        return 0

    text = json.dumps(result, ensure_ascii=False, indent=2, default=str)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text)
        logger.info("Output written to %s", args.output)
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
