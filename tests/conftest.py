"""Shared test fixtures for Laptop Advisor."""

import logging
import sys
from datetime import date, datetime, timedelta
from pathlib import Path

import pytest

# Ensure laptop_advisor is importable
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from laptop_advisor.analysis.models import PriceRecord
from laptop_advisor.common.models import ParsedSpec
from laptop_advisor.database.connection import get_connection, init_db
from laptop_advisor.database.repository import ProductRepository

# Fixed analysis time for every time-dependent test
FIXED_NOW = datetime(2026, 10, 17, 12, 0, 0)


@pytest.fixture(autouse=True)
def _reset_package_logging():
    """Drop handlers setup_logging attached, so none outlives a test's captured stderr."""
    yield
    logger = logging.getLogger("laptop_advisor")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def temp_db(tmp_path) -> str:
    """Provide the path of an initialized temporary SQLite database."""
    db_file = tmp_path / "test_laptop_advisor.db"
    init_db(db_file)
    return str(db_file)


@pytest.fixture
def db_conn(temp_db):
    """Provide an initialized SQLite connection from temp_db."""
    conn = get_connection(temp_db)
    yield conn
    conn.close()


@pytest.fixture
def repository(temp_db) -> ProductRepository:
    return ProductRepository(temp_db)


@pytest.fixture
def gaming_spec() -> ParsedSpec:
    """16-inch gaming laptop (RTX 4070, 240Hz)."""
    return ParsedSpec(
        cpu="Intel Core i7-13650HX",
        gpu="NVIDIA GeForce RTX 4070 Laptop GPU",
        gpu_vram=8,
        ram_gb=32,
        ram_type="DDR5",
        ssd_gb=1024,
        screen_size=16.0,
        resolution="2560x1600",
        refresh_rate=240,
        panel_type="IPS",
        weight_kg=2.5,
        battery_wh=90,
        usb_a_count=2,
        usb_c_count=2,
        thunderbolt=True,
        hdmi_version="2.1",
        lan_port=True,
        wifi_version="Wi-Fi 6E",
        bt_version="5.3",
        pcie_gen="4.0",
    )


@pytest.fixture
def ultrabook_spec() -> ParsedSpec:
    """14-inch thin-and-light laptop with integrated graphics."""
    return ParsedSpec(
        cpu="Intel Core Ultra 7 155H",
        gpu="Intel Arc Graphics",
        ram_gb=16,
        ram_type="LPDDR5X",
        ssd_gb=512,
        screen_size=14.0,
        resolution="2880x1800",
        refresh_rate=120,
        panel_type="OLED",
        brightness=500,
        weight_kg=1.19,
        battery_wh=77,
        usb_a_count=0,
        usb_c_count=2,
        thunderbolt=True,
        hdmi_version="2.1",
        wifi_version="Wi-Fi 7",
        bt_version="5.4",
        pcie_gen="4.0",
        has_npu=True,
    )


@pytest.fixture
def make_history():
    """Build daily PriceRecords from {days_before_now: price}."""

    def _make(prices_by_days_ago: dict[int, int], now: datetime = FIXED_NOW) -> list[PriceRecord]:
        today = now.date()
        return [
            PriceRecord(price=price, date=today - timedelta(days=days_ago))
            for days_ago, price in sorted(prices_by_days_ago.items(), reverse=True)
        ]

    return _make


@pytest.fixture
def sample_release_date() -> date:
    return date(2025, 8, 1)
