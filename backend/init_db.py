#!/usr/bin/env python3
# backend/init_db.py
"""
Database initialization script.

Creates all tables and, with --seed, a few reference assets with an
initial price so a fresh install has something to value.

This script can be run from any directory:
    python backend/init_db.py
    cd backend && python init_db.py --seed
"""
import argparse
import sys
from decimal import Decimal
from pathlib import Path

# Add the backend directory to Python path so 'investment_tracker' is importable
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))

from investment_tracker.database import SessionLocal, engine
from investment_tracker.models import AssetType, Base
from investment_tracker.services.asset_service import AssetService
from investment_tracker.services.cache import ViewCache
from investment_tracker.services.constants import PRICE_SOURCE_MANUAL
from investment_tracker.services.currency_service import CurrencyService
from investment_tracker.services.price_service import PriceService

# (symbol, name, type, currency, initial price)
SEED_ASSETS = [
    ("THYAO", "Turk Hava Yollari", AssetType.EQUITY, "TRY", Decimal("285.50")),
    ("AAPL", "Apple Inc.", AssetType.EQUITY, "USD", Decimal("189.30")),
    ("XAU", "Gold (troy ounce)", AssetType.PRECIOUS_METAL, "USD", Decimal("2345.00")),
    ("USDTRY", "US Dollar / Turkish Lira", AssetType.FX, "TRY", Decimal("31.50")),
    ("TI2", "Is Portfoy BIST 30 Fund", AssetType.FUND, "TRY", Decimal("74.20")),
]


def init_db() -> None:
    """Create all database tables defined in models."""
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("Tables created successfully!")


def seed_assets() -> None:
    """Create the seed assets that do not exist yet, each with one price."""
    cache = ViewCache()
    assets = AssetService(cache=cache)
    prices = PriceService(currency_service=CurrencyService(), cache=cache)

    db = SessionLocal()
    try:
        for symbol, name, asset_type, currency, price in SEED_ASSETS:
            if assets.find_by_symbol(db, symbol) is not None:
                print(f"  {symbol} already exists, skipping")
                continue
            asset = assets.find_or_create(db, symbol, name, asset_type, currency)
            db.commit()
            prices.update_price_for_asset(db, asset.id, price, currency, source=PRICE_SOURCE_MANUAL)
            print(f"  {symbol}: {price} {currency}")
    finally:
        db.close()
    print("Seed assets created!")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Initialize the database")
    parser.add_argument("--seed", action="store_true", help="Create reference assets")
    args = parser.parse_args()

    init_db()
    if args.seed:
        seed_assets()
