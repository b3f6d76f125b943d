#!/usr/bin/env python3
"""
Target seeding script for local runs.

Loads targets from a JSON file and inserts them into tracking_targets.

Schema for the seed file (a JSON array):
- Required fields:
  - display_name: str
  - locator: str - product URL or search identifier (e.g. an ASIN)
- Optional fields with defaults:
  - status: "tracking" | "not-tracking" (default: "tracking")
  - target_price: number (default: null)

Targets whose locator is already present are skipped.

Usage:
    python scripts/seed_targets.py targets_seed.json
    python scripts/seed_targets.py --list
"""

import asyncio
import json
import sys
from decimal import Decimal
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from price_sniper.config import ConfigurationError, load_settings
from price_sniper.db.models import Base, TrackingTarget
from price_sniper.db.session import create_engine, create_session_factory
from price_sniper.ingest.base import TrackingStatus

VALID_STATUSES = {s.value for s in TrackingStatus}


async def seed_targets(seed_path: Path):
    """Insert targets from ``seed_path``."""
    entries = json.loads(seed_path.read_text(encoding="utf-8"))
    if not isinstance(entries, list):
        print("Error: seed file must contain a JSON array")
        sys.exit(1)

    engine = create_engine(load_settings())
    session_factory = create_session_factory(engine)
    added = skipped = errors = 0

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        async with session_factory() as db:
            for idx, entry in enumerate(entries):
                name = entry.get("display_name")
                locator = (entry.get("locator") or "").strip()
                status = entry.get("status", TrackingStatus.TRACKING.value)

                if not name or not locator or status not in VALID_STATUSES:
                    print(f"  [ERROR] Entry {idx}: needs display_name, locator and a valid status")
                    errors += 1
                    continue

                existing = await db.execute(
                    select(TrackingTarget.id).where(TrackingTarget.locator == locator)
                )
                if existing.first():
                    print(f"  [SKIP] {name} (already present)")
                    skipped += 1
                    continue

                target_price = entry.get("target_price")
                db.add(TrackingTarget(
                    display_name=name,
                    locator=locator,
                    status=status,
                    target_price=Decimal(str(target_price)) if target_price is not None else None,
                ))
                print(f"  [ADD] {name}")
                added += 1

            await db.commit()
    except SQLAlchemyError as e:
        print(f"\nError: Database operation failed: {e}")
        sys.exit(1)
    finally:
        await engine.dispose()

    print(f"\nSeeding complete!")
    print(f"  - Added: {added}")
    print(f"  - Skipped: {skipped}")
    if errors > 0:
        print(f"  - Errors: {errors}")


async def list_targets():
    """List all stored targets with their last check result."""
    engine = create_engine(load_settings())
    session_factory = create_session_factory(engine)
    try:
        async with session_factory() as db:
            result = await db.execute(select(TrackingTarget).order_by(TrackingTarget.id))
            targets = result.scalars().all()
    except SQLAlchemyError as e:
        print(f"Error: Failed to list targets: {e}")
        sys.exit(1)
    finally:
        await engine.dispose()

    if not targets:
        print("No targets found.")
        return

    print(f"\nTargets ({len(targets)} total):\n")
    for t in targets:
        flag = "[ON]" if t.status == TrackingStatus.TRACKING.value else "[OFF]"
        checked = t.last_checked.isoformat() if t.last_checked else "never"
        print(
            f"  {flag} #{t.id} {t.display_name}: price={t.current_price} "
            f"stock={t.stock_status or '-'} checked={checked}"
        )


if __name__ == "__main__":
    try:
        if len(sys.argv) > 1 and sys.argv[1] == "--list":
            asyncio.run(list_targets())
        elif len(sys.argv) > 1:
            asyncio.run(seed_targets(Path(sys.argv[1])))
        else:
            print(__doc__)
            sys.exit(1)
    except ConfigurationError as e:
        print(f"Error: {e}")
        sys.exit(2)
