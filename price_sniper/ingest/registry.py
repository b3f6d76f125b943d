"""Reads the batch of tracking targets from the registry."""

import logging
from typing import Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from price_sniper.db.models import TrackingTarget
from price_sniper.ingest.base import RegistryUnavailableError, TrackedTarget, TrackingStatus

logger = logging.getLogger(__name__)


def _tracking_query():
    return (
        select(TrackingTarget.id, TrackingTarget.locator, TrackingTarget.display_name)
        .where(TrackingTarget.status == TrackingStatus.TRACKING.value)
        .where(TrackingTarget.locator.isnot(None))
        .where(func.trim(TrackingTarget.locator) != "")
    )


def _to_target(row) -> TrackedTarget:
    target_id, locator, display_name = row
    return TrackedTarget(
        id=target_id,
        locator=locator.strip(),
        display_name=display_name or f"target {target_id}",
    )


async def load_tracking_targets(session_factory: async_sessionmaker) -> Tuple[TrackedTarget, ...]:
    """
    Load every target whose status is 'tracking' and whose locator is set.

    Args:
        session_factory: Registry session factory

    Returns:
        Targets ordered by id; empty when nothing qualifies

    Raises:
        RegistryUnavailableError: If the registry cannot be queried
    """
    try:
        async with session_factory() as db:
            result = await db.execute(_tracking_query().order_by(TrackingTarget.id))
            rows = result.all()
    except (SQLAlchemyError, OSError) as e:
        raise RegistryUnavailableError(f"Could not load tracking targets: {e}") from e

    targets = tuple(_to_target(row) for row in rows)
    logger.info(f"Loaded {len(targets)} tracking targets")
    return targets


async def load_target(session_factory: async_sessionmaker, target_id: int) -> Optional[TrackedTarget]:
    """
    Load a single tracking target by id.

    Returns None if the target does not exist, is not tracking, or has
    no locator.

    Raises:
        RegistryUnavailableError: If the registry cannot be queried
    """
    try:
        async with session_factory() as db:
            result = await db.execute(_tracking_query().where(TrackingTarget.id == target_id))
            row = result.first()
    except (SQLAlchemyError, OSError) as e:
        raise RegistryUnavailableError(f"Could not load target {target_id}: {e}") from e

    if row is None:
        logger.warning(f"Target {target_id} not found or not tracking")
        return None
    return _to_target(row)
