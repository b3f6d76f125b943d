"""Writes check results back to the registry."""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from price_sniper.db.models import TrackingTarget
from price_sniper.ingest.base import (
    Availability,
    CheckOutcome,
    CheckStage,
    ExtractionResult,
    StorageError,
    TrackedTarget,
)

logger = logging.getLogger(__name__)

PRICE_NOT_FOUND = "price not found"


class Reconciler:
    """Applies an extraction result to the target's registry record.

    A missing price never reaches storage, and an ``unknown`` availability
    never overwrites a stored stock status.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.session_factory = session_factory
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def reconcile(self, target: TrackedTarget, result: ExtractionResult) -> CheckOutcome:
        """
        Write the result for ``target``, or report why nothing was written.

        Args:
            target: Target that was checked
            result: What the extractor found

        Returns:
            CheckOutcome; storage failures are reported here, not raised
        """
        if result.price is None:
            logger.info(f"Price not found for {target.display_name}, skipping update")
            return CheckOutcome.failure(target, PRICE_NOT_FOUND, failed_after=CheckStage.EXTRACTED)

        try:
            await self._write(target, result)
        except StorageError as e:
            logger.error(f"Storage update failed for {target.display_name}: {e}")
            return CheckOutcome.failure(
                target, f"storage error: {e}", failed_after=CheckStage.EXTRACTED
            )

        return CheckOutcome(
            target_id=target.id,
            display_name=target.display_name,
            succeeded=True,
            stage=CheckStage.RECONCILED,
            price=result.price,
            availability=result.availability,
        )

    async def _write(self, target: TrackedTarget, result: ExtractionResult) -> None:
        values = {
            "current_price": result.price,
            "last_checked": self._clock(),
        }
        if result.availability is not Availability.UNKNOWN:
            values["stock_status"] = result.availability.value

        stmt = update(TrackingTarget).where(TrackingTarget.id == target.id).values(**values)

        try:
            async with self.session_factory() as db:
                updated = await db.execute(stmt)
                if updated.rowcount == 0:
                    await db.rollback()
                    raise StorageError(f"target {target.id} no longer exists")
                await db.commit()
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(str(e)) from e

        logger.debug(f"Updated target {target.id}: {values}")
