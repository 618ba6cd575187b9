"""SettlementSweeper — periodic settlement of expired active listings.

The sweep is a per-listing saga: every listing settles in its own atomic
unit, a failure is logged and counted, and the loop moves on. A failed
listing stays active, so the next tick retries it.

Scheduling: one tick immediately on start(), then one every
`interval_seconds`. Ticks are idempotent, which is what makes overlap with
the admin trigger or with another process safe.
"""

import asyncio
import contextlib
import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.auc_bidding.domain.repository import BidRepositoryProtocol
from src.auc_bidding.infrastructure.persistence import BidRepository
from src.auc_common.datetime_utils import utc_now
from src.auc_common.store import LedgerStore
from src.auc_listing.domain.repository import ListingRepositoryProtocol
from src.auc_listing.infrastructure.persistence import ListingRepository
from src.auc_settlement.domain.models import SettlementResult, SweepReport
from src.auc_settlement.domain.repository import TransactionRepositoryProtocol
from src.auc_settlement.domain.settlement import settle_listing
from src.auc_settlement.infrastructure.lease import SweepLease
from src.auc_settlement.infrastructure.persistence import TransactionRepository

logger = logging.getLogger(__name__)


class SettlementSweeper:
    def __init__(
        self,
        store: LedgerStore,
        interval_seconds: float = 60.0,
        batch_size: int = 1000,
        lease: SweepLease | None = None,
        listing_repo: ListingRepositoryProtocol | None = None,
        bid_repo: BidRepositoryProtocol | None = None,
        txn_repo: TransactionRepositoryProtocol | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be > 0, got {interval_seconds}")
        self._store = store
        self._interval = interval_seconds
        self._batch_size = batch_size
        self._lease = lease
        self._listings: ListingRepositoryProtocol = listing_repo or ListingRepository()
        self._bids: BidRepositoryProtocol = bid_repo or BidRepository()
        self._txns: TransactionRepositoryProtocol = txn_repo or TransactionRepository()
        self._clock = clock
        self._task: asyncio.Task[None] | None = None

    # ------------------------------------------------------------------
    # One tick
    # ------------------------------------------------------------------

    async def run_once(self) -> SweepReport:
        now = self._clock()
        if self._lease is None:
            return await self._sweep(now)
        async with self._lease.hold() as may_sweep:
            if not may_sweep:
                logger.debug("Sweep skipped: lease held by another process")
                return SweepReport(started_at=now, lease_denied=True)
            return await self._sweep(now)

    async def _sweep(self, now: datetime) -> SweepReport:
        async with self._store.session() as db:
            listing_ids = await self._listings.list_expired_active_ids(now, self._batch_size, db)

        report = SweepReport(started_at=now, scanned=len(listing_ids))
        for listing_id in listing_ids:
            try:
                result = await self.settle_one(listing_id, now)
            except Exception:
                # Saga boundary: this listing stays active and is retried next tick
                report.failed += 1
                report.failed_listing_ids.append(listing_id)
                logger.exception("Settlement failed for listing %s", listing_id)
                continue
            report.record(result)

        if report.scanned:
            logger.info(
                "Sweep done: scanned=%d sold=%d expired=%d skipped=%d failed=%d",
                report.scanned,
                report.sold,
                report.expired,
                report.skipped,
                report.failed,
            )
        return report

    async def settle_one(self, listing_id: str, now: datetime | None = None) -> SettlementResult | None:
        at = now or self._clock()

        async def _unit(db: AsyncSession) -> SettlementResult | None:
            return await settle_listing(listing_id, at, self._listings, self._bids, self._txns, db)

        return await self._store.run_atomic(_unit, label=f"settle[{listing_id}]")

    # ------------------------------------------------------------------
    # Background loop
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run_forever(), name="settlement-sweeper")
        logger.info("Settlement sweeper started (interval=%.1fs)", self._interval)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("Settlement sweeper stopped")

    async def _run_forever(self) -> None:
        while True:
            try:
                await self.run_once()
            except Exception:
                # Scan or lease failure; the loop itself must survive it
                logger.exception("Sweep tick failed")
            await asyncio.sleep(self._interval)
