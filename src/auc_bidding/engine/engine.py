"""BiddingEngine — serialized, atomic bid placement per listing."""
import asyncio
import logging
import weakref
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.auc_bidding.domain.models import Bid, BidAccepted
from src.auc_bidding.domain.repository import BidRepositoryProtocol
from src.auc_bidding.infrastructure.persistence import BidRepository
from src.auc_common.cents import validate_amount
from src.auc_common.datetime_utils import utc_now
from src.auc_common.errors import InternalError, InvalidBidAmountError
from src.auc_common.id_generator import generate_id
from src.auc_common.store import LedgerStore
from src.auc_listing.domain.repository import ListingRepositoryProtocol
from src.auc_listing.infrastructure.persistence import ListingRepository
from src.auc_rules.validator import raise_for_decision, validate_bid

logger = logging.getLogger(__name__)


class BiddingEngine:
    """Applies bids one listing at a time.

    Two layers of serialization, both scoped to a single listing:
      - an in-process asyncio.Lock queues callers of this process FIFO;
      - SELECT ... FOR UPDATE inside the atomic unit serializes against other
        processes and against the settlement sweeper.
    The read, the validator check, the bid insert and the price update all
    commit or roll back together.
    """

    def __init__(
        self,
        store: LedgerStore,
        listing_repo: ListingRepositoryProtocol | None = None,
        bid_repo: BidRepositoryProtocol | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._listings: ListingRepositoryProtocol = listing_repo or ListingRepository()
        self._bids: BidRepositoryProtocol = bid_repo or BidRepository()
        self._clock = clock
        # Entries vanish once no coroutine holds or waits on the lock
        self._listing_locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def _get_or_create_lock(self, listing_id: str) -> asyncio.Lock:
        lock = self._listing_locks.get(listing_id)
        if lock is None:
            lock = asyncio.Lock()
            self._listing_locks[listing_id] = lock
        return lock

    async def place_bid(self, listing_id: str, bidder_id: str, amount: int) -> BidAccepted:
        """Main entry point. Raises a BusinessRuleViolation on rejection,
        ConflictError when the store keeps reporting conflicts."""
        try:
            validate_amount(amount)
        except ValueError:
            raise InvalidBidAmountError(amount) from None

        lock = self._get_or_create_lock(listing_id)
        async with lock:

            async def _unit(db: AsyncSession) -> BidAccepted:
                return await self._apply_bid(listing_id, bidder_id, amount, db)

            accepted = await self._store.run_atomic(_unit, label=f"place_bid[{listing_id}]")

        logger.info(
            "Bid accepted: listing=%s bid=%s bidder=%s amount=%d",
            listing_id,
            accepted.bid_id,
            bidder_id,
            amount,
        )
        return accepted

    async def _apply_bid(
        self, listing_id: str, bidder_id: str, amount: int, db: AsyncSession
    ) -> BidAccepted:
        listing = await self._listings.get_for_update(listing_id, db)
        decision = validate_bid(listing, amount, bidder_id)
        if not decision.accepted:
            logger.info(
                "Bid rejected: listing=%s bidder=%s amount=%d reason=%s",
                listing_id,
                bidder_id,
                amount,
                decision.reason.value if decision.reason else None,
            )
            raise_for_decision(decision, listing_id, listing, amount)

        bid = Bid(
            id=generate_id(),
            listing_id=listing_id,
            bidder_id=bidder_id,
            amount=amount,
            created_at=self._clock(),
        )
        await self._bids.insert(bid, db)

        # Row is locked and was just validated; a miss here means the guard
        # (status='active' AND current_price < amount) disagrees with the read.
        if not await self._listings.update_current_price(listing_id, amount, db):
            raise InternalError(f"Price update lost for listing {listing_id}")

        return BidAccepted(
            bid_id=bid.id,
            listing_id=listing_id,
            amount=amount,
            new_current_price=amount,
            created_at=bid.created_at,
        )
