"""Listing settlement — one expired listing, inside one atomic unit.

Steps, all on the row held FOR UPDATE:
  1. re-read the listing (a bid may have landed since the scan);
  2. skip unless still active and past end_time;
  3. sold iff current_price > starting_price, else expired;
  4. sold: insert the transaction for the highest bid
     (amount DESC, created_at ASC, id ASC);
  5. flip status and stamp settled_at.
"""

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.auc_bidding.domain.repository import BidRepositoryProtocol
from src.auc_common.enums import ListingStatus
from src.auc_common.errors import InternalError, SettlementInconsistencyError
from src.auc_common.id_generator import generate_id
from src.auc_listing.domain.repository import ListingRepositoryProtocol
from src.auc_settlement.domain.models import SettlementResult, Transaction
from src.auc_settlement.domain.outcome import decide_outcome
from src.auc_settlement.domain.repository import TransactionRepositoryProtocol

logger = logging.getLogger(__name__)


async def settle_listing(
    listing_id: str,
    now: datetime,
    listings: ListingRepositoryProtocol,
    bids: BidRepositoryProtocol,
    transactions: TransactionRepositoryProtocol,
    db: AsyncSession,
) -> SettlementResult | None:
    """Returns None when there is nothing to do (already settled, or not yet expired)."""
    listing = await listings.get_for_update(listing_id, db)
    if listing is None or not listing.is_active or not listing.is_expired_at(now):
        return None

    outcome = decide_outcome(listing)
    txn: Transaction | None = None
    if outcome is ListingStatus.SOLD:
        winner = await bids.get_highest_bid(listing_id, db)
        if winner is None:
            raise SettlementInconsistencyError(
                listing_id,
                f"current_price {listing.current_price} > starting_price "
                f"{listing.starting_price} but no bid exists",
            )
        if winner.amount != listing.current_price:
            raise SettlementInconsistencyError(
                listing_id,
                f"highest bid {winner.amount} != current_price {listing.current_price}",
            )
        txn = Transaction(
            id=generate_id(),
            listing_id=listing_id,
            bid_id=winner.id,
            buyer_id=winner.bidder_id,
            amount=winner.amount,
            created_at=now,
        )
        await transactions.insert(txn, db)

    if not await listings.mark_settled(listing_id, outcome.value, now, db):
        raise InternalError(f"Status update lost for listing {listing_id}")

    logger.info(
        "Listing settled: id=%s status=%s amount=%s buyer=%s",
        listing_id,
        outcome.value,
        txn.amount if txn else None,
        txn.buyer_id if txn else None,
    )
    return SettlementResult(listing_id=listing_id, status=outcome.value, transaction=txn)
