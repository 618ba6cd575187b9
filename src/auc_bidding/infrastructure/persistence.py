# src/auc_bidding/infrastructure/persistence.py
"""BidRepository — raw SQL persistence implementation. Insert-only writes."""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.auc_bidding.domain.models import Bid

_INSERT_BID_SQL = text("""
    INSERT INTO bids (id, listing_id, bidder_id, amount, created_at)
    VALUES (:id, :listing_id, :bidder_id, :amount, :created_at)
""")

# Highest amount wins; equal amounts fall back to the earliest bid
_HIGHEST_BID_SQL = text("""
    SELECT id, listing_id, bidder_id, amount, created_at
    FROM bids
    WHERE listing_id = :listing_id
    ORDER BY amount DESC, created_at ASC, id ASC
    LIMIT 1
""")


def _row_to_bid(row: Any) -> Bid:
    return Bid(
        id=row.id,
        listing_id=row.listing_id,
        bidder_id=str(row.bidder_id),
        amount=row.amount,
        created_at=row.created_at,
    )


class BidRepository:
    """Concrete implementation of BidRepositoryProtocol using raw SQL."""

    async def insert(self, bid: Bid, db: AsyncSession) -> None:
        await db.execute(
            _INSERT_BID_SQL,
            {
                "id": bid.id,
                "listing_id": bid.listing_id,
                "bidder_id": bid.bidder_id,
                "amount": bid.amount,
                "created_at": bid.created_at,
            },
        )

    async def get_highest_bid(self, listing_id: str, db: AsyncSession) -> Bid | None:
        result = await db.execute(_HIGHEST_BID_SQL, {"listing_id": listing_id})
        row = result.fetchone()
        return _row_to_bid(row) if row else None
