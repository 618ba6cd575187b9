# src/auc_settlement/domain/invariants.py
"""Ledger-wide audit queries. Read-only; each check returns offending rows."""
import logging

from sqlalchemy import TextClause, text
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

_PRICE_BELOW_START_SQL = text("""
    SELECT id, starting_price, current_price
    FROM listings
    WHERE current_price < starting_price
""")

# Price only moves through accepted bids, so it always equals the top bid
_PRICE_NOT_TOP_BID_SQL = text("""
    SELECT l.id, l.current_price, MAX(b.amount) AS top_bid
    FROM listings l
    JOIN bids b ON b.listing_id = l.id
    GROUP BY l.id, l.current_price
    HAVING l.current_price <> MAX(b.amount)
""")

_PRICE_MOVED_WITHOUT_BIDS_SQL = text("""
    SELECT l.id, l.starting_price, l.current_price
    FROM listings l
    WHERE l.current_price <> l.starting_price
      AND NOT EXISTS (SELECT 1 FROM bids b WHERE b.listing_id = l.id)
""")

_SOLD_WITHOUT_TXN_SQL = text("""
    SELECT l.id
    FROM listings l
    LEFT JOIN transactions t ON t.listing_id = l.id
    WHERE l.status = 'sold' AND t.id IS NULL
""")

_TXN_ON_UNSOLD_SQL = text("""
    SELECT t.id, t.listing_id, l.status
    FROM transactions t
    JOIN listings l ON l.id = t.listing_id
    WHERE l.status <> 'sold'
""")

_TXN_NOT_WINNING_BID_SQL = text("""
    WITH winners AS (
        SELECT DISTINCT ON (listing_id) listing_id, id, bidder_id, amount
        FROM bids
        ORDER BY listing_id, amount DESC, created_at ASC, id ASC
    )
    SELECT t.id, t.listing_id, t.bid_id, t.amount, w.id AS winning_bid_id, w.amount AS winning_amount
    FROM transactions t
    LEFT JOIN winners w ON w.listing_id = t.listing_id
    WHERE w.id IS NULL
       OR t.bid_id <> w.id
       OR t.amount <> w.amount
       OR t.buyer_id <> w.bidder_id
""")

_EXPIRED_WITH_BIDS_SQL = text("""
    SELECT l.id, COUNT(b.id) AS bid_count
    FROM listings l
    JOIN bids b ON b.listing_id = l.id
    WHERE l.status = 'expired'
    GROUP BY l.id
""")

_SELF_BIDS_SQL = text("""
    SELECT b.id, b.listing_id
    FROM bids b
    JOIN listings l ON l.id = b.listing_id
    WHERE b.bidder_id = l.seller_id
""")

# Accepted bids on one listing form a strictly increasing sequence in time
_NON_INCREASING_BIDS_SQL = text("""
    SELECT id, listing_id, amount, prev_amount
    FROM (
        SELECT id, listing_id, amount,
               LAG(amount) OVER (PARTITION BY listing_id ORDER BY created_at, id) AS prev_amount
        FROM bids
    ) seq
    WHERE prev_amount IS NOT NULL AND amount <= prev_amount
""")

_CHECKS: list[tuple[str, TextClause]] = [
    ("price_below_start", _PRICE_BELOW_START_SQL),
    ("price_not_top_bid", _PRICE_NOT_TOP_BID_SQL),
    ("price_moved_without_bids", _PRICE_MOVED_WITHOUT_BIDS_SQL),
    ("sold_without_transaction", _SOLD_WITHOUT_TXN_SQL),
    ("transaction_on_unsold_listing", _TXN_ON_UNSOLD_SQL),
    ("transaction_not_winning_bid", _TXN_NOT_WINNING_BID_SQL),
    ("expired_with_bids", _EXPIRED_WITH_BIDS_SQL),
    ("self_bid", _SELF_BIDS_SQL),
    ("non_increasing_bids", _NON_INCREASING_BIDS_SQL),
]

CHECK_NAMES = [name for name, _ in _CHECKS]


async def verify_ledger_invariants(db: AsyncSession) -> list[str]:
    """Run every audit query. Returns violation strings, empty when consistent."""
    violations: list[str] = []
    for name, sql in _CHECKS:
        rows = (await db.execute(sql)).fetchall()
        for row in rows:
            msg = f"{name}: {dict(row._mapping)}"
            violations.append(msg)
            logger.error("Invariant violated: %s", msg)
    return violations
