"""ListingRepository / ListingQueryRepository — raw text() SQL, no ORM.

asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
UUID columns (seller_id, bidder_id, buyer_id) come back as uuid.UUID and are
normalised to str in the row mappers.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.auc_listing.domain.models import (
    BidHistoryEntry,
    Category,
    Listing,
    ListingSummary,
    SaleRecord,
    UserBidView,
)

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_LISTING_COLUMNS = """
    l.id, l.seller_id, l.category_id, l.title, l.description,
    l.starting_price, l.current_price, l.end_time, l.status,
    l.settled_at, l.created_at, l.updated_at
"""

_SUMMARY_COLUMNS = f"""
    {_LISTING_COLUMNS},
    c.name AS category_name,
    u.username AS seller_username,
    (SELECT COUNT(*) FROM bids b WHERE b.listing_id = l.id) AS bid_count
"""

_SUMMARY_FROM = """
    FROM listings l
    JOIN categories c ON c.id = l.category_id
    LEFT JOIN users u ON u.id = l.seller_id
"""

_INSERT_LISTING_SQL = text("""
    INSERT INTO listings (id, seller_id, category_id, title, description,
        starting_price, current_price, end_time, status)
    VALUES (:id, :seller_id, :category_id, :title, :description,
        :starting_price, :starting_price, :end_time, 'active')
""")

_GET_LISTING_FOR_UPDATE_SQL = text(f"""
    SELECT {_LISTING_COLUMNS}
    FROM listings l
    WHERE l.id = :listing_id
    FOR UPDATE
""")

# Guarded so a stale caller can never lower the price or touch a settled listing
_UPDATE_PRICE_SQL = text("""
    UPDATE listings
    SET current_price = :new_price, updated_at = NOW()
    WHERE id = :listing_id
      AND status = 'active'
      AND current_price < :new_price
""")

_MARK_SETTLED_SQL = text("""
    UPDATE listings
    SET status = :status, settled_at = :settled_at, updated_at = NOW()
    WHERE id = :listing_id AND status = 'active'
""")

_LIST_EXPIRED_ACTIVE_SQL = text("""
    SELECT id
    FROM listings
    WHERE status = 'active' AND end_time < :now
    ORDER BY end_time ASC, id ASC
    LIMIT :limit
""")

_GET_CATEGORY_SQL = text("SELECT id, name FROM categories WHERE id = :category_id")

_LIST_CATEGORIES_SQL = text("SELECT id, name FROM categories ORDER BY name ASC")

_LIST_ACTIVE_SQL = text(f"""
    SELECT {_SUMMARY_COLUMNS}
    {_SUMMARY_FROM}
    WHERE l.status = 'active'
      AND (CAST(:category_id AS INTEGER) IS NULL
           OR l.category_id = CAST(:category_id AS INTEGER))
      AND (CAST(:pattern AS TEXT) IS NULL
           OR l.title ILIKE CAST(:pattern AS TEXT) ESCAPE '\\'
           OR l.description ILIKE CAST(:pattern AS TEXT) ESCAPE '\\')
    ORDER BY l.end_time ASC, l.id ASC
    LIMIT :limit
""")

_GET_SUMMARY_SQL = text(f"""
    SELECT {_SUMMARY_COLUMNS}
    {_SUMMARY_FROM}
    WHERE l.id = :listing_id
""")

_LIST_BY_SELLER_SQL = text(f"""
    SELECT {_SUMMARY_COLUMNS}
    {_SUMMARY_FROM}
    WHERE l.seller_id = :seller_id
    ORDER BY l.created_at DESC, l.id DESC
""")

_BID_HISTORY_SQL = text("""
    SELECT b.id, b.bidder_id, u.username AS bidder_username, b.amount, b.created_at
    FROM bids b
    LEFT JOIN users u ON u.id = b.bidder_id
    WHERE b.listing_id = :listing_id
    ORDER BY b.amount DESC, b.created_at ASC, b.id ASC
""")

_GET_SALE_SQL = text("""
    SELECT id, buyer_id, amount, created_at
    FROM transactions
    WHERE listing_id = :listing_id
""")

_LIST_USER_BIDS_SQL = text("""
    SELECT b.id AS bid_id, b.listing_id, l.title AS listing_title,
           b.amount, b.created_at,
           l.status AS listing_status, l.current_price, l.end_time,
           t.bid_id AS winning_bid_id
    FROM bids b
    JOIN listings l ON l.id = b.listing_id
    LEFT JOIN transactions t ON t.listing_id = l.id
    WHERE b.bidder_id = :bidder_id
    ORDER BY b.created_at DESC, b.id DESC
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_listing(row: Any) -> Listing:
    return Listing(
        id=row.id,
        seller_id=str(row.seller_id),
        category_id=row.category_id,
        title=row.title,
        description=row.description,
        starting_price=row.starting_price,
        current_price=row.current_price,
        end_time=row.end_time,
        status=row.status,
        settled_at=row.settled_at,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_summary(row: Any) -> ListingSummary:
    return ListingSummary(
        listing=_row_to_listing(row),
        category_name=row.category_name,
        seller_username=row.seller_username,
        bid_count=int(row.bid_count),
    )


def like_pattern(search: str | None) -> str | None:
    """Free-text search -> ILIKE pattern with LIKE wildcards escaped."""
    if search is None:
        return None
    term = search.strip()
    if not term:
        return None
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------


class ListingRepository:
    """Concrete implementation of ListingRepositoryProtocol."""

    async def insert(self, listing: Listing, db: AsyncSession) -> None:
        await db.execute(
            _INSERT_LISTING_SQL,
            {
                "id": listing.id,
                "seller_id": listing.seller_id,
                "category_id": listing.category_id,
                "title": listing.title,
                "description": listing.description,
                "starting_price": listing.starting_price,
                "end_time": listing.end_time,
            },
        )

    async def get_for_update(self, listing_id: str, db: AsyncSession) -> Listing | None:
        """Row-locks the listing until the surrounding transaction ends."""
        result = await db.execute(_GET_LISTING_FOR_UPDATE_SQL, {"listing_id": listing_id})
        row = result.fetchone()
        return _row_to_listing(row) if row else None

    async def update_current_price(
        self, listing_id: str, new_price: int, db: AsyncSession
    ) -> bool:
        result = await db.execute(
            _UPDATE_PRICE_SQL, {"listing_id": listing_id, "new_price": new_price}
        )
        return bool(result.rowcount)  # type: ignore[attr-defined]

    async def mark_settled(
        self, listing_id: str, status: str, settled_at: datetime, db: AsyncSession
    ) -> bool:
        result = await db.execute(
            _MARK_SETTLED_SQL,
            {"listing_id": listing_id, "status": status, "settled_at": settled_at},
        )
        return bool(result.rowcount)  # type: ignore[attr-defined]

    async def list_expired_active_ids(
        self, now: datetime, limit: int, db: AsyncSession
    ) -> list[str]:
        result = await db.execute(_LIST_EXPIRED_ACTIVE_SQL, {"now": now, "limit": limit})
        return [row.id for row in result.fetchall()]

    async def get_category(self, category_id: int, db: AsyncSession) -> Category | None:
        result = await db.execute(_GET_CATEGORY_SQL, {"category_id": category_id})
        row = result.fetchone()
        return Category(id=row.id, name=row.name) if row else None


class ListingQueryRepository:
    """Concrete implementation of ListingQueryRepositoryProtocol — read-only SQL."""

    async def list_categories(self, db: AsyncSession) -> list[Category]:
        result = await db.execute(_LIST_CATEGORIES_SQL)
        return [Category(id=row.id, name=row.name) for row in result.fetchall()]

    async def list_active(
        self,
        db: AsyncSession,
        category_id: int | None,
        search: str | None,
        limit: int,
    ) -> list[ListingSummary]:
        result = await db.execute(
            _LIST_ACTIVE_SQL,
            {
                "category_id": category_id,
                "pattern": like_pattern(search),
                "limit": limit,
            },
        )
        return [_row_to_summary(row) for row in result.fetchall()]

    async def get_summary(self, listing_id: str, db: AsyncSession) -> ListingSummary | None:
        result = await db.execute(_GET_SUMMARY_SQL, {"listing_id": listing_id})
        row = result.fetchone()
        return _row_to_summary(row) if row else None

    async def list_bid_history(
        self, listing_id: str, db: AsyncSession
    ) -> list[BidHistoryEntry]:
        result = await db.execute(_BID_HISTORY_SQL, {"listing_id": listing_id})
        return [
            BidHistoryEntry(
                bid_id=row.id,
                bidder_id=str(row.bidder_id),
                bidder_username=row.bidder_username,
                amount=row.amount,
                created_at=row.created_at,
            )
            for row in result.fetchall()
        ]

    async def get_sale(self, listing_id: str, db: AsyncSession) -> SaleRecord | None:
        result = await db.execute(_GET_SALE_SQL, {"listing_id": listing_id})
        row = result.fetchone()
        if row is None:
            return None
        return SaleRecord(
            transaction_id=row.id,
            buyer_id=str(row.buyer_id),
            amount=row.amount,
            created_at=row.created_at,
        )

    async def list_by_seller(self, seller_id: str, db: AsyncSession) -> list[ListingSummary]:
        result = await db.execute(_LIST_BY_SELLER_SQL, {"seller_id": seller_id})
        return [_row_to_summary(row) for row in result.fetchall()]

    async def list_user_bids(self, bidder_id: str, db: AsyncSession) -> list[UserBidView]:
        result = await db.execute(_LIST_USER_BIDS_SQL, {"bidder_id": bidder_id})
        return [
            UserBidView(
                bid_id=row.bid_id,
                listing_id=row.listing_id,
                listing_title=row.listing_title,
                amount=row.amount,
                created_at=row.created_at,
                listing_status=row.listing_status,
                current_price=row.current_price,
                end_time=row.end_time,
                winning_bid_id=row.winning_bid_id,
            )
            for row in result.fetchall()
        ]
