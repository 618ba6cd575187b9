# src/auc_listing/domain/repository.py
"""Repository Protocols — dependency inversion for testability.

Unit tests inject in-memory fakes or mocks conforming to these Protocols.
Infrastructure layer provides the raw-SQL implementations.
"""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.auc_listing.domain.models import (
    BidHistoryEntry,
    Category,
    Listing,
    ListingSummary,
    SaleRecord,
    UserBidView,
)


class ListingRepositoryProtocol(Protocol):
    """Write-side access used inside atomic units."""

    async def insert(self, listing: Listing, db: AsyncSession) -> None: ...

    async def get_for_update(self, listing_id: str, db: AsyncSession) -> Listing | None: ...

    async def update_current_price(
        self, listing_id: str, new_price: int, db: AsyncSession
    ) -> bool: ...

    async def mark_settled(
        self, listing_id: str, status: str, settled_at: datetime, db: AsyncSession
    ) -> bool: ...

    async def list_expired_active_ids(
        self, now: datetime, limit: int, db: AsyncSession
    ) -> list[str]: ...

    async def get_category(self, category_id: int, db: AsyncSession) -> Category | None: ...


class ListingQueryRepositoryProtocol(Protocol):
    """Read projections; committed state only, no locks."""

    async def list_categories(self, db: AsyncSession) -> list[Category]: ...

    async def list_active(
        self,
        db: AsyncSession,
        category_id: int | None,
        search: str | None,
        limit: int,
    ) -> list[ListingSummary]: ...

    async def get_summary(self, listing_id: str, db: AsyncSession) -> ListingSummary | None: ...

    async def list_bid_history(
        self, listing_id: str, db: AsyncSession
    ) -> list[BidHistoryEntry]: ...

    async def get_sale(self, listing_id: str, db: AsyncSession) -> SaleRecord | None: ...

    async def list_by_seller(self, seller_id: str, db: AsyncSession) -> list[ListingSummary]: ...

    async def list_user_bids(self, bidder_id: str, db: AsyncSession) -> list[UserBidView]: ...
