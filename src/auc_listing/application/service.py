"""ListingApplicationService — listing creation plus the read-side projections.

Reads take the request's session and see committed state only.
create_listing validates its input before touching the store, then inserts
inside one LedgerStore atomic unit.
"""

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.auc_common.cents import validate_amount
from src.auc_common.datetime_utils import utc_now
from src.auc_common.errors import (
    CategoryNotFoundError,
    ListingNotFoundError,
    ListingValidationError,
)
from src.auc_common.id_generator import generate_id
from src.auc_common.store import LedgerStore
from src.auc_listing.application.schemas import (
    CategoryOut,
    CreateListingRequest,
    CreateListingResponse,
    ListingDetailResponse,
    ListingItem,
    ListingListResponse,
    UserBidItem,
    UserBidListResponse,
)
from src.auc_listing.domain.models import Listing, ListingDetail
from src.auc_listing.domain.repository import (
    ListingQueryRepositoryProtocol,
    ListingRepositoryProtocol,
)
from src.auc_listing.infrastructure.persistence import (
    ListingQueryRepository,
    ListingRepository,
)

logger = logging.getLogger(__name__)


def validate_new_listing(req: CreateListingRequest, now: datetime) -> None:
    try:
        validate_amount(req.starting_price_cents)
    except ValueError as exc:
        raise ListingValidationError(str(exc)) from None
    if req.end_time <= now:
        raise ListingValidationError("end_time must be in the future")


class ListingApplicationService:
    def __init__(
        self,
        repo: ListingRepositoryProtocol | None = None,
        query_repo: ListingQueryRepositoryProtocol | None = None,
    ) -> None:
        self._repo: ListingRepositoryProtocol = repo or ListingRepository()
        self._query: ListingQueryRepositoryProtocol = query_repo or ListingQueryRepository()

    async def create_listing(
        self,
        store: LedgerStore,
        seller_id: str,
        req: CreateListingRequest,
        now: datetime | None = None,
    ) -> CreateListingResponse:
        validate_new_listing(req, now or utc_now())

        listing = Listing(
            id=generate_id(),
            seller_id=seller_id,
            category_id=req.category_id,
            title=req.title,
            description=req.description,
            starting_price=req.starting_price_cents,
            current_price=req.starting_price_cents,
            end_time=req.end_time,
            status="active",
        )

        async def _unit(db: AsyncSession) -> None:
            if await self._repo.get_category(listing.category_id, db) is None:
                raise CategoryNotFoundError(listing.category_id)
            await self._repo.insert(listing, db)

        await store.run_atomic(_unit, label=f"create_listing[{listing.id}]")
        logger.info(
            "Listing created: id=%s seller=%s start=%d end=%s",
            listing.id,
            seller_id,
            listing.starting_price,
            listing.end_time.isoformat(),
        )
        return CreateListingResponse(
            listing_id=listing.id,
            status=listing.status,
            end_time=listing.end_time.isoformat(),
        )

    async def list_categories(self, db: AsyncSession) -> list[CategoryOut]:
        return [CategoryOut.from_domain(c) for c in await self._query.list_categories(db)]

    async def get_active_listings(
        self,
        db: AsyncSession,
        category_id: int | None,
        search: str | None,
        limit: int,
    ) -> ListingListResponse:
        summaries = await self._query.list_active(db, category_id, search, limit)
        now = utc_now()
        return ListingListResponse(items=[ListingItem.from_domain(s, now) for s in summaries])

    async def get_listing_detail(self, db: AsyncSession, listing_id: str) -> ListingDetailResponse:
        summary = await self._query.get_summary(listing_id, db)
        if summary is None:
            raise ListingNotFoundError(listing_id)
        bids = await self._query.list_bid_history(listing_id, db)
        sale = None
        if summary.listing.status == "sold":
            sale = await self._query.get_sale(listing_id, db)
        return ListingDetailResponse.from_domain(
            ListingDetail(summary=summary, bids=bids, sale=sale), utc_now()
        )

    async def get_user_listings(self, db: AsyncSession, user_id: str) -> ListingListResponse:
        summaries = await self._query.list_by_seller(user_id, db)
        now = utc_now()
        return ListingListResponse(items=[ListingItem.from_domain(s, now) for s in summaries])

    async def get_user_bids(self, db: AsyncSession, user_id: str) -> UserBidListResponse:
        views = await self._query.list_user_bids(user_id, db)
        return UserBidListResponse(items=[UserBidItem.from_domain(v) for v in views])
