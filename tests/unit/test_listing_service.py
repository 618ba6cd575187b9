"""Unit tests for ListingApplicationService (fake store, mocked query repository)."""
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError

from fakes import ALICE, NOW, SELLER, FakeListingRepository, FakeStore, make_listing
from src.auc_common.errors import (
    CategoryNotFoundError,
    ListingNotFoundError,
    ListingValidationError,
)
from src.auc_listing.application.schemas import CreateListingRequest
from src.auc_listing.application.service import ListingApplicationService
from src.auc_listing.domain.models import (
    BidHistoryEntry,
    Category,
    ListingSummary,
    SaleRecord,
    UserBidView,
)


def _request(**kwargs: object) -> CreateListingRequest:
    body: dict[str, object] = {
        "title": "  Vintage camera  ",
        "description": "Works fine",
        "category_id": 1,
        "starting_price_cents": 10_000,
        "end_time": (NOW + timedelta(days=3)).isoformat(),
    }
    body.update(kwargs)
    return CreateListingRequest(**body)  # type: ignore[arg-type]


def _summary(**kwargs: object) -> ListingSummary:
    return ListingSummary(
        listing=make_listing(**kwargs),
        category_name="Electronics",
        seller_username="seller1",
        bid_count=0,
    )


class TestCreateListingRequest:
    def test_title_is_stripped(self) -> None:
        assert _request().title == "Vintage camera"

    def test_blank_title_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _request(title="   ")

    def test_non_positive_price_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _request(starting_price_cents=0)

    def test_naive_end_time_is_utc(self) -> None:
        req = _request(end_time="2030-01-01T00:00:00")
        assert req.end_time.utcoffset() == timedelta(0)


class TestCreateListing:
    async def test_inserts_active_listing_at_starting_price(self, fake_store: FakeStore) -> None:
        repo = FakeListingRepository()
        svc = ListingApplicationService(repo=repo, query_repo=AsyncMock())
        result = await svc.create_listing(fake_store, SELLER, _request(), now=NOW)
        stored = repo.listings[result.listing_id]
        assert result.status == "active"
        assert stored.seller_id == SELLER
        assert stored.title == "Vintage camera"
        assert stored.current_price == stored.starting_price == 10_000
        assert fake_store.labels == [f"create_listing[{result.listing_id}]"]

    async def test_end_time_in_past_rejected_before_store(self, fake_store: FakeStore) -> None:
        svc = ListingApplicationService(repo=FakeListingRepository(), query_repo=AsyncMock())
        req = _request(end_time=(NOW - timedelta(minutes=1)).isoformat())
        with pytest.raises(ListingValidationError, match="future"):
            await svc.create_listing(fake_store, SELLER, req, now=NOW)
        assert fake_store.labels == []

    async def test_unknown_category(self, fake_store: FakeStore) -> None:
        repo = FakeListingRepository()
        svc = ListingApplicationService(repo=repo, query_repo=AsyncMock())
        with pytest.raises(CategoryNotFoundError):
            await svc.create_listing(fake_store, SELLER, _request(category_id=99), now=NOW)
        assert repo.listings == {}


class TestQueries:
    async def test_list_categories(self) -> None:
        query = AsyncMock()
        query.list_categories.return_value = [Category(id=1, name="Electronics")]
        svc = ListingApplicationService(repo=FakeListingRepository(), query_repo=query)
        result = await svc.list_categories(AsyncMock())
        assert [c.name for c in result] == ["Electronics"]

    async def test_active_listings_pass_filters(self) -> None:
        query = AsyncMock()
        query.list_active.return_value = [_summary()]
        db = AsyncMock()
        svc = ListingApplicationService(repo=FakeListingRepository(), query_repo=query)
        result = await svc.get_active_listings(db, 1, "camera", 50)
        query.list_active.assert_awaited_once_with(db, 1, "camera", 50)
        item = result.items[0]
        assert item.current_price_cents == 10_000
        assert item.current_price_display == "$100.00"
        assert item.category_name == "Electronics"

    async def test_detail_not_found(self) -> None:
        query = AsyncMock()
        query.get_summary.return_value = None
        svc = ListingApplicationService(repo=FakeListingRepository(), query_repo=query)
        with pytest.raises(ListingNotFoundError):
            await svc.get_listing_detail(AsyncMock(), "lst-x")

    async def test_detail_active_has_no_sale_lookup(self) -> None:
        query = AsyncMock()
        query.get_summary.return_value = _summary(current_price=15_000)
        query.list_bid_history.return_value = [
            BidHistoryEntry("bid-2", ALICE, "alice", 15_000, NOW),
            BidHistoryEntry("bid-1", ALICE, "alice", 12_000, NOW - timedelta(minutes=5)),
        ]
        svc = ListingApplicationService(repo=FakeListingRepository(), query_repo=query)
        result = await svc.get_listing_detail(AsyncMock(), "lst-1")
        assert [b.amount_cents for b in result.bids] == [15_000, 12_000]
        assert result.sale is None
        query.get_sale.assert_not_awaited()

    async def test_detail_sold_includes_sale(self) -> None:
        query = AsyncMock()
        query.get_summary.return_value = _summary(status="sold", current_price=15_000, settled_at=NOW)
        query.list_bid_history.return_value = []
        query.get_sale.return_value = SaleRecord("txn-1", ALICE, 15_000, NOW)
        svc = ListingApplicationService(repo=FakeListingRepository(), query_repo=query)
        result = await svc.get_listing_detail(AsyncMock(), "lst-1")
        assert result.sale is not None
        assert result.sale.buyer_id == ALICE
        assert result.listing.seconds_remaining == 0

    async def test_user_bids_carry_state(self) -> None:
        query = AsyncMock()
        query.list_user_bids.return_value = [
            UserBidView("bid-1", "lst-1", "Camera", 12_000, NOW, "active", 15_000,
                        NOW + timedelta(hours=1), None),
            UserBidView("bid-2", "lst-2", "Lamp", 9_000, NOW, "sold", 9_000,
                        NOW - timedelta(hours=1), "bid-2"),
        ]
        svc = ListingApplicationService(repo=FakeListingRepository(), query_repo=query)
        result = await svc.get_user_bids(AsyncMock(), ALICE)
        assert [i.bid_state for i in result.items] == ["OUTBID", "WON"]

    async def test_user_listings(self) -> None:
        query = AsyncMock()
        query.list_by_seller.return_value = [_summary(), _summary(id="lst-2")]
        svc = ListingApplicationService(repo=FakeListingRepository(), query_repo=query)
        result = await svc.get_user_listings(AsyncMock(), SELLER)
        assert [i.id for i in result.items] == ["lst-1", "lst-2"]
        query.list_by_seller.assert_awaited_once()
