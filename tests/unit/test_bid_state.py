"""Unit tests for classify_bid — the bidder-side view of a bid."""
from datetime import UTC, datetime
from typing import Any

from src.auc_common.enums import BidState
from src.auc_listing.domain.bid_state import classify_bid
from src.auc_listing.domain.models import UserBidView


def _view(**kwargs: Any) -> UserBidView:
    defaults: dict[str, Any] = {
        "bid_id": "bid-1",
        "listing_id": "lst-1",
        "listing_title": "Vintage camera",
        "amount": 15_000,
        "created_at": datetime(2026, 10, 1, tzinfo=UTC),
        "listing_status": "active",
        "current_price": 15_000,
        "end_time": datetime(2026, 10, 2, tzinfo=UTC),
        "winning_bid_id": None,
    }
    defaults.update(kwargs)
    return UserBidView(**defaults)


def test_top_bid_on_active_listing_is_winning() -> None:
    assert classify_bid(_view()) is BidState.WINNING


def test_lower_bid_on_active_listing_is_outbid() -> None:
    assert classify_bid(_view(amount=12_000, current_price=15_000)) is BidState.OUTBID


def test_winning_bid_on_sold_listing_is_won() -> None:
    assert classify_bid(_view(listing_status="sold", winning_bid_id="bid-1")) is BidState.WON


def test_other_bid_on_sold_listing_is_lost() -> None:
    view = _view(amount=12_000, listing_status="sold", winning_bid_id="bid-9")
    assert classify_bid(view) is BidState.LOST


def test_sold_without_transaction_row_is_lost() -> None:
    assert classify_bid(_view(listing_status="sold")) is BidState.LOST
