"""Unit tests for auc_rules: individual rules and the ordered validator."""
from datetime import timedelta

import pytest

from fakes import ALICE, NOW, SELLER, make_listing
from src.auc_common.enums import RejectReason
from src.auc_common.errors import (
    AuctionEndedError,
    BidTooLowError,
    ListingNotFoundError,
    SelfBidError,
)
from src.auc_rules.rules.bid_amount import is_bid_high_enough
from src.auc_rules.rules.listing_status import check_listing_open
from src.auc_rules.rules.self_bid import is_self_bid
from src.auc_rules.validator import ACCEPT, BidDecision, raise_for_decision, validate_bid


class TestListingStatus:
    def test_missing_listing(self) -> None:
        assert check_listing_open(None) is RejectReason.NOT_FOUND

    def test_active_listing_open(self) -> None:
        assert check_listing_open(make_listing()) is None

    @pytest.mark.parametrize("status", ["sold", "expired"])
    def test_settled_listing_ended(self, status: str) -> None:
        assert check_listing_open(make_listing(status=status)) is RejectReason.AUCTION_ENDED


class TestBidAmount:
    def test_higher_is_enough(self) -> None:
        assert is_bid_high_enough(make_listing(current_price=10_000), 10_001) is True

    def test_equal_is_not_enough(self) -> None:
        assert is_bid_high_enough(make_listing(current_price=10_000), 10_000) is False

    def test_lower_is_not_enough(self) -> None:
        assert is_bid_high_enough(make_listing(current_price=10_000), 9_000) is False


class TestSelfBid:
    def test_same_user_is_self_bid(self) -> None:
        assert is_self_bid(SELLER, SELLER) is True

    def test_case_insensitive(self) -> None:
        assert is_self_bid("ABCDEF12-0000-0000-0000-000000000000", "abcdef12-0000-0000-0000-000000000000")

    def test_different_user_is_not(self) -> None:
        assert is_self_bid(ALICE, SELLER) is False


class TestValidateBid:
    def test_accept(self) -> None:
        decision = validate_bid(make_listing(), 15_000, ALICE)
        assert decision.accepted
        assert decision is ACCEPT

    def test_not_found(self) -> None:
        assert validate_bid(None, 15_000, ALICE).reason is RejectReason.NOT_FOUND

    def test_missing_listing_skips_remaining_checks(self) -> None:
        # Seller id and amount would both fail; only the lookup is reported
        assert validate_bid(None, 0, SELLER).reason is RejectReason.NOT_FOUND

    def test_ended_checked_before_amount(self) -> None:
        decision = validate_bid(make_listing(status="sold"), 1, ALICE)
        assert decision.reason is RejectReason.AUCTION_ENDED

    def test_amount_checked_before_self_bid(self) -> None:
        decision = validate_bid(make_listing(current_price=10_000), 9_000, SELLER)
        assert decision.reason is RejectReason.BID_TOO_LOW

    def test_self_bid(self) -> None:
        assert validate_bid(make_listing(), 15_000, SELLER).reason is RejectReason.SELF_BID

    def test_expired_but_unswept_still_accepts(self) -> None:
        listing = make_listing(end_time=NOW - timedelta(minutes=1))
        assert validate_bid(listing, 15_000, ALICE).accepted


class TestRaiseForDecision:
    def test_accept_is_noop(self) -> None:
        raise_for_decision(ACCEPT, "lst-1", make_listing(), 15_000)

    def test_not_found(self) -> None:
        with pytest.raises(ListingNotFoundError):
            raise_for_decision(BidDecision(RejectReason.NOT_FOUND), "lst-1", None, 15_000)

    def test_ended(self) -> None:
        listing = make_listing(status="expired")
        with pytest.raises(AuctionEndedError, match="expired"):
            raise_for_decision(BidDecision(RejectReason.AUCTION_ENDED), "lst-1", listing, 15_000)

    def test_too_low_reports_current_price(self) -> None:
        listing = make_listing(current_price=10_000)
        with pytest.raises(BidTooLowError, match="10000"):
            raise_for_decision(BidDecision(RejectReason.BID_TOO_LOW), "lst-1", listing, 9_000)

    def test_self_bid(self) -> None:
        with pytest.raises(SelfBidError):
            raise_for_decision(BidDecision(RejectReason.SELF_BID), "lst-1", make_listing(), 15_000)
