"""Tests for auc_common.errors and auc_common.response."""

from src.auc_common.errors import (
    AppError,
    AuctionEndedError,
    BidTooLowError,
    BusinessRuleViolation,
    ConflictError,
    ListingNotFoundError,
    SelfBidError,
    SettlementInconsistencyError,
    StoreUnavailableError,
)
from src.auc_common.response import (
    ApiResponse,
    app_error_response,
    error_response,
    new_request_id,
    success_response,
)


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500
        assert err.retryable is False

    def test_custom_http_status(self) -> None:
        err = AppError(code=1001, message="Username taken", http_status=409)
        assert err.http_status == 409

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1001, message="test"), Exception)


class TestBidErrors:
    def test_listing_not_found(self) -> None:
        err = ListingNotFoundError("lst-9")
        assert err.code == 2001
        assert err.http_status == 404
        assert "lst-9" in err.message
        assert isinstance(err, BusinessRuleViolation)

    def test_auction_ended(self) -> None:
        err = AuctionEndedError("lst-1", "sold")
        assert err.code == 3001
        assert err.http_status == 409
        assert "sold" in err.message

    def test_bid_too_low_mentions_both_amounts(self) -> None:
        err = BidTooLowError(amount=9000, current_price=10000)
        assert err.code == 3002
        assert err.http_status == 422
        assert "9000" in err.message
        assert "10000" in err.message

    def test_self_bid(self) -> None:
        err = SelfBidError()
        assert err.code == 3003
        assert err.http_status == 422

    def test_rule_violations_are_not_retryable(self) -> None:
        assert BidTooLowError(1, 2).retryable is False


class TestSystemErrors:
    def test_conflict_is_retryable(self) -> None:
        err = ConflictError(attempts=4)
        assert err.code == 9003
        assert err.http_status == 409
        assert err.retryable is True
        assert "4" in err.message

    def test_store_unavailable(self) -> None:
        err = StoreUnavailableError()
        assert err.code == 9004
        assert err.http_status == 503

    def test_settlement_inconsistency(self) -> None:
        err = SettlementInconsistencyError("lst-1", "no bid")
        assert err.code == 9005
        assert "lst-1" in err.message
        assert "no bid" in err.message


class TestApiResponse:
    def test_success(self) -> None:
        resp = success_response({"id": "abc"})
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"id": "abc"}
        assert resp.retryable is False

    def test_error(self) -> None:
        resp = error_response(3002, "Bid too low")
        assert resp.code == 3002
        assert resp.message == "Bid too low"
        assert resp.data is None

    def test_error_retryable_flag(self) -> None:
        assert error_response(9003, "conflict", retryable=True).retryable is True

    def test_serialization(self) -> None:
        d = success_response({"amount_cents": 15000}).model_dump()
        for key in ("code", "message", "data", "retryable", "timestamp", "request_id"):
            assert key in d

    def test_request_id_prefix(self) -> None:
        assert ApiResponse().request_id.startswith("req_")

    def test_request_ids_are_unique(self) -> None:
        assert new_request_id() != new_request_id()

    def test_app_error_envelope(self) -> None:
        resp = app_error_response(BidTooLowError(9_000, 10_000), request_id="req_0123456789ab")
        assert resp.code == 3002
        assert resp.data is None
        assert resp.retryable is False
        assert resp.request_id == "req_0123456789ab"

    def test_app_error_envelope_keeps_retryable(self) -> None:
        resp = app_error_response(ConflictError(4))
        assert resp.retryable is True
        assert resp.request_id.startswith("req_")
