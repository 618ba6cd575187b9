"""Bid validator — pure decision over a listing snapshot.

Checks run in a fixed order and stop at the first failure:
  1. listing exists and is active      -> NOT_FOUND / AUCTION_ENDED
  2. amount > current_price            -> BID_TOO_LOW
  3. bidder is not the seller          -> SELF_BID

No I/O. A decision taken on a snapshot read outside the atomic unit is
advisory only; the bidding engine re-runs this on the row it holds locked.
"""

from dataclasses import dataclass

from src.auc_common.enums import RejectReason
from src.auc_common.errors import (
    AuctionEndedError,
    BidTooLowError,
    ListingNotFoundError,
    SelfBidError,
)
from src.auc_listing.domain.models import Listing
from src.auc_rules.rules.bid_amount import is_bid_high_enough
from src.auc_rules.rules.listing_status import check_listing_open
from src.auc_rules.rules.self_bid import is_self_bid


@dataclass(frozen=True)
class BidDecision:
    reason: RejectReason | None = None

    @property
    def accepted(self) -> bool:
        return self.reason is None


ACCEPT = BidDecision()


def validate_bid(listing: Listing | None, amount: int, bidder_id: str) -> BidDecision:
    if listing is None:
        return BidDecision(RejectReason.NOT_FOUND)
    reason = check_listing_open(listing)
    if reason is not None:
        return BidDecision(reason)
    if not is_bid_high_enough(listing, amount):
        return BidDecision(RejectReason.BID_TOO_LOW)
    if is_self_bid(bidder_id, listing.seller_id):
        return BidDecision(RejectReason.SELF_BID)
    return ACCEPT


def raise_for_decision(
    decision: BidDecision, listing_id: str, listing: Listing | None, amount: int
) -> None:
    """Translate a rejection into its BusinessRuleViolation; no-op when accepted."""
    if decision.reason is None:
        return
    if decision.reason is RejectReason.NOT_FOUND or listing is None:
        raise ListingNotFoundError(listing_id)
    if decision.reason is RejectReason.AUCTION_ENDED:
        raise AuctionEndedError(listing_id, listing.status)
    if decision.reason is RejectReason.BID_TOO_LOW:
        raise BidTooLowError(amount, listing.current_price)
    raise SelfBidError()
