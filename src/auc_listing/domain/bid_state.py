"""Classify a user's bid against the listing's live state."""

from src.auc_common.enums import BidState, ListingStatus
from src.auc_listing.domain.models import UserBidView


def classify_bid(view: UserBidView) -> BidState:
    """WINNING/OUTBID while the auction runs, WON/LOST once it has settled."""
    if view.listing_status == ListingStatus.ACTIVE.value:
        return BidState.WINNING if view.amount >= view.current_price else BidState.OUTBID
    if view.listing_status == ListingStatus.SOLD.value and view.winning_bid_id == view.bid_id:
        return BidState.WON
    return BidState.LOST
