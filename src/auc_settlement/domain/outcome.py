"""Sale outcome rules for an expired listing. Pure functions."""

from src.auc_common.enums import ListingStatus
from src.auc_listing.domain.models import Listing


def decide_outcome(listing: Listing) -> ListingStatus:
    """sold iff the price moved above the start; equality is never a sale."""
    if listing.current_price > listing.starting_price:
        return ListingStatus.SOLD
    return ListingStatus.EXPIRED
