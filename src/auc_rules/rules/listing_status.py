from src.auc_common.enums import ListingStatus, RejectReason
from src.auc_listing.domain.models import Listing


def check_listing_open(listing: Listing | None) -> RejectReason | None:
    """Listing must exist and still be active."""
    if listing is None:
        return RejectReason.NOT_FOUND
    if listing.status != ListingStatus.ACTIVE.value:
        return RejectReason.AUCTION_ENDED
    return None
