from src.auc_listing.domain.models import Listing


def is_bid_high_enough(listing: Listing, amount: int) -> bool:
    """Strictly greater than the current price; equality never outbids."""
    return amount > listing.current_price
