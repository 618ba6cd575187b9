"""Global enums — must match DB CHECK constraints exactly.

See alembic/versions/003_create_listings.py for the listings.status CHECK.
"""

from enum import Enum


class ListingStatus(str, Enum):
    ACTIVE = "active"
    SOLD = "sold"
    EXPIRED = "expired"


class RejectReason(str, Enum):
    """Why the bid validator refused a proposed bid."""
    NOT_FOUND = "NOT_FOUND"
    AUCTION_ENDED = "AUCTION_ENDED"
    BID_TOO_LOW = "BID_TOO_LOW"
    SELF_BID = "SELF_BID"


class BidState(str, Enum):
    """Bid as seen from the bidder's side, derived from the listing's live state."""
    WINNING = "WINNING"
    OUTBID = "OUTBID"
    WON = "WON"
    LOST = "LOST"
