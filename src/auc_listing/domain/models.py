"""Domain models for auc_listing — pure dataclasses, no business logic."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Listing:
    id: str
    seller_id: str
    category_id: int
    title: str
    description: str | None
    starting_price: int  # cents, > 0
    current_price: int  # cents, >= starting_price
    end_time: datetime
    status: str  # active / sold / expired
    settled_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    def is_expired_at(self, now: datetime) -> bool:
        return self.end_time < now


@dataclass
class ListingSummary:
    """Listing plus the joined/derived columns served by read projections."""

    listing: Listing
    category_name: str | None
    seller_username: str | None
    bid_count: int = 0


@dataclass
class Category:
    id: int
    name: str


@dataclass
class BidHistoryEntry:
    bid_id: str
    bidder_id: str
    bidder_username: str | None
    amount: int
    created_at: datetime


@dataclass
class SaleRecord:
    """Transaction row as seen from the listing detail page."""

    transaction_id: str
    buyer_id: str
    amount: int
    created_at: datetime


@dataclass
class ListingDetail:
    summary: ListingSummary
    bids: list[BidHistoryEntry] = field(default_factory=list)  # amount descending
    sale: SaleRecord | None = None


@dataclass
class UserBidView:
    """One of the user's bids joined with the listing's live state."""

    bid_id: str
    listing_id: str
    listing_title: str
    amount: int
    created_at: datetime
    listing_status: str
    current_price: int
    end_time: datetime
    winning_bid_id: str | None  # transactions.bid_id once sold
