"""Bid domain models — pure dataclasses, no SQLAlchemy dependency."""
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Bid:
    """Append-only: a bid row is never updated or deleted once accepted."""

    id: str
    listing_id: str
    bidder_id: str
    amount: int  # cents
    created_at: datetime


@dataclass(frozen=True)
class BidAccepted:
    bid_id: str
    listing_id: str
    amount: int
    new_current_price: int
    created_at: datetime
