"""Pydantic schemas for auc_listing requests and responses.

Money fields carry a *_cents int plus a *_display string; clients must
use the cents value.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

from src.auc_common.cents import MAX_AMOUNT_CENTS, cents_to_display
from src.auc_common.datetime_utils import seconds_until
from src.auc_listing.domain.bid_state import classify_bid
from src.auc_listing.domain.models import (
    BidHistoryEntry,
    Category,
    ListingDetail,
    ListingSummary,
    SaleRecord,
    UserBidView,
)

# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class CreateListingRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    category_id: int = Field(..., gt=0)
    starting_price_cents: int = Field(..., gt=0, le=MAX_AMOUNT_CENTS)
    end_time: datetime

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be blank")
        return v

    @field_validator("end_time")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Naive datetimes are interpreted as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class CreateListingResponse(BaseModel):
    listing_id: str
    status: str
    end_time: str


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


class CategoryOut(BaseModel):
    id: int
    name: str

    @classmethod
    def from_domain(cls, c: Category) -> "CategoryOut":
        return cls(id=c.id, name=c.name)


# ---------------------------------------------------------------------------
# Listing item (list + detail header)
# ---------------------------------------------------------------------------


class ListingItem(BaseModel):
    id: str
    seller_id: str
    seller_username: str | None
    category_id: int
    category_name: str | None
    title: str
    description: str | None
    status: str
    starting_price_cents: int
    current_price_cents: int
    current_price_display: str
    bid_count: int
    end_time: str
    seconds_remaining: int
    settled_at: str | None

    @classmethod
    def from_domain(cls, s: ListingSummary, now: datetime | None = None) -> "ListingItem":
        lst = s.listing
        return cls(
            id=lst.id,
            seller_id=lst.seller_id,
            seller_username=s.seller_username,
            category_id=lst.category_id,
            category_name=s.category_name,
            title=lst.title,
            description=lst.description,
            status=lst.status,
            starting_price_cents=lst.starting_price,
            current_price_cents=lst.current_price,
            current_price_display=cents_to_display(lst.current_price),
            bid_count=s.bid_count,
            end_time=lst.end_time.isoformat(),
            seconds_remaining=seconds_until(lst.end_time, now) if lst.is_active else 0,
            settled_at=lst.settled_at.isoformat() if lst.settled_at else None,
        )


class ListingListResponse(BaseModel):
    items: list[ListingItem]


# ---------------------------------------------------------------------------
# Listing detail
# ---------------------------------------------------------------------------


class BidHistoryItem(BaseModel):
    bid_id: str
    bidder_id: str
    bidder_username: str | None
    amount_cents: int
    amount_display: str
    created_at: str

    @classmethod
    def from_domain(cls, b: BidHistoryEntry) -> "BidHistoryItem":
        return cls(
            bid_id=b.bid_id,
            bidder_id=b.bidder_id,
            bidder_username=b.bidder_username,
            amount_cents=b.amount,
            amount_display=cents_to_display(b.amount),
            created_at=b.created_at.isoformat(),
        )


class SaleOut(BaseModel):
    transaction_id: str
    buyer_id: str
    amount_cents: int
    created_at: str

    @classmethod
    def from_domain(cls, s: SaleRecord) -> "SaleOut":
        return cls(
            transaction_id=s.transaction_id,
            buyer_id=s.buyer_id,
            amount_cents=s.amount,
            created_at=s.created_at.isoformat(),
        )


class ListingDetailResponse(BaseModel):
    listing: ListingItem
    bids: list[BidHistoryItem]  # amount descending
    sale: SaleOut | None

    @classmethod
    def from_domain(cls, d: ListingDetail, now: datetime | None = None) -> "ListingDetailResponse":
        return cls(
            listing=ListingItem.from_domain(d.summary, now),
            bids=[BidHistoryItem.from_domain(b) for b in d.bids],
            sale=SaleOut.from_domain(d.sale) if d.sale else None,
        )


# ---------------------------------------------------------------------------
# "My bids"
# ---------------------------------------------------------------------------


class UserBidItem(BaseModel):
    bid_id: str
    listing_id: str
    listing_title: str
    amount_cents: int
    created_at: str
    listing_status: str
    current_price_cents: int
    end_time: str
    bid_state: str

    @classmethod
    def from_domain(cls, v: UserBidView) -> "UserBidItem":
        return cls(
            bid_id=v.bid_id,
            listing_id=v.listing_id,
            listing_title=v.listing_title,
            amount_cents=v.amount,
            created_at=v.created_at.isoformat(),
            listing_status=v.listing_status,
            current_price_cents=v.current_price,
            end_time=v.end_time.isoformat(),
            bid_state=classify_bid(v).value,
        )


class UserBidListResponse(BaseModel):
    items: list[UserBidItem]
