# src/auc_bidding/application/schemas.py
from pydantic import BaseModel, Field

from src.auc_common.cents import MAX_AMOUNT_CENTS


class PlaceBidRequest(BaseModel):
    listing_id: str = Field(..., min_length=1, max_length=64)
    amount_cents: int = Field(..., gt=0, le=MAX_AMOUNT_CENTS)


class PlaceBidResponse(BaseModel):
    bid_id: str
    listing_id: str
    amount_cents: int
    new_current_price_cents: int
    new_current_price_display: str
    created_at: str
