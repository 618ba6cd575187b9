# src/auc_bidding/application/service.py
from src.auc_bidding.application.schemas import PlaceBidRequest, PlaceBidResponse
from src.auc_bidding.engine.engine import BiddingEngine
from src.auc_common.cents import cents_to_display


async def place_bid(
    engine: BiddingEngine, req: PlaceBidRequest, user_id: str
) -> PlaceBidResponse:
    accepted = await engine.place_bid(req.listing_id, user_id, req.amount_cents)
    return PlaceBidResponse(
        bid_id=accepted.bid_id,
        listing_id=accepted.listing_id,
        amount_cents=accepted.amount,
        new_current_price_cents=accepted.new_current_price,
        new_current_price_display=cents_to_display(accepted.new_current_price),
        created_at=accepted.created_at.isoformat(),
    )
