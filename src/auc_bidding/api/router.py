# src/auc_bidding/api/router.py
"""POST /bids — place a bid on an active listing (auth)."""
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from src.auc_bidding.application import service as svc
from src.auc_bidding.application.schemas import PlaceBidRequest
from src.auc_bidding.engine.engine import BiddingEngine
from src.auc_common.response import ApiResponse, success_response
from src.auc_gateway.auth.dependencies import get_current_user
from src.auc_gateway.middleware.request_log import get_request_id
from src.auc_gateway.user.db_models import UserModel

router = APIRouter(prefix="/bids", tags=["bids"])


def get_bidding_engine(request: Request) -> BiddingEngine:
    return request.app.state.bidding_engine


@router.post("", status_code=status.HTTP_201_CREATED)
async def place_bid(
    request: Request,
    req: PlaceBidRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    engine: Annotated[BiddingEngine, Depends(get_bidding_engine)],
) -> ApiResponse:
    result = await svc.place_bid(engine, req, str(current_user.id))
    resp = success_response(result.model_dump(), message="Bid placed successfully")
    resp.request_id = get_request_id(request)
    return resp
