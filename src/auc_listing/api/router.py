"""auc_listing REST endpoints.

GET  /categories                 — category reference list
POST /listings                   — create listing (auth)
GET  /listings                   — active listings, ?category_id= &search=
GET  /listings/{listing_id}      — detail + bid history (amount desc)
GET  /me/listings                — caller's own listings (auth)
GET  /me/bids                    — caller's bids with live state (auth)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.auc_common.database import get_db_session
from src.auc_common.response import ApiResponse, success_response
from src.auc_common.store import LedgerStore, get_store
from src.auc_gateway.auth.dependencies import get_current_user
from src.auc_gateway.middleware.request_log import get_request_id
from src.auc_gateway.user.db_models import UserModel
from src.auc_listing.application.schemas import CreateListingRequest
from src.auc_listing.application.service import ListingApplicationService

router = APIRouter(tags=["listings"])
me_router = APIRouter(prefix="/me", tags=["me"])

_service = ListingApplicationService()


@router.get("/categories")
async def list_categories(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.list_categories(db)
    resp = success_response([c.model_dump() for c in result])
    resp.request_id = get_request_id(request)
    return resp


@router.post("/listings", status_code=status.HTTP_201_CREATED)
async def create_listing(
    request: Request,
    body: CreateListingRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    store: Annotated[LedgerStore, Depends(get_store)],
) -> ApiResponse:
    result = await _service.create_listing(store, str(current_user.id), body)
    resp = success_response(result.model_dump(), message="Listing created")
    resp.request_id = get_request_id(request)
    return resp


@router.get("/listings")
async def get_active_listings(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    category_id: int | None = Query(None, gt=0),
    search: str | None = Query(None, max_length=200),
    limit: int = Query(100, ge=1, le=500),
) -> ApiResponse:
    result = await _service.get_active_listings(db, category_id, search, limit)
    resp = success_response(result.model_dump())
    resp.request_id = get_request_id(request)
    return resp


@router.get("/listings/{listing_id}")
async def get_listing_detail(
    listing_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_listing_detail(db, listing_id)
    resp = success_response(result.model_dump())
    resp.request_id = get_request_id(request)
    return resp


@me_router.get("/listings")
async def get_user_listings(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_user_listings(db, str(current_user.id))
    resp = success_response(result.model_dump())
    resp.request_id = get_request_id(request)
    return resp


@me_router.get("/bids")
async def get_user_bids(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_user_bids(db, str(current_user.id))
    resp = success_response(result.model_dump())
    resp.request_id = get_request_id(request)
    return resp
