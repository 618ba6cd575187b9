# src/auc_settlement/api/router.py
"""Admin settlement REST API."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.auc_common.database import get_db_session
from src.auc_common.response import ApiResponse, success_response
from src.auc_gateway.auth.dependencies import require_admin_user
from src.auc_gateway.middleware.request_log import get_request_id
from src.auc_gateway.user.db_models import UserModel
from src.auc_settlement.application.service import SettlementAdminService
from src.auc_settlement.application.sweeper import SettlementSweeper

router = APIRouter(prefix="/admin/settlement", tags=["admin"])
_service = SettlementAdminService()


def get_sweeper(request: Request) -> SettlementSweeper:
    return request.app.state.sweeper


@router.post("/sweep")
async def trigger_sweep(
    request: Request,
    admin: Annotated[UserModel, Depends(require_admin_user)],
    sweeper: Annotated[SettlementSweeper, Depends(get_sweeper)],
) -> ApiResponse:
    result = await _service.trigger_sweep(sweeper, admin.username)
    resp = success_response(result.model_dump(), message="Sweep completed")
    resp.request_id = get_request_id(request)
    return resp


@router.get("/invariants")
async def verify_invariants(
    request: Request,
    admin: Annotated[UserModel, Depends(require_admin_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.verify_invariants(db)
    resp = success_response(result.model_dump())
    resp.request_id = get_request_id(request)
    return resp


@router.get("/transactions")
async def list_transactions(
    request: Request,
    admin: Annotated[UserModel, Depends(require_admin_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    limit: int = Query(100, ge=1, le=500),
) -> ApiResponse:
    result = await _service.list_transactions(db, limit)
    resp = success_response(result.model_dump())
    resp.request_id = get_request_id(request)
    return resp
