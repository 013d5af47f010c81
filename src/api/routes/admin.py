"""
Admin endpoints
===============

GET  /api/v1/admin/console                         -- stats, drivers, rides, withdrawals
POST /api/v1/admin/drivers/{driver_id}/approve     -- pending driver -> approved
POST /api/v1/admin/drivers/{driver_id}/reject      -- pending driver -> rejected
POST /api/v1/admin/withdrawals/{id}/approve        -- pending withdrawal -> approved
POST /api/v1/admin/withdrawals/{id}/reject         -- pending withdrawal -> rejected
GET  /api/v1/admin/health                          -- simple health check

Callers whose profile role is not ``admin`` get 403 and no data is read.
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from src.api.dependencies import get_store, require_user
from src.api.middleware import limiter
from src.api.schemas import AdminConsoleResponse, ErrorResponse, HealthResponse
from src.config import settings
from src.domain.session import Session
from src.infrastructure.store import DataStore
from src.views.admin import (
    ACCESS_DENIED,
    AdminConsole,
    approve_driver,
    approve_withdrawal,
    load_admin_console,
    reject_driver,
    reject_withdrawal,
)

router = APIRouter(prefix="/admin", tags=["admin"])


async def admin_console(
    session: Session = Depends(require_user),
    store: DataStore = Depends(get_store),
) -> AdminConsole:
    console = await load_admin_console(store, session)
    if console.access_denied:
        raise HTTPException(status_code=403, detail=ACCESS_DENIED)
    return console


@router.get(
    "/console",
    response_model=AdminConsoleResponse,
    summary="Admin console: stats and review queues",
    responses={403: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def get_console(request: Request, console: AdminConsole = Depends(admin_console)):
    return AdminConsoleResponse.model_validate(console)


@router.post(
    "/drivers/{driver_id}/approve",
    response_model=AdminConsoleResponse,
    summary="Approve a pending driver",
)
@limiter.limit(settings.rate_limit)
async def approve_driver_route(
    request: Request,
    driver_id: str,
    console: AdminConsole = Depends(admin_console),
    store: DataStore = Depends(get_store),
):
    return AdminConsoleResponse.model_validate(
        await approve_driver(store, console, driver_id)
    )


@router.post(
    "/drivers/{driver_id}/reject",
    response_model=AdminConsoleResponse,
    summary="Reject a pending driver",
)
@limiter.limit(settings.rate_limit)
async def reject_driver_route(
    request: Request,
    driver_id: str,
    console: AdminConsole = Depends(admin_console),
    store: DataStore = Depends(get_store),
):
    return AdminConsoleResponse.model_validate(
        await reject_driver(store, console, driver_id)
    )


@router.post(
    "/withdrawals/{withdrawal_id}/approve",
    response_model=AdminConsoleResponse,
    summary="Approve a pending withdrawal",
    description="Stamps ``processed_at``.  The wallet balance is not touched.",
)
@limiter.limit(settings.rate_limit)
async def approve_withdrawal_route(
    request: Request,
    withdrawal_id: str,
    console: AdminConsole = Depends(admin_console),
    store: DataStore = Depends(get_store),
):
    return AdminConsoleResponse.model_validate(
        await approve_withdrawal(store, console, withdrawal_id)
    )


@router.post(
    "/withdrawals/{withdrawal_id}/reject",
    response_model=AdminConsoleResponse,
    summary="Reject a pending withdrawal",
)
@limiter.limit(settings.rate_limit)
async def reject_withdrawal_route(
    request: Request,
    withdrawal_id: str,
    console: AdminConsole = Depends(admin_console),
    store: DataStore = Depends(get_store),
):
    return AdminConsoleResponse.model_validate(
        await reject_withdrawal(store, console, withdrawal_id)
    )


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()
