"""
Session endpoints
=================

GET   /api/v1/session         -- resolved profile and the view to route to
PATCH /api/v1/session/profile -- change own full name / phone
"""

from fastapi import APIRouter, Depends, Request

from src.api.dependencies import get_session, get_store, require_user
from src.api.middleware import limiter
from src.api.schemas import AccountResponse, ProfileUpdateRequest
from src.config import settings
from src.domain.session import Session
from src.infrastructure.store import DataStore
from src.views.account import load_account, update_profile

router = APIRouter(prefix="/session", tags=["session"])


@router.get(
    "",
    response_model=AccountResponse,
    summary="Resolve the caller's profile and view",
)
@limiter.limit(settings.rate_limit)
async def get_account(request: Request, session: Session = Depends(get_session)):
    return AccountResponse.model_validate(load_account(session))


@router.patch(
    "/profile",
    response_model=AccountResponse,
    summary="Update own profile",
    description="Only ``full_name`` and ``phone`` are writable; role never is.",
)
@limiter.limit(settings.rate_limit)
async def patch_profile(
    request: Request,
    body: ProfileUpdateRequest,
    session: Session = Depends(require_user),
    store: DataStore = Depends(get_store),
):
    account = await update_profile(
        store, load_account(session), body.model_dump(exclude_unset=True)
    )
    return AccountResponse.model_validate(account)
