"""FastAPI dependency injection helpers."""

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.domain.session import Session
from src.infrastructure.database import async_session_factory
from src.infrastructure.store import DataStore
from src.views.common import fetch_or_keep


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_store(db: AsyncSession = Depends(get_db)) -> DataStore:
    return DataStore(db)


async def get_session(
    request: Request, store: DataStore = Depends(get_store)
) -> Session:
    """Resolve ``(user, profile)`` from the identity gateway header.

    A missing profile row is a normal state, not an error.
    """
    user_id = request.headers.get(settings.identity_header)
    if not user_id:
        return Session()
    profile = await fetch_or_keep(
        store, lambda: store.profiles.get_by_user_id(user_id), None, "profile"
    )
    return Session(user_id=user_id, profile=profile)


async def require_user(session: Session = Depends(get_session)) -> Session:
    if session.user_id is None:
        raise HTTPException(status_code=401, detail="Not signed in")
    return session
