"""Notices and the guarded-fetch helper shared by the role views."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from src.infrastructure.store import DataStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Notice:
    """One-shot, user-visible outcome of a view operation."""

    level: str  # "success" | "error" | "info"
    message: str

    @classmethod
    def success(cls, message: str) -> "Notice":
        return cls("success", message)

    @classmethod
    def error(cls, message: str) -> "Notice":
        return cls("error", message)

    @classmethod
    def info(cls, message: str) -> "Notice":
        return cls("info", message)


async def fetch_or_keep(
    store: DataStore,
    fetch: Callable[[], Awaitable[T]],
    fallback: T,
    what: str,
) -> T:
    """Await *fetch*; on a store error log it and return *fallback*.

    Callers pass the last-known value as *fallback* so a failed re-fetch
    leaves the view as it was.
    """
    try:
        return await fetch()
    except SQLAlchemyError:
        logger.exception("Error fetching %s", what)
        await store.rollback()
        return fallback
