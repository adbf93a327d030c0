"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from accesslog.application.interfaces import AccessLogStoreInterface
from accesslog.database import get_session
from accesslog.infrastructure.persistence import SQLAlchemyAccessLogStore

SessionDep = Annotated[AsyncSession, Depends(get_session)]


async def get_store(session: SessionDep) -> AccessLogStoreInterface:
    """Resolve the access log store bound to the request's database session."""

    return SQLAlchemyAccessLogStore(session)


StoreDep = Annotated[AccessLogStoreInterface, Depends(get_store)]


__all__ = ["get_store", "SessionDep", "StoreDep"]
