"""Async engine and session lifecycle for the access log store."""

from __future__ import annotations

import logging
import re
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool
from sqlalchemy.schema import CreateSchema

from accesslog.config.settings import settings

# Importing the package registers every table on Base.metadata
from accesslog.models import Base

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def resolve_schema(raw: Optional[str]) -> Optional[str]:
    """Return the configured schema, or None for the backend default.

    Anything that is not a plain SQL identifier is ignored with a warning.
    """

    schema = (raw or "").strip()
    if not schema:
        return None

    if _IDENTIFIER.fullmatch(schema) is None:
        logger.warning("Ignoring schema name %r; using the default schema", raw)
        return None

    return schema


def engine_options(url: str, *, serverless: bool, debug: bool) -> dict[str, Any]:
    """Pooling options for the backend behind ``url``."""

    options: dict[str, Any] = {"echo": debug}
    if make_url(url).get_backend_name() == "sqlite":
        # an in-memory database only exists inside its one connection
        options["poolclass"] = StaticPool
        return options

    options["pool_pre_ping"] = True
    if serverless or debug:
        options["poolclass"] = NullPool
    return options


SCHEMA_NAME = resolve_schema(settings.database.schema_name)


def _create_engine() -> AsyncEngine:
    database = settings.database
    created = create_async_engine(
        database.url,
        **engine_options(
            database.url,
            serverless=database.serverless,
            debug=settings.debug,
        ),
    )
    if SCHEMA_NAME:
        # unqualified tables resolve to the configured schema for DDL and queries
        created = created.execution_options(schema_translate_map={None: SCHEMA_NAME})
    return created


engine: AsyncEngine = _create_engine()

SessionFactory = async_sessionmaker(
    engine,
    expire_on_commit=False,
    class_=AsyncSession,
)


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """Yield a session; uncommitted work is rolled back if the block raises."""

    async with SessionFactory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def get_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency yielding one session per request."""

    async with session_scope() as session:
        yield session


async def init_models() -> None:
    """Create the schema (when configured) and any missing tables."""

    async with engine.begin() as conn:
        if SCHEMA_NAME:
            await conn.execute(CreateSchema(SCHEMA_NAME, if_not_exists=True))
        await conn.run_sync(Base.metadata.create_all)

    logger.info(
        "Access log tables ready (schema=%s, backend=%s)",
        SCHEMA_NAME or "default",
        engine.dialect.name,
    )


async def dispose_engine() -> None:
    await engine.dispose()
