"""LedgerStore — the atomic-unit primitive for listings, bids and transactions.

Every mutation of a listing's (current_price, status) pair runs through
`run_atomic`: one fresh session, one transaction, committed on success and
rolled back on any exception. Transient conflicts (serialization failure,
deadlock) re-run the whole unit with exponential backoff; exhaustion raises
ConflictError. Business errors raised inside the unit propagate untouched
after rollback and are never retried.
"""

import asyncio
import logging
import random
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TypeVar

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from config.settings import Settings
from src.auc_common.database import build_engine, build_session_factory
from src.auc_common.errors import ConflictError, InternalError, StoreUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# 40001 serialization_failure, 40P01 deadlock_detected
_TRANSIENT_SQLSTATES = frozenset({"40001", "40P01"})


def is_transient_conflict(exc: DBAPIError) -> bool:
    """True if the driver error is a retryable concurrency conflict."""
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return code in _TRANSIENT_SQLSTATES


class LedgerStore:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: AsyncEngine | None = None,
        max_retries: int = 3,
        backoff_ms: int = 25,
    ) -> None:
        self._session_factory = session_factory
        self._engine = engine
        self._max_retries = max_retries
        self._backoff_ms = backoff_ms

    @classmethod
    def from_settings(cls, settings: Settings) -> "LedgerStore":
        engine = build_engine(settings)
        return cls(
            build_session_factory(engine),
            engine=engine,
            max_retries=settings.STORE_MAX_RETRIES,
            backoff_ms=settings.STORE_RETRY_BACKOFF_MS,
        )

    async def ping(self) -> None:
        """Startup check — lets connection errors escape so the process refuses to boot."""
        async with self._session_factory() as db:
            await db.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Plain session for read paths and caller-managed transactions."""
        try:
            async with self._session_factory() as db:
                yield db
        except PoolTimeoutError as exc:
            logger.error("Connection pool exhausted: %s", exc)
            raise StoreUnavailableError() from exc

    async def run_atomic(
        self, unit: Callable[[AsyncSession], Awaitable[T]], label: str = "unit"
    ) -> T:
        attempt = 0
        while True:
            attempt += 1
            try:
                async with self._session_factory() as db, db.begin():
                    return await unit(db)
            except IntegrityError as exc:
                logger.error("Integrity violation in %s: %s", label, exc.orig)
                raise InternalError(f"Integrity violation in {label}") from exc
            except DBAPIError as exc:
                if not is_transient_conflict(exc):
                    logger.error("Store error in %s: %s", label, exc.orig)
                    raise StoreUnavailableError() from exc
                if attempt > self._max_retries:
                    logger.warning("%s: conflict persisted after %d attempts", label, attempt)
                    raise ConflictError(attempt) from exc
                delay = self._backoff_ms * (2 ** (attempt - 1)) * random.uniform(0.5, 1.0)
                logger.warning(
                    "%s: transient conflict (attempt %d/%d), retrying in %.0fms",
                    label,
                    attempt,
                    self._max_retries + 1,
                    delay,
                )
                await asyncio.sleep(delay / 1000)
            except PoolTimeoutError as exc:
                logger.error("Connection pool exhausted in %s: %s", label, exc)
                raise StoreUnavailableError() from exc
            except OSError as exc:
                logger.error("Store connection failed in %s: %s", label, exc)
                raise StoreUnavailableError() from exc


def get_store(request: Request) -> LedgerStore:
    """FastAPI dependency: the LedgerStore built in the lifespan hook."""
    return request.app.state.store
