"""
Credential store — every read and write of the ``users`` table goes through here.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from auth.errors import DuplicateUsername, StoreUnavailable
from database.models import Base, User

logger = logging.getLogger(__name__)


def _describe(exc: Exception) -> str:
    # DBAPI error only; the SQLAlchemy wrapper text carries bound parameters.
    return repr(getattr(exc, "orig", None) or type(exc).__name__)


class CredentialStore:
    """
    Thin adapter over one shared engine / session factory.

    Each call opens its own session, so concurrent requests share only the
    connection pool.  Uniqueness of ``username`` is enforced by the database,
    never by application-level locking.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        self._engine = engine
        self._session_factory = session_factory

    async def create_tables(self) -> None:
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Could not create tables: %s", _describe(exc))
            raise StoreUnavailable() from exc

    async def find_password_hash(self, username: str) -> Optional[str]:
        """Return the stored hash for ``username``, or ``None`` if no such account."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(User.password).where(User.username == username)
                )
                return result.scalar_one_or_none()
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Lookup failed for %r: %s", username, _describe(exc))
            raise StoreUnavailable() from exc

    async def insert_account(
        self,
        username: str,
        password_hash: str,
        profile_photo_path: Optional[str] = None,
        id_photo_path: Optional[str] = None,
    ) -> None:
        """
        Insert one account in its own transaction.

        Raises ``DuplicateUsername`` on a uniqueness violation and
        ``StoreUnavailable`` on any other database fault.
        """
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    session.add(
                        User(
                            username=username,
                            password=password_hash,
                            profile_photo_path=profile_photo_path,
                            id_photo_path=id_photo_path,
                        )
                    )
        except IntegrityError as exc:
            logger.info("Insert rejected for %r: username already exists", username)
            raise DuplicateUsername() from exc
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Insert failed for %r: %s", username, _describe(exc))
            raise StoreUnavailable() from exc

    async def count_accounts(self, username: str) -> int:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(func.count()).select_from(User).where(User.username == username)
                )
                return result.scalar_one()
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Count failed for %r: %s", username, _describe(exc))
            raise StoreUnavailable() from exc

    async def close(self) -> None:
        await self._engine.dispose()
