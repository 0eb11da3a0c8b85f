"""Session Repository: domain queries over the cashier_sessions store."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cashledger.core.errors import NotFoundError, StoreUnavailableError
from cashledger.core.logging import get_logger
from cashledger.models import CashierSession, SessionRecord
from cashledger.models.enums import SessionStatus
from cashledger.utils.datetime import now_local_naive, to_local_naive

logger = get_logger(__name__)

# Connection refused/reset from the driver surfaces as OSError
STORE_ERRORS = (SQLAlchemyError, OSError)


class SessionRepository:
    """Translate ledger operations into store calls.

    The repository keeps no cache: after any write, callers reload with
    load_all() and re-derive their views from the store of record.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def load_all(self) -> list[SessionRecord]:
        """All sessions, most recently opened first."""
        stmt = select(CashierSession).order_by(CashierSession.opened_at.desc())
        try:
            result = await self.db.execute(stmt)
            rows = list(result.scalars().all())
        except STORE_ERRORS as e:
            await self.db.rollback()
            logger.error("session_history.load_failed", error=type(e).__name__)
            raise StoreUnavailableError("load", details={"error": type(e).__name__}) from e

        records = [SessionRecord.from_model(row) for row in rows]
        for record in records:
            if not record.is_consistent:
                logger.warning(
                    "session.invariant_violated",
                    session_id=str(record.id),
                    status=record.status.value,
                    has_closed_at=record.closed_at is not None,
                    has_ending_cash=record.ending_cash is not None,
                )

        logger.info("session_history.loaded", count=len(records))
        return records

    async def _get_row(self, session_id: UUID) -> CashierSession:
        try:
            row = await self.db.get(CashierSession, session_id)
        except STORE_ERRORS as e:
            await self.db.rollback()
            raise StoreUnavailableError("get", details={"error": type(e).__name__}) from e
        if row is None:
            raise NotFoundError("CashierSession", str(session_id))
        return row

    async def get(self, session_id: UUID) -> SessionRecord:
        """Fetch a single session for the detail view."""
        return SessionRecord.from_model(await self._get_row(session_id))

    async def delete(self, session_id: UUID) -> None:
        """Permanently delete a session.

        Raises:
            NotFoundError: the session is already gone
            StoreUnavailableError: the store rejected or could not run the delete
        """
        row = await self._get_row(session_id)
        try:
            await self.db.delete(row)
            await self.db.commit()
        except STORE_ERRORS as e:
            await self.db.rollback()
            logger.error("session.delete_failed", session_id=str(session_id), error=type(e).__name__)
            raise StoreUnavailableError("delete", details={"error": type(e).__name__}) from e

        logger.info("session.deleted", session_id=str(session_id))

    async def open_session(
        self,
        starting_cash: Decimal,
        user_id: UUID | None = None,
        employee_name: str | None = None,
        opened_at: datetime | None = None,
        notes: str | None = None,
    ) -> SessionRecord:
        """Open a drawer. New sessions always start in Open state."""
        row = CashierSession(
            user_id=user_id,
            employee_name=employee_name,
            starting_cash=starting_cash,
            total_sales=Decimal("0.00"),
            opened_at=to_local_naive(opened_at) if opened_at else now_local_naive(),
            status=SessionStatus.OPEN.value,
            notes=notes,
        )
        try:
            self.db.add(row)
            await self.db.commit()
            await self.db.refresh(row)
        except STORE_ERRORS as e:
            await self.db.rollback()
            raise StoreUnavailableError("open", details={"error": type(e).__name__}) from e

        logger.info(
            "session.opened",
            session_id=str(row.id),
            user_id=str(user_id) if user_id else None,
            starting_cash=str(starting_cash),
        )
        return SessionRecord.from_model(row)

    async def close_session(
        self,
        session_id: UUID,
        ending_cash: Decimal,
        closed_at: datetime | None = None,
        notes: str | None = None,
    ) -> SessionRecord:
        """Close an open session with the counted drawer amount.

        Raises:
            NotFoundError: unknown session
            InvalidStateError: session already closed, or closed_at < opened_at
        """
        row = await self._get_row(session_id)
        row.close(
            ending_cash=ending_cash,
            closed_at=to_local_naive(closed_at) if closed_at else now_local_naive(),
        )
        if notes is not None:
            row.notes = notes

        try:
            await self.db.commit()
            await self.db.refresh(row)
        except STORE_ERRORS as e:
            await self.db.rollback()
            raise StoreUnavailableError("close", details={"error": type(e).__name__}) from e

        logger.info(
            "session.closed",
            session_id=str(row.id),
            expected_cash=str(row.expected_cash),
            variance=str(row.variance),
        )
        return SessionRecord.from_model(row)
