"""CashierSession lifecycle endpoints (open, close)."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from cashledger.api.session_history import get_repository
from cashledger.core.errors import ValidationError
from cashledger.core.session_repository import SessionRepository
from cashledger.models import CashierSessionClose, CashierSessionOpen, SessionRecord
from cashledger.utils.datetime import now_local_naive, to_local_naive

router = APIRouter(prefix="/api/cash-sessions", tags=["cash-sessions"])


@router.post("", response_model=SessionRecord, status_code=status.HTTP_201_CREATED)
async def open_session(
    payload: CashierSessionOpen,
    repository: SessionRepository = Depends(get_repository),
):
    """Open a new cashier session (drawer open)."""
    if payload.opened_at and to_local_naive(payload.opened_at) > now_local_naive():
        raise ValidationError(
            "Opening time cannot be in the future",
            details={"opened_at": payload.opened_at.isoformat()},
        )

    return await repository.open_session(
        starting_cash=payload.starting_cash,
        user_id=payload.user_id,
        employee_name=payload.employee_name,
        opened_at=payload.opened_at,
        notes=payload.notes,
    )


@router.put("/{session_id}/close", response_model=SessionRecord)
async def close_session(
    session_id: UUID,
    payload: CashierSessionClose,
    repository: SessionRepository = Depends(get_repository),
):
    """Close an open session with the counted drawer amount.

    Sets ending cash, close time, expected cash and variance in one write.
    """
    return await repository.close_session(
        session_id,
        ending_cash=payload.ending_cash,
        closed_at=payload.closed_at,
        notes=payload.notes,
    )
