"""Session history endpoints (list, detail, export, delete)."""

import io
from datetime import date
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from cashledger.core.db import get_db
from cashledger.core.logging import get_logger
from cashledger.core.session_export import export_filename, to_delimited_text, to_xlsx
from cashledger.core.session_filters import apply_filters
from cashledger.core.session_repository import SessionRepository
from cashledger.core.session_stats import summarize
from cashledger.models import FilterCriteria, SessionHistoryResponse, SessionRecord
from cashledger.models.enums import StatusFilter

logger = get_logger(__name__)

router = APIRouter(prefix="/api/session-history", tags=["session-history"])


def get_repository(db: AsyncSession = Depends(get_db)) -> SessionRepository:
    return SessionRepository(db)


def get_filter_criteria(
    q: str | None = Query(None, description="Search cashier name or session ID"),
    date_from: date | None = Query(None, description="Opened on or after (YYYY-MM-DD)"),
    date_to: date | None = Query(None, description="Opened on or before (YYYY-MM-DD, whole day)"),
    status_filter: StatusFilter = Query(StatusFilter.ALL, alias="status", description="All, Open or Closed"),
) -> FilterCriteria:
    """Build filter criteria from query params."""
    return FilterCriteria(query=q, date_from=date_from, date_to=date_to, status=status_filter)


@router.get("", response_model=SessionHistoryResponse)
async def list_session_history(
    criteria: FilterCriteria = Depends(get_filter_criteria),
    repository: SessionRepository = Depends(get_repository),
):
    """List sessions matching the filters, newest first, with summary stats."""
    sessions = await repository.load_all()
    visible = apply_filters(sessions, criteria)

    return SessionHistoryResponse(
        sessions=visible,
        summary=summarize(visible),
        criteria=criteria,
    )


@router.get("/export")
async def export_session_history(
    format: Literal["csv", "xlsx"] = Query("csv", description="Export format: csv or xlsx"),
    criteria: FilterCriteria = Depends(get_filter_criteria),
    repository: SessionRepository = Depends(get_repository),
):
    """Download the filtered sessions as CSV (default) or Excel."""
    visible = apply_filters(await repository.load_all(), criteria)

    logger.info(
        "export.sessions",
        format=format,
        count=len(visible),
        filters=criteria.model_dump(mode="json"),
    )

    if format == "xlsx":
        content = to_xlsx(visible)
        media_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    else:
        content = to_delimited_text(visible).encode("utf-8")
        media_type = "text/csv; charset=utf-8"

    return StreamingResponse(
        io.BytesIO(content),
        media_type=media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename(format)}"',
            "Cache-Control": "no-cache, no-store, must-revalidate",
        },
    )


@router.get("/{session_id}", response_model=SessionRecord)
async def get_session_detail(
    session_id: UUID,
    repository: SessionRepository = Depends(get_repository),
):
    """Session detail."""
    return await repository.get(session_id)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: UUID,
    repository: SessionRepository = Depends(get_repository),
):
    """Permanently delete a session. There is no undo."""
    await repository.delete(session_id)
