"""Session history view state: the owned session list and everything derived from it."""

from cashledger.core.deletion import DeletionWorkflow
from cashledger.core.errors import AppError, StoreUnavailableError
from cashledger.core.logging import get_logger
from cashledger.core.session_export import export_filename, to_delimited_text
from cashledger.core.session_filters import apply_filters
from cashledger.core.session_repository import SessionRepository
from cashledger.core.session_stats import summarize
from cashledger.models import FilterCriteria, SessionRecord, SummaryStats

logger = get_logger(__name__)


class SessionHistoryView:
    """Holds the full list, the criteria and the detail/delete state.

    The visible subset and summary are recomputed on every access; nothing
    derived is cached.
    """

    def __init__(self, repository: SessionRepository):
        self.repository = repository
        self.sessions: list[SessionRecord] = []
        self.criteria = FilterCriteria()
        self.selected: SessionRecord | None = None
        self.error_message: str | None = None
        self.deletion = DeletionWorkflow(repository.delete)

    async def reload(self) -> bool:
        """Replace the list from the store. On failure the previous list stays."""
        try:
            sessions = await self.repository.load_all()
        except StoreUnavailableError as e:
            self.error_message = e.message
            logger.warning("session_history.reload_failed", kept=len(self.sessions))
            return False

        self.sessions = sessions
        self.error_message = None
        return True

    def set_criteria(self, criteria: FilterCriteria) -> None:
        self.criteria = criteria

    @property
    def visible(self) -> list[SessionRecord]:
        return apply_filters(self.sessions, self.criteria)

    @property
    def summary(self) -> SummaryStats:
        return summarize(self.visible)

    def export_csv(self) -> tuple[str, str]:
        """(filename, csv text) for the visible subset."""
        visible = self.visible
        logger.info("export.sessions", format="csv", count=len(visible))
        return export_filename("csv"), to_delimited_text(visible)

    def open_detail(self, session: SessionRecord) -> None:
        self.selected = session

    def close_detail(self) -> None:
        self.selected = None

    def request_delete(self, session: SessionRecord) -> None:
        self.deletion.request_delete(session)

    def cancel_delete(self) -> None:
        self.deletion.cancel()

    async def confirm_delete(self) -> bool:
        """Confirm the pending delete. Returns False and sets error_message on failure."""
        try:
            deleted = await self.deletion.confirm()
        except AppError as e:
            self.error_message = f"Failed to delete session: {e.message}"
            return False

        if self.selected is not None and self.selected.id == deleted.id:
            self.close_detail()

        await self.reload()
        return True
