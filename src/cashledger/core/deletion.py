"""Two-step delete confirmation for cashier sessions.

    IDLE --request_delete--> PENDING_CONFIRMATION(session)
    PENDING_CONFIRMATION --cancel--> IDLE
    PENDING_CONFIRMATION --confirm--> DELETING(session)
    DELETING --success--> IDLE
    DELETING --failure--> PENDING_CONFIRMATION(session)

request_delete restarts from PENDING_CONFIRMATION with the new target in any
state; only one deletion is ever pending.
"""

from typing import Awaitable, Callable
from uuid import UUID

from cashledger.core.errors import AppError, InvalidStateError, NotFoundError
from cashledger.core.logging import get_logger
from cashledger.models import SessionRecord
from cashledger.models.enums import DeletionState

logger = get_logger(__name__)

DeleteCallable = Callable[[UUID], Awaitable[None]]


class DeletionWorkflow:
    """Gate the irreversible delete behind an explicit confirmation."""

    def __init__(self, delete: DeleteCallable):
        self._delete = delete
        self.state = DeletionState.IDLE
        self.target: SessionRecord | None = None
        self.last_error: AppError | None = None

    def request_delete(self, session: SessionRecord) -> None:
        """Capture the intent to delete; nothing touches the store yet."""
        self.state = DeletionState.PENDING_CONFIRMATION
        self.target = session
        self.last_error = None

    def cancel(self) -> None:
        if self.state != DeletionState.PENDING_CONFIRMATION:
            raise InvalidStateError(
                "No deletion awaiting confirmation", details={"state": self.state.value}
            )
        self._reset()

    async def confirm(self) -> SessionRecord:
        """Run the delete for the pending target and return the deleted session.

        A target that is already gone counts as deleted. Any other failure
        puts the workflow back in PENDING_CONFIRMATION and is re-raised so
        the caller can show it.
        """
        if self.state != DeletionState.PENDING_CONFIRMATION or self.target is None:
            raise InvalidStateError(
                "No deletion awaiting confirmation", details={"state": self.state.value}
            )

        target = self.target
        self.state = DeletionState.DELETING
        try:
            await self._delete(target.id)
        except NotFoundError:
            logger.warning("session.delete_target_missing", session_id=str(target.id))
        except AppError as e:
            self.state = DeletionState.PENDING_CONFIRMATION
            self.last_error = e
            logger.error(
                "session.delete_rejected",
                session_id=str(target.id),
                code=e.code,
            )
            raise
        except BaseException:
            # Unexpected errors and cancellation leave the target pending
            self.state = DeletionState.PENDING_CONFIRMATION
            raise

        self._reset()
        return target

    def _reset(self) -> None:
        self.state = DeletionState.IDLE
        self.target = None
        self.last_error = None
