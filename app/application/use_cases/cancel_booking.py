from __future__ import annotations

import logging
from enum import Enum

from app.application.exceptions import ActionNotAllowedError, TransportError, WorkflowStateError
from app.application.ports.booking_mutation import BookingMutationPort
from app.application.ports.notification_sink import NotificationSinkPort
from app.application.use_cases.query_controller import QueryController
from app.domain.booking_actions import RowAction, is_action_allowed
from app.domain.entities.booking import Booking, BookingStatus
from app.domain.entities.notification import Notification

CANCEL_FAILED_LABEL = "CS_SOMETHING_WENT_WRONG"


class CancelState(str, Enum):
    IDLE = "idle"
    CONFIRMING = "confirming"
    SUBMITTING = "submitting"


class CancelBookingWorkflow:
    """Idle -> Confirming -> Submitting -> Idle. Decline returns to Idle without submitting."""

    def __init__(
        self,
        mutation: BookingMutationPort,
        notifications: NotificationSinkPort,
        controller: QueryController,
    ) -> None:
        self._mutation = mutation
        self._notifications = notifications
        self._controller = controller
        self._state = CancelState.IDLE
        self._target: Booking | None = None
        self._logger = logging.getLogger(__name__)

    @property
    def state(self) -> CancelState:
        return self._state

    @property
    def target(self) -> Booking | None:
        return self._target

    def request_cancel(self, booking: Booking) -> None:
        if self._state is CancelState.SUBMITTING:
            raise WorkflowStateError("A cancellation is already being submitted")
        if not is_action_allowed(booking.booking_status, RowAction.CANCEL):
            raise ActionNotAllowedError(
                f"Booking {booking.booking_no} cannot be cancelled from {booking.booking_status.value}"
            )
        self._target = booking
        self._state = CancelState.CONFIRMING

    def decline(self) -> None:
        if self._state is CancelState.SUBMITTING:
            raise WorkflowStateError("Cannot decline while the cancellation is being submitted")
        self._target = None
        self._state = CancelState.IDLE

    async def confirm(self) -> bool:
        """Submit the cancellation. Returns True when the booking service accepted it."""
        if self._state is not CancelState.CONFIRMING or self._target is None:
            raise WorkflowStateError(f"Nothing to confirm (state={self._state.value})")

        updated = self._target.with_status(BookingStatus.CANCELLED)
        self._state = CancelState.SUBMITTING
        try:
            await self._mutation.submit(updated)
        except TransportError as e:
            self._logger.error(
                "Cancellation failed",
                extra={"booking_no": updated.booking_no, "error": str(e)},
            )
            self._notifications.show(Notification(error=True, label=CANCEL_FAILED_LABEL))
            return False
        except Exception as e:
            self._logger.exception(
                "Cancellation failed unexpectedly",
                extra={"booking_no": updated.booking_no, "error": str(e)},
            )
            self._notifications.show(Notification(error=True, label=CANCEL_FAILED_LABEL))
            return False
        finally:
            # also runs when the request task is cancelled mid-submit
            self._finish()

        self._logger.info("Booking cancelled", extra={"booking_no": updated.booking_no})
        await self._controller.execute_search()
        return True

    def _finish(self) -> None:
        self._target = None
        self._state = CancelState.IDLE
