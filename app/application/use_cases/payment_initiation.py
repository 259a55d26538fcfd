from __future__ import annotations

import logging
from enum import Enum

from app.application.exceptions import ActionNotAllowedError, ConflictError
from app.application.ports.navigator import NavigatorPort
from app.application.ports.notification_sink import NotificationSinkPort
from app.application.ports.slot_availability import SlotAvailabilityPort
from app.domain.booking_actions import RowAction, is_action_allowed
from app.domain.entities.booking import Booking
from app.domain.entities.notification import Notification
from app.domain.entities.slot_availability import AvailabilityResult, SlotQuery

HALL_ALREADY_BOOKED_LABEL = "CHB_COMMUNITY_HALL_ALREADY_BOOKED"
PAYMENT_FAILED_LABEL = "CS_SOMETHING_WENT_WRONG"


class PaymentOutcome(str, Enum):
    NAVIGATED = "navigated"
    CONFLICT = "conflict"
    FAILED = "failed"


def build_slot_query(booking: Booking) -> SlotQuery:
    """The range runs from the first slot's date to the last slot's date."""
    return SlotQuery(
        tenant_id=booking.tenant_id,
        booking_id=booking.booking_id,
        community_hall_code=booking.community_hall_code,
        hall_code=booking.first_slot.hall_code,
        booking_start_date=booking.first_slot.booking_date,
        booking_end_date=booking.last_slot.booking_date,
        is_timer_required=True,
    )


class PaymentInitiationWorkflow:
    """
    Re-checks slot availability right before sending the operator to payment.

    The row the operator clicked may be stale, so availability is fetched
    again and navigation only happens once that fetch has resolved with no
    slot already BOOKED.
    """

    def __init__(
        self,
        availability: SlotAvailabilityPort,
        navigator: NavigatorPort,
        notifications: NotificationSinkPort,
        payment_route: str,
    ) -> None:
        self._availability = availability
        self._navigator = navigator
        self._notifications = notifications
        self._payment_route = payment_route
        self._logger = logging.getLogger(__name__)

    async def initiate(self, booking: Booking) -> PaymentOutcome:
        if not is_action_allowed(booking.booking_status, RowAction.COLLECT_PAYMENT):
            raise ActionNotAllowedError(
                f"Payment cannot be collected for {booking.booking_no} in {booking.booking_status.value}"
            )

        query = build_slot_query(booking)
        try:
            result = await self._availability.check_availability(query)
            self._ensure_slots_free(booking, result)
        except ConflictError as e:
            self._logger.warning("Payment blocked", extra={"booking_no": booking.booking_no, "reason": str(e)})
            self._notifications.show(Notification(error=True, label=HALL_ALREADY_BOOKED_LABEL))
            return PaymentOutcome.CONFLICT
        except Exception as e:
            self._logger.exception(
                "Slot availability check failed",
                extra={"booking_no": booking.booking_no, "error": str(e)},
            )
            self._notifications.show(Notification(error=True, label=PAYMENT_FAILED_LABEL))
            return PaymentOutcome.FAILED

        self._navigator.go_to(
            self._payment_route.format(booking_no=booking.booking_no),
            {
                "tenantId": booking.tenant_id,
                "bookingNo": booking.booking_no,
                "timerValue": result.timer_value,
                "slotQuery": query.as_dict(),
            },
        )
        self._logger.info(
            "Navigated to payment collection",
            extra={"booking_no": booking.booking_no, "timer_value": result.timer_value},
        )
        return PaymentOutcome.NAVIGATED

    def _ensure_slots_free(self, booking: Booking, result: AvailabilityResult) -> None:
        booked = result.booked_slots()
        if booked:
            dates = ", ".join(slot.booking_date.isoformat() for slot in booked)
            raise ConflictError(f"{booking.community_hall_code} already booked on {dates}")
