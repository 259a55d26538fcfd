from __future__ import annotations

import logging
from dataclasses import dataclass

from app.application.exceptions import ActionNotAllowedError, BookingNotFoundError
from app.application.use_cases.cancel_booking import CancelBookingWorkflow
from app.application.use_cases.payment_initiation import PaymentInitiationWorkflow, PaymentOutcome
from app.application.use_cases.query_controller import QueryController
from app.domain.booking_actions import RowAction, RowActions, is_action_allowed, row_actions_for
from app.domain.entities.booking import Booking
from app.domain.entities.result_set import ResultSet


@dataclass
class RowActionState:
    booking_no: str
    menu_open: bool = False


class RowActionRegistry:
    """
    Action-menu state for the visible rows, keyed by booking number.

    Rows are rebuilt (all menus closed) whenever the controller replaces its
    result set. Menus of different rows are independent: opening one does not
    close another.
    """

    def __init__(
        self,
        controller: QueryController,
        cancel_workflow: CancelBookingWorkflow,
        payment_workflow: PaymentInitiationWorkflow,
    ) -> None:
        self._controller = controller
        self._cancel = cancel_workflow
        self._payment = payment_workflow
        self._rows: dict[str, RowActionState] = {}
        self._logger = logging.getLogger(__name__)
        controller.subscribe(self.sync)
        self.sync(controller.result_set)

    def sync(self, result_set: ResultSet) -> None:
        self._rows = {booking_no: RowActionState(booking_no) for booking_no in result_set.booking_numbers()}

    def state(self, booking_no: str) -> RowActionState:
        row = self._rows.get(booking_no)
        if row is None:
            raise BookingNotFoundError(booking_no)
        return row

    def open_menus(self) -> list[str]:
        return [row.booking_no for row in self._rows.values() if row.menu_open]

    def actions_for(self, booking_no: str) -> RowActions:
        return row_actions_for(self._booking(booking_no).booking_status)

    def toggle(self, booking_no: str) -> bool:
        """Flip the row's menu. A disabled take-action control stays closed."""
        row = self.state(booking_no)
        if not self.actions_for(booking_no).can_take_action:
            return row.menu_open
        row.menu_open = not row.menu_open
        return row.menu_open

    def outside_interaction(self, inside: str | None = None) -> None:
        """Close every open menu except the one the interaction landed in."""
        for row in self._rows.values():
            if row.booking_no != inside:
                row.menu_open = False

    async def select(self, booking_no: str, action: RowAction) -> PaymentOutcome | None:
        """
        Run a menu entry. Cancel hands the booking to the cancel workflow for
        confirmation; Collect Payment starts payment straight away.
        """
        booking = self._booking(booking_no)
        if not is_action_allowed(booking.booking_status, action):
            raise ActionNotAllowedError(
                f"{action.value} is not available for {booking_no} ({booking.booking_status.value})"
            )
        self._logger.info("Row action selected", extra={"booking_no": booking_no, "action": action.value})
        if action is RowAction.CANCEL:
            self._cancel.request_cancel(booking)
            return None
        return await self._payment.initiate(booking)

    def _booking(self, booking_no: str) -> Booking:
        if booking_no not in self._rows:
            raise BookingNotFoundError(booking_no)
        booking = self._controller.result_set.find(booking_no)
        if booking is None:
            raise BookingNotFoundError(booking_no)
        return booking
