"""Which row actions a booking's status allows."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from app.domain.entities.booking import BookingStatus


class RowAction(str, Enum):
    CANCEL = "cancel"
    COLLECT_PAYMENT = "collect_payment"


LEGAL_ACTIONS: dict[BookingStatus, frozenset[RowAction]] = {
    BookingStatus.BOOKED: frozenset({RowAction.CANCEL}),
    BookingStatus.BOOKING_CREATED: frozenset({RowAction.COLLECT_PAYMENT}),
    BookingStatus.PAYMENT_FAILED: frozenset({RowAction.COLLECT_PAYMENT}),
    BookingStatus.PENDING_FOR_PAYMENT: frozenset({RowAction.COLLECT_PAYMENT}),
    BookingStatus.EXPIRED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}

ACTIONABLE_STATUSES = frozenset(status for status, actions in LEGAL_ACTIONS.items() if actions)


@dataclass(frozen=True)
class RowActions:
    can_take_action: bool
    can_cancel: bool
    can_collect_payment: bool


def allowed_actions(status: BookingStatus) -> frozenset[RowAction]:
    return LEGAL_ACTIONS.get(status, frozenset())


def is_action_allowed(status: BookingStatus, action: RowAction) -> bool:
    return action in allowed_actions(status)


def row_actions_for(status: BookingStatus) -> RowActions:
    actions = allowed_actions(status)
    return RowActions(
        can_take_action=status in ACTIONABLE_STATUSES,
        can_cancel=RowAction.CANCEL in actions,
        can_collect_payment=RowAction.COLLECT_PAYMENT in actions,
    )
