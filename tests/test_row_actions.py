"""
Tests for the per-row action menus and the legal-action table.
"""

from __future__ import annotations

from datetime import date

import pytest

from app.application.exceptions import ActionNotAllowedError, BookingNotFoundError
from app.application.use_cases.cancel_booking import CancelState
from app.application.use_cases.payment_initiation import PaymentOutcome
from app.domain.booking_actions import RowAction, row_actions_for
from app.domain.entities.booking import BookingStatus
from app.domain.entities.result_set import ResultSet, booking_date_label, derive_rows
from conftest import make_booking


@pytest.mark.parametrize(
    "status, take_action, cancel, collect",
    [
        (BookingStatus.BOOKED, True, True, False),
        (BookingStatus.BOOKING_CREATED, True, False, True),
        (BookingStatus.PAYMENT_FAILED, True, False, True),
        (BookingStatus.PENDING_FOR_PAYMENT, True, False, True),
        (BookingStatus.EXPIRED, False, False, False),
        (BookingStatus.CANCELLED, False, False, False),
    ],
)
def test_legal_actions_by_status(status, take_action, cancel, collect):
    actions = row_actions_for(status)
    assert actions.can_take_action is take_action
    assert actions.can_cancel is cancel
    assert actions.can_collect_payment is collect


def test_rows_show_date_range_and_details_route():
    single = make_booking("CHB-1", dates=(date(2024, 5, 1),))
    ranged = make_booking("CHB-2", dates=(date(2024, 5, 1), date(2024, 5, 2), date(2024, 5, 3)))
    assert booking_date_label(single) == "2024-05-01"
    assert booking_date_label(ranged) == "2024-05-01 - 2024-05-03"

    rows = derive_rows(ResultSet(bookings=(single, ranged), total_count=2), "/details/{booking_no}")
    assert [r.details_route for r in rows] == ["/details/CHB-1", "/details/CHB-2"]
    assert rows[0].applicant_name == "Asha Rao"
    assert rows[0].status == "BOOKED"


async def _load(controller, search, *bookings):
    search.bookings = list(bookings)
    await controller.initialize()


@pytest.mark.asyncio
async def test_toggle_and_outside_interaction(controller, search, rows):
    await _load(controller, search, make_booking("A"), make_booking("B"))

    assert rows.toggle("A") is True
    assert rows.toggle("B") is True
    # no mutual exclusion between rows
    assert rows.open_menus() == ["A", "B"]

    rows.outside_interaction(inside="B")
    assert rows.open_menus() == ["B"]

    assert rows.toggle("B") is False
    assert rows.open_menus() == []


@pytest.mark.asyncio
async def test_disabled_row_menu_never_opens(controller, search, rows):
    await _load(controller, search, make_booking("X", status=BookingStatus.EXPIRED))
    assert rows.toggle("X") is False
    assert rows.state("X").menu_open is False


@pytest.mark.asyncio
async def test_new_search_rebuilds_row_state(controller, search, rows):
    await _load(controller, search, make_booking("A"), make_booking("B"))
    rows.toggle("A")

    search.bookings = [make_booking("B"), make_booking("C")]
    await controller.execute_search()

    assert rows.open_menus() == []
    assert rows.state("C").menu_open is False
    with pytest.raises(BookingNotFoundError):
        rows.state("A")


@pytest.mark.asyncio
async def test_select_cancel_hands_off_to_cancel_workflow(controller, search, rows, cancel_workflow, mutation):
    await _load(controller, search, make_booking("A"))
    rows.toggle("A")

    assert await rows.select("A", RowAction.CANCEL) is None

    assert cancel_workflow.state is CancelState.CONFIRMING
    assert cancel_workflow.target.booking_no == "A"
    assert mutation.submitted == []
    assert rows.state("A").menu_open is True


@pytest.mark.asyncio
async def test_select_collect_payment_runs_immediately(controller, search, rows, outbox, availability):
    await _load(controller, search, make_booking("P", status=BookingStatus.PAYMENT_FAILED))

    assert await rows.select("P", RowAction.COLLECT_PAYMENT) is PaymentOutcome.NAVIGATED
    assert len(availability.queries) == 1
    assert outbox.take_navigation().state["bookingNo"] == "P"


@pytest.mark.asyncio
async def test_illegal_or_unknown_selection_is_rejected(controller, search, rows):
    await _load(controller, search, make_booking("A"), make_booking("E", status=BookingStatus.CANCELLED))

    with pytest.raises(ActionNotAllowedError):
        await rows.select("A", RowAction.COLLECT_PAYMENT)
    with pytest.raises(ActionNotAllowedError):
        await rows.select("E", RowAction.CANCEL)
    with pytest.raises(BookingNotFoundError):
        await rows.select("missing", RowAction.CANCEL)
