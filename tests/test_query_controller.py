"""
Tests for the search controller: defaults, paging, sorting, filters and reset.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import date

import pytest

from app.application.ports.booking_search import BookingSearchPort
from app.application.use_cases.query_controller import SEARCH_FAILED_LABEL, QueryController
from app.domain.entities.booking import BookingStatus
from app.domain.entities.filter_state import SortOrder
from app.domain.entities.notification import Notification
from app.domain.entities.session_context import SessionContext
from conftest import TENANT, TODAY, FakeCatalog, make_booking


@pytest.mark.asyncio
async def test_initialize_searches_once_with_defaults(controller, search):
    await controller.initialize()

    assert len(search.calls) == 1
    state = search.calls[0]
    assert state == controller.filter_state
    assert state.status is BookingStatus.BOOKED
    assert state.from_date == date(2024, 5, 15)
    assert state.to_date == TODAY
    assert state.offset == 0
    assert [h.code for h in controller.hall_options] == ["SJCH", "GBCH"]


@pytest.mark.asyncio
@pytest.mark.parametrize("limit, offset", [(10, 0), (10, 30), (25, 5), (1, 7)])
async def test_paging_moves_by_limit_and_clamps_at_zero(controller, search, limit, offset):
    await controller.initialize()
    await controller.set_page_size(limit)
    controller._filters = replace(controller.filter_state, offset=offset)

    await controller.next_page()
    assert controller.filter_state.offset == offset + limit

    await controller.previous_page()
    await controller.previous_page()
    assert controller.filter_state.offset == max(0, offset - limit)


@pytest.mark.asyncio
async def test_previous_page_from_zero_stays_at_zero(controller, search):
    await controller.initialize()
    await controller.previous_page()
    assert controller.filter_state.offset == 0
    assert len(search.calls) == 2


@pytest.mark.asyncio
async def test_filter_change_restarts_paging(controller, search):
    await controller.initialize()
    await controller.next_page()
    await controller.next_page()
    assert controller.filter_state.offset == 20

    assert await controller.set_filter_field("bookingNo", "CHB-42") is True
    assert controller.filter_state.offset == 0
    assert search.calls[-1].booking_no == "CHB-42"
    assert search.calls[-1].offset == 0


@pytest.mark.asyncio
async def test_bad_mobile_number_is_rejected_without_search(controller, search):
    await controller.initialize()
    before = controller.filter_state

    assert await controller.set_filter_field("mobileNumber", "5123456789") is False
    assert len(search.calls) == 1
    assert controller.filter_state == before
    assert "mobile_number" in controller.field_errors

    assert await controller.set_filter_field("mobileNumber", "9123456789") is True
    assert len(search.calls) == 2
    assert search.calls[-1].mobile_number == "9123456789"
    assert "mobile_number" not in controller.field_errors


@pytest.mark.asyncio
async def test_sort_updates_and_searches(controller, search):
    await controller.initialize()

    await controller.set_sort("", True)
    assert len(search.calls) == 1

    await controller.set_sort("bookingNo", False)
    assert controller.filter_state.sort_by == "bookingNo"
    assert controller.filter_state.sort_order is SortOrder.ASC
    assert controller.sort_params == {"id": "bookingNo", "desc": False}
    assert len(search.calls) == 2


@pytest.mark.asyncio
async def test_page_size_change_keeps_offset(controller):
    await controller.initialize()
    await controller.next_page()
    assert await controller.set_page_size(25) is True
    assert controller.filter_state.offset == 10
    assert controller.filter_state.limit == 25

    assert await controller.set_page_size(0) is False
    assert controller.filter_state.limit == 25


@pytest.mark.asyncio
async def test_reset_restores_defaults_and_clears_toast(controller, search, outbox):
    await controller.initialize()
    defaults = controller.filter_state
    await controller.set_filter_field("status", "CANCELLED")
    await controller.set_page_size(50)
    await controller.set_filter_field("mobileNumber", "123")
    outbox.show(Notification(error=True, label="X"))

    await controller.reset()

    assert controller.filter_state == defaults
    assert controller.field_errors == {}
    assert outbox.notification is None
    assert search.calls[-1] == defaults


@pytest.mark.asyncio
async def test_search_failure_keeps_previous_results(controller, search, outbox):
    search.bookings = [make_booking("CHB-1")]
    await controller.initialize()
    shown = controller.result_set

    search.fail = True
    assert await controller.execute_search() is None

    assert controller.result_set is shown
    assert outbox.notification == Notification(error=True, label=SEARCH_FAILED_LABEL)
    assert controller.is_loading is False


@pytest.mark.asyncio
async def test_unexpected_search_error_shows_toast_instead_of_raising(controller, search, outbox):
    async def broken_search(filters):
        raise ValueError("bad payload")

    search.search = broken_search

    assert await controller.initialize() is None

    assert controller.result_set.bookings == ()
    assert outbox.notification == Notification(error=True, label=SEARCH_FAILED_LABEL)
    assert controller.is_loading is False


@pytest.mark.asyncio
async def test_result_set_replaced_and_listeners_told(controller, search):
    seen = []
    controller.subscribe(seen.append)
    search.bookings = [make_booking("CHB-1"), make_booking("CHB-2")]

    await controller.initialize()

    assert controller.result_set.booking_numbers() == ["CHB-1", "CHB-2"]
    assert controller.result_set.total_count == 2
    assert seen == [controller.result_set]


@pytest.mark.asyncio
async def test_empty_result_carries_display_message(controller):
    await controller.initialize()
    assert controller.result_set.display_message == "ES_COMMON_NO_DATA"


@pytest.mark.asyncio
async def test_catalog_failure_does_not_block_first_search(search, outbox, context):
    controller = QueryController(
        search=search,
        catalog=FakeCatalog(fail=True),
        notifications=outbox,
        context=context,
        clock=lambda: TODAY,
    )
    await controller.initialize()
    assert controller.hall_options == ()
    assert len(search.calls) == 1


@pytest.mark.asyncio
async def test_unbounded_limit_has_a_single_page(search, outbox):
    controller = QueryController(
        search=search,
        catalog=FakeCatalog(),
        notifications=outbox,
        context=SessionContext(tenant_id=TENANT, constrained_viewport=False),
        clock=lambda: TODAY,
    )
    await controller.initialize()
    await controller.next_page()
    assert controller.filter_state.offset == 0
    assert controller.current_page == 0
    assert len(search.calls) == 1


class GatedSearch(BookingSearchPort):
    """Holds the first search until the second one has answered."""

    def __init__(self) -> None:
        self.release_first = asyncio.Event()
        self.count = 0

    async def search(self, filters):
        self.count += 1
        if self.count == 1:
            await self.release_first.wait()
            return [make_booking("STALE")], 1
        self.release_first.set()
        return [make_booking("FRESH")], 1


async def _race(controller: QueryController) -> None:
    first = asyncio.create_task(controller.execute_search())
    await asyncio.sleep(0)
    assert controller.is_loading is True
    await controller.execute_search()
    await first


@pytest.mark.asyncio
async def test_last_response_wins_without_fencing(outbox, context):
    controller = QueryController(GatedSearch(), FakeCatalog(), outbox, context, clock=lambda: TODAY)
    await _race(controller)
    assert controller.result_set.booking_numbers() == ["STALE"]


@pytest.mark.asyncio
async def test_fencing_drops_stale_response(outbox, context):
    controller = QueryController(GatedSearch(), FakeCatalog(), outbox, context, clock=lambda: TODAY, fencing=True)
    await _race(controller)
    assert controller.result_set.booking_numbers() == ["FRESH"]
    assert controller.is_loading is False
