"""
Tests for filter defaults and per-field validation.
"""

from __future__ import annotations

from datetime import date

import pytest

from app.application.exceptions import FilterValidationError
from app.application.utils.filter_rules import (
    MOBILE_ERROR,
    apply_filter_value,
    default_filter_state,
    one_month_before,
)
from app.domain.entities.booking import BookingStatus
from app.domain.entities.filter_state import FilterState, SortOrder
from app.domain.entities.session_context import SessionContext

TODAY = date(2024, 6, 15)
HALLS = ["SJCH", "GBCH"]


@pytest.mark.parametrize(
    "day, expected",
    [
        (date(2024, 6, 15), date(2024, 5, 15)),
        (date(2024, 3, 31), date(2024, 2, 29)),
        (date(2024, 1, 10), date(2023, 12, 10)),
    ],
)
def test_one_month_before(day, expected):
    assert one_month_before(day) == expected


def test_defaults_for_constrained_viewport():
    state = default_filter_state(TODAY, SessionContext(tenant_id="t", constrained_viewport=True))
    assert state.status is BookingStatus.BOOKED
    assert state.from_date == date(2024, 5, 15)
    assert state.to_date == TODAY
    assert state.offset == 0
    assert state.limit == 10
    assert state.sort_by == "commencementDate"
    assert state.sort_order is SortOrder.DESC


def test_defaults_leave_limit_unbounded_otherwise():
    state = default_filter_state(TODAY, SessionContext(tenant_id="t", constrained_viewport=False))
    assert state.limit is None


@pytest.mark.parametrize("mobile", ["5123456789", "912345678", "91234567890", "91234abcde", "0123456789"])
def test_mobile_number_rejected(mobile):
    with pytest.raises(FilterValidationError) as exc:
        apply_filter_value(FilterState(), "mobileNumber", mobile, TODAY, HALLS)
    assert exc.value.field == "mobile_number"
    assert exc.value.message == MOBILE_ERROR


@pytest.mark.parametrize("mobile", ["9123456789", "6000000000", " 7123456789 "])
def test_mobile_number_accepted(mobile):
    state = apply_filter_value(FilterState(), "mobile_number", mobile, TODAY, HALLS)
    assert state.mobile_number == mobile.strip()


def test_blank_value_clears_field():
    state = FilterState(booking_no="CHB-1")
    assert apply_filter_value(state, "bookingNo", "  ", TODAY, HALLS).booking_no is None
    assert apply_filter_value(state, "status", None, TODAY, HALLS).status is None


def test_hall_code_must_come_from_catalog():
    assert apply_filter_value(FilterState(), "communityHallCode", "GBCH", TODAY, HALLS).community_hall_code == "GBCH"
    with pytest.raises(FilterValidationError):
        apply_filter_value(FilterState(), "communityHallCode", "NOPE", TODAY, HALLS)


def test_status_accepts_searchable_codes_only():
    state = apply_filter_value(FilterState(), "status", "pending_for_payment", TODAY, HALLS)
    assert state.status is BookingStatus.PENDING_FOR_PAYMENT
    with pytest.raises(FilterValidationError):
        apply_filter_value(FilterState(), "status", "PAYMENT_FAILED", TODAY, HALLS)
    with pytest.raises(FilterValidationError):
        apply_filter_value(FilterState(), "status", "SOMETHING", TODAY, HALLS)


def test_to_date_may_not_be_in_the_future():
    with pytest.raises(FilterValidationError):
        apply_filter_value(FilterState(), "toDate", "2024-06-16", TODAY, HALLS)
    assert apply_filter_value(FilterState(), "toDate", "2024-06-15", TODAY, HALLS).to_date == TODAY


def test_date_order_is_enforced():
    state = FilterState(from_date=date(2024, 5, 10), to_date=date(2024, 5, 20))
    with pytest.raises(FilterValidationError):
        apply_filter_value(state, "from_date", date(2024, 5, 21), TODAY, HALLS)
    with pytest.raises(FilterValidationError):
        apply_filter_value(state, "to_date", date(2024, 5, 9), TODAY, HALLS)


def test_unparseable_date_and_unknown_field():
    with pytest.raises(FilterValidationError):
        apply_filter_value(FilterState(), "fromDate", "15/05/2024", TODAY, HALLS)
    with pytest.raises(FilterValidationError):
        apply_filter_value(FilterState(), "colour", "red", TODAY, HALLS)


def test_snapshots_are_not_mutated():
    original = FilterState()
    updated = apply_filter_value(original, "bookingNo", "CHB-9", TODAY, HALLS)
    assert original.booking_no is None
    assert updated.booking_no == "CHB-9"
