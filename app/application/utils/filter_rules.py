from __future__ import annotations

import calendar
import re
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Iterable

from app.application.exceptions import FilterValidationError
from app.domain.entities.booking import BookingStatus
from app.domain.entities.filter_state import SEARCHABLE_STATUSES, FilterState
from app.domain.entities.session_context import SessionContext

MOBILE_NUMBER_PATTERN = re.compile(r"^[6-9][0-9]{9}$")

MOBILE_ERROR = "CORE_COMMON_MOBILE_ERROR"
DATE_ERROR = "CHB_INVALID_DATE"
FUTURE_DATE_ERROR = "CHB_DATE_IN_FUTURE"
DATE_ORDER_ERROR = "CHB_FROM_DATE_AFTER_TO_DATE"
HALL_ERROR = "CHB_INVALID_COMMUNITY_HALL"
STATUS_ERROR = "CHB_INVALID_STATUS"
UNKNOWN_FIELD_ERROR = "CHB_UNKNOWN_FILTER"

FILTER_FIELDS = (
    "booking_no",
    "community_hall_code",
    "status",
    "mobile_number",
    "from_date",
    "to_date",
)

FIELD_ALIASES = {
    "bookingNo": "booking_no",
    "communityHallCode": "community_hall_code",
    "mobileNumber": "mobile_number",
    "fromDate": "from_date",
    "toDate": "to_date",
}


def one_month_before(day: date) -> date:
    """Same day of the previous month, clamped to that month's last day."""
    year, month = (day.year, day.month - 1) if day.month > 1 else (day.year - 1, 12)
    last_day = calendar.monthrange(year, month)[1]
    return day.replace(year=year, month=month, day=min(day.day, last_day))


def default_filter_state(today: date, context: SessionContext) -> FilterState:
    return FilterState(
        status=BookingStatus.BOOKED,
        from_date=one_month_before(today),
        to_date=today,
        offset=0,
        limit=context.page_size if context.constrained_viewport else None,
    )


def normalize_field_name(name: str) -> str:
    field = FIELD_ALIASES.get(name, name)
    if field not in FILTER_FIELDS:
        raise FilterValidationError(name, UNKNOWN_FIELD_ERROR)
    return field


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_date(field: str, value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise FilterValidationError(field, DATE_ERROR) from None


def apply_filter_value(
    state: FilterState,
    name: str,
    value: Any,
    today: date,
    hall_codes: Iterable[str],
) -> FilterState:
    """
    Validate `value` for filter `name` and return the updated snapshot.
    Blank values clear the field. Raises FilterValidationError on a bad value.
    """
    field = normalize_field_name(name)

    if _blank(value):
        return replace(state, **{field: None})

    if field == "booking_no":
        return replace(state, booking_no=str(value).strip())

    if field == "mobile_number":
        mobile = str(value).strip()
        if not MOBILE_NUMBER_PATTERN.match(mobile):
            raise FilterValidationError(field, MOBILE_ERROR)
        return replace(state, mobile_number=mobile)

    if field == "community_hall_code":
        code = str(value).strip()
        if code not in set(hall_codes):
            raise FilterValidationError(field, HALL_ERROR)
        return replace(state, community_hall_code=code)

    if field == "status":
        try:
            status = BookingStatus(str(getattr(value, "value", value)).strip().upper())
        except ValueError:
            raise FilterValidationError(field, STATUS_ERROR) from None
        if status not in SEARCHABLE_STATUSES:
            raise FilterValidationError(field, STATUS_ERROR)
        return replace(state, status=status)

    day = _parse_date(field, value)
    if day > today:
        raise FilterValidationError(field, FUTURE_DATE_ERROR)
    if field == "from_date":
        if state.to_date is not None and day > state.to_date:
            raise FilterValidationError(field, DATE_ORDER_ERROR)
        return replace(state, from_date=day)
    if state.from_date is not None and day < state.from_date:
        raise FilterValidationError(field, DATE_ORDER_ERROR)
    return replace(state, to_date=day)
