from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from app.domain.entities.booking import BookingStatus


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


# Statuses an operator may filter by. PAYMENT_FAILED is only ever seen on rows.
SEARCHABLE_STATUSES: tuple[BookingStatus, ...] = (
    BookingStatus.BOOKED,
    BookingStatus.BOOKING_CREATED,
    BookingStatus.PENDING_FOR_PAYMENT,
    BookingStatus.EXPIRED,
    BookingStatus.CANCELLED,
)

DEFAULT_SORT_BY = "commencementDate"


@dataclass(frozen=True)
class FilterState:
    booking_no: str | None = None
    community_hall_code: str | None = None
    status: BookingStatus | None = BookingStatus.BOOKED
    mobile_number: str | None = None
    from_date: date | None = None
    to_date: date | None = None
    offset: int = 0
    limit: int | None = None  # None: unbounded, a single page
    sort_by: str = DEFAULT_SORT_BY
    sort_order: SortOrder = SortOrder.DESC


@dataclass(frozen=True)
class StatusOption:
    code: BookingStatus
    label: str


STATUS_OPTIONS: tuple[StatusOption, ...] = (
    StatusOption(BookingStatus.BOOKED, "CHB_BOOKED"),
    StatusOption(BookingStatus.BOOKING_CREATED, "CHB_BOOKING_IN_PROGRES"),
    StatusOption(BookingStatus.PENDING_FOR_PAYMENT, "PENDING_FOR_PAYMENT"),
    StatusOption(BookingStatus.EXPIRED, "EXPIRED"),
    StatusOption(BookingStatus.CANCELLED, "CANCELLED"),
)
