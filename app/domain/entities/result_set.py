from __future__ import annotations

from dataclasses import dataclass

from app.domain.booking_actions import RowActions, row_actions_for
from app.domain.entities.booking import Booking


NO_RESULTS_LABEL = "ES_COMMON_NO_DATA"


@dataclass(frozen=True)
class ResultSet:
    bookings: tuple[Booking, ...] = ()
    total_count: int = 0

    @property
    def display_message(self) -> str | None:
        """Label shown in place of the table when nothing matched."""
        if not self.bookings:
            return NO_RESULTS_LABEL
        return None

    def find(self, booking_no: str) -> Booking | None:
        for booking in self.bookings:
            if booking.booking_no == booking_no:
                return booking
        return None

    def booking_numbers(self) -> list[str]:
        return [booking.booking_no for booking in self.bookings]


@dataclass(frozen=True)
class Column:
    id: str
    header: str
    sortable: bool = False


BOOKING_COLUMNS: tuple[Column, ...] = (
    Column("bookingNo", "CHB_BOOKING_NO"),
    Column("applicantName", "CHB_APPLICANT_NAME"),
    Column("communityHallCode", "CHB_COMMUNITY_HALL_NAME"),
    Column("bookingDate", "CHB_BOOKING_DATE"),
    Column("bookingStatus", "PT_COMMON_TABLE_COL_STATUS_LABEL"),
    Column("actions", "CHB_ACTIONS"),
)


@dataclass(frozen=True)
class BookingRow:
    booking_no: str
    details_route: str
    applicant_name: str
    community_hall: str
    booking_date: str
    status: str
    actions: RowActions


def booking_date_label(booking: Booking) -> str:
    first = booking.first_slot.booking_date.isoformat()
    if len(booking.booking_slot_details) > 1:
        return f"{first} - {booking.last_slot.booking_date.isoformat()}"
    return first


def derive_rows(result_set: ResultSet, details_route: str) -> list[BookingRow]:
    """Project bookings into table rows; `details_route` takes a {booking_no} field."""
    return [
        BookingRow(
            booking_no=booking.booking_no,
            details_route=details_route.format(booking_no=booking.booking_no),
            applicant_name=booking.applicant_detail.applicant_name,
            community_hall=booking.community_hall_code,
            booking_date=booking_date_label(booking),
            status=booking.booking_status.value,
            actions=row_actions_for(booking.booking_status),
        )
        for booking in result_set.bookings
    ]
