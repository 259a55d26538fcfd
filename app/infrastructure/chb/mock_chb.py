from __future__ import annotations

import logging
from datetime import date, timedelta

from app.application.exceptions import TransportError
from app.application.ports.booking_mutation import BookingMutationPort
from app.application.ports.booking_search import BookingSearchPort
from app.application.ports.hall_catalog import HallCatalogPort
from app.application.ports.slot_availability import SlotAvailabilityPort
from app.domain.entities.booking import ApplicantDetail, Booking, BookingStatus, SlotDetail
from app.domain.entities.filter_state import DEFAULT_SORT_BY, FilterState, SortOrder
from app.domain.entities.hall import HallOption
from app.domain.entities.slot_availability import (
    SLOT_STATUS_BOOKED,
    AvailabilityResult,
    SlotAvailability,
    SlotQuery,
)

MOCK_HALLS = [
    HallOption(code="SJCH", name="Sardar Jassa Singh Community Hall"),
    HallOption(code="GBCH", name="Guru Nanak Bhawan Community Hall"),
]

MOCK_TIMER_SECONDS = 600

# unknown columns fall back to the commencement date
SORT_KEYS = {
    "commencementDate": lambda b: b.first_slot.booking_date,
    "bookingDate": lambda b: b.first_slot.booking_date,
    "bookingNo": lambda b: b.booking_no,
    "applicantName": lambda b: b.applicant_detail.applicant_name,
    "communityHallCode": lambda b: b.community_hall_code,
    "bookingStatus": lambda b: b.booking_status.value,
}


class MockChbBackend(BookingSearchPort, BookingMutationPort, SlotAvailabilityPort, HallCatalogPort):
    """In-memory booking service for local runs. Filters on the first slot's date."""

    def __init__(self, bookings: list[Booking] | None = None, halls: list[HallOption] | None = None) -> None:
        self._bookings: dict[str, Booking] = {b.booking_no: b for b in (bookings or [])}
        self._halls = list(halls if halls is not None else MOCK_HALLS)
        self._mobiles: dict[str, str] = {}
        self._logger = logging.getLogger(__name__)

    def add(self, booking: Booking, mobile_number: str | None = None) -> None:
        self._bookings[booking.booking_no] = booking
        if mobile_number:
            self._mobiles[booking.booking_no] = mobile_number

    def get(self, booking_no: str) -> Booking | None:
        return self._bookings.get(booking_no)

    async def list_hall_codes(self, tenant_id: str) -> list[HallOption]:
        return list(self._halls)

    async def search(self, filters: FilterState) -> tuple[list[Booking], int]:
        matches = [b for b in self._bookings.values() if self._matches(b, filters)]
        sort_key = SORT_KEYS.get(filters.sort_by, SORT_KEYS[DEFAULT_SORT_BY])
        matches.sort(
            key=lambda b: (sort_key(b), b.booking_no),
            reverse=filters.sort_order is SortOrder.DESC,
        )
        end = None if filters.limit is None else filters.offset + filters.limit
        return matches[filters.offset:end], len(matches)

    async def submit(self, booking: Booking) -> Booking:
        if booking.booking_no not in self._bookings:
            raise TransportError(f"unknown booking {booking.booking_no}")
        self._bookings[booking.booking_no] = booking
        self._logger.info(
            "Mock booking updated",
            extra={"booking_no": booking.booking_no, "status": booking.booking_status.value},
        )
        return booking

    async def check_availability(self, query: SlotQuery) -> AvailabilityResult:
        taken = {
            (slot.hall_code, slot.booking_date)
            for b in self._bookings.values()
            if b.booking_status is BookingStatus.BOOKED
            and b.booking_id != query.booking_id
            and b.community_hall_code == query.community_hall_code
            for slot in b.booking_slot_details
        }
        slots = []
        day = query.booking_start_date
        while day <= query.booking_end_date:
            status = SLOT_STATUS_BOOKED if (query.hall_code, day) in taken else "AVAILABLE"
            slots.append(SlotAvailability(booking_date=day, hall_code=query.hall_code, status=status))
            day += timedelta(days=1)
        return AvailabilityResult(slots=tuple(slots), timer_value=MOCK_TIMER_SECONDS)

    def _matches(self, booking: Booking, filters: FilterState) -> bool:
        day = booking.first_slot.booking_date
        return (
            (filters.booking_no is None or booking.booking_no == filters.booking_no)
            and (filters.community_hall_code is None or booking.community_hall_code == filters.community_hall_code)
            and (filters.status is None or booking.booking_status is filters.status)
            and (filters.mobile_number is None or self._mobiles.get(booking.booking_no) == filters.mobile_number)
            and (filters.from_date is None or day >= filters.from_date)
            and (filters.to_date is None or day <= filters.to_date)
        )


def seed_bookings(today: date, tenant_id: str) -> list[Booking]:
    """A handful of bookings covering every status, dated within the last month."""
    statuses = [
        BookingStatus.BOOKED,
        BookingStatus.BOOKED,
        BookingStatus.BOOKING_CREATED,
        BookingStatus.PAYMENT_FAILED,
        BookingStatus.PENDING_FOR_PAYMENT,
        BookingStatus.EXPIRED,
        BookingStatus.CANCELLED,
    ]
    bookings = []
    for index, status in enumerate(statuses, start=1):
        start = today - timedelta(days=3 * index)
        days = 2 if index % 2 == 0 else 1
        hall = MOCK_HALLS[index % len(MOCK_HALLS)].code
        bookings.append(
            Booking(
                booking_no=f"CHB-BK-{index:04d}",
                booking_id=f"bk-{index:04d}",
                tenant_id=tenant_id,
                community_hall_code=hall,
                applicant_detail=ApplicantDetail(applicant_name=f"Applicant {index}"),
                booking_slot_details=tuple(
                    SlotDetail(booking_date=start + timedelta(days=offset), hall_code="HALL_A")
                    for offset in range(days)
                ),
                booking_status=status,
            )
        )
    return bookings
