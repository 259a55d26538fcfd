from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Any


class BookingStatus(str, Enum):
    BOOKED = "BOOKED"
    BOOKING_CREATED = "BOOKING_CREATED"
    PAYMENT_FAILED = "PAYMENT_FAILED"
    PENDING_FOR_PAYMENT = "PENDING_FOR_PAYMENT"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class SlotDetail:
    booking_date: date
    hall_code: str


@dataclass(frozen=True)
class ApplicantDetail:
    applicant_name: str


@dataclass(frozen=True)
class Booking:
    booking_no: str
    booking_id: str
    tenant_id: str
    community_hall_code: str
    applicant_detail: ApplicantDetail
    booking_slot_details: tuple[SlotDetail, ...]
    booking_status: BookingStatus
    # Remaining wire fields, passed back untouched on update
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        if not self.booking_slot_details:
            raise ValueError(f"Booking {self.booking_no} has no slot details")

    @property
    def first_slot(self) -> SlotDetail:
        return self.booking_slot_details[0]

    @property
    def last_slot(self) -> SlotDetail:
        return self.booking_slot_details[-1]

    def with_status(self, status: BookingStatus) -> "Booking":
        return replace(self, booking_status=status)
