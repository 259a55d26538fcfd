from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any


SLOT_STATUS_BOOKED = "BOOKED"


@dataclass(frozen=True)
class SlotQuery:
    tenant_id: str
    booking_id: str
    community_hall_code: str
    hall_code: str
    booking_start_date: date
    booking_end_date: date
    is_timer_required: bool = True

    def as_dict(self) -> dict[str, Any]:
        return {
            "tenantId": self.tenant_id,
            "bookingId": self.booking_id,
            "communityHallCode": self.community_hall_code,
            "hallCode": self.hall_code,
            "bookingStartDate": self.booking_start_date.isoformat(),
            "bookingEndDate": self.booking_end_date.isoformat(),
            "isTimerRequired": self.is_timer_required,
        }


@dataclass(frozen=True)
class SlotAvailability:
    booking_date: date
    hall_code: str
    status: str


@dataclass(frozen=True)
class AvailabilityResult:
    slots: tuple[SlotAvailability, ...]
    timer_value: int | None = None  # seconds the hold is honoured

    def booked_slots(self) -> list[SlotAvailability]:
        return [slot for slot in self.slots if slot.status == SLOT_STATUS_BOOKED]
