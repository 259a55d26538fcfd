from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities.booking import ApplicantDetail, Booking, BookingStatus, SlotDetail
from app.domain.entities.hall import HallOption
from app.domain.entities.slot_availability import AvailabilityResult, SlotAvailability


class SlotDetailDTO(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    booking_date: date = Field(alias="bookingDate")
    hall_code: str = Field(default="", alias="hallCode")


class ApplicantDetailDTO(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    applicant_name: str = Field(default="", alias="applicantName")


class BookingDTO(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    booking_no: str = Field(alias="bookingNo")
    booking_id: str = Field(alias="bookingId")
    tenant_id: str = Field(alias="tenantId")
    community_hall_code: str = Field(alias="communityHallCode")
    booking_status: BookingStatus = Field(alias="bookingStatus")
    applicant_detail: ApplicantDetailDTO = Field(default_factory=ApplicantDetailDTO, alias="applicantDetail")
    booking_slot_details: list[SlotDetailDTO] = Field(alias="bookingSlotDetails", min_length=1)

    @classmethod
    def parse_booking(cls, raw: dict[str, Any]) -> Booking:
        dto = cls.model_validate(raw)
        return Booking(
            booking_no=dto.booking_no,
            booking_id=dto.booking_id,
            tenant_id=dto.tenant_id,
            community_hall_code=dto.community_hall_code,
            applicant_detail=ApplicantDetail(applicant_name=dto.applicant_detail.applicant_name),
            booking_slot_details=tuple(
                SlotDetail(booking_date=slot.booking_date, hall_code=slot.hall_code)
                for slot in dto.booking_slot_details
            ),
            booking_status=dto.booking_status,
            extra=dict(raw),
        )


def booking_to_payload(booking: Booking) -> dict[str, Any]:
    """The original wire record with the fields this core owns laid over it."""
    payload = dict(booking.extra)
    payload.update(
        {
            "bookingNo": booking.booking_no,
            "bookingId": booking.booking_id,
            "tenantId": booking.tenant_id,
            "communityHallCode": booking.community_hall_code,
            "bookingStatus": booking.booking_status.value,
        }
    )
    payload.setdefault("applicantDetail", {"applicantName": booking.applicant_detail.applicant_name})
    payload.setdefault(
        "bookingSlotDetails",
        [
            {"bookingDate": slot.booking_date.isoformat(), "hallCode": slot.hall_code}
            for slot in booking.booking_slot_details
        ],
    )
    return payload


class BookingSearchResponseDTO(BaseModel):
    applications: list[dict[str, Any]] = Field(default_factory=list, alias="hallsBookingApplication")
    count: int = 0

    def to_domain(self) -> tuple[list[Booking], int]:
        bookings = [BookingDTO.parse_booking(raw) for raw in self.applications]
        return bookings, self.count


class BookingUpdateResponseDTO(BaseModel):
    applications: list[dict[str, Any]] = Field(default_factory=list, alias="hallsBookingApplication")


class SlotAvailabilityDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    booking_date: date = Field(alias="bookingDate")
    hall_code: str = Field(default="", alias="hallCode")
    # the booking service spells it this way
    slot_status: str = Field(alias="slotStaus")


class SlotSearchResponseDTO(BaseModel):
    slots: list[SlotAvailabilityDTO] = Field(default_factory=list, alias="hallSlotAvailabiltityDetails")
    timer_value: int | None = Field(default=None, alias="timerValue")

    def to_domain(self) -> AvailabilityResult:
        return AvailabilityResult(
            slots=tuple(
                SlotAvailability(booking_date=slot.booking_date, hall_code=slot.hall_code, status=slot.slot_status)
                for slot in self.slots
            ),
            timer_value=self.timer_value,
        )


class HallDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    code: str
    name: str = ""


class MdmsResponseDTO(BaseModel):
    mdms_res: dict[str, dict[str, list[dict[str, Any]]]] = Field(default_factory=dict, alias="MdmsRes")

    def community_halls(self, module: str, master: str) -> list[HallOption]:
        rows = self.mdms_res.get(module, {}).get(master, [])
        halls = [HallDTO.model_validate(row) for row in rows]
        return [HallOption(code=hall.code, name=hall.name or hall.code) for hall in halls]
