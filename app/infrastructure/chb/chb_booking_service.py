from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from app.application.dto.chb_payloads import (
    BookingDTO,
    BookingSearchResponseDTO,
    BookingUpdateResponseDTO,
    SlotSearchResponseDTO,
    booking_to_payload,
)
from app.application.exceptions import TransportError
from app.application.ports.booking_mutation import BookingMutationPort
from app.application.ports.booking_search import BookingSearchPort
from app.application.ports.slot_availability import SlotAvailabilityPort
from app.domain.entities.booking import Booking
from app.domain.entities.filter_state import FilterState
from app.domain.entities.slot_availability import AvailabilityResult, SlotQuery
from app.infrastructure.chb.chb_client import ChbClient

SEARCH_PATH = "/chb-services/booking/v1/_search"
UPDATE_PATH = "/chb-services/booking/v1/_update"
SLOT_SEARCH_PATH = "/chb-services/booking/v1/_slot-search"


def search_params(tenant_id: str, filters: FilterState) -> dict[str, Any]:
    params: dict[str, Any] = {
        "tenantId": tenant_id,
        "bookingNo": filters.booking_no,
        "communityHallCode": filters.community_hall_code,
        "status": filters.status.value if filters.status else None,
        "mobileNumber": filters.mobile_number,
        "fromDate": filters.from_date.isoformat() if filters.from_date else None,
        "toDate": filters.to_date.isoformat() if filters.to_date else None,
        "offset": filters.offset,
        "limit": filters.limit,
        "sortBy": filters.sort_by,
        "sortOrder": filters.sort_order.value,
    }
    return {key: value for key, value in params.items() if value is not None}


class ChbBookingService(BookingSearchPort, BookingMutationPort, SlotAvailabilityPort):
    def __init__(self, client: ChbClient, tenant_id: str) -> None:
        self._client = client
        self._tenant_id = tenant_id
        self._logger = logging.getLogger(__name__)

    async def search(self, filters: FilterState) -> tuple[list[Booking], int]:
        data = await self._client.post(SEARCH_PATH, params=search_params(self._tenant_id, filters))
        try:
            return BookingSearchResponseDTO.model_validate(data).to_domain()
        except ValidationError as exc:
            raise TransportError(f"unreadable search response: {exc.error_count()} errors") from exc

    async def submit(self, booking: Booking) -> Booking:
        data = await self._client.post(
            UPDATE_PATH,
            body={"hallsBookingApplication": booking_to_payload(booking)},
        )
        try:
            applications = BookingUpdateResponseDTO.model_validate(data).applications
            if not applications:
                return booking
            return BookingDTO.parse_booking(applications[0])
        except ValidationError as exc:
            raise TransportError(f"unreadable update response: {exc.error_count()} errors") from exc

    async def check_availability(self, query: SlotQuery) -> AvailabilityResult:
        data = await self._client.post(SLOT_SEARCH_PATH, params=query.as_dict())
        try:
            return SlotSearchResponseDTO.model_validate(data).to_domain()
        except ValidationError as exc:
            raise TransportError(f"unreadable slot search response: {exc.error_count()} errors") from exc
