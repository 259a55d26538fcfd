from __future__ import annotations

from datetime import date

import pytest

from app.application.exceptions import TransportError
from app.application.ports.booking_mutation import BookingMutationPort
from app.application.ports.booking_search import BookingSearchPort
from app.application.ports.hall_catalog import HallCatalogPort
from app.application.ports.slot_availability import SlotAvailabilityPort
from app.application.use_cases.cancel_booking import CancelBookingWorkflow
from app.application.use_cases.payment_initiation import PaymentInitiationWorkflow
from app.application.use_cases.query_controller import QueryController
from app.application.use_cases.row_actions import RowActionRegistry
from app.domain.entities.booking import ApplicantDetail, Booking, BookingStatus, SlotDetail
from app.domain.entities.filter_state import FilterState
from app.domain.entities.hall import HallOption
from app.domain.entities.session_context import SessionContext
from app.domain.entities.slot_availability import AvailabilityResult, SlotQuery
from app.infrastructure.shell.session_outbox import SessionOutbox

TODAY = date(2024, 6, 15)
TENANT = "pg.citya"
PAYMENT_ROUTE = "/digit-ui/employee/payment/collect/chb-services/{booking_no}"


def make_booking(
    booking_no: str = "CHB-001",
    status: BookingStatus = BookingStatus.BOOKED,
    dates: tuple[date, ...] = (date(2024, 5, 1),),
    hall_code: str = "HALL_A",
    community_hall_code: str = "SJCH",
) -> Booking:
    return Booking(
        booking_no=booking_no,
        booking_id=f"id-{booking_no}",
        tenant_id=TENANT,
        community_hall_code=community_hall_code,
        applicant_detail=ApplicantDetail(applicant_name="Asha Rao"),
        booking_slot_details=tuple(SlotDetail(booking_date=d, hall_code=hall_code) for d in dates),
        booking_status=status,
        extra={"bookingNo": booking_no, "purpose": {"purpose": "WEDDING"}, "auditDetails": {"createdBy": "u1"}},
    )


class FakeSearch(BookingSearchPort):
    def __init__(self, bookings: list[Booking] | None = None) -> None:
        self.bookings = list(bookings or [])
        self.calls: list[FilterState] = []
        self.fail = False

    async def search(self, filters: FilterState) -> tuple[list[Booking], int]:
        self.calls.append(filters)
        if self.fail:
            raise TransportError("search down")
        return list(self.bookings), len(self.bookings)


class FakeCatalog(HallCatalogPort):
    def __init__(self, halls: list[HallOption] | None = None, fail: bool = False) -> None:
        self.halls = halls if halls is not None else [HallOption("SJCH", "Jassa Singh Hall"), HallOption("GBCH", "Bhawan")]
        self.fail = fail

    async def list_hall_codes(self, tenant_id: str) -> list[HallOption]:
        if self.fail:
            raise TransportError("mdms down")
        return list(self.halls)


class FakeMutation(BookingMutationPort):
    def __init__(self) -> None:
        self.submitted: list[Booking] = []
        self.fail = False

    async def submit(self, booking: Booking) -> Booking:
        self.submitted.append(booking)
        if self.fail:
            raise TransportError("update rejected")
        return booking


class FakeAvailability(SlotAvailabilityPort):
    def __init__(self, result: AvailabilityResult | None = None, error: Exception | None = None) -> None:
        self.result = result or AvailabilityResult(slots=(), timer_value=600)
        self.error = error
        self.queries: list[SlotQuery] = []
        self.on_call = None

    async def check_availability(self, query: SlotQuery) -> AvailabilityResult:
        self.queries.append(query)
        if self.on_call is not None:
            self.on_call()
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def context() -> SessionContext:
    return SessionContext(tenant_id=TENANT, constrained_viewport=True, page_size=10)


@pytest.fixture
def search() -> FakeSearch:
    return FakeSearch()


@pytest.fixture
def outbox() -> SessionOutbox:
    return SessionOutbox()


@pytest.fixture
def controller(search: FakeSearch, outbox: SessionOutbox, context: SessionContext) -> QueryController:
    return QueryController(
        search=search,
        catalog=FakeCatalog(),
        notifications=outbox,
        context=context,
        clock=lambda: TODAY,
    )


@pytest.fixture
def mutation() -> FakeMutation:
    return FakeMutation()


@pytest.fixture
def availability() -> FakeAvailability:
    return FakeAvailability()


@pytest.fixture
def cancel_workflow(mutation: FakeMutation, outbox: SessionOutbox, controller: QueryController) -> CancelBookingWorkflow:
    return CancelBookingWorkflow(mutation=mutation, notifications=outbox, controller=controller)


@pytest.fixture
def payment_workflow(availability: FakeAvailability, outbox: SessionOutbox) -> PaymentInitiationWorkflow:
    return PaymentInitiationWorkflow(
        availability=availability,
        navigator=outbox,
        notifications=outbox,
        payment_route=PAYMENT_ROUTE,
    )


@pytest.fixture
def rows(
    controller: QueryController,
    cancel_workflow: CancelBookingWorkflow,
    payment_workflow: PaymentInitiationWorkflow,
) -> RowActionRegistry:
    return RowActionRegistry(controller=controller, cancel_workflow=cancel_workflow, payment_workflow=payment_workflow)
