from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from functools import lru_cache

from app.application.ports.booking_mutation import BookingMutationPort
from app.application.ports.booking_search import BookingSearchPort
from app.application.ports.hall_catalog import HallCatalogPort
from app.application.ports.slot_availability import SlotAvailabilityPort
from app.application.use_cases.cancel_booking import CancelBookingWorkflow
from app.application.use_cases.payment_initiation import PaymentInitiationWorkflow
from app.application.use_cases.query_controller import QueryController
from app.application.use_cases.row_actions import RowActionRegistry
from app.core.config import Settings, settings
from app.domain.entities.session_context import SessionContext
from app.infrastructure.chb.chb_booking_service import ChbBookingService
from app.infrastructure.chb.chb_client import ChbClient
from app.infrastructure.chb.mdms_hall_catalog import MdmsHallCatalog
from app.infrastructure.chb.mock_chb import MockChbBackend, seed_bookings
from app.infrastructure.shell.session_outbox import SessionOutbox
from app.infrastructure.store.session_store import MemorySessionStore


@dataclass(frozen=True)
class BookingBackend:
    search: BookingSearchPort
    mutation: BookingMutationPort
    availability: SlotAvailabilityPort
    catalog: HallCatalogPort


@dataclass(frozen=True)
class BookingSearchSession:
    controller: QueryController
    rows: RowActionRegistry
    cancel: CancelBookingWorkflow
    payment: PaymentInitiationWorkflow
    outbox: SessionOutbox


_backend: BookingBackend | None = None


def _use_mock(config: Settings) -> bool:
    return config.ENV.lower() in {"dev", "local"}


def get_backend() -> BookingBackend:
    global _backend
    if _backend is None:
        logger = logging.getLogger(__name__)
        if _use_mock(settings):
            logger.info("Using MockChbBackend (ENV=%s)", settings.ENV)
            mock = MockChbBackend(seed_bookings(date.today(), settings.TENANT_ID))
            _backend = BookingBackend(search=mock, mutation=mock, availability=mock, catalog=mock)
        else:
            logger.info("Using booking service at %s", settings.CHB_BASE_URL)
            chb_client = ChbClient(
                base_url=settings.CHB_BASE_URL,
                auth_token=settings.CHB_AUTH_TOKEN,
                timeout=settings.HTTP_TIMEOUT_SECONDS,
            )
            mdms_client = ChbClient(
                base_url=settings.MDMS_BASE_URL or settings.CHB_BASE_URL,
                auth_token=settings.CHB_AUTH_TOKEN,
                timeout=settings.HTTP_TIMEOUT_SECONDS,
            )
            service = ChbBookingService(client=chb_client, tenant_id=settings.TENANT_ID)
            _backend = BookingBackend(
                search=service,
                mutation=service,
                availability=service,
                catalog=MdmsHallCatalog(client=mdms_client),
            )
    return _backend


@lru_cache
def get_session_store() -> MemorySessionStore[BookingSearchSession]:
    return MemorySessionStore()


def build_session(
    backend: BookingBackend,
    context: SessionContext,
    config: Settings = settings,
) -> BookingSearchSession:
    outbox = SessionOutbox()
    controller = QueryController(
        search=backend.search,
        catalog=backend.catalog,
        notifications=outbox,
        context=context,
        fencing=config.SEARCH_FENCING_ENABLED,
    )
    cancel = CancelBookingWorkflow(mutation=backend.mutation, notifications=outbox, controller=controller)
    payment = PaymentInitiationWorkflow(
        availability=backend.availability,
        navigator=outbox,
        notifications=outbox,
        payment_route=config.PAYMENT_COLLECT_ROUTE,
    )
    rows = RowActionRegistry(controller=controller, cancel_workflow=cancel, payment_workflow=payment)
    return BookingSearchSession(controller=controller, rows=rows, cancel=cancel, payment=payment, outbox=outbox)


def session_context(constrained_viewport: bool | None = None, tenant_id: str | None = None) -> SessionContext:
    return SessionContext(
        tenant_id=tenant_id or settings.TENANT_ID,
        constrained_viewport=settings.CONSTRAINED_VIEWPORT if constrained_viewport is None else constrained_viewport,
        page_size=settings.DEFAULT_PAGE_SIZE,
    )
