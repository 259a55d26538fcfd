from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from app.api.v1.schemas import (
    ActionResultSchema,
    CancelSchema,
    ColumnSchema,
    CreateSessionSchema,
    FiltersSchema,
    FilterValueSchema,
    NavigationSchema,
    NotificationSchema,
    OptionSchema,
    OutsideInteractionSchema,
    PageSizeSchema,
    RowActionsSchema,
    RowSchema,
    SessionViewSchema,
    SortSchema,
)
from app.application.exceptions import ActionNotAllowedError, BookingNotFoundError, WorkflowStateError
from app.core.config import settings
from app.domain.booking_actions import RowAction
from app.domain.entities.filter_state import STATUS_OPTIONS
from app.domain.entities.result_set import BOOKING_COLUMNS, derive_rows
from app.infrastructure.store.session_store import MemorySessionStore
from app.wiring.dependencies import (
    BookingSearchSession,
    build_session,
    get_backend,
    get_session_store,
    session_context,
)

router = APIRouter(prefix="/booking-search")
logger = logging.getLogger(__name__)


def _session(
    session_id: str,
    store: MemorySessionStore[BookingSearchSession] = Depends(get_session_store),
) -> BookingSearchSession:
    session = store.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Unknown search session")
    return session


def _view(session_id: str, session: BookingSearchSession) -> SessionViewSchema:
    controller = session.controller
    filters = controller.filter_state
    result_set = controller.result_set
    menus = set(session.rows.open_menus())
    navigation = session.outbox.take_navigation()
    notification = session.outbox.notification
    target = session.cancel.target

    return SessionViewSchema(
        session_id=session_id,
        filters=FiltersSchema(
            booking_no=filters.booking_no,
            community_hall_code=filters.community_hall_code,
            status=filters.status.value if filters.status else None,
            mobile_number=filters.mobile_number,
            from_date=filters.from_date,
            to_date=filters.to_date,
            offset=filters.offset,
            limit=filters.limit,
            sort_by=filters.sort_by,
            sort_order=filters.sort_order.value,
        ),
        field_errors=controller.field_errors,
        hall_options=[OptionSchema(code=hall.code, label=hall.name) for hall in controller.hall_options],
        status_options=[OptionSchema(code=option.code.value, label=option.label) for option in STATUS_OPTIONS],
        columns=[ColumnSchema(id=c.id, header=c.header, sortable=c.sortable) for c in BOOKING_COLUMNS],
        rows=[
            RowSchema(
                booking_no=row.booking_no,
                details_route=row.details_route,
                applicant_name=row.applicant_name,
                community_hall=row.community_hall,
                booking_date=row.booking_date,
                status=row.status,
                menu_open=row.booking_no in menus,
                actions=RowActionsSchema(
                    can_take_action=row.actions.can_take_action,
                    can_cancel=row.actions.can_cancel,
                    can_collect_payment=row.actions.can_collect_payment,
                ),
            )
            for row in derive_rows(result_set, settings.BOOKING_DETAILS_ROUTE)
        ],
        total_count=result_set.total_count,
        display_message=result_set.display_message,
        current_page=controller.current_page,
        sort=controller.sort_params,
        is_loading=controller.is_loading,
        cancel=CancelSchema(state=session.cancel.state.value, booking_no=target.booking_no if target else None),
        notification=(
            NotificationSchema(error=notification.error, label=notification.label) if notification else None
        ),
        navigation=NavigationSchema(route=navigation.route, state=navigation.state) if navigation else None,
    )


@router.post("/sessions", response_model=SessionViewSchema, status_code=201)
async def create_session(
    req: CreateSessionSchema,
    store: MemorySessionStore[BookingSearchSession] = Depends(get_session_store),
):
    session = build_session(get_backend(), session_context(constrained_viewport=req.constrained_viewport))
    session_id = store.add(session)
    await session.controller.initialize()
    logger.info("Search session created", extra={"session_id": session_id})
    return _view(session_id, session)


@router.get("/sessions/{session_id}", response_model=SessionViewSchema)
async def get_session(session_id: str, session: BookingSearchSession = Depends(_session)):
    return _view(session_id, session)


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(
    session_id: str,
    store: MemorySessionStore[BookingSearchSession] = Depends(get_session_store),
):
    if not store.remove(session_id):
        raise HTTPException(status_code=404, detail="Unknown search session")


@router.put("/sessions/{session_id}/filters/{field}", response_model=SessionViewSchema)
async def set_filter(
    session_id: str,
    field: str,
    req: FilterValueSchema,
    session: BookingSearchSession = Depends(_session),
):
    await session.controller.set_filter_field(field, req.value)
    return _view(session_id, session)


@router.post("/sessions/{session_id}/sort", response_model=SessionViewSchema)
async def set_sort(session_id: str, req: SortSchema, session: BookingSearchSession = Depends(_session)):
    await session.controller.set_sort(req.column_id, req.descending)
    return _view(session_id, session)


@router.post("/sessions/{session_id}/pages/next", response_model=SessionViewSchema)
async def next_page(session_id: str, session: BookingSearchSession = Depends(_session)):
    await session.controller.next_page()
    return _view(session_id, session)


@router.post("/sessions/{session_id}/pages/previous", response_model=SessionViewSchema)
async def previous_page(session_id: str, session: BookingSearchSession = Depends(_session)):
    await session.controller.previous_page()
    return _view(session_id, session)


@router.put("/sessions/{session_id}/page-size", response_model=SessionViewSchema)
async def set_page_size(session_id: str, req: PageSizeSchema, session: BookingSearchSession = Depends(_session)):
    await session.controller.set_page_size(req.size)
    return _view(session_id, session)


@router.post("/sessions/{session_id}/reset", response_model=SessionViewSchema)
async def reset(session_id: str, session: BookingSearchSession = Depends(_session)):
    await session.controller.reset()
    return _view(session_id, session)


@router.post("/sessions/{session_id}/rows/{booking_no}/toggle", response_model=SessionViewSchema)
async def toggle_menu(session_id: str, booking_no: str, session: BookingSearchSession = Depends(_session)):
    try:
        session.rows.toggle(booking_no)
    except BookingNotFoundError:
        raise HTTPException(status_code=404, detail=f"Booking {booking_no} is not on this page")
    return _view(session_id, session)


@router.post("/sessions/{session_id}/outside-interaction", response_model=SessionViewSchema)
async def outside_interaction(
    session_id: str,
    req: OutsideInteractionSchema,
    session: BookingSearchSession = Depends(_session),
):
    session.rows.outside_interaction(inside=req.inside)
    return _view(session_id, session)


@router.post("/sessions/{session_id}/rows/{booking_no}/actions/{action}", response_model=ActionResultSchema)
async def select_action(
    session_id: str,
    booking_no: str,
    action: RowAction,
    session: BookingSearchSession = Depends(_session),
):
    try:
        outcome = await session.rows.select(booking_no, action)
    except BookingNotFoundError:
        raise HTTPException(status_code=404, detail=f"Booking {booking_no} is not on this page")
    except (ActionNotAllowedError, WorkflowStateError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    return ActionResultSchema(
        action=action,
        outcome=outcome.value if outcome else None,
        view=_view(session_id, session),
    )


@router.post("/sessions/{session_id}/cancel/confirm", response_model=SessionViewSchema)
async def confirm_cancel(session_id: str, session: BookingSearchSession = Depends(_session)):
    try:
        await session.cancel.confirm()
    except WorkflowStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _view(session_id, session)


@router.post("/sessions/{session_id}/cancel/decline", response_model=SessionViewSchema)
async def decline_cancel(session_id: str, session: BookingSearchSession = Depends(_session)):
    try:
        session.cancel.decline()
    except WorkflowStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _view(session_id, session)
