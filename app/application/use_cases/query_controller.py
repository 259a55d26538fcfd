from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Any, Callable

from app.application.exceptions import FilterValidationError, TransportError
from app.application.ports.booking_search import BookingSearchPort
from app.application.ports.hall_catalog import HallCatalogPort
from app.application.ports.notification_sink import NotificationSinkPort
from app.application.utils.filter_rules import (
    apply_filter_value,
    default_filter_state,
    normalize_field_name,
)
from app.domain.entities.filter_state import FilterState, SortOrder
from app.domain.entities.hall import HallOption
from app.domain.entities.notification import Notification
from app.domain.entities.result_set import ResultSet
from app.domain.entities.session_context import SessionContext

SEARCH_FAILED_LABEL = "CS_SOMETHING_WENT_WRONG"
PAGE_SIZE_ERROR = "CHB_INVALID_PAGE_SIZE"

ResultListener = Callable[[ResultSet], None]


class QueryController:
    """
    Owns the search filters and the last fetched page of bookings.

    Every mutator builds a new FilterState snapshot and runs a search with it.
    Searches are not cancelled or sequenced: the last response to arrive
    replaces the result set, unless `fencing` is on, in which case responses
    older than the one already shown are dropped.
    """

    def __init__(
        self,
        search: BookingSearchPort,
        catalog: HallCatalogPort,
        notifications: NotificationSinkPort,
        context: SessionContext,
        clock: Callable[[], date] = date.today,
        fencing: bool = False,
    ) -> None:
        self._search = search
        self._catalog = catalog
        self._notifications = notifications
        self._context = context
        self._clock = clock
        self._fencing = fencing
        self._filters = default_filter_state(clock(), context)
        self._result_set = ResultSet()
        self._field_errors: dict[str, str] = {}
        self._hall_options: tuple[HallOption, ...] = ()
        self._listeners: list[ResultListener] = []
        self._issued = 0
        self._applied = 0
        self._in_flight = 0
        self._logger = logging.getLogger(__name__)

    @property
    def context(self) -> SessionContext:
        return self._context

    @property
    def filter_state(self) -> FilterState:
        return self._filters

    @property
    def result_set(self) -> ResultSet:
        return self._result_set

    @property
    def field_errors(self) -> dict[str, str]:
        return dict(self._field_errors)

    @property
    def hall_options(self) -> tuple[HallOption, ...]:
        return self._hall_options

    @property
    def is_loading(self) -> bool:
        return self._in_flight > 0

    @property
    def current_page(self) -> int:
        if not self._filters.limit:
            return 0
        return self._filters.offset // self._filters.limit

    @property
    def sort_params(self) -> dict[str, Any]:
        return {"id": self._filters.sort_by, "desc": self._filters.sort_order is SortOrder.DESC}

    def subscribe(self, listener: ResultListener) -> None:
        """Call `listener` with every result set that replaces the current one."""
        self._listeners.append(listener)

    async def initialize(self) -> ResultSet | None:
        await self._load_hall_options()
        self._filters = default_filter_state(self._clock(), self._context)
        self._field_errors = {}
        return await self.execute_search()

    async def set_filter_field(self, name: str, value: Any) -> bool:
        """Returns False (and records a field error) when the value is rejected."""
        try:
            field = normalize_field_name(name)
            updated = apply_filter_value(
                self._filters,
                field,
                value,
                today=self._clock(),
                hall_codes=[hall.code for hall in self._hall_options],
            )
        except FilterValidationError as e:
            self._field_errors[e.field] = e.message
            self._logger.info("Filter rejected", extra={"field": e.field, "reason": e.message})
            return False

        self._field_errors.pop(field, None)
        self._filters = replace(updated, offset=0)
        await self.execute_search()
        return True

    async def set_sort(self, column_id: str, descending: bool) -> None:
        if not column_id:
            return
        self._filters = replace(
            self._filters,
            sort_by=column_id,
            sort_order=SortOrder.DESC if descending else SortOrder.ASC,
        )
        await self.execute_search()

    async def next_page(self) -> None:
        limit = self._filters.limit
        if not limit:
            return
        self._filters = replace(self._filters, offset=self._filters.offset + limit)
        await self.execute_search()

    async def previous_page(self) -> None:
        limit = self._filters.limit
        if not limit:
            return
        self._filters = replace(self._filters, offset=max(0, self._filters.offset - limit))
        await self.execute_search()

    async def set_page_size(self, size: int) -> bool:
        # offset is kept as-is, unlike filter changes
        if size <= 0:
            self._field_errors["limit"] = PAGE_SIZE_ERROR
            return False
        self._field_errors.pop("limit", None)
        self._filters = replace(self._filters, limit=size)
        await self.execute_search()
        return True

    async def reset(self) -> None:
        self._filters = default_filter_state(self._clock(), self._context)
        self._field_errors = {}
        self._notifications.clear()
        await self.execute_search()

    async def execute_search(self) -> ResultSet | None:
        """Search with the current snapshot. Returns the new result set, or None if it was not applied."""
        snapshot = self._filters
        self._issued += 1
        sequence = self._issued
        self._in_flight += 1
        try:
            bookings, total_count = await self._search.search(snapshot)
        except TransportError as e:
            self._logger.error(
                "Booking search failed",
                extra={"error": str(e), "offset": snapshot.offset, "limit": snapshot.limit},
            )
            self._notifications.show(Notification(error=True, label=SEARCH_FAILED_LABEL))
            return None
        except Exception as e:
            self._logger.exception(
                "Booking search failed unexpectedly",
                extra={"error": str(e), "offset": snapshot.offset, "limit": snapshot.limit},
            )
            self._notifications.show(Notification(error=True, label=SEARCH_FAILED_LABEL))
            return None
        finally:
            self._in_flight -= 1

        if self._fencing and sequence < self._applied:
            self._logger.info(
                "Discarding stale search response",
                extra={"sequence": sequence, "applied": self._applied},
            )
            return None

        self._applied = sequence
        self._result_set = ResultSet(bookings=tuple(bookings), total_count=total_count)
        self._logger.info(
            "Search results replaced",
            extra={"count": len(bookings), "total": total_count, "offset": snapshot.offset},
        )
        for listener in self._listeners:
            listener(self._result_set)
        return self._result_set

    async def _load_hall_options(self) -> None:
        try:
            halls = await self._catalog.list_hall_codes(self._context.tenant_id)
        except TransportError as e:
            self._logger.warning(
                "Hall catalog unavailable",
                extra={"tenant_id": self._context.tenant_id, "error": str(e)},
            )
            halls = []
        self._hall_options = tuple(halls)
