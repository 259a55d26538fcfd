from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, Field

from app.domain.booking_actions import RowAction


class CreateSessionSchema(BaseModel):
    constrained_viewport: bool | None = None


class FilterValueSchema(BaseModel):
    value: Any = None


class SortSchema(BaseModel):
    column_id: str = ""
    descending: bool = True


class PageSizeSchema(BaseModel):
    size: int


class OutsideInteractionSchema(BaseModel):
    inside: str | None = None


class FiltersSchema(BaseModel):
    booking_no: str | None = None
    community_hall_code: str | None = None
    status: str | None = None
    mobile_number: str | None = None
    from_date: date | None = None
    to_date: date | None = None
    offset: int = 0
    limit: int | None = None
    sort_by: str
    sort_order: str


class OptionSchema(BaseModel):
    code: str
    label: str


class ColumnSchema(BaseModel):
    id: str
    header: str
    sortable: bool


class RowActionsSchema(BaseModel):
    can_take_action: bool
    can_cancel: bool
    can_collect_payment: bool


class RowSchema(BaseModel):
    booking_no: str
    details_route: str
    applicant_name: str
    community_hall: str
    booking_date: str
    status: str
    menu_open: bool
    actions: RowActionsSchema


class CancelSchema(BaseModel):
    state: str
    booking_no: str | None = None


class NotificationSchema(BaseModel):
    error: bool
    label: str


class NavigationSchema(BaseModel):
    route: str
    state: dict[str, Any] = Field(default_factory=dict)


class SessionViewSchema(BaseModel):
    session_id: str
    filters: FiltersSchema
    field_errors: dict[str, str] = Field(default_factory=dict)
    hall_options: list[OptionSchema] = Field(default_factory=list)
    status_options: list[OptionSchema] = Field(default_factory=list)
    columns: list[ColumnSchema] = Field(default_factory=list)
    rows: list[RowSchema] = Field(default_factory=list)
    total_count: int = 0
    display_message: str | None = None
    current_page: int = 0
    sort: dict[str, Any] = Field(default_factory=dict)
    is_loading: bool = False
    cancel: CancelSchema
    notification: NotificationSchema | None = None
    navigation: NavigationSchema | None = None


class ActionResultSchema(BaseModel):
    action: RowAction
    outcome: str | None = None
    view: SessionViewSchema
