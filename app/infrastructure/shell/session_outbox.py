from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from app.application.ports.navigator import NavigatorPort
from app.application.ports.notification_sink import NotificationSinkPort
from app.domain.entities.notification import Notification


@dataclass(frozen=True)
class Navigation:
    route: str
    state: dict[str, Any]


class SessionOutbox(NavigatorPort, NotificationSinkPort):
    """
    Collects the toast and navigation requests of one search session so the
    HTTP shell can hand them to the browser on its next response.
    """

    def __init__(self) -> None:
        self._notification: Notification | None = None
        self._navigations: list[Navigation] = []
        self._logger = logging.getLogger(__name__)

    @property
    def notification(self) -> Notification | None:
        return self._notification

    def show(self, notification: Notification) -> None:
        self._notification = notification
        self._logger.info("Toast", extra={"label": notification.label, "error": notification.error})

    def clear(self) -> None:
        self._notification = None

    def go_to(self, route: str, state: dict[str, Any]) -> None:
        self._navigations.append(Navigation(route=route, state=dict(state)))

    def pending_navigations(self) -> list[Navigation]:
        return list(self._navigations)

    def take_navigation(self) -> Navigation | None:
        """Pop the oldest pending navigation."""
        if not self._navigations:
            return None
        return self._navigations.pop(0)
