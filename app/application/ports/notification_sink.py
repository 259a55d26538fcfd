from abc import ABC, abstractmethod

from app.domain.entities.notification import Notification


class NotificationSinkPort(ABC):
    @abstractmethod
    def show(self, notification: Notification) -> None:
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        """Dismiss whatever notification is showing."""
        raise NotImplementedError
