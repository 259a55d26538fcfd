from abc import ABC, abstractmethod
from typing import Any


class NavigatorPort(ABC):
    @abstractmethod
    def go_to(self, route: str, state: dict[str, Any]) -> None:
        raise NotImplementedError
