from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.booking import Booking
from app.domain.entities.filter_state import FilterState


class BookingSearchPort(ABC):
    @abstractmethod
    async def search(self, filters: FilterState) -> tuple[list[Booking], int]:
        """
        Run a booking search.
        Returns (bookings on the requested page, total matching count).
        Raises TransportError on any failure.
        """
        raise NotImplementedError
