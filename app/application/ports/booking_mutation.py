from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.booking import Booking


class BookingMutationPort(ABC):
    @abstractmethod
    async def submit(self, booking: Booking) -> Booking:
        """Persist an updated booking record. Returns the record as acknowledged."""
        raise NotImplementedError
