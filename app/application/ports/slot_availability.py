from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.slot_availability import AvailabilityResult, SlotQuery


class SlotAvailabilityPort(ABC):
    @abstractmethod
    async def check_availability(self, query: SlotQuery) -> AvailabilityResult:
        """
        Fetch per-slot availability for a hall and date range, once.
        Adapters stay inert until this is called; there is no polling.
        """
        raise NotImplementedError
