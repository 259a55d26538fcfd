from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.hall import HallOption


class HallCatalogPort(ABC):
    @abstractmethod
    async def list_hall_codes(self, tenant_id: str) -> list[HallOption]:
        """List the bookable halls of a tenant."""
        raise NotImplementedError
