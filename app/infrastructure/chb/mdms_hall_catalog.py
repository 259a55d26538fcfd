from __future__ import annotations

from pydantic import ValidationError

from app.application.dto.chb_payloads import MdmsResponseDTO
from app.application.exceptions import TransportError
from app.application.ports.hall_catalog import HallCatalogPort
from app.domain.entities.hall import HallOption
from app.infrastructure.chb.chb_client import ChbClient

MDMS_SEARCH_PATH = "/egov-mdms-service/v1/_search"
MODULE_NAME = "CHB"
MASTER_NAME = "CommunityHalls"


class MdmsHallCatalog(HallCatalogPort):
    def __init__(self, client: ChbClient) -> None:
        self._client = client

    async def list_hall_codes(self, tenant_id: str) -> list[HallOption]:
        body = {
            "MdmsCriteria": {
                "tenantId": tenant_id,
                "moduleDetails": [{"moduleName": MODULE_NAME, "masterDetails": [{"name": MASTER_NAME}]}],
            }
        }
        data = await self._client.post(MDMS_SEARCH_PATH, body=body)
        try:
            return MdmsResponseDTO.model_validate(data).community_halls(MODULE_NAME, MASTER_NAME)
        except ValidationError as exc:
            raise TransportError(f"unreadable MDMS response: {exc.error_count()} errors") from exc
