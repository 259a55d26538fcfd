from __future__ import annotations

import logging
from typing import Any

import httpx

from app.application.exceptions import TransportError


class ChbClient:
    """
    Thin async client for DIGIT-style services: every call is a POST whose body
    carries a RequestInfo block, with filters passed as query parameters.
    """

    def __init__(
        self,
        base_url: str,
        auth_token: str | None = None,
        timeout: float = 10.0,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self._auth_token = auth_token
        self._http = http or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._logger = logging.getLogger(__name__)

    async def aclose(self) -> None:
        await self._http.aclose()

    def request_info(self) -> dict[str, Any]:
        info: dict[str, Any] = {"apiId": "Rainmaker"}
        if self._auth_token:
            info["authToken"] = self._auth_token
        return info

    async def post(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        payload = {"RequestInfo": self.request_info(), **(body or {})}
        try:
            response = await self._http.post(path, params=params, json=payload)
        except httpx.TimeoutException as exc:
            raise TransportError(f"timeout calling {path}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"connection failed calling {path}: {exc}") from exc

        if response.status_code >= 400:
            self._logger.error(
                "Booking service call failed",
                extra={"path": path, "status": response.status_code, "error": response.text[:500]},
            )
            raise TransportError(f"{path} returned {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise TransportError(f"{path} returned a non-JSON body") from exc
        if not isinstance(data, dict):
            raise TransportError(f"{path} returned an unexpected payload")
        return data
