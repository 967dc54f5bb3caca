# src/taskique/api/gateway.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.errors import NetworkFailure
from ..core.ports import JsonDict

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Something went wrong"


def _error_message(response: httpx.Response) -> str:
    """Prefer the server's own `message`, fall back to a generic line."""
    try:
        data = response.json()
    except ValueError:
        return DEFAULT_ERROR_MESSAGE
    if isinstance(data, dict):
        message = data.get("message") or data.get("detail")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return DEFAULT_ERROR_MESSAGE


def friendly_network_error_message(exc: httpx.HTTPError) -> str:
    if isinstance(exc, httpx.TimeoutException):
        return "The task service did not respond in time."
    if isinstance(exc, httpx.ConnectError):
        return "Cannot reach the task service. Check your connection."
    return str(exc) or exc.__class__.__name__


class HttpTaskGateway:
    """
    Thin async client for the remote task service.

    - one shot per call: no retries, no backoff
    - every failure surfaces as NetworkFailure with a human-readable message
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpTaskGateway:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, *, json: JsonDict | None = None) -> JsonDict:
        logger.debug("%s %s payload=%s", method, path, json)
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.debug("%s %s transport error", method, path, exc_info=True)
            raise NetworkFailure(friendly_network_error_message(e)) from e

        if not response.is_success:
            message = _error_message(response)
            logger.debug("%s %s -> %s %s", method, path, response.status_code, message)
            raise NetworkFailure(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise NetworkFailure("Invalid JSON in server response", status_code=response.status_code) from e
        if not isinstance(data, dict):
            raise NetworkFailure("Unexpected server response", status_code=response.status_code)
        return data

    async def list_tasks(self) -> JsonDict:
        return await self._request("GET", "/tasks")

    async def create_task(self, payload: JsonDict) -> JsonDict:
        return await self._request("POST", "/tasks", json=payload)

    async def update_task(self, task_id: str, payload: JsonDict) -> JsonDict:
        return await self._request("PUT", f"/tasks/{task_id}", json=payload)

    async def update_task_status(self, task_id: str, status: str) -> JsonDict:
        # The service takes status changes on the regular PUT route.
        return await self._request(
            "PUT",
            f"/tasks/{task_id}",
            json={"status": status, "completed": status == "completed"},
        )

    async def delete_task(self, task_id: str) -> JsonDict:
        return await self._request("DELETE", f"/tasks/{task_id}")

    async def process_prompt(self, input_text: str) -> JsonDict:
        return await self._request("POST", "/process-tasks", json={"input_text": input_text})
