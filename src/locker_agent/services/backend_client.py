"""HTTP client for the Smart Locker backend API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import settings

logger = logging.getLogger(__name__)

DEFAULT_CONNECT_TIMEOUT = 3.0


class BackendError(Exception):
    """The backend answered with a non-success status."""

    def __init__(self, status_code: int, message: str, payload: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.payload = payload


class BackendUnavailableError(ConnectionError):
    """The backend could not be reached (DNS, refused connection, timeout)."""


def _error_message(response: httpx.Response, payload: Any) -> str:
    if isinstance(payload, dict):
        for key in ("error", "message"):
            value = payload.get(key)
            if value:
                return str(value)
    text = response.text.strip()
    return text[:300] if text else f"HTTP {response.status_code}"


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


class BackendClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        catalog_timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url if base_url is not None else settings.api_base_url).rstrip("/")
        if not self.base_url:
            raise ValueError("Backend API base URL is not configured.")
        self.timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self.catalog_timeout = catalog_timeout if catalog_timeout is not None else settings.catalog_timeout_seconds
        self._transport = transport

    def _get_client(self, timeout: float) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout, connect=min(timeout, DEFAULT_CONNECT_TIMEOUT)),
            transport=self._transport,
            headers={"Accept": "application/json"},
        )

    def _request(
        self,
        method: str,
        path: str,
        *,
        timeout: float | None = None,
        params: dict | None = None,
        json: Any = None,
    ) -> tuple[int, Any]:
        """Issue a single request; no retries.

        Returns ``(status_code, decoded_json)`` on success and raises
        ``BackendError`` or ``BackendUnavailableError`` otherwise.
        """
        with self._get_client(timeout or self.timeout) as client:
            try:
                response = client.request(method, path, params=params, json=json)
            except httpx.TimeoutException as exc:
                raise BackendUnavailableError(
                    f"Backend at {self.base_url} timed out on {method} {path}: {exc}"
                ) from exc
            except (httpx.ConnectError, httpx.NetworkError, OSError) as exc:
                raise BackendUnavailableError(
                    f"Failed to connect to backend at {self.base_url}: {exc}"
                ) from exc

        payload = _decode(response)
        if response.is_error:
            message = _error_message(response, payload)
            logger.debug(f"Backend {method} {path} -> {response.status_code}: {message}")
            raise BackendError(response.status_code, message, payload)
        return response.status_code, payload

    def get_active_resi(self) -> Any:
        _, payload = self._request("GET", "/api/agent/active-resi", timeout=self.catalog_timeout)
        return payload

    def get_couriers(self) -> Any:
        _, payload = self._request("GET", "/api/couriers")
        return payload

    def get_lockers(self) -> Any:
        _, payload = self._request("GET", "/api/lockers")
        return payload

    def get_lockers_raw(self) -> tuple[int, Any]:
        return self._request("GET", "/api/lockers")

    def get_customers(self) -> Any:
        _, payload = self._request("GET", "/api/customers")
        return payload

    def get_shipments(self, limit: int | None = None) -> Any:
        params = {"limit": limit if limit is not None else settings.shipment_list_limit}
        _, payload = self._request("GET", "/api/shipments", params=params)
        return payload

    def validate_resi(self, courier: str, resi: str) -> Any:
        """Ask the backend whether ``resi`` is a valid tracking number for ``courier``."""
        _, payload = self._request("GET", "/api/validate-resi", params={"courier": courier, "resi": resi})
        return payload

    def create_shipment(self, body: dict) -> Any:
        _, payload = self._request("POST", "/api/shipments", json=body)
        return payload

    def create_courier(self, body: dict) -> Any:
        _, payload = self._request("POST", "/api/couriers", json=body)
        return payload


def check_health(client: BackendClient | None = None) -> bool:
    """Return True when the backend answers at all (any HTTP status)."""
    backend = client or BackendClient()
    try:
        backend._request("GET", "/api/couriers", timeout=backend.catalog_timeout)
        return True
    except BackendError:
        return True
    except BackendUnavailableError as exc:
        logger.warning(f"Backend health check failed: {exc}")
        return False
