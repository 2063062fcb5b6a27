"""HTTP client for the third-party flight search and booking API."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from django.conf import settings

from ..exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class FlightApiError(ExternalServiceError):
    """The flight API could not be reached or rejected the request."""

    def __init__(self, message: str, *, status_code: int | None = None, payload: Any = None):
        # Upstream client errors (e.g. 422) pass through; everything else is a bad gateway.
        passthrough = status_code if status_code is not None and 400 <= status_code < 500 else None
        errors = payload.get("errors") if isinstance(payload, dict) else None
        super().__init__(message, status_code=passthrough, errors=errors)
        self.upstream_status = status_code
        self.payload = payload


class FlightApiClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.FLIGHT_API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.FLIGHT_API_TIMEOUT
        self.transport = transport

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            with httpx.Client(
                timeout=self.timeout,
                transport=self.transport,
                headers={"Accept": "application/json"},
            ) as client:
                response = client.request(method, url, **kwargs)
        except (httpx.HTTPError, httpx.TimeoutException) as exc:
            logger.warning("Flight API %s %s failed: %s", method, path, exc)
            raise FlightApiError(f"Flight service unavailable: {exc}") from exc

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.is_error:
            message = payload.get("message") if isinstance(payload, dict) else None
            logger.warning("Flight API %s %s returned %s", method, path, response.status_code)
            raise FlightApiError(
                message or f"Flight service returned HTTP {response.status_code}",
                status_code=response.status_code,
                payload=payload,
            )
        if payload is None:
            raise FlightApiError("Flight service returned an invalid response", payload=response.text)
        return payload

    def initiate_search(self, params: dict[str, Any]) -> Any:
        return self._request("POST", "/search", json=params)

    def fetch_amadeus_results(self, folder: str) -> Any:
        return self._request("POST", "/search/amadeus", json={"folder": folder})

    def fetch_sabre_results(self, folder: str, flight_type: str | None = None) -> Any:
        return self._request("POST", "/search/sabre", json={"folder": folder, "flight_type": flight_type})

    def search_sabre(self, params: dict[str, Any]) -> Any:
        return self._request("POST", "/searchSabre", json=params)

    def search_amadeus(self, params: dict[str, Any]) -> Any:
        return self._request("POST", "/searchAmadeus", json=params)

    def revalidate(self, payload: dict[str, Any]) -> Any:
        return self._request("POST", "/revalidate", json=payload)

    def book(self, payload: dict[str, Any]) -> Any:
        return self._request("POST", "/booking", json=payload)

    def booking_details(self, booking_id: str, folder_path: str | None = None) -> Any:
        params = {"booking_id": booking_id}
        if folder_path:
            params["folder_path"] = folder_path
        return self._request("GET", "/flight-booking-details", params=params)

    def issue_ticket(self, booking_id: str, selected_passengers: list[dict[str, Any]]) -> Any:
        return self._request(
            "POST",
            "/ticket-issue-submit",
            json={"bookingId": booking_id, "selected_passengers": selected_passengers},
        )

    def countries(self) -> Any:
        return self._request("GET", "/countries")
