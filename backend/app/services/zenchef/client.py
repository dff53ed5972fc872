"""Zenchef API client: lowest level, sends requests only. No business rules."""
import logging
from datetime import date
from typing import Any

import httpx

from app.core.errors import CredentialsNotConfiguredError, ZenchefApiError, extract_error_message
from app.services.zenchef.config import ZenchefConfig
from app.services.zenchef.types import ZenchefBooking

logger = logging.getLogger(__name__)


def build_filter_params(filters: list[tuple[str, str, str]]) -> list[tuple[str, str]]:
    """[(field, op, value)] -> filters[i][field|operator|value] query params, in order."""
    params: list[tuple[str, str]] = []
    for i, (field, op, value) in enumerate(filters):
        params.append((f"filters[{i}][field]", field))
        params.append((f"filters[{i}][operator]", op))
        params.append((f"filters[{i}][value]", str(value)))
    return params


class ZenchefClient:
    """Availabilities (v2) and bookings (v1) for one restaurant."""

    def __init__(self, config: ZenchefConfig, *, transport: httpx.BaseTransport | None = None) -> None:
        self._config = config
        self._transport = transport

    @property
    def config(self) -> ZenchefConfig:
        return self._config

    def _request(
        self,
        method: str,
        url: str,
        *,
        params: Any = None,
        json_body: dict[str, Any] | None = None,
        include_publisher: bool = False,
    ) -> dict[str, Any]:
        if not self._config.is_configured():
            raise CredentialsNotConfiguredError()
        try:
            with httpx.Client(timeout=self._config.timeout, transport=self._transport) as c:
                r = c.request(
                    method,
                    url,
                    params=params,
                    json=json_body,
                    headers=self._config.headers(include_publisher),
                )
        except httpx.HTTPError as e:
            raise ZenchefApiError(f"Zenchef request failed: {e}") from e
        if not r.is_success:
            try:
                body = r.json() if r.content else None
            except ValueError:
                body = None
            message = extract_error_message(body, r.text[:500] if r.text else f"Zenchef API error: {r.status_code}")
            raise ZenchefApiError(message, status_code=r.status_code)
        try:
            return r.json() if r.content else {}
        except ValueError:
            return {"_raw_body": (r.text[:2000] if r.text else "")}

    def _v1(self, path: str) -> str:
        return f"{self._config.base_url_v1}{path}"

    def _v2(self, path: str) -> str:
        return f"{self._config.base_url_v2}{path}"

    # --- Availabilities ---

    def get_availabilities(self, date_begin: date, date_end: date) -> dict[str, Any]:
        """GET availabilities for an inclusive date range; usable directly as the engine's FeedFetcher."""
        return self._request(
            "GET",
            self._v2(f"/restaurants/{self._config.zenchef_id}/availabilities"),
            params={
                "date-begin": date_begin.isoformat(),
                "date-end": date_end.isoformat(),
                "with": "possible_guests",
            },
        )

    # --- Bookings ---

    def search_bookings(
        self,
        filters: list[tuple[str, str, str]],
        *,
        limit: int = 100,
        page: int = 1,
    ) -> dict[str, Any]:
        params = build_filter_params(filters)
        params.extend([("limit", str(limit)), ("page", str(page))])
        return self._request("GET", self._v1("/bookings"), params=params)

    def get_booking(self, booking_id: str) -> ZenchefBooking:
        raw = self._request("GET", self._v1(f"/bookings/{booking_id}"))
        return raw.get("data") or {}

    def create_booking(self, payload: dict[str, Any]) -> dict[str, Any]:
        raw = self._request(
            "POST",
            self._v1("/bookings"),
            params={"force": "1", "with-confirmation": "1"},
            json_body=payload,
            include_publisher=True,
        )
        return raw.get("data") or {}

    def update_booking(self, booking_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        raw = self._request(
            "PUT",
            self._v1(f"/bookings/{booking_id}"),
            params={"force": "1", "with-confirmation": "1"},
            json_body=payload,
        )
        return raw.get("data") or {}

    def change_time(self, booking_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        raw = self._request("PATCH", self._v1(f"/bookings/{booking_id}/changeTime"), json_body=payload)
        return raw.get("data") or {}

    def change_status(self, booking_id: str, status: str) -> dict[str, Any]:
        raw = self._request(
            "PATCH",
            self._v1(f"/bookings/{booking_id}/changeStatus"),
            json_body={"status": status},
            include_publisher=True,
        )
        logger.info("Changed status of booking %s to %s", booking_id, status)
        return raw.get("data") or {}
