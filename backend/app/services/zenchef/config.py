"""Zenchef API config. Per-restaurant credentials come from the DB; base URLs and publisher from settings."""
import uuid

from app.config import settings


class ZenchefConfig:
    """API credentials and base URLs for one restaurant on Zenchef."""

    __slots__ = ("zenchef_id", "api_token", "base_url_v1", "base_url_v2", "publisher_name", "timeout")

    def __init__(
        self,
        *,
        zenchef_id: str | None = None,
        api_token: str | None = None,
        base_url_v1: str | None = None,
        base_url_v2: str | None = None,
        publisher_name: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.zenchef_id = (zenchef_id or "").strip()
        self.api_token = (api_token or "").strip()
        self.base_url_v1 = (base_url_v1 or settings.zenchef_api_base_url_v1).rstrip("/")
        self.base_url_v2 = (base_url_v2 or settings.zenchef_api_base_url_v2).rstrip("/")
        self.publisher_name = publisher_name if publisher_name is not None else settings.zenchef_publisher_name
        self.timeout = timeout or settings.zenchef_timeout_seconds

    def is_configured(self) -> bool:
        return bool(self.zenchef_id and self.api_token)

    def headers(self, include_publisher: bool = False) -> dict[str, str]:
        """Mutating calls identify the publisher; PublisherModelId is fresh per request."""
        h = {
            "Content-Type": "application/json",
            "auth-token": self.api_token,
            "restaurantId": self.zenchef_id,
        }
        if include_publisher:
            h["PublisherName"] = self.publisher_name
            h["PublisherModelId"] = str(uuid.uuid4())
        return h
