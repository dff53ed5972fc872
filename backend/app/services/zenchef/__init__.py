"""Zenchef transport: config, client, raw payload types."""
from app.services.zenchef.client import ZenchefClient, build_filter_params
from app.services.zenchef.config import ZenchefConfig
from app.services.zenchef.types import ZenchefBooking, ZenchefDay, ZenchefShift, ZenchefShiftSlot


def client_for(zenchef_id: str, api_token: str) -> ZenchefClient:
    """Client for one restaurant with base URLs and publisher from settings."""
    return ZenchefClient(ZenchefConfig(zenchef_id=zenchef_id, api_token=api_token))


__all__ = [
    "ZenchefBooking",
    "ZenchefClient",
    "ZenchefConfig",
    "ZenchefDay",
    "ZenchefShift",
    "ZenchefShiftSlot",
    "build_filter_params",
    "client_for",
]
