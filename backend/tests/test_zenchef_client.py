import json
from datetime import date

import httpx
import pytest

from app.core.errors import CredentialsNotConfiguredError, ZenchefApiError
from app.services.zenchef.client import ZenchefClient, build_filter_params
from app.services.zenchef.config import ZenchefConfig


def _client(handler, **config) -> ZenchefClient:
    cfg = ZenchefConfig(
        zenchef_id=config.get("zenchef_id", "zc-1"),
        api_token=config.get("api_token", "token-1"),
        base_url_v1="https://zc.test/api/v1",
        base_url_v2="https://zc.test/api/v2/",
        publisher_name="pub",
    )
    return ZenchefClient(cfg, transport=httpx.MockTransport(handler))


def test_availabilities_request_shape() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": []})

    out = _client(handler).get_availabilities(date(2025, 6, 14), date(2025, 6, 20))

    assert out == {"data": []}
    req = seen[0]
    assert req.method == "GET"
    assert req.url.path == "/api/v2/restaurants/zc-1/availabilities"
    assert req.url.params["date-begin"] == "2025-06-14"
    assert req.url.params["date-end"] == "2025-06-20"
    assert req.headers["auth-token"] == "token-1"
    assert req.headers["restaurantId"] == "zc-1"
    assert "PublisherName" not in req.headers


def test_create_sends_publisher_headers_and_force_flags() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": {"id": 42}})

    data = _client(handler).create_booking({"day": "2025-06-14"})

    assert data == {"id": 42}
    req = seen[0]
    assert req.method == "POST"
    assert req.url.params["force"] == "1"
    assert req.url.params["with-confirmation"] == "1"
    assert req.headers["PublisherName"] == "pub"
    assert req.headers["PublisherModelId"]
    assert json.loads(req.content) == {"day": "2025-06-14"}


def test_publisher_model_id_is_fresh_per_request() -> None:
    cfg = ZenchefConfig(zenchef_id="z", api_token="t", publisher_name="pub")

    assert cfg.headers(True)["PublisherModelId"] != cfg.headers(True)["PublisherModelId"]


def test_cancel_uses_change_status() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": {"id": 1, "status": "canceled"}})

    _client(handler).change_status("1", "canceled")

    assert seen[0].method == "PATCH"
    assert seen[0].url.path == "/api/v1/bookings/1/changeStatus"
    assert json.loads(seen[0].content) == {"status": "canceled"}


def test_search_encodes_filters_in_order() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": []})

    _client(handler).search_bookings([("reservation_type", "=", "reservation"), ("day", "=", "2025-06-14")], limit=50)

    params = seen[0].url.params
    assert params["filters[0][field]"] == "reservation_type"
    assert params["filters[1][value]"] == "2025-06-14"
    assert params["limit"] == "50"
    assert params["page"] == "1"


def test_non_success_raises_with_extracted_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(412, json={"message": "Slot full"})

    with pytest.raises(ZenchefApiError) as exc_info:
        _client(handler).create_booking({})

    assert exc_info.value.status_code == 412
    assert str(exc_info.value) == "Slot full"


def test_transport_error_raises_without_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(ZenchefApiError) as exc_info:
        _client(handler).get_booking("1")

    assert exc_info.value.status_code is None


def test_missing_credentials_raise_before_any_request() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(CredentialsNotConfiguredError):
        _client(handler, api_token="").get_availabilities(date(2025, 6, 14), date(2025, 6, 14))


def test_build_filter_params() -> None:
    assert build_filter_params([("email", "=", "a@b.c")]) == [
        ("filters[0][field]", "email"),
        ("filters[0][operator]", "="),
        ("filters[0][value]", "a@b.c"),
    ]
