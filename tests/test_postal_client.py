import httpx
import pytest

from loadmatch.errors import LookupUnavailable
from loadmatch.models.domain import PostalLookupKey
from loadmatch.services.geocoding import Geocoder, ZippopotamClient, postal_client

BEVERLY_HILLS = {
    "post code": "90210",
    "country": "United States",
    "country abbreviation": "US",
    "places": [
        {
            "place name": "Beverly Hills",
            "longitude": "-118.4065",
            "state": "California",
            "state abbreviation": "CA",
            "latitude": "34.0901",
        }
    ],
}


def _client(handler) -> ZippopotamClient:
    return ZippopotamClient(base_url="https://zip.test/", country="us", timeout=1.0, transport=httpx.MockTransport(handler))


def test_lookup_parses_first_place():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json=BEVERLY_HILLS)

    result = _client(handler).lookup(PostalLookupKey("90210"))

    assert seen == ["/us/90210"]
    assert result is not None
    assert result.latitude == pytest.approx(34.0901)
    assert result.longitude == pytest.approx(-118.4065)
    assert result.city == "Beverly Hills"
    assert result.state == "CA"


def test_lookup_not_found_returns_none():
    client = _client(lambda request: httpx.Response(404, json={}))
    assert client.lookup(PostalLookupKey("00000")) is None


def test_lookup_without_places_returns_none():
    client = _client(lambda request: httpx.Response(200, json={"post code": "00000", "places": []}))
    assert client.lookup(PostalLookupKey("00000")) is None


@pytest.mark.parametrize("status_code", [500, 502, 503, 429])
def test_lookup_server_errors_are_unavailable(status_code):
    client = _client(lambda request: httpx.Response(status_code, text="boom"))
    with pytest.raises(LookupUnavailable):
        client.lookup(PostalLookupKey("90210"))


def test_lookup_timeout_is_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(LookupUnavailable) as excinfo:
        _client(handler).lookup(PostalLookupKey("90210"))
    assert isinstance(excinfo.value.__cause__, httpx.TimeoutException)


def test_lookup_connection_error_is_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(LookupUnavailable):
        _client(handler).lookup(PostalLookupKey("90210"))


def test_lookup_malformed_json_is_unavailable():
    client = _client(lambda request: httpx.Response(200, text="<html>not json</html>"))
    with pytest.raises(LookupUnavailable):
        client.lookup(PostalLookupKey("90210"))


def test_geocoder_over_http_client_hits_service_once():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        return httpx.Response(200, json=BEVERLY_HILLS)

    geocoder = Geocoder(_client(handler))
    geocoder.geocode_parts(postal_code="90210")
    geocoder.geocode_parts(postal_code="90210")

    assert calls == ["/us/90210"]


class _FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload

    def raise_for_status(self):
        if self.status_code >= 400:
            request = httpx.Request("GET", "https://zip.test/us/90210")
            raise httpx.HTTPStatusError("error", request=request, response=httpx.Response(self.status_code, request=request))

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


@pytest.mark.parametrize(
    "response,expected",
    [
        (_FakeResponse(200, BEVERLY_HILLS), True),
        (_FakeResponse(200, {"places": []}), False),
        (_FakeResponse(500, {}), False),
        (_FakeResponse(200, ValueError("not json")), False),
    ],
)
def test_check_health(monkeypatch: pytest.MonkeyPatch, response, expected):
    seen = []

    def fake_get(url, timeout):
        seen.append(url)
        return response

    monkeypatch.setattr(postal_client.httpx, "get", fake_get)

    assert postal_client.check_health("https://zip.test/") is expected
    assert seen == ["https://zip.test/us/90210"]


def test_check_health_connection_error(monkeypatch: pytest.MonkeyPatch):
    def fake_get(url, timeout):
        raise httpx.ConnectError("connection refused", request=httpx.Request("GET", url))

    monkeypatch.setattr(postal_client.httpx, "get", fake_get)

    assert postal_client.check_health("https://zip.test") is False
