from __future__ import annotations

import json
import logging

import pytest
import requests

from geonames.common.cancel import CancellationToken
from geonames.common.constants import ERR_CODE_AUTHORIZATION
from geonames.common.errors import ConfigError, DecodeResponseError, ResponseError, TransportError
from geonames.common.values import Position
from geonames.webservice.client import WebClient
from geonames.webservice.queries import (
    AddressRequest,
    CountryCodeRequest,
    CountrySubdivisionRequest,
    EarthquakesRequest,
    FindNearbyRequest,
    GetRequest,
    OceanRequest,
    SearchRequest,
)
from geonames.webservice.results import CountryNearby


class FakeResponse:
    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        self.closed = False

    def json(self):
        return json.loads(self.body)

    def close(self):
        self.closed = True


class FakeHttpClient:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls: list[dict] = []

    def get(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response


def _client(http_client: FakeHttpClient) -> WebClient:
    return WebClient(
        "test-user",
        base_url="https://ws.test/",
        http_client=http_client,
        logger=logging.getLogger("tests.web"),
    )


@pytest.mark.integration
def test_country_code_happy_path():
    response = FakeResponse(
        200, '{"countryCode":"US","countryName":"United States","languages":"en,es","distance":"0.111"}'
    )
    http_client = FakeHttpClient(response)

    result = _client(http_client).country_code(
        CountryCodeRequest(position=Position(latitude=1.111, longitude=-1.111), radius=10, language="en")
    )

    assert result == CountryNearby(code="US", name="United States", languages=["en", "es"], distance=0.111)
    [call] = http_client.calls
    assert call["url"] == "https://ws.test/countryCodeJSON"
    assert call["params"] == {
        "lat": ["1.111"],
        "lng": ["-1.111"],
        "radius": ["10"],
        "lang": ["en"],
        "type": ["json"],
        "username": ["test-user"],
    }
    assert response.closed


@pytest.mark.integration
def test_service_error_is_structured():
    response = FakeResponse(404, '{"status":{"message":"user does not exist.","value":10}}')

    with pytest.raises(ResponseError) as exc_info:
        _client(FakeHttpClient(response)).get(GetRequest(geoname_id=1))

    exc = exc_info.value
    assert exc.code == 10
    assert exc.message == "user does not exist."
    assert exc.match_code(ERR_CODE_AUTHORIZATION)
    assert str(exc) == 'got error response => code: 10, message: "user does not exist."'
    assert response.closed


@pytest.mark.integration
def test_zero_request_sends_only_type_and_username():
    http_client = FakeHttpClient(FakeResponse(200, '{"earthquakes":[]}'))

    assert _client(http_client).earthquakes(EarthquakesRequest()) == []
    assert http_client.calls[0]["params"] == {"type": ["json"], "username": ["test-user"]}


@pytest.mark.integration
def test_type_and_username_cannot_be_overridden():
    http_client = FakeHttpClient(FakeResponse(200, '{"geonames":[]}'))

    _client(http_client).search(SearchRequest(query="london"))

    params = http_client.calls[0]["params"]
    assert params["type"] == ["json"]
    assert params["username"] == ["test-user"]
    assert params["q"] == ["london"]


@pytest.mark.integration
def test_missing_result_list_decodes_empty():
    http_client = FakeHttpClient(FakeResponse(200, "{}"))
    assert _client(http_client).find_nearby(FindNearbyRequest()) == []


@pytest.mark.integration
def test_malformed_body_is_decode_error():
    response = FakeResponse(200, "{not json")

    with pytest.raises(DecodeResponseError) as exc_info:
        _client(FakeHttpClient(response)).search(SearchRequest(query="x"))

    assert str(exc_info.value).startswith("decode response => ")
    assert response.closed


@pytest.mark.integration
def test_field_error_is_decode_error():
    body = '{"geonames":[{"geonameId":1,"distance":"invalid"}]}'

    with pytest.raises(DecodeResponseError) as exc_info:
        _client(FakeHttpClient(FakeResponse(200, body))).find_nearby(FindNearbyRequest())

    assert str(exc_info.value) == 'decode response => parse distance => invalid float64 syntax: "invalid"'


@pytest.mark.integration
def test_malformed_error_body_is_decode_error():
    response = FakeResponse(500, "<html>oops</html>")

    with pytest.raises(DecodeResponseError):
        _client(FakeHttpClient(response)).get(GetRequest(geoname_id=1))
    assert response.closed


@pytest.mark.integration
def test_transport_error_is_wrapped():
    http_client = FakeHttpClient(error=requests.Timeout("read timed out"))

    with pytest.raises(TransportError) as exc_info:
        _client(http_client).get(GetRequest(geoname_id=1))

    assert str(exc_info.value) == "send http request => read timed out"


@pytest.mark.integration
def test_cancelled_token_skips_http():
    token = CancellationToken()
    token.cancel()
    http_client = FakeHttpClient(FakeResponse(200, "{}"))

    with pytest.raises(Exception) as exc_info:
        _client(http_client).get(GetRequest(geoname_id=1), token=token)

    assert exc_info.value is token.cause
    assert http_client.calls == []


@pytest.mark.integration
@pytest.mark.parametrize(
    ("call", "body"),
    [
        (lambda client: client.get(GetRequest(geoname_id=1)), '{"geonameId":1,"alternateNames":5}'),
        (
            lambda client: client.country_subdivision(CountrySubdivisionRequest()),
            '{"codes":7}',
        ),
    ],
)
def test_non_array_list_is_decode_error(call, body):
    with pytest.raises(DecodeResponseError) as exc_info:
        call(_client(FakeHttpClient(FakeResponse(200, body))))

    assert str(exc_info.value).startswith("decode response => parse ")
    assert str(exc_info.value).endswith("expected JSON array, got int")


@pytest.mark.integration
def test_address_accepts_single_object_and_list():
    single = FakeHttpClient(FakeResponse(200, '{"address":{"street":"Roble Ave","distance":"0.02"}}'))
    many = FakeHttpClient(FakeResponse(200, '{"address":[{"street":"A"},{"street":"B"}]}'))
    request = AddressRequest(position=Position(latitude=37.45, longitude=-122.18))

    assert [item.street for item in _client(single).address(request)] == ["Roble Ave"]
    assert [item.street for item in _client(many).address(request)] == ["A", "B"]


@pytest.mark.integration
def test_envelope_items_and_elevation():
    ocean = FakeHttpClient(FakeResponse(200, '{"ocean":{"distance":"0","geonameId":3411923,"name":"North Atlantic Ocean"}}'))
    assert _client(ocean).ocean(OceanRequest(position=Position(latitude=40.78, longitude=-43.96))).id == 3411923

    srtm = FakeHttpClient(FakeResponse(200, '{"srtm1":206,"lng":10.2,"lat":47.01}'))
    assert _client(srtm).srtm1(Position(latitude=47.01, longitude=10.2)) == 206
    assert srtm.calls[0]["url"] == "https://ws.test/srtm1JSON"
    assert srtm.calls[0]["params"]["lat"] == ["47.01"]


def test_username_is_required():
    with pytest.raises(ConfigError):
        WebClient("")
