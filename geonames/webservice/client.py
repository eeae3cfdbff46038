"""Client for the JSON web services at secure.geonames.org."""

from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

import requests

from geonames.common.cancel import CancellationToken, raise_if_cancelled
from geonames.common.config_loader import WebServiceSettings
from geonames.common.constants import WEBSERVICE_BASE_URL, WEBSERVICE_TIMEOUT_SECONDS
from geonames.common.errors import (
    ConfigError,
    DecodeResponseError,
    GeoNamesError,
    ResponseError,
    TransportError,
    ValueParseError,
)
from geonames.common.http import HttpClient, RetryConfig, TimeoutConfig, normalize_base_url
from geonames.common.logging import log_event
from geonames.common.parse import parse_int64, parse_number
from geonames.common.values import Position
from geonames.webservice.encode import encode_query
from geonames.webservice.queries import (
    AddressRequest,
    ChildrenRequest,
    ContainsRequest,
    CountryCodeRequest,
    CountryInfoRequest,
    CountrySubdivisionRequest,
    EarthquakesRequest,
    FindNearbyPlaceNameRequest,
    FindNearbyPostalCodesRequest,
    FindNearbyRequest,
    FindNearbyWeatherRequest,
    FindNearbyWikipediaRequest,
    GeoCodeAddressRequest,
    GetRequest,
    HierarchyRequest,
    NeighboursRequest,
    OceanRequest,
    PostalCodeLookupRequest,
    PostalCodeSearchRequest,
    SearchRequest,
    SiblingsRequest,
    StreetNameLookupRequest,
    TimezoneRequest,
    WeatherICAORequest,
    WeatherRequest,
    WikipediaBoundingBoxRequest,
    WikipediaSearchRequest,
)
from geonames.webservice.results import (
    AddressNearby,
    CountryDetailed,
    CountryNearby,
    CountrySubdivision,
    Earthquake,
    GeoName,
    GeoNameDetailed,
    GeoNameNearby,
    Ocean,
    PostalCode,
    PostalCodeNearby,
    Timezone,
    WeatherObservation,
    WeatherObservationNearby,
    Wikipedia,
    WikipediaNearby,
    expect_object,
)

T = TypeVar("T")


class WebClient:
    """Typed access to the GeoNames web services.

    Every request carries ``type=json`` and the configured ``username``.
    Non-200 responses raise ``ResponseError`` with the service's code and
    message; malformed bodies raise ``DecodeResponseError``.
    """

    def __init__(
        self,
        username: str,
        *,
        base_url: str = WEBSERVICE_BASE_URL,
        http_client: HttpClient | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if not username:
            raise ConfigError("web service username is required")
        self.username = username
        self._base_url = normalize_base_url(base_url)
        self.http_client = http_client or HttpClient(timeout=TimeoutConfig.total(WEBSERVICE_TIMEOUT_SECONDS))
        self.logger = logger or logging.getLogger("geonames.webservice")

    @classmethod
    def from_settings(cls, settings: WebServiceSettings, *, logger: logging.Logger | None = None) -> "WebClient":
        http_client = HttpClient(
            timeout=TimeoutConfig.total(settings.timeout_seconds),
            retry=RetryConfig(max_attempts=settings.retry_attempts),
        )
        return cls(settings.username, base_url=settings.base_url, http_client=http_client, logger=logger)

    @property
    def base_url(self) -> str:
        return self._base_url

    # Toponyms

    def search(self, request: SearchRequest, *, token: CancellationToken | None = None) -> list[GeoName]:
        return self._list("/searchJSON", request, "geonames", GeoName.from_json, token)

    def get(self, request: GetRequest, *, token: CancellationToken | None = None) -> GeoNameDetailed:
        return self._root("/getJSON", request, GeoNameDetailed.from_json, token)

    def hierarchy(self, request: HierarchyRequest, *, token: CancellationToken | None = None) -> list[GeoName]:
        return self._list("/hierarchyJSON", request, "geonames", GeoName.from_json, token)

    def children(self, request: ChildrenRequest, *, token: CancellationToken | None = None) -> list[GeoName]:
        return self._list("/childrenJSON", request, "geonames", GeoName.from_json, token)

    def siblings(self, request: SiblingsRequest, *, token: CancellationToken | None = None) -> list[GeoName]:
        return self._list("/siblingsJSON", request, "geonames", GeoName.from_json, token)

    def neighbours(self, request: NeighboursRequest, *, token: CancellationToken | None = None) -> list[GeoName]:
        return self._list("/neighboursJSON", request, "geonames", GeoName.from_json, token)

    def contains(self, request: ContainsRequest, *, token: CancellationToken | None = None) -> list[GeoName]:
        return self._list("/containsJSON", request, "geonames", GeoName.from_json, token)

    def find_nearby(
        self, request: FindNearbyRequest, *, token: CancellationToken | None = None
    ) -> list[GeoNameNearby]:
        return self._list("/findNearbyJSON", request, "geonames", GeoNameNearby.from_json, token)

    def find_nearby_place_name(
        self, request: FindNearbyPlaceNameRequest, *, token: CancellationToken | None = None
    ) -> list[GeoNameNearby]:
        return self._list("/findNearbyPlaceNameJSON", request, "geonames", GeoNameNearby.from_json, token)

    # Postal codes

    def find_nearby_postal_codes(
        self, request: FindNearbyPostalCodesRequest, *, token: CancellationToken | None = None
    ) -> list[PostalCodeNearby]:
        return self._list("/findNearbyPostalCodesJSON", request, "postalCodes", PostalCodeNearby.from_json, token)

    def postal_code_lookup(
        self, request: PostalCodeLookupRequest, *, token: CancellationToken | None = None
    ) -> list[PostalCode]:
        return self._list("/postalCodeLookupJSON", request, "postalCodes", PostalCode.from_json, token)

    def postal_code_search(
        self, request: PostalCodeSearchRequest, *, token: CancellationToken | None = None
    ) -> list[PostalCode]:
        return self._list("/postalCodeSearchJSON", request, "postalCodes", PostalCode.from_json, token)

    # Addresses

    def address(self, request: AddressRequest, *, token: CancellationToken | None = None) -> list[AddressNearby]:
        return self._list("/addressJSON", request, "address", AddressNearby.from_json, token)

    def geo_code_address(
        self, request: GeoCodeAddressRequest, *, token: CancellationToken | None = None
    ) -> list[AddressNearby]:
        return self._list("/geoCodeAddressJSON", request, "address", AddressNearby.from_json, token)

    def street_name_lookup(
        self, request: StreetNameLookupRequest, *, token: CancellationToken | None = None
    ) -> list[AddressNearby]:
        return self._list("/streetNameLookupJSON", request, "address", AddressNearby.from_json, token)

    # Countries

    def country_code(self, request: CountryCodeRequest, *, token: CancellationToken | None = None) -> CountryNearby:
        return self._root("/countryCodeJSON", request, CountryNearby.from_json, token)

    def country_info(
        self, request: CountryInfoRequest, *, token: CancellationToken | None = None
    ) -> list[CountryDetailed]:
        return self._list("/countryInfoJSON", request, "geonames", CountryDetailed.from_json, token)

    def country_subdivision(
        self, request: CountrySubdivisionRequest, *, token: CancellationToken | None = None
    ) -> CountrySubdivision:
        return self._root("/countrySubdivisionJSON", request, CountrySubdivision.from_json, token)

    def timezone(self, request: TimezoneRequest, *, token: CancellationToken | None = None) -> Timezone:
        return self._root("/timezoneJSON", request, Timezone.from_json, token)

    def ocean(self, request: OceanRequest, *, token: CancellationToken | None = None) -> Ocean:
        return self._item("/oceanJSON", request, "ocean", Ocean.from_json, token)

    # Elevation models, values in meters

    def astergdem(self, position: Position, *, token: CancellationToken | None = None) -> int:
        return self._item("/astergdemJSON", position, "astergdem", _elevation, token)

    def gtopo30(self, position: Position, *, token: CancellationToken | None = None) -> int:
        return self._item("/gtopo30JSON", position, "gtopo30", _elevation, token)

    def srtm1(self, position: Position, *, token: CancellationToken | None = None) -> int:
        return self._item("/srtm1JSON", position, "srtm1", _elevation, token)

    def srtm3(self, position: Position, *, token: CancellationToken | None = None) -> int:
        return self._item("/srtm3JSON", position, "srtm3", _elevation, token)

    # Observations

    def earthquakes(self, request: EarthquakesRequest, *, token: CancellationToken | None = None) -> list[Earthquake]:
        return self._list("/earthquakesJSON", request, "earthquakes", Earthquake.from_json, token)

    def weather(
        self, request: WeatherRequest, *, token: CancellationToken | None = None
    ) -> list[WeatherObservation]:
        return self._list("/weatherJSON", request, "weatherObservations", WeatherObservation.from_json, token)

    def weather_icao(
        self, request: WeatherICAORequest, *, token: CancellationToken | None = None
    ) -> WeatherObservation:
        return self._item("/weatherIcaoJSON", request, "weatherObservation", WeatherObservation.from_json, token)

    def find_nearby_weather(
        self, request: FindNearbyWeatherRequest, *, token: CancellationToken | None = None
    ) -> WeatherObservationNearby:
        return self._item(
            "/findNearByWeatherJSON",
            request,
            "weatherObservation",
            WeatherObservationNearby.from_json,
            token,
        )

    # Wikipedia

    def find_nearby_wikipedia(
        self, request: FindNearbyWikipediaRequest, *, token: CancellationToken | None = None
    ) -> list[WikipediaNearby]:
        return self._list("/findNearbyWikipediaJSON", request, "geonames", WikipediaNearby.from_json, token)

    def wikipedia_search(
        self, request: WikipediaSearchRequest, *, token: CancellationToken | None = None
    ) -> list[Wikipedia]:
        return self._list("/wikipediaSearchJSON", request, "geonames", Wikipedia.from_json, token)

    def wikipedia_bounding_box(
        self, request: WikipediaBoundingBoxRequest, *, token: CancellationToken | None = None
    ) -> list[Wikipedia]:
        return self._list("/wikipediaBoundingBoxJSON", request, "geonames", Wikipedia.from_json, token)

    # Pipeline

    def _root(self, path: str, request: Any, decode: Callable[[Any], T], token: CancellationToken | None) -> T:
        payload = self._request(path, request, token)
        return _decode(lambda: decode(payload))

    def _item(
        self, path: str, request: Any, key: str, decode: Callable[[Any], T], token: CancellationToken | None
    ) -> T:
        payload = self._request(path, request, token)
        return _decode(lambda: decode(expect_object(payload).get(key)))

    def _list(
        self, path: str, request: Any, key: str, decode: Callable[[Any], T], token: CancellationToken | None
    ) -> list[T]:
        payload = self._request(path, request, token)

        def _items() -> list[T]:
            raw = expect_object(payload).get(key)
            if raw is None:
                return []
            # /addressJSON answers a single object when there is one match.
            if isinstance(raw, dict):
                raw = [raw]
            if not isinstance(raw, list):
                raise ValueParseError(f"expected JSON array under \"{key}\", got {type(raw).__name__}")
            return [decode(item) for item in raw]

        return _decode(_items)

    def _request(self, path: str, request: Any, token: CancellationToken | None) -> Any:
        raise_if_cancelled(token)

        params = encode_query(request)
        params["type"] = ["json"]
        params["username"] = [self.username]
        url = f"{self._base_url}{path}"

        try:
            response = self.http_client.get(url, params=params)
        except requests.RequestException as exc:
            raise TransportError(str(exc)).add_stage("send http request") from exc

        try:
            if response.status_code != 200:
                raise _response_error(response)
            try:
                payload = response.json()
            except ValueError as exc:
                raise DecodeResponseError(str(exc)).add_stage("decode response") from exc
        finally:
            response.close()

        log_event(
            self.logger,
            f"GET {path}",
            client="webservice",
            operation=path.strip("/"),
            event="REQUEST_END",
            status="ok",
        )
        return payload


def _response_error(response: requests.Response) -> GeoNamesError:
    try:
        status = expect_object(expect_object(response.json()).get("status") or {})
        code = parse_number(status.get("value"), parse_int64)
    except (ValueError, GeoNamesError) as exc:
        return _decode_error(exc)
    message = status.get("message")
    return ResponseError(code, "" if message is None else str(message))


def _decode(fn: Callable[[], T]) -> T:
    try:
        return fn()
    except GeoNamesError as exc:
        raise _decode_error(exc) from exc


def _decode_error(exc: Exception) -> DecodeResponseError:
    err = DecodeResponseError(str(exc)).add_stage("decode response")
    err.__cause__ = exc
    return err


def _elevation(value: Any) -> int:
    return parse_number(value, parse_int64)
