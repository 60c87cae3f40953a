"""Geocoder gateway: response parsing and failure mapping."""

import pytest
import requests

from places_api.errors import GeocodeFailed
from places_api.services.geocoder import Coordinates, Geocoder, parse_coordinates


class StubResponse:
    def __init__(self, status_code=200, payload=None, invalid_json=False):
        self.status_code = status_code
        self._payload = payload
        self._invalid_json = invalid_json

    def json(self):
        if self._invalid_json:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class StubHttp:
    """Stands in for the ``requests`` module; records the last call."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        if self.error is not None:
            raise self.error
        return self.response


def _geocoder(http):
    return Geocoder(api_key="key-123", base_url="https://geo.example/search", timeout=3, http=http)


def test_geocode_returns_first_match():
    http = StubHttp(StubResponse(payload=[{"lat": "40.7484", "lon": "-73.9856"}, {"lat": "0", "lon": "0"}]))

    coordinates = _geocoder(http).geocode("20 W 34th St")

    assert coordinates == Coordinates(lat=40.7484, lng=-73.9856)
    url, params, timeout = http.calls[0]
    assert url == "https://geo.example/search"
    assert params == {"key": "key-123", "q": "20 W 34th St", "format": "json"}
    assert timeout == 3


@pytest.mark.parametrize(
    "response",
    [
        StubResponse(status_code=404, payload={"error": "Unable to geocode"}),
        StubResponse(status_code=500, payload=None),
        StubResponse(invalid_json=True),
        StubResponse(payload=[]),
    ],
)
def test_geocode_failures(response):
    with pytest.raises(GeocodeFailed):
        _geocoder(StubHttp(response)).geocode("Nowhere")


def test_transport_error_is_geocode_failure():
    http = StubHttp(error=requests.ConnectionError("connection refused"))
    with pytest.raises(GeocodeFailed):
        _geocoder(http).geocode("20 W 34th St")


@pytest.mark.parametrize(
    "payload",
    [
        None,
        {"lat": "1", "lon": "2"},
        [],
        [{"status": "ZERO_RESULTS"}],
        [{"lat": "north", "lon": "2"}],
        [{"lat": "1"}],
        ["not a dict"],
    ],
)
def test_parse_coordinates_rejects_unusable_payloads(payload):
    with pytest.raises(GeocodeFailed):
        parse_coordinates(payload)
