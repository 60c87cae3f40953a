"""LocationIQ geocoding gateway.

Thin wrapper around the LocationIQ search endpoint.  One request per
lookup, no retries.  Every kind of failure (transport, HTTP status,
empty result set, unparsable body) is reported as ``GeocodeFailed``.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from places_api.config import settings
from places_api.errors import GeocodeFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float


class Geocoder:
    """
    Resolves free-text addresses to coordinates.

    Reads defaults from settings:
      - MAP_API_KEY
      - GEOCODER_URL
      - GEOCODER_TIMEOUT
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http: Optional[requests.Session] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.map_api_key
        self.base_url = base_url or settings.geocoder_url
        self.timeout = timeout if timeout is not None else settings.geocoder_timeout
        self.http = http if http is not None else requests

        if not self.api_key:
            logger.warning("MAP_API_KEY is not set; geocoding requests will be rejected by the provider.")

    def geocode(self, address: str) -> Coordinates:
        """Return coordinates for ``address`` or raise ``GeocodeFailed``."""
        params = {"key": self.api_key, "q": address, "format": "json"}
        try:
            response = self.http.get(self.base_url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Geocoding request failed for '{address}': {e}")
            raise GeocodeFailed(f"Geocoding request failed: {e}") from e

        if response.status_code != 200:
            logger.info(f"Geocoder returned HTTP {response.status_code} for '{address}'")
            raise GeocodeFailed(f"Geocoder returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise GeocodeFailed("Geocoder returned a non-JSON body") from e

        return parse_coordinates(data)


def parse_coordinates(data) -> Coordinates:
    """
    Extract the first match from a LocationIQ/Nominatim style payload.

    Accepts a list of matches ([{"lat": "..", "lon": ".."}, ...]).
    Empty lists, ``ZERO_RESULTS`` markers and missing/unparsable
    coordinates raise ``GeocodeFailed``.
    """
    if not isinstance(data, list) or not data:
        raise GeocodeFailed("No results for address")

    first = data[0]
    if not isinstance(first, dict) or first.get("status") == "ZERO_RESULTS":
        raise GeocodeFailed("No results for address")

    try:
        return Coordinates(lat=float(first["lat"]), lng=float(first["lon"]))
    except (KeyError, TypeError, ValueError) as e:
        raise GeocodeFailed("Geocoder result has no usable coordinates") from e


def get_geocoder() -> Geocoder:
    """FastAPI dependency; overridden in tests."""
    return Geocoder()
