"""
Address and postal code resolution through the MapQuest geocoding API.
"""

from dataclasses import dataclass
from typing import Optional

import httpx

from config import GEOCODER_API_KEY, GEOCODER_TIMEOUT_SECONDS, GEOCODER_URL
from errors import GeocodeError
from logger import get_logger

logger = get_logger(__name__)


@dataclass
class GeoLocation:
    latitude: float
    longitude: float
    formatted_address: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None
    country: Optional[str] = None

    def to_point(self) -> dict:
        """GeoJSON representation stored on a bootcamp."""
        return {
            "type": "Point",
            "coordinates": [self.longitude, self.latitude],
            "formatted_address": self.formatted_address,
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zipcode": self.zipcode,
            "country": self.country,
        }


class Geocoder:
    def __init__(
        self,
        url: str = GEOCODER_URL,
        api_key: str = GEOCODER_API_KEY,
        timeout: float = GEOCODER_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    def geocode(self, query: str) -> Optional[GeoLocation]:
        """Resolve an address or postal code; returns None when nothing matches."""
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.get(self.url, params={"key": self.api_key, "location": query, "maxResults": 1})
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.warning("geocoder timed out", query=query)
            raise GeocodeError("Geocoding service timed out", code="geocode.timeout", status_code=504) from exc
        except httpx.HTTPError as exc:
            logger.error("geocoder request failed", query=query, error=str(exc))
            raise GeocodeError("Geocoding service unavailable", code="geocode.unavailable", status_code=502) from exc
        return self._parse(response.json())

    @staticmethod
    def _parse(payload: dict) -> Optional[GeoLocation]:
        results = payload.get("results") or []
        locations = results[0].get("locations") if results else None
        if not locations:
            return None
        loc = locations[0]
        lat_lng = loc.get("latLng") or {}
        if "lat" not in lat_lng or "lng" not in lat_lng:
            return None
        parts = [loc.get("street"), loc.get("adminArea5"), loc.get("adminArea3"), loc.get("postalCode"), loc.get("adminArea1")]
        return GeoLocation(
            latitude=float(lat_lng["lat"]),
            longitude=float(lat_lng["lng"]),
            formatted_address=", ".join(p for p in parts if p) or None,
            street=loc.get("street") or None,
            city=loc.get("adminArea5") or None,
            state=loc.get("adminArea3") or None,
            zipcode=loc.get("postalCode") or None,
            country=loc.get("adminArea1") or None,
        )


_geocoder: Optional[Geocoder] = None


def get_geocoder() -> Geocoder:
    global _geocoder
    if _geocoder is None:
        _geocoder = Geocoder()
    return _geocoder
