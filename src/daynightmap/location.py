"""Observer-location lookups over HTTP: public-IP geolocation and place search.

The IP lookup is slow and may fail; callers start it alongside the first
render and treat a None result as "no observer", never as an error.
"""

import logging

import httpx

from daynightmap.models import GeoPoint

logger = logging.getLogger(__name__)

IP_LOCATION_URL = "http://ip-api.com/json/"
_HEADERS = {"User-Agent": "DayNightMap/1.0"}


async def locate(
    client: httpx.AsyncClient | None = None,
    url: str = IP_LOCATION_URL,
    timeout: float = 5.0,
) -> GeoPoint | None:
    """Approximate the observer's position from their public IP.

    Args:
        client: Shared client; a short-lived one is created when None.
        url: Endpoint returning JSON with ``status``, ``lat``, ``lon``.
        timeout: Request timeout in seconds.

    Returns:
        GeoPoint, or None when the service is unreachable or answers
        with anything unusable.
    """
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=timeout, headers=_HEADERS)
    try:
        resp = await client.get(url, params={"fields": "status,message,lat,lon"})
        resp.raise_for_status()
        data = resp.json()
        if data.get("status") != "success":
            logger.warning("location lookup refused: %s", data.get("message", data.get("status")))
            return None
        point = GeoPoint(lat=float(data["lat"]), lng=float(data["lon"]))
    except httpx.HTTPError as e:
        logger.warning("location lookup failed: %s", e)
        return None
    except (KeyError, TypeError, ValueError) as e:
        # ValueError covers bad JSON and out-of-range coordinates (DomainError)
        logger.warning("location lookup returned unusable data: %s", e)
        return None
    finally:
        if owns_client:
            await client.aclose()

    logger.info("observer located at %.2f, %.2f", point.lat, point.lng)
    return point


def from_browser_geolocation(payload: object) -> GeoPoint | None:
    """Convert a navigator.geolocation result (as returned to Streamlit) to a GeoPoint.

    Returns None for missing, denied, or malformed results.
    """
    if not isinstance(payload, dict):
        return None
    coords = payload.get("coords")
    if not isinstance(coords, dict):
        return None
    try:
        return GeoPoint(lat=float(coords["latitude"]), lng=float(coords["longitude"]))
    except (KeyError, TypeError, ValueError):
        logger.warning("ignoring malformed browser location: %r", coords)
        return None


NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"


class GeocodingError(Exception):
    """Geocoder call failure."""


async def geocode(
    address: str,
    client: httpx.AsyncClient | None = None,
    url: str = NOMINATIM_URL,
    timeout: float = 10.0,
) -> GeoPoint | None:
    """Nominatim (OpenStreetMap) lookup for a place name typed by the user.

    Unlike locate(), the user asked for this place explicitly, so transport
    failures raise GeocodingError instead of degrading silently.

    Returns:
        GeoPoint of the best match, or None when nothing matches.
    """
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=timeout, headers=_HEADERS)
    try:
        resp = await client.get(url, params={"q": address, "format": "json", "limit": 1})
        resp.raise_for_status()
        results = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        raise GeocodingError(f"geocoding {address!r} failed: {e}") from e
    finally:
        if owns_client:
            await client.aclose()

    if not results:
        logger.info("no geocoding match for %r", address)
        return None
    r = results[0]
    logger.info("geocoded %r to %s", address, r.get("display_name", "?"))
    return GeoPoint(lat=float(r["lat"]), lng=float(r["lon"]))
