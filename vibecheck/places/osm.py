from __future__ import annotations

import logging
import random
import time
from typing import Any

import httpx

from ..voting.models import Candidate
from .cache import lookup_coords, remember_coords
from .config import DEFAULT_PLACES_CONFIG, PlacesConfig
from .prioritize import prioritize_places

logger = logging.getLogger(__name__)

# Overpass tag filters per category, queried in order
QUERY_STRATEGIES: dict[str, list[str]] = {
    "food": [
        '["amenity"="restaurant"]',
        '["amenity"="fast_food"]["name"]',
        '["amenity"="cafe"]["cuisine"]',
    ],
    "drinks": [
        '["amenity"~"bar|pub|biergarten|nightclub"]',
        '["bar"="yes"]["name"]',
        '["cocktails"="yes"]["name"]',
    ],
    "activities": [
        '["amenity"~"theatre|cinema|arts_centre|community_centre|events_venue"]',
        '["leisure"~"bowling_alley|escape_game|amusement_arcade|miniature_golf|sports_centre|ice_rink"]',
        '["tourism"~"museum|gallery|zoo|aquarium|theme_park|attraction"]',
        '["leisure"~"park|garden|nature_reserve"]["name"]',
        '["amenity"~"nightclub|casino|karaoke_box"]',
        '["sport"~"climbing|bowling|billiards"]["name"]',
        '["leisure"="sports_centre"]["name"]',
    ],
}


def _client(client: httpx.Client | None, config: PlacesConfig) -> httpx.Client:
    if client is not None:
        return client
    return httpx.Client(timeout=config.timeout, headers={"User-Agent": config.user_agent})


def geocode_location(
    location: str,
    client: httpx.Client | None = None,
    config: PlacesConfig = DEFAULT_PLACES_CONFIG,
) -> tuple[float, float] | None:
    """Resolve a location string to ``(lat, lon)`` with Photon, or None."""
    cached = lookup_coords(location, config.geocode_ttl_seconds)
    if cached is not None:
        return cached

    http = _client(client, config)
    try:
        resp = http.get(config.photon_url, params={"q": location, "limit": 1})
        resp.raise_for_status()
        features = resp.json().get("features") or []
        coords = features[0]["geometry"]["coordinates"] if features else None
    except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError):
        logger.warning("Geocoding failed for %r", location, exc_info=True)
        return None
    finally:
        if client is None:
            http.close()

    if not coords:
        return None
    # GeoJSON order is lon, lat
    result = (float(coords[1]), float(coords[0]))
    remember_coords(location, result)
    return result


def _overpass_query(tag_filter: str, lat: float, lon: float, radius: int, limit: int) -> str:
    around = f"(around:{radius},{lat},{lon})"
    return (
        f"[out:json][timeout:10];"
        f"(node{tag_filter}{around};way{tag_filter}{around};);"
        f"out center {limit};"
    )


def _split_cuisine(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [c.strip().lower() for c in raw.split(";") if c.strip()]


def element_to_candidate(element: dict[str, Any]) -> Candidate | None:
    """Convert one Overpass element; unnamed elements yield None."""
    tags = element.get("tags") or {}
    name = tags.get("name")
    if not name:
        return None

    center = element.get("center") or {}
    lat = element.get("lat", center.get("lat"))
    lon = element.get("lon", center.get("lon"))
    address = " ".join(
        part for part in (
            tags.get("addr:housenumber"),
            tags.get("addr:street"),
            tags.get("addr:city"),
        ) if part
    )

    return Candidate(
        id=f"osm_{element['id']}",
        name=name,
        tags=_split_cuisine(tags.get("cuisine")),
        address=address or None,
        website=tags.get("website") or tags.get("contact:website"),
        tel=tags.get("phone") or tags.get("contact:phone"),
        hours=tags.get("opening_hours"),
        amenity=tags.get("amenity") or tags.get("leisure") or tags.get("tourism"),
        lat=lat,
        lon=lon,
        maps_url=(
            f"https://www.openstreetmap.org/?mlat={lat}&mlon={lon}#map=18/{lat}/{lon}"
            if lat is not None and lon is not None else None
        ),
    )


def fetch_local_places(
    category: str,
    location: str,
    radius_meters: int,
    client: httpx.Client | None = None,
    rng: random.Random | None = None,
    config: PlacesConfig = DEFAULT_PLACES_CONFIG,
) -> list[Candidate]:
    """
    Fetch named places of *category* around *location* from OpenStreetMap.

    Returns at most ``config.max_places`` candidates, richer entries first.
    Failed queries are skipped; an ungeocodable location gives ``[]``.
    """
    http = _client(client, config)
    try:
        coords = geocode_location(location, client=http, config=config)
        if coords is None:
            logger.error("Could not geocode location %r", location)
            return []
        lat, lon = coords

        filters = QUERY_STRATEGIES.get(category.strip().lower(), QUERY_STRATEGIES["food"])
        places: list[Candidate] = []
        seen_ids: set[int] = set()

        for i, tag_filter in enumerate(filters):
            if i > 0 and config.query_pause > 0:
                time.sleep(config.query_pause)

            query = _overpass_query(tag_filter, lat, lon, radius_meters, config.elements_per_query)
            try:
                resp = http.post(config.overpass_url, data={"data": query})
                resp.raise_for_status()
                elements = resp.json().get("elements") or []
            except (httpx.HTTPError, ValueError):
                logger.warning("Overpass query failed for filter %s", tag_filter, exc_info=True)
                continue

            for element in elements:
                if element.get("id") in seen_ids:
                    continue
                candidate = element_to_candidate(element)
                if candidate is None:
                    continue
                seen_ids.add(element["id"])
                places.append(candidate)
    finally:
        if client is None:
            http.close()

    result = prioritize_places(places, limit=config.max_places, rng=rng)
    logger.info(
        "Found %d places for %s near %r, returning %d",
        len(places), category, location, len(result),
    )
    return result
