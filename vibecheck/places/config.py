from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class PlacesConfig:
    photon_url: str = "https://photon.komoot.io/api/"
    overpass_url: str = os.getenv("OVERPASS_URL", "https://overpass-api.de/api/interpreter")
    user_agent: str = "VibeCheck/1.0"
    timeout: float = 15.0
    query_pause: float = 1.0  # seconds between Overpass queries
    elements_per_query: int = 50
    max_places: int = 12
    geocode_ttl_seconds: float = 3600.0


DEFAULT_PLACES_CONFIG = PlacesConfig()
