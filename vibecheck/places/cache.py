"""Geocoding results per location string, expiring after a TTL."""
from __future__ import annotations

import time

Coords = tuple[float, float]

# normalised location -> (stored_at, (lat, lon))
_coords: dict[str, tuple[float, Coords]] = {}
_stats = {"hits": 0, "misses": 0, "expired": 0}


def normalize_location(location: str) -> str:
    return " ".join(location.lower().split())


def lookup_coords(location: str, ttl_seconds: float, now: float | None = None) -> Coords | None:
    now = time.time() if now is None else now
    key = normalize_location(location)
    entry = _coords.get(key)
    if entry is None:
        _stats["misses"] += 1
        return None
    stored_at, coords = entry
    if now - stored_at >= ttl_seconds:
        del _coords[key]
        _stats["expired"] += 1
        _stats["misses"] += 1
        return None
    _stats["hits"] += 1
    return coords


def remember_coords(location: str, coords: Coords, now: float | None = None) -> None:
    _coords[normalize_location(location)] = (time.time() if now is None else now, coords)


def get_cache_stats() -> dict:
    lookups = _stats["hits"] + _stats["misses"]
    return {
        "locations": len(_coords),
        **_stats,
        "hit_rate": round(_stats["hits"] / lookups * 100, 1) if lookups else 0.0,
    }


def clear_cache() -> None:
    _coords.clear()
    for name in _stats:
        _stats[name] = 0
