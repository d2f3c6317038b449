from __future__ import annotations

import os
from dataclasses import dataclass, field


def _default_radius_meters() -> dict[str, int]:
    return {"walkable": 1000, "nearby": 8000, "city": 25000}


@dataclass(frozen=True)
class SessionConfig:
    max_age_hours: float = float(os.getenv("SESSION_MAX_AGE_HOURS", "24"))
    cleanup_interval_seconds: float = 3600.0
    radius_meters: dict[str, int] = field(default_factory=_default_radius_meters)
    default_radius_meters: int = 5000

    def radius_for(self, tier: str | None) -> int:
        return self.radius_meters.get(tier or "", self.default_radius_meters)


DEFAULT_SESSION_CONFIG = SessionConfig()
