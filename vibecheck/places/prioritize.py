from __future__ import annotations

import random
import re
from itertools import groupby
from typing import Callable, Hashable, Sequence, TypeVar

from ..voting.models import Candidate

T = TypeVar("T")

_QUOTES_RE = re.compile(r"['‘’`]")


def shuffle_runs(
    items: Sequence[T],
    key: Callable[[T], Hashable],
    rng: random.Random | None = None,
) -> list[T]:
    """
    Shuffle *items* only inside runs of consecutive equal *key*.

    The caller is responsible for putting items in a stable order first.
    With ``rng=None`` the order is returned unchanged.
    """
    if rng is None:
        return list(items)
    result: list[T] = []
    for _, run in groupby(items, key=key):
        chunk = list(run)
        rng.shuffle(chunk)
        result.extend(chunk)
    return result


def normalize_name(name: str) -> str:
    return " ".join(_QUOTES_RE.sub("", name.lower()).split())


def dedupe_by_name(places: Sequence[Candidate]) -> list[Candidate]:
    """Keep one location per business name."""
    seen: set[str] = set()
    kept: list[Candidate] = []
    for place in places:
        name = normalize_name(place.name)
        if name in seen:
            continue
        seen.add(name)
        kept.append(place)
    return kept


def richness(place: Candidate) -> int:
    """0 for places with tags and an address, 1 for one of them, 2 for neither."""
    return 2 - (bool(place.tags) + bool(place.address))


def prioritize_places(
    places: Sequence[Candidate],
    limit: int,
    rng: random.Random | None = None,
) -> list[Candidate]:
    deduped = dedupe_by_name(places)
    stable = sorted(deduped, key=richness)
    return shuffle_runs(stable, key=richness, rng=rng)[:limit]
