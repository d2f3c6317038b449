from __future__ import annotations

import random

from ..places.prioritize import shuffle_runs
from ..voting.models import QuizQuestion

# Hardcoded this-or-that pairs per category
QUESTION_BANKS: dict[str, list[tuple[str, str, str]]] = {
    "activities": [
        ("board games", "video games", "analog vs digital"),
        ("escape room", "karaoke", "puzzle vs performance"),
        ("hiking", "museum", "outdoors vs indoors"),
        ("bowling", "mini golf", "competitive style"),
        ("trivia night", "comedy show", "participate vs watch"),
        ("spa day", "amusement park", "relaxation vs thrill"),
        ("cooking class", "painting class", "culinary vs artistic"),
        ("arcade", "laser tag", "chill vs active"),
        ("picnic in the park", "rooftop hangout", "nature vs urban"),
        ("live music", "movie night", "concert vs cinema"),
        ("axe throwing", "pottery class", "rowdy vs zen"),
        ("sports bar", "jazz club", "casual vs sophisticated"),
    ],
    "food": [
        ("spicy", "mild", "heat tolerance"),
        ("sweet", "savory", "flavor preference"),
        ("comfort food", "adventurous eats", "familiar vs new"),
        ("home cooking", "dining out", "setting"),
        ("fast casual", "fine dining", "vibe"),
        ("meat lover", "plant-forward", "protein preference"),
        ("brunch", "late night eats", "time of day"),
        ("street food", "sit-down restaurant", "formality"),
        ("sharing plates", "own entree", "communal vs individual"),
        ("local spots", "popular chains", "discovery vs reliability"),
        ("big portions", "small and refined", "quantity vs quality"),
        ("ethnic cuisine", "american classics", "culinary culture"),
    ],
    "drinks": [
        ("cocktails", "beer", "spirit preference"),
        ("wine bar", "dive bar", "ambiance"),
        ("rooftop", "speakeasy", "scene vs hidden"),
        ("craft/artisanal", "classic/simple", "complexity"),
        ("sweet drinks", "bitter/dry", "taste profile"),
        ("live music venue", "quiet conversation", "noise level"),
        ("sports bar", "lounge", "energy"),
        ("happy hour", "late night", "time of day"),
        ("brewery/distillery", "cocktail bar", "drink focus"),
        ("outdoor patio", "cozy interior", "setting"),
        ("trying new spots", "regular haunts", "discovery vs comfort"),
        ("bar snacks", "just drinks", "food pairing"),
    ],
}


def generate_questions(category: str, rng: random.Random | None = None) -> list[QuizQuestion]:
    """Question pairs for *category* (``activities`` when unknown), optionally shuffled."""
    bank = QUESTION_BANKS.get(category.strip().lower(), QUESTION_BANKS["activities"])
    questions = [
        QuizQuestion(id=i, left=left, right=right, dimension=dimension)
        for i, (left, right, dimension) in enumerate(bank, start=1)
    ]
    return shuffle_runs(questions, key=lambda q: 0, rng=rng)
