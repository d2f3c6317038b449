from __future__ import annotations

import json
import logging

from groq import Groq

from ..voting.models import FallbackRequest, Suggestion
from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a local expert helping a group find places they might all enjoy. "
    "The group couldn't agree on the specific places they were shown. "
    "Based on what we know about their tastes, suggest 3-5 TYPES of places "
    "(not specific business names) that might appeal to the whole group. "
    "Focus on middle ground: places that offer variety or fusion, or have "
    "something for everyone.\n\n"
    "Return ONLY valid JSON in this exact format:\n"
    '{"suggestions": [{"label": "<type of place>", "rationale": "<why it works for the group>", '
    '"search_hint": "<a good search term for finding it on a map>"}]}'
)

RADIUS_DESCRIPTIONS = {
    "walkable": "within walking distance",
    "nearby": "within a short drive",
    "city": "anywhere in the area",
}


def _build_user_message(request: FallbackRequest) -> str:
    lines = ["## Group"]
    lines.append(f"- Category: {request.category}")
    lines.append(f"- Location: {request.location}")
    radius = RADIUS_DESCRIPTIONS.get(request.radius_tier or "", "nearby")
    lines.append(f"- Search radius: {radius}")
    tags = ", ".join(request.top_tags) or "varied/no clear pattern"
    lines.append(f"- Tags they gravitated toward: {tags}")

    lines.append("\n## Individual Tastes")
    lines.append("| Name | Favoured tags | Loved | Liked |")
    lines.append("|---|---|---|---|")
    for t in request.participant_tastes:
        lines.append(
            f"| {t.name} | {', '.join(t.tags) or '-'} | {t.loved_count} | {t.liked_count} |"
        )

    lines.append(f"\nSuggest place types for this group in {request.location}.")
    return "\n".join(lines)


def _parse_suggestions(content: str) -> list[Suggestion]:
    parsed = json.loads(content)
    items = parsed.get("suggestions", []) if isinstance(parsed, dict) else parsed

    results: list[Suggestion] = []
    for item in items or []:
        if not isinstance(item, dict):
            continue
        label = str(item.get("label", "")).strip()
        if not label:
            continue
        results.append(Suggestion(
            label=label,
            rationale=str(item.get("rationale", "")).strip(),
            search_hint=str(item.get("search_hint", "") or label).strip(),
        ))
    return results


def suggest_fresh_ideas(
    request: FallbackRequest,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> list[Suggestion]:
    """
    Ask Groq for new kinds of places when the group found no common ground.

    Returns suggestions in the order the model ranked them.
    Returns an empty list on any failure (timeout, bad JSON, API error).
    """
    if not config.enabled or not config.api_key:
        return []

    try:
        client = Groq(api_key=config.api_key, timeout=config.timeout)
        response = client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": _build_user_message(request)},
            ],
            max_tokens=config.max_tokens,
            temperature=0.7,
            response_format={"type": "json_object"},
        )

        content = response.choices[0].message.content or ""
        return _parse_suggestions(content)

    except Exception:
        logger.warning("Groq suggestion call failed, keeping engine results", exc_info=True)
        return []
