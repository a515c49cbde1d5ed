"""Tiered text search over the collected recipes.

Each entry is scored by the best field the query matches:

* tier 0 – result display name or result identifier,
* tier 1 – any ingredient name,
* tier 2 – device label.

Entries matching nothing are dropped.  Survivors are ordered by tier, then
with blank display names last, then case-insensitively by name.  Everything
here is pure, so it is safe to run on every keystroke.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple

from recipe_book.models import RecipeEntry

NO_MATCH = -1
TIER_NAME = 0
TIER_INGREDIENT = 1
TIER_DEVICE = 2


def normalise_query(query: Optional[str]) -> str:
    return (query or "").strip().lower()


def match_tier(entry: RecipeEntry, needle: str) -> int:
    """Return the best tier of ``entry`` for an already normalised ``needle``."""

    if not needle:
        return TIER_NAME
    if needle in entry.result_display_name.lower() or needle in entry.result_id.lower():
        return TIER_NAME
    if any(needle in ingredient.name.lower() for ingredient in entry.ingredients):
        return TIER_INGREDIENT
    if needle in entry.device_names.lower():
        return TIER_DEVICE
    return NO_MATCH


def _sort_key(tier: int, entry: RecipeEntry) -> Tuple[int, int, str]:
    blank = 1 if not entry.result_display_name.strip() else 0
    return (tier, blank, entry.sort_name().lower())


def rank(entries: Iterable[RecipeEntry], query: Optional[str] = "") -> Tuple[RecipeEntry, ...]:
    """Filter ``entries`` by ``query`` and return them in display order."""

    needle = normalise_query(query)
    scored = []
    for entry in entries:
        tier = match_tier(entry, needle)
        if tier == NO_MATCH:
            continue
        scored.append((_sort_key(tier, entry), entry))
    # sorted() is stable, equal keys keep collection order
    scored.sort(key=lambda pair: pair[0])
    return tuple(entry for _, entry in scored)


def rank_with_tiers(entries: Sequence[RecipeEntry], query: Optional[str] = "") -> Tuple[Tuple[int, RecipeEntry], ...]:
    """Like :func:`rank` but keep the tier next to each entry."""

    needle = normalise_query(query)
    return tuple((match_tier(entry, needle), entry) for entry in rank(entries, query))


__all__ = [
    "NO_MATCH",
    "TIER_DEVICE",
    "TIER_INGREDIENT",
    "TIER_NAME",
    "match_tier",
    "normalise_query",
    "rank",
    "rank_with_tiers",
]
