"""View model handed to renderers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

from recipe_book.models import IconRef, RecipeEntry

RESULT_HEADER = "Result"
INGREDIENTS_HEADER = "Ingredients"
DEVICE_HEADER = "Device"


@dataclass(frozen=True)
class RowView:
    """A single table row.

    ``result_label`` and ``device_label`` are clickable in renderers that
    support it; clicking feeds the label back as the new query.  When
    ``ingredient_names`` holds more than one name the renderer offers them in
    a menu with the same effect.
    """

    result_id: str
    result_label: str
    icon: Optional[IconRef]
    ingredients_label: str
    device_label: str
    ingredient_names: Tuple[str, ...] = ()
    alternate: bool = False

    @property
    def has_ingredient_menu(self) -> bool:
        return len(self.ingredient_names) > 1


@dataclass(frozen=True)
class PanelView:
    title: str
    query: str
    rows: Sequence[RowView] = field(default_factory=tuple)
    columns: Tuple[str, ...] = (RESULT_HEADER, INGREDIENTS_HEADER, DEVICE_HEADER)


def build_row(entry: RecipeEntry, index: int) -> RowView:
    return RowView(
        result_id=entry.result_id,
        result_label=entry.result_display_name,
        icon=entry.result_icon,
        ingredients_label=entry.ingredients_label(),
        device_label=entry.device_names,
        ingredient_names=tuple(ingredient.name for ingredient in entry.ingredients),
        alternate=index % 2 == 1,
    )


def build_view(title: str, query: str, entries: Sequence[RecipeEntry]) -> PanelView:
    """Project ranked entries into the rows a renderer materialises."""

    return PanelView(
        title=title,
        query=query,
        rows=tuple(build_row(entry, index) for index, entry in enumerate(entries)),
    )


__all__ = ["PanelView", "RowView", "build_row", "build_view"]
