"""Shared data structures used by the recipe book."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple


@dataclass(frozen=True)
class IconRef:
    """Opaque handle to the icon artwork of an item."""

    texture: str
    source_rect: Optional[Tuple[int, int, int, int]] = None


@dataclass(frozen=True)
class ItemDescriptor:
    """Catalog view of a single item as exposed by the host."""

    identifier: str
    name: Optional[str] = None
    icon: Optional[IconRef] = None
    tags: Sequence[str] = field(default_factory=tuple)


@dataclass(frozen=True)
class RequiredSlot:
    """One required-input slot of a fabrication definition.

    ``candidates`` keeps the host order and may contain ``None`` for
    references the host could not resolve.
    """

    amount: int
    candidates: Sequence[Optional[ItemDescriptor]] = field(default_factory=tuple)


@dataclass(frozen=True)
class FabricationDefinition:
    """Raw recipe record as handed over by a record source."""

    target_identifier: str
    display_name: Optional[str] = None
    target_item: Optional[ItemDescriptor] = None
    required_items: Sequence[RequiredSlot] = field(default_factory=tuple)
    suitable_fabricators: Sequence[str] = field(default_factory=tuple)


@dataclass(frozen=True)
class Ingredient:
    name: str
    amount: int

    def label(self) -> str:
        return f"{self.name} ×{self.amount}"


@dataclass(frozen=True)
class RecipeEntry:
    """Normalised, display-ready row for a single recipe."""

    result_id: str
    result_display_name: str
    ingredients: Tuple[Ingredient, ...]
    device_names: str
    result_icon: Optional[IconRef] = None

    def ingredients_label(self) -> str:
        """Return the ingredients joined as ``name ×amount`` pairs."""

        return ", ".join(ingredient.label() for ingredient in self.ingredients)

    def sort_name(self) -> str:
        return self.result_display_name if self.result_display_name.strip() else self.result_id


@dataclass(frozen=True)
class SkippedDefinition:
    """A definition that the collector refused to turn into an entry."""

    target_identifier: str
    reason: str


@dataclass(frozen=True)
class CollectionReport:
    """Outcome of one pass over a record source."""

    entries: Tuple[RecipeEntry, ...] = ()
    skipped: Tuple[SkippedDefinition, ...] = ()
    error: Optional[str] = None

    @property
    def complete(self) -> bool:
        return self.error is None


__all__ = [
    "CollectionReport",
    "FabricationDefinition",
    "IconRef",
    "Ingredient",
    "ItemDescriptor",
    "RecipeEntry",
    "RequiredSlot",
    "SkippedDefinition",
]
