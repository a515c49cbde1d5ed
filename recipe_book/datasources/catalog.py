"""Record source and catalog lookup interfaces plus an in-memory catalog.

The collector never touches host types directly.  Everything it needs is
expressed through :class:`RecordSource` (the fabrication definitions) and the
optional :class:`CatalogLookup` (identifier to display name and icon).  The
concrete loaders in :mod:`recipe_book.datasources.json_catalog` and
:mod:`recipe_book.datasources.xml_catalog` both produce an
:class:`ItemCatalog`, which implements the two interfaces.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Protocol, Sequence, runtime_checkable

from recipe_book.models import FabricationDefinition, ItemDescriptor, RequiredSlot


class CatalogError(RuntimeError):
    """Raised when a catalog dump cannot be retrieved or parsed."""


@runtime_checkable
class RecordSource(Protocol):
    """Read-only view over the host's fabrication definitions."""

    def definitions(self) -> Iterable[FabricationDefinition]:
        ...


@runtime_checkable
class CatalogLookup(Protocol):
    """Resolves an item or device identifier to its catalog descriptor."""

    def lookup(self, identifier: str) -> Optional[ItemDescriptor]:
        ...


class ItemCatalog:
    """In-memory catalog of items and the recipes that produce them."""

    def __init__(
        self,
        items: Iterable[ItemDescriptor] = (),
        definitions: Iterable[FabricationDefinition] = (),
    ) -> None:
        self._items: Dict[str, ItemDescriptor] = {}
        for item in items:
            # First definition of an identifier wins, later duplicates are ignored.
            self._items.setdefault(item.identifier.casefold(), item)
        self._definitions: List[FabricationDefinition] = list(definitions)

    def definitions(self) -> Iterator[FabricationDefinition]:
        return iter(self._definitions)

    def lookup(self, identifier: str) -> Optional[ItemDescriptor]:
        if not identifier:
            return None
        return self._items.get(identifier.casefold())

    def items_with_tag(self, tag: str) -> List[ItemDescriptor]:
        """Return every item carrying ``tag`` in catalog order."""

        wanted = tag.casefold()
        return [
            item
            for item in self._items.values()
            if any(candidate.casefold() == wanted for candidate in item.tags)
        ]

    @property
    def items(self) -> Sequence[ItemDescriptor]:
        return tuple(self._items.values())

    def __len__(self) -> int:
        return len(self._definitions)


@dataclass(frozen=True)
class SlotReference:
    """Unresolved required-input slot as read from a dump."""

    amount: int
    identifiers: Sequence[str] = ()
    tag: Optional[str] = None


@dataclass(frozen=True)
class _PendingRecipe:
    target_identifier: str
    display_name: Optional[str]
    slots: Sequence[SlotReference]
    fabricators: Sequence[str]


class CatalogBuilder:
    """Accumulate items and recipes, then resolve references in one pass.

    Recipes may mention items declared later in the dump, so candidate
    resolution is deferred until :meth:`build`.
    """

    def __init__(self) -> None:
        self._items: List[ItemDescriptor] = []
        self._pending: List[_PendingRecipe] = []

    def add_item(self, item: ItemDescriptor) -> None:
        self._items.append(item)

    def add_recipe(
        self,
        target_identifier: str,
        slots: Sequence[SlotReference],
        *,
        display_name: Optional[str] = None,
        fabricators: Sequence[str] = (),
    ) -> None:
        self._pending.append(
            _PendingRecipe(
                target_identifier=target_identifier,
                display_name=display_name,
                slots=tuple(slots),
                fabricators=tuple(fabricators),
            )
        )

    def build(self) -> ItemCatalog:
        index = ItemCatalog(self._items)
        definitions = [
            FabricationDefinition(
                target_identifier=pending.target_identifier,
                display_name=pending.display_name,
                target_item=index.lookup(pending.target_identifier),
                required_items=tuple(self._resolve_slot(index, slot) for slot in pending.slots),
                suitable_fabricators=pending.fabricators,
            )
            for pending in self._pending
        ]
        return ItemCatalog(self._items, definitions)

    @staticmethod
    def _resolve_slot(index: ItemCatalog, slot: SlotReference) -> RequiredSlot:
        # Unknown identifiers stay in place as None so the collector sees the gap.
        candidates: List[Optional[ItemDescriptor]] = [
            index.lookup(identifier) for identifier in slot.identifiers
        ]
        if slot.tag:
            candidates.extend(index.items_with_tag(slot.tag))
        return RequiredSlot(amount=slot.amount, candidates=tuple(candidates))


__all__ = [
    "CatalogBuilder",
    "CatalogError",
    "CatalogLookup",
    "ItemCatalog",
    "RecordSource",
    "SlotReference",
]
