"""Turn a record source into the normalised recipe list shown by the panel."""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence, Union

from recipe_book.config import GENERIC_DEVICE_LABEL
from recipe_book.datasources.catalog import CatalogLookup, RecordSource
from recipe_book.models import (
    CollectionReport,
    FabricationDefinition,
    IconRef,
    Ingredient,
    ItemDescriptor,
    RecipeEntry,
    RequiredSlot,
    SkippedDefinition,
)

logger = logging.getLogger(__name__)

_WORD_SEPARATOR_RE = re.compile(r"[_\-]")

ItemResult = Union[RecipeEntry, SkippedDefinition]


def _label_from_identifier(identifier: str) -> str:
    return _WORD_SEPARATOR_RE.sub(" ", identifier.strip()).strip()


class RecipeCollector:
    """Walk a :class:`RecordSource` once and normalise every definition.

    The collector never raises.  Every definition yields either a
    :class:`RecipeEntry` or a :class:`SkippedDefinition` explaining why it was
    dropped, and a failure of the source itself ends the walk with whatever
    was gathered so far.
    """

    def __init__(
        self,
        *,
        lookup: Optional[CatalogLookup] = None,
        generic_device_label: str = GENERIC_DEVICE_LABEL,
    ) -> None:
        self.lookup = lookup
        self.generic_device_label = generic_device_label

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def collect(self, source: RecordSource) -> CollectionReport:
        lookup = self.lookup
        if lookup is None and isinstance(source, CatalogLookup):
            lookup = source

        entries: List[RecipeEntry] = []
        skipped: List[SkippedDefinition] = []
        error: Optional[str] = None
        try:
            for definition in source.definitions():
                result = self._collect_one(definition, lookup)
                if isinstance(result, RecipeEntry):
                    entries.append(result)
                else:
                    skipped.append(result)
        except Exception as exc:
            logger.error("Recipe collection aborted after %d entries: %s", len(entries), exc, exc_info=True)
            error = str(exc) or type(exc).__name__

        logger.info("Collected %d recipes (%d skipped)", len(entries), len(skipped))
        return CollectionReport(entries=tuple(entries), skipped=tuple(skipped), error=error)

    def normalise(
        self, definition: FabricationDefinition, lookup: Optional[CatalogLookup] = None
    ) -> ItemResult:
        """Normalise a single definition; raises on malformed host objects."""

        if lookup is None:
            lookup = self.lookup
        target = (getattr(definition, "target_identifier", None) or "").strip()
        if not target:
            return SkippedDefinition("", "definition has no result identifier")

        slots = definition.required_items or ()
        if len(slots) == 0:
            return SkippedDefinition(target, "no required items")

        ingredients = [ingredient for ingredient in (self._ingredient(slot) for slot in slots) if ingredient]
        if not ingredients:
            return SkippedDefinition(target, "no resolvable ingredients")

        produced = definition.target_item
        if produced is None and lookup is not None:
            produced = self._lookup(lookup, target)

        return RecipeEntry(
            result_id=target,
            result_display_name=self._display_name(definition, produced, target),
            ingredients=tuple(ingredients),
            device_names=self.device_label(definition.suitable_fabricators, lookup),
            result_icon=self._icon(produced),
        )

    def device_label(
        self, fabricators: Sequence[str], lookup: Optional[CatalogLookup] = None
    ) -> str:
        """Resolve the joined label of the devices able to produce a recipe."""

        if lookup is None:
            lookup = self.lookup
        if not fabricators:
            return self.generic_device_label

        names: List[str] = []
        for identifier in fabricators:
            if not identifier or not identifier.strip():
                continue
            device = self._lookup(lookup, identifier.strip()) if lookup is not None else None
            if device is not None and device.name and device.name.strip():
                names.append(device.name.strip())
            else:
                names.append(_label_from_identifier(identifier))
        return ", ".join(names) if names else self.generic_device_label

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _collect_one(self, definition: FabricationDefinition, lookup: Optional[CatalogLookup]) -> ItemResult:
        try:
            result = self.normalise(definition, lookup)
        except Exception as exc:
            target = str(getattr(definition, "target_identifier", "") or "")
            logger.warning("Skipping recipe for '%s': %s", target, exc)
            return SkippedDefinition(target, f"error: {exc}")

        if isinstance(result, SkippedDefinition):
            logger.debug("Skipping recipe for '%s': %s", result.target_identifier, result.reason)
        return result

    @staticmethod
    def _ingredient(slot: RequiredSlot) -> Optional[Ingredient]:
        amount = slot.amount
        if not isinstance(amount, int) or amount <= 0:
            return None
        for candidate in slot.candidates or ():
            if candidate is None:
                continue
            name = candidate.name if candidate.name is not None else candidate.identifier
            return Ingredient(name=name, amount=amount)
        return None

    @staticmethod
    def _display_name(
        definition: FabricationDefinition, produced: Optional[ItemDescriptor], target: str
    ) -> str:
        if definition.display_name is not None:
            return definition.display_name
        if produced is not None and produced.name is not None:
            return produced.name
        return target

    @staticmethod
    def _icon(produced: Optional[ItemDescriptor]) -> Optional[IconRef]:
        return produced.icon if produced is not None else None

    @staticmethod
    def _lookup(lookup: CatalogLookup, identifier: str) -> Optional[ItemDescriptor]:
        try:
            return lookup.lookup(identifier)
        except Exception as exc:
            logger.debug("Catalog lookup for '%s' failed: %s", identifier, exc)
            return None


def collect_recipes(
    source: RecordSource,
    *,
    lookup: Optional[CatalogLookup] = None,
    generic_device_label: str = GENERIC_DEVICE_LABEL,
) -> Sequence[RecipeEntry]:
    """Return the recipe entries of ``source``; never raises."""

    collector = RecipeCollector(lookup=lookup, generic_device_label=generic_device_label)
    return collector.collect(source).entries


__all__ = ["RecipeCollector", "collect_recipes"]
