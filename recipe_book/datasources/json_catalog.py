"""Load a host catalog from a JSON dump, either on disk or over HTTP."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

import requests
from pydantic import ValidationError

from recipe_book.models import IconRef, ItemDescriptor
from recipe_book.schemas import CatalogDump, ItemRecord

from .catalog import CatalogBuilder, CatalogError, ItemCatalog, SlotReference

logger = logging.getLogger(__name__)

HEADERS = {"User-Agent": "recipe-book/1.0"}
DEFAULT_TIMEOUT = 30.0


def _descriptor(record: ItemRecord) -> ItemDescriptor:
    icon = None
    if record.icon is not None:
        icon = IconRef(texture=record.icon.texture, source_rect=record.icon.source_rect)
    return ItemDescriptor(
        identifier=record.identifier,
        name=record.name,
        icon=icon,
        tags=tuple(record.tags),
    )


def catalog_from_payload(payload: Mapping[str, Any]) -> ItemCatalog:
    """Validate a decoded JSON dump and turn it into an :class:`ItemCatalog`."""

    try:
        dump = CatalogDump.model_validate(payload)
    except ValidationError as exc:
        raise CatalogError(f"Catalog dump does not match the expected schema: {exc}") from exc

    builder = CatalogBuilder()
    for record in dump.items:
        builder.add_item(_descriptor(record))
        for recipe in record.fabrication:
            builder.add_recipe(
                record.identifier,
                [
                    SlotReference(
                        amount=slot.amount,
                        identifiers=tuple(slot.identifiers),
                        tag=slot.tag,
                    )
                    for slot in recipe.required_items
                ],
                display_name=recipe.display_name,
                fabricators=tuple(recipe.suitable_fabricators),
            )

    catalog = builder.build()
    logger.debug("Loaded %d items and %d recipes from JSON dump", len(catalog.items), len(catalog))
    return catalog


def load_json_catalog(path: Path | str) -> ItemCatalog:
    """Load a catalog dump previously written to ``path``."""

    data_path = Path(path)
    if not data_path.exists():
        raise CatalogError(f"Catalog dump not found at {data_path}")

    try:
        payload = json.loads(data_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise CatalogError(f"Catalog dump at {data_path} is not valid JSON") from exc
    return catalog_from_payload(payload)


def fetch_json_catalog(url: str, *, timeout: float = DEFAULT_TIMEOUT) -> ItemCatalog:
    """Download a catalog dump from ``url``."""

    logger.info("Downloading catalog dump from %s", url)
    try:
        response = requests.get(url, headers=HEADERS, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise CatalogError(f"Unable to download catalog dump from {url}: {exc}") from exc

    try:
        payload = response.json()
    except ValueError as exc:
        raise CatalogError(f"Catalog dump at {url} is not valid JSON") from exc
    return catalog_from_payload(payload)


__all__ = ["catalog_from_payload", "fetch_json_catalog", "load_json_catalog"]
