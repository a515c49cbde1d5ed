"""Schemas describing a catalog dump exported from the host.

The dump is produced by whatever tool extracted the host data, therefore the
schemas are forgiving: almost every field is optional and unknown keys are
ignored.  The loaders turn validated records into the plain dataclasses of
:mod:`recipe_book.models`.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class IconRecord(BaseModel):
    """Location of an item's inventory icon."""

    model_config = ConfigDict(extra="ignore")

    texture: str = Field(description="Path of the texture holding the icon.")
    source_rect: Optional[Tuple[int, int, int, int]] = Field(
        default=None,
        description="Sub-rectangle (x, y, width, height) inside the texture.",
    )


class RequiredItemRecord(BaseModel):
    """One required-input slot of a fabrication recipe."""

    model_config = ConfigDict(extra="ignore")

    amount: int = Field(default=1, description="Number of items consumed.")
    identifiers: List[str] = Field(
        default_factory=list,
        description="Identifiers of the items accepted in this slot, in preference order.",
    )
    tag: Optional[str] = Field(
        default=None,
        description="Tag accepted in this slot; expands to every item carrying it.",
    )


class FabricationRecord(BaseModel):
    """A fabrication recipe attached to the item it produces."""

    model_config = ConfigDict(extra="ignore")

    display_name: Optional[str] = Field(
        default=None,
        description="Explicit recipe name, when it differs from the item name.",
    )
    required_items: List[RequiredItemRecord] = Field(default_factory=list)
    suitable_fabricators: List[str] = Field(
        default_factory=list,
        description="Devices that may produce the item; empty means any fabricator.",
    )


class ItemRecord(BaseModel):
    """Catalog entry for a single item."""

    model_config = ConfigDict(extra="ignore")

    identifier: str
    name: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    icon: Optional[IconRecord] = None
    fabrication: List[FabricationRecord] = Field(default_factory=list)


class CatalogDump(BaseModel):
    """Top-level structure of a JSON catalog dump."""

    model_config = ConfigDict(extra="ignore")

    items: List[ItemRecord] = Field(default_factory=list)


__all__ = [
    "CatalogDump",
    "FabricationRecord",
    "IconRecord",
    "ItemRecord",
    "RequiredItemRecord",
]
