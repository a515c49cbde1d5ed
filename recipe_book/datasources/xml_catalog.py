"""Read host item definitions straight from their XML content files.

Only the parts the recipe book needs are extracted::

    <Items>
      <Item identifier="steelbar" name="Steel Bar" tags="smallitem,metal">
        <InventoryIcon texture="Content/Items/icons.png" sourcerect="0,0,64,64" />
        <Fabricate suitablefabricators="fabricator" displayname="Steel Bar">
          <RequiredItem identifier="ironore" amount="2" />
          <RequiredItem tag="carbon" />
        </Fabricate>
      </Item>
    </Items>

Element and attribute names are matched case-insensitively because content
packages are not consistent about them.  Items wrapped in ``<Override>``
blocks are picked up as well.  An ``<Item>`` nested inside another item, such as
a ``<Deconstruct>`` output, is a reference and is not read as a declaration.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from lxml import etree

from recipe_book.models import IconRef, ItemDescriptor

from .catalog import CatalogBuilder, CatalogError, ItemCatalog, SlotReference

logger = logging.getLogger(__name__)

_ICON_ELEMENTS = ("inventoryicon", "sprite")


def _local_name(element: etree._Element) -> str:
    tag = element.tag
    if not isinstance(tag, str):
        # comments and processing instructions
        return ""
    return etree.QName(tag).localname.lower()


def _named(element: etree._Element, name: str) -> Iterator[etree._Element]:
    for child in element:
        if _local_name(child) == name:
            yield child


def _attr(element: etree._Element, name: str) -> Optional[str]:
    for key, value in element.attrib.items():
        if key.lower() == name:
            return value
    return None


def _split_list(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _parse_amount(value: Optional[str], *, item: str) -> int:
    if value is None or not value.strip():
        return 1
    try:
        return int(value.strip())
    except ValueError:
        # A slot with amount 0 is discarded by the collector.
        logger.warning("Item '%s' declares a non-numeric amount %r", item, value)
        return 0


def _parse_rect(value: Optional[str]) -> Optional[Tuple[int, int, int, int]]:
    parts = _split_list(value)
    if len(parts) != 4:
        return None
    try:
        x, y, width, height = (int(float(part)) for part in parts)
    except ValueError:
        return None
    return (x, y, width, height)


def _parse_icon(item: etree._Element) -> Optional[IconRef]:
    for name in _ICON_ELEMENTS:
        for element in _named(item, name):
            texture = _attr(element, "texture")
            if texture:
                return IconRef(texture=texture, source_rect=_parse_rect(_attr(element, "sourcerect")))
    return None


def _parse_slots(fabricate: etree._Element, *, item: str) -> List[SlotReference]:
    slots: List[SlotReference] = []
    for required in _named(fabricate, "requireditem"):
        slots.append(
            SlotReference(
                amount=_parse_amount(_attr(required, "amount"), item=item),
                identifiers=_split_list(_attr(required, "identifier")),
                tag=(_attr(required, "tag") or "").strip() or None,
            )
        )
    return slots


def _item_elements(element: etree._Element) -> Iterator[etree._Element]:
    """Yield item declarations; ``<Item>`` nested inside another item is a reference."""

    name = _local_name(element)
    if name == "item":
        yield element
        return
    for child in element:
        child_name = _local_name(child)
        if child_name == "item":
            yield child
        elif child_name == "override":
            yield from _item_elements(child)


def _read_items(root: etree._Element, builder: CatalogBuilder) -> int:
    count = 0
    for element in _item_elements(root):
        identifier = (_attr(element, "identifier") or "").strip()
        if not identifier:
            logger.debug("Ignoring <Item> without identifier on line %s", element.sourceline)
            continue

        builder.add_item(
            ItemDescriptor(
                identifier=identifier,
                name=_attr(element, "name"),
                icon=_parse_icon(element),
                tags=_split_list(_attr(element, "tags")),
            )
        )
        count += 1

        for fabricate in _named(element, "fabricate"):
            builder.add_recipe(
                identifier,
                _parse_slots(fabricate, item=identifier),
                display_name=_attr(fabricate, "displayname"),
                fabricators=_split_list(_attr(fabricate, "suitablefabricators")),
            )
    return count


def catalog_from_xml(documents: Iterable[str | bytes]) -> ItemCatalog:
    """Build a catalog from in-memory XML documents."""

    builder = CatalogBuilder()
    for document in documents:
        data = document.encode("utf-8") if isinstance(document, str) else document
        try:
            root = etree.fromstring(data)
        except etree.XMLSyntaxError as exc:
            raise CatalogError(f"Unable to parse item XML: {exc}") from exc
        _read_items(root, builder)
    return builder.build()


def load_xml_catalog(paths: Sequence[Path | str]) -> ItemCatalog:
    """Build a catalog from one or more item XML files."""

    builder = CatalogBuilder()
    for path in paths:
        xml_path = Path(path)
        if not xml_path.exists():
            raise CatalogError(f"Item XML not found at {xml_path}")
        try:
            root = etree.parse(str(xml_path)).getroot()
        except etree.XMLSyntaxError as exc:
            raise CatalogError(f"Unable to parse item XML {xml_path}: {exc}") from exc
        count = _read_items(root, builder)
        logger.debug("Read %d items from %s", count, xml_path)
    return builder.build()


__all__ = ["catalog_from_xml", "load_xml_catalog"]
