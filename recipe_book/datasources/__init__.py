"""Record sources backed by host catalog dumps."""

from .catalog import CatalogBuilder, CatalogError, CatalogLookup, ItemCatalog, RecordSource, SlotReference
from .json_catalog import catalog_from_payload, fetch_json_catalog, load_json_catalog
from .xml_catalog import catalog_from_xml, load_xml_catalog

__all__ = [
    "CatalogBuilder",
    "CatalogError",
    "CatalogLookup",
    "ItemCatalog",
    "RecordSource",
    "SlotReference",
    "catalog_from_payload",
    "catalog_from_xml",
    "fetch_json_catalog",
    "load_json_catalog",
    "load_xml_catalog",
]
