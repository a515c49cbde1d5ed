import json
import pathlib
import sys
from typing import Any, Dict

import pytest
import requests

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from recipe_book.collector import RecipeCollector, collect_recipes
from recipe_book.datasources import (
    CatalogError,
    catalog_from_payload,
    catalog_from_xml,
    fetch_json_catalog,
    load_json_catalog,
    load_xml_catalog,
)
from recipe_book.datasources import json_catalog
from recipe_book.models import IconRef, Ingredient


ITEMS_XML = """
<Items>
  <Item identifier="ironore" name="Iron Ore" tags="smallitem,ore" />
  <Item identifier="carbon" name="Carbon" tags="smallitem,carbon" />
  <Item identifier="charcoal" name="Charcoal" tags="smallitem,carbon" />
  <Item identifier="medicalfabricator" name="Medical Fabricator" />
  <Override>
    <Item identifier="steelbar" name="Steel Bar" tags="smallitem,metal">
      <InventoryIcon texture="Content/Items/icons.png" sourcerect="64,0,64,64" />
      <Fabricate suitablefabricators="fabricator">
        <RequiredItem identifier="ironore" amount="2" />
        <RequiredItem tag="carbon" />
      </Fabricate>
      <Fabricate suitablefabricators="medicalfabricator,ignored_unit" displayname="Medical Steel">
        <RequiredItem identifier="missingthing,ironore" amount="3" />
      </Fabricate>
    </Item>
  </Override>
  <Item identifier="phantom">
    <Fabricate>
      <RequiredItem identifier="doesnotexist" />
    </Fabricate>
  </Item>
  <!-- comments are ignored -->
  <item identifier="weldingtool" name="Welding Tool">
    <sprite texture="Content/Items/tools.png" />
    <fabricate>
      <requireditem identifier="steelbar" amount="x" />
      <requireditem identifier="ironore" />
    </fabricate>
  </item>
</Items>
"""


@pytest.fixture()
def payload() -> Dict[str, Any]:
    return {
        "items": [
            {"identifier": "ironore", "name": "Iron Ore"},
            {"identifier": "carbon", "name": "Carbon", "tags": ["carbon"]},
            {
                "identifier": "steelbar",
                "name": "Steel Bar",
                "icon": {"texture": "icons.png", "source_rect": [0, 0, 64, 64]},
                "fabrication": [
                    {
                        "required_items": [
                            {"amount": 2, "identifiers": ["ironore"]},
                            {"tag": "carbon"},
                        ]
                    }
                ],
                "unknown_key": "ignored",
            },
            {
                "identifier": "weldingtool",
                "fabrication": [
                    {
                        "display_name": "Welder",
                        "suitable_fabricators": ["ignored_unit"],
                        "required_items": [{"identifiers": ["steelbar"]}],
                    }
                ],
            },
        ]
    }


def test_json_payload_becomes_catalog(payload: Dict[str, Any]) -> None:
    catalog = catalog_from_payload(payload)

    assert len(catalog) == 2
    assert catalog.lookup("STEELBAR").name == "Steel Bar"

    steel, welder = collect_recipes(catalog)
    assert steel.ingredients == (Ingredient("Iron Ore", 2), Ingredient("Carbon", 1))
    assert steel.result_icon == IconRef("icons.png", (0, 0, 64, 64))
    assert welder.result_display_name == "Welder"
    assert welder.device_names == "ignored unit"
    assert welder.ingredients == (Ingredient("Steel Bar", 1),)


def test_json_payload_schema_errors_are_wrapped() -> None:
    with pytest.raises(CatalogError):
        catalog_from_payload({"items": [{"name": "no identifier"}]})


def test_load_json_catalog_from_disk(tmp_path: pathlib.Path, payload: Dict[str, Any]) -> None:
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(payload), encoding="utf-8")

    assert len(load_json_catalog(path)) == 2


def test_load_json_catalog_errors(tmp_path: pathlib.Path) -> None:
    with pytest.raises(CatalogError):
        load_json_catalog(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogError):
        load_json_catalog(broken)


class _FakeResponse:
    def __init__(self, payload: Any, status: int = 200) -> None:
        self._payload = payload
        self.status_code = status

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self) -> Any:
        return self._payload


def test_fetch_json_catalog(monkeypatch: pytest.MonkeyPatch, payload: Dict[str, Any]) -> None:
    seen: Dict[str, Any] = {}

    def fake_get(url, headers=None, timeout=None):
        seen.update(url=url, headers=headers, timeout=timeout)
        return _FakeResponse(payload)

    monkeypatch.setattr(json_catalog.requests, "get", fake_get)

    catalog = fetch_json_catalog("https://example.com/catalog.json", timeout=5)

    assert len(catalog) == 2
    assert seen["timeout"] == 5
    assert seen["headers"]["User-Agent"].startswith("recipe-book")


def test_fetch_json_catalog_http_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(json_catalog.requests, "get", lambda *a, **k: _FakeResponse({}, status=404))

    with pytest.raises(CatalogError):
        fetch_json_catalog("https://example.com/missing.json")


def test_xml_catalog_reads_items_and_recipes() -> None:
    catalog = catalog_from_xml([ITEMS_XML])

    assert catalog.lookup("steelbar").icon == IconRef("Content/Items/icons.png", (64, 0, 64, 64))
    assert catalog.lookup("weldingtool").icon == IconRef("Content/Items/tools.png", None)
    assert [item.identifier for item in catalog.items_with_tag("carbon")] == ["carbon", "charcoal"]

    report = RecipeCollector().collect(catalog)
    steel, medical_steel, welder = report.entries

    assert steel.ingredients == (Ingredient("Iron Ore", 2), Ingredient("Carbon", 1))
    assert steel.device_names == "fabricator"
    assert medical_steel.result_display_name == "Medical Steel"
    assert medical_steel.ingredients == (Ingredient("Iron Ore", 3),)
    assert medical_steel.device_names == "Medical Fabricator, ignored unit"
    # the non-numeric amount drops that slot only
    assert welder.ingredients == (Ingredient("Iron Ore", 1),)
    assert welder.device_names == "Fabricator"

    assert [skip.target_identifier for skip in report.skipped] == ["phantom"]


def test_xml_catalog_from_files(tmp_path: pathlib.Path) -> None:
    first = tmp_path / "ores.xml"
    first.write_text('<Items><Item identifier="ironore" name="Iron Ore" /></Items>', encoding="utf-8")
    second = tmp_path / "metals.xml"
    second.write_text(
        '<Items><Item identifier="steelbar"><Fabricate>'
        '<RequiredItem identifier="ironore" amount="2" /></Fabricate></Item></Items>',
        encoding="utf-8",
    )

    (entry,) = collect_recipes(load_xml_catalog([first, second]))

    # references resolve across files
    assert entry.ingredients == (Ingredient("Iron Ore", 2),)
    assert entry.result_display_name == "steelbar"


def test_xml_catalog_errors(tmp_path: pathlib.Path) -> None:
    with pytest.raises(CatalogError):
        catalog_from_xml(["<Items><Item></Items>"])

    with pytest.raises(CatalogError):
        load_xml_catalog([tmp_path / "absent.xml"])


def test_xml_nested_item_references_do_not_shadow_declarations() -> None:
    xml = """
    <Items>
      <Item identifier="weldingtool" name="Welding Tool">
        <Fabricate suitablefabricators="fabricator">
          <RequiredItem identifier="steel" />
        </Fabricate>
        <Deconstruct>
          <Item identifier="steel" />
        </Deconstruct>
      </Item>
      <Item identifier="steel" name="Steel Bar" />
    </Items>
    """

    catalog = catalog_from_xml([xml])
    (entry,) = collect_recipes(catalog)

    assert catalog.lookup("steel").name == "Steel Bar"
    assert entry.ingredients == (Ingredient("Steel Bar", 1),)


def test_xml_override_document_root() -> None:
    catalog = catalog_from_xml(['<Override><Item identifier="steel" name="Steel Bar" /></Override>'])

    assert catalog.lookup("steel").name == "Steel Bar"
