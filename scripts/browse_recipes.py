#!/usr/bin/env python3
"""Browse the crafting recipes of a host catalog dump from the terminal."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence, TextIO

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from recipe_book.commands import CommandRegistry
from recipe_book.config import SettingsError, load_settings
from recipe_book.datasources import (
    CatalogError,
    ItemCatalog,
    fetch_json_catalog,
    load_json_catalog,
    load_xml_catalog,
)
from recipe_book.mod import RecipeBookMod
from recipe_book.panel import TextRenderer
from recipe_book.ranking import rank_with_tiers

LOGGER = logging.getLogger("browse_recipes")

TIER_NAMES = {0: "name", 1: "ingredient", 2: "device"}

HELP_TEXT = """\
Type text to search.  Commands:
  /toggle, /recipebook, /rb   open or close the panel
  /close                      close the panel
  /key <KEY>                  simulate a key press
  /click <N>                  filter by the result of row N
  /device <N>                 filter by the device of row N
  /quit                       leave
"""


def load_catalog(args: argparse.Namespace) -> ItemCatalog:
    if args.url:
        return fetch_json_catalog(args.url, timeout=args.timeout)
    if args.json:
        return load_json_catalog(args.json)
    return load_xml_catalog(args.xml)


def print_ranked(mod: RecipeBookMod, query: str, out: TextIO) -> None:
    for tier, entry in rank_with_tiers(mod.panel.entries, query):
        out.write(
            f"[{TIER_NAMES.get(tier, tier)}] {entry.result_display_name or entry.result_id}: "
            f"{entry.ingredients_label()} @ {entry.device_names}\n"
        )


def _row_index(argument: str) -> int:
    try:
        return int(argument) - 1
    except ValueError:
        return -1


def interactive(mod: RecipeBookMod, renderer: TextRenderer, stdin: TextIO, out: TextIO) -> None:
    out.write(HELP_TEXT)
    mod.open_recipe_book()
    for raw in stdin:
        line = raw.rstrip("\n")
        if not line.startswith("/"):
            if not mod.panel.on_query_changed(line):
                out.write("(panel is closed, /toggle to open it)\n")
            continue

        command, _, argument = line[1:].partition(" ")
        command = command.lower()
        if command == "quit":
            break
        if command == "close":
            mod.panel.close()
        elif command == "key":
            mod.on_key(argument.strip() or None)
        elif command == "click":
            renderer.click_result(_row_index(argument))
        elif command == "device":
            renderer.click_device(_row_index(argument))
        elif command == "toggle":
            mod.open_recipe_book()
        elif not mod.commands.dispatch(line[1:]):
            out.write(f"Unknown command: {command}\n")
        LOGGER.debug("Panel is now %s", mod.panel.state.value)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--json", type=Path, help="Catalog dump in JSON format")
    source.add_argument("--xml", type=Path, nargs="+", help="Host item XML files")
    source.add_argument("--url", help="Download a JSON catalog dump from this URL")
    parser.add_argument("--settings", type=Path, help="Optional settings JSON document")
    parser.add_argument("--query", help="Print the ranked matches for this query and exit")
    parser.add_argument("--timeout", type=float, default=30.0, help="HTTP timeout in seconds")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s")

    try:
        settings = load_settings(args.settings)
        catalog = load_catalog(args)
    except (CatalogError, SettingsError) as exc:
        LOGGER.error("%s", exc)
        return 1

    renderer = TextRenderer(sys.stdout)
    mod = RecipeBookMod(lambda: catalog, renderer, settings=settings, commands=CommandRegistry())
    mod.initialize()
    mod.on_load_completed()
    if mod.last_report is not None and mod.last_report.skipped:
        LOGGER.info("%d recipe definitions were skipped", len(mod.last_report.skipped))

    if args.query is not None:
        print_ranked(mod, args.query, sys.stdout)
    else:
        interactive(mod, renderer, sys.stdin, sys.stdout)

    mod.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
