"""Plugin entry point wiring the recipe book into a host.

The host drives the lifecycle::

    mod = RecipeBookMod(source_factory, renderer)
    mod.initialize()          # plugin constructed
    mod.on_load_completed()   # content loaded: collect, build panel, add command
    ...
    mod.on_key("F6")          # from the host's input polling
    mod.on_update()           # every frame
    mod.dispose()             # plugin unloaded

The hotkey, both console aliases and the fabricator button all end up in
:meth:`RecipeBookMod.open_recipe_book`, which toggles the panel.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence, Tuple

from recipe_book.collector import RecipeCollector
from recipe_book.commands import CommandRegistry, ConsoleCommand
from recipe_book.config import RecipeBookSettings
from recipe_book.datasources.catalog import RecordSource
from recipe_book.fabricator_button import ButtonHost, FabricatorButtonHook
from recipe_book.models import CollectionReport, RecipeEntry
from recipe_book.panel import PanelController, Renderer

logger = logging.getLogger(__name__)

SourceFactory = Callable[[], RecordSource]


class RecipeBookMod:
    def __init__(
        self,
        source_factory: SourceFactory,
        renderer: Renderer,
        *,
        settings: Optional[RecipeBookSettings] = None,
        commands: Optional[CommandRegistry] = None,
        button_host: Optional[ButtonHost] = None,
    ) -> None:
        self.settings = settings or RecipeBookSettings()
        self.source_factory = source_factory
        self.commands = commands
        self.panel = PanelController(renderer, collect=self.collect_recipes, settings=self.settings)
        self.button_hook: Optional[FabricatorButtonHook] = None
        if button_host is not None:
            self.button_hook = FabricatorButtonHook(
                button_host, self.open_recipe_book, label=self.settings.button_label
            )
        self.last_report: Optional[CollectionReport] = None
        self._command: Optional[ConsoleCommand] = None

    # ------------------------------------------------------------------
    # Host lifecycle
    # ------------------------------------------------------------------
    def initialize(self) -> None:
        self._command = ConsoleCommand(
            names=self.settings.joined_command_names,
            help=self.settings.command_help,
            action=self._on_console_command,
        )

    def on_load_completed(self) -> None:
        if self._command is None:
            self.initialize()
        self.panel.initialize(self.collect_recipes())
        self._register_console_command()

    def dispose(self) -> None:
        if self.commands is not None and self._command is not None:
            self.commands.unregister(self._command)
        self.panel.dispose()
        self.last_report = None

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------
    def open_recipe_book(self) -> bool:
        """Toggle the panel, initializing it first when needed."""

        return self.panel.toggle()

    def on_key(self, key: Optional[str], *, text_input_focused: bool = False) -> bool:
        return self.panel.on_key_event(key, text_input_focused=text_input_focused)

    def on_update(self) -> None:
        self.panel.add_to_update_list()

    def on_fabricator_gui_created(self, screen: Any) -> bool:
        if self.button_hook is None:
            return False
        return self.button_hook.postfix(screen)

    # ------------------------------------------------------------------
    # Recipes
    # ------------------------------------------------------------------
    def collect_recipes(self) -> Tuple[RecipeEntry, ...]:
        try:
            source = self.source_factory()
        except Exception as exc:
            logger.error("Recipe source is not available: %s", exc, exc_info=True)
            return ()
        collector = RecipeCollector(generic_device_label=self.settings.generic_device_label)
        self.last_report = collector.collect(source)
        return self.last_report.entries

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _on_console_command(self, args: Sequence[str]) -> None:
        self.open_recipe_book()

    def _register_console_command(self) -> None:
        if self.commands is None or self._command is None:
            return
        if self.commands.get(self._command.aliases[0]) is self._command:
            return
        try:
            self.commands.register(self._command)
        except Exception as exc:
            logger.error("Registering console command '%s' failed: %s", self._command.names, exc)


__all__ = ["RecipeBookMod", "SourceFactory"]
