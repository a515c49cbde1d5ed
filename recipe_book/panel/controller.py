"""Lifecycle of the recipe book panel.

The panel is a small state machine::

    UNINITIALIZED --initialize--> CLOSED <--open/close--> OPEN
          ^                                                 |
          +--------------------- dispose -------------------+

No public method raises.  Faults inside the renderer or the recipe source are
logged and the call degrades to doing nothing, which leaves the state as it
was so that the next user action retries.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence, Tuple

from recipe_book.config import RecipeBookSettings
from recipe_book.models import RecipeEntry
from recipe_book.ranking import rank

from .renderer import RenderSurfaceUnavailable, Renderer
from .view import build_view

logger = logging.getLogger(__name__)

EntryProvider = Callable[[], Iterable[RecipeEntry]]


class PanelState(str, Enum):
    """Visibility and construction state of the panel."""

    UNINITIALIZED = "uninitialized"
    CLOSED = "closed"
    OPEN = "open"


class PanelController:
    """Own the panel state and route user events to state transitions."""

    def __init__(
        self,
        renderer: Renderer,
        *,
        collect: Optional[EntryProvider] = None,
        settings: Optional[RecipeBookSettings] = None,
    ) -> None:
        self.renderer = renderer
        self.settings = settings or RecipeBookSettings()
        self._collect = collect
        self._state = PanelState.UNINITIALIZED
        self._entries: Optional[Tuple[RecipeEntry, ...]] = None
        self._query = ""
        self._visible: Tuple[RecipeEntry, ...] = ()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    @property
    def state(self) -> PanelState:
        return self._state

    @property
    def is_initialized(self) -> bool:
        return self._state is not PanelState.UNINITIALIZED

    @property
    def is_open(self) -> bool:
        return self._state is PanelState.OPEN

    @property
    def entries(self) -> Sequence[RecipeEntry]:
        return self._entries or ()

    @property
    def query(self) -> str:
        return self._query

    @property
    def visible_entries(self) -> Sequence[RecipeEntry]:
        """Entries shown by the last successful render."""

        return self._visible

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def initialize(self, entries: Optional[Iterable[RecipeEntry]]) -> bool:
        """Bind ``entries`` and build the hidden panel.

        Only the first successful call has an effect.  Returns whether the
        panel is initialized afterwards.
        """

        if self.is_initialized:
            logger.debug("Recipe book already initialized, ignoring new entry list")
            return True

        try:
            bound = tuple(entries or ())
            self.renderer.build(self.on_query_changed)
        except RenderSurfaceUnavailable as exc:
            logger.warning("Recipe book panel cannot be created yet: %s", exc)
            return False
        except Exception as exc:
            logger.warning("Recipe book panel construction failed: %s", exc, exc_info=True)
            return False

        self._entries = bound
        self._state = PanelState.CLOSED
        logger.debug("Recipe book initialized with %d entries", len(bound))
        return True

    def toggle(self) -> bool:
        """Open a closed panel or close an open one.

        An uninitialized panel first gathers fresh entries and initializes
        itself.  Returns whether a transition took place.
        """

        if not self._ensure_initialized():
            return False
        if self._state is PanelState.OPEN:
            return self.close()
        return self.open()

    def open(self) -> bool:
        if not self._ensure_initialized():
            return False
        if not self._render():
            return False
        self._state = PanelState.OPEN
        return True

    def close(self) -> bool:
        if self._state is not PanelState.OPEN:
            return False
        try:
            self.renderer.hide()
        except Exception as exc:
            logger.warning("Hiding the recipe book failed: %s", exc, exc_info=True)
        self._state = PanelState.CLOSED
        return True

    def dispose(self) -> None:
        """Release the panel and the entry list; the next toggle starts over."""

        if self.is_initialized:
            try:
                self.renderer.destroy()
            except Exception as exc:
                logger.warning("Destroying the recipe book panel failed: %s", exc, exc_info=True)
        self._entries = None
        self._visible = ()
        self._query = ""
        self._state = PanelState.UNINITIALIZED

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def on_query_changed(self, text: Optional[str]) -> bool:
        """Re-rank and re-render for the new search text while open."""

        if self._state is not PanelState.OPEN:
            return False
        query = text or ""
        if not self._render(query):
            return False
        self._query = query
        return True

    def on_key_event(self, key: Optional[str], *, text_input_focused: bool = False) -> bool:
        """Route a key press; returns whether it was consumed.

        Keys destined for a focused text field are never intercepted.  The
        toggle key always toggles; any other key closes an open panel.
        """

        if text_input_focused:
            return False
        if self._is_toggle_key(key):
            self.toggle()
            return True
        if self._state is PanelState.OPEN:
            return self.close()
        return False

    def add_to_update_list(self) -> None:
        """Per-frame hook keeping the panel registered with the host."""

        if not self.is_initialized:
            return
        try:
            self.renderer.attach()
        except Exception as exc:
            logger.warning("Attaching the recipe book panel failed: %s", exc)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _is_toggle_key(self, key: Optional[str]) -> bool:
        if key is None:
            return False
        return str(key).strip().lower() == self.settings.toggle_key.lower()

    def _ensure_initialized(self) -> bool:
        if self.is_initialized:
            return True
        if not self.initialize(self._gather()):
            logger.warning("Recipe book is not available yet; retry once the game screen is loaded")
            return False
        return True

    def _gather(self) -> Tuple[RecipeEntry, ...]:
        if self._collect is None:
            logger.warning("No recipe source configured, the recipe book will be empty")
            return ()
        try:
            return tuple(self._collect())
        except Exception as exc:
            logger.error("Gathering recipes failed: %s", exc, exc_info=True)
            return ()

    def _render(self, query: Optional[str] = None) -> bool:
        # Ranking completes before the render request is issued.
        if query is None:
            query = self._query
        try:
            ranked = rank(self.entries, query)
            view = build_view(self.settings.panel_title, query, ranked)
            self.renderer.show(view)
        except RenderSurfaceUnavailable as exc:
            logger.warning("Recipe book cannot be shown yet: %s", exc)
            return False
        except Exception as exc:
            logger.warning("Rendering the recipe book failed: %s", exc, exc_info=True)
            return False
        self._visible = ranked
        return True


__all__ = ["EntryProvider", "PanelController", "PanelState"]
