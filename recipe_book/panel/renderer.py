"""Renderer boundary of the panel plus a plain-text implementation.

Real hosts bind :class:`Renderer` to their widget toolkit.  The
:class:`TextRenderer` writes the panel to a text stream and is what the
command-line browser uses.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Protocol, Sequence, TextIO

from .view import PanelView, RowView

logger = logging.getLogger(__name__)

QueryCallback = Callable[[str], None]


class RenderSurfaceUnavailable(RuntimeError):
    """Raised when the host has no surface to draw the panel on yet."""


class Renderer(Protocol):
    def build(self, on_query_changed: QueryCallback) -> None:
        """Construct the (hidden) panel; raise :class:`RenderSurfaceUnavailable` if impossible."""

    def show(self, view: PanelView) -> None:
        """Replace the whole row set with ``view`` and make the panel visible."""

    def hide(self) -> None:
        ...

    def attach(self) -> None:
        """Keep the panel in the host's per-frame update list."""

    def destroy(self) -> None:
        ...


class TextRenderer:
    """Render the panel as an aligned text table."""

    def __init__(self, stream: Optional[TextIO], *, max_column_width: int = 48) -> None:
        self.stream = stream
        self.max_column_width = max_column_width
        self.visible = False
        self.rows: Sequence[RowView] = ()
        self._on_query_changed: Optional[QueryCallback] = None

    # ------------------------------------------------------------------
    # Renderer protocol
    # ------------------------------------------------------------------
    def build(self, on_query_changed: QueryCallback) -> None:
        if self.stream is None:
            raise RenderSurfaceUnavailable("no output stream to render on")
        self._on_query_changed = on_query_changed
        self.visible = False
        self.rows = ()

    def show(self, view: PanelView) -> None:
        if self.stream is None:
            raise RenderSurfaceUnavailable("no output stream to render on")
        self.rows = tuple(view.rows)
        self.visible = True
        self.stream.write(self.format(view))
        self.stream.flush()

    def hide(self) -> None:
        self.visible = False

    def attach(self) -> None:
        # Text output needs no per-frame registration.
        return None

    def destroy(self) -> None:
        self.visible = False
        self.rows = ()
        self._on_query_changed = None

    # ------------------------------------------------------------------
    # Click-to-filter shortcuts
    # ------------------------------------------------------------------
    def click_result(self, index: int) -> bool:
        row = self._row(index)
        return row is not None and self._emit(row.result_label)

    def click_device(self, index: int) -> bool:
        row = self._row(index)
        return row is not None and self._emit(row.device_label)

    def choose_ingredient(self, index: int, name: str) -> bool:
        row = self._row(index)
        if row is None or not row.has_ingredient_menu or name not in row.ingredient_names:
            return False
        return self._emit(name)

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------
    def format(self, view: PanelView) -> str:
        lines: List[str] = [f"== {view.title} ==", f"Search: {view.query}"]
        table = [list(view.columns)]
        for number, row in enumerate(view.rows, start=1):
            result = row.result_label or row.result_id
            table.append([f"{number:>3}. {result}", row.ingredients_label, row.device_label])
        if len(table) == 1:
            lines.append("(no matching recipes)")
            return "\n".join(lines) + "\n"

        widths = [
            min(self.max_column_width, max(len(cells[column]) for cells in table))
            for column in range(len(view.columns))
        ]
        for cells in table:
            padded = [self._clip(cell, width).ljust(width) for cell, width in zip(cells, widths)]
            lines.append(" | ".join(padded).rstrip())
        return "\n".join(lines) + "\n"

    @staticmethod
    def _clip(text: str, width: int) -> str:
        if len(text) <= width:
            return text
        return text[: max(width - 1, 0)] + "…"

    def _row(self, index: int) -> Optional[RowView]:
        if not self.visible or index < 0 or index >= len(self.rows):
            return None
        return self.rows[index]

    def _emit(self, text: str) -> bool:
        if self._on_query_changed is None or not text:
            return False
        self._on_query_changed(text)
        return True


__all__ = ["QueryCallback", "RenderSurfaceUnavailable", "Renderer", "TextRenderer"]
