"""The recipe book panel: state machine, view model and renderers."""

from .controller import PanelController, PanelState
from .renderer import RenderSurfaceUnavailable, Renderer, TextRenderer
from .view import PanelView, RowView, build_view

__all__ = [
    "PanelController",
    "PanelState",
    "PanelView",
    "RenderSurfaceUnavailable",
    "Renderer",
    "RowView",
    "TextRenderer",
    "build_view",
]
