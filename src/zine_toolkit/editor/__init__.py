"""
Editor Package

Element and page stores, layering, pointer interaction, clipboard and
shortcut dispatch for the open document.

EditorSession lives in zine_toolkit.editor.session; it depends on the layout
and output packages, which themselves build on this one.
"""

from .config import EditorConfig
from .state import AllPagesForCapture, EditorState, RenderMode, SinglePage
from .layering import LayerDirection, move_layer, next_z_index, render_order
from .interaction import (
    CropSide,
    ResizeCorner,
    ResizeResult,
    TextEditSession,
    ZoomControl,
    canvas_delta,
    clamp_position,
    compute_crop,
    compute_resize,
)
from .commands import CommandDispatcher, InteractionContext, Shortcut, context_for

__all__ = [
    "EditorConfig",
    "AllPagesForCapture",
    "EditorState",
    "RenderMode",
    "SinglePage",
    "LayerDirection",
    "move_layer",
    "next_z_index",
    "render_order",
    "CropSide",
    "ResizeCorner",
    "ResizeResult",
    "TextEditSession",
    "ZoomControl",
    "canvas_delta",
    "clamp_position",
    "compute_crop",
    "compute_resize",
    "CommandDispatcher",
    "InteractionContext",
    "Shortcut",
    "context_for",
]
