"""
Module: editor.commands

Purpose:
    Keyboard shortcut routing. Handlers register against an interaction
    context and a shortcut with a priority; dispatch picks the highest
    priority handler for the current context. Each (context, shortcut) pair
    resolves to at most one handler.

Key Classes:
    - InteractionContext: What the user is interacting with
    - Shortcut: Recognised keyboard commands
    - CommandDispatcher: Priority-ordered registry

Key Functions:
    - context_for(): Interaction context of an EditorState
    - shortcut_for_key(): Map a key event to a Shortcut

Dependencies:
    - editor.state: EditorState

Used By:
    - editor.session
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

from .state import EditorState

logger = logging.getLogger(__name__)

Handler = Callable[[], Union[Any, Awaitable[Any]]]


class InteractionContext(str, Enum):
    TEXT_EDITING = "text_editing"
    ELEMENT_SELECTED = "element_selected"
    PAGE_SELECTED = "page_selected"
    NONE_SELECTED = "none_selected"


class Shortcut(str, Enum):
    COPY = "copy"
    PASTE = "paste"
    DELETE = "delete"
    LAYER_UP = "layer_up"
    LAYER_DOWN = "layer_down"


def context_for(state: EditorState) -> InteractionContext:
    """
    Interaction context of the current state.

    Text editing and focused inputs take precedence over selection.
    """
    if state.editing_element_id is not None or state.input_focused:
        return InteractionContext.TEXT_EDITING
    if state.selected_element_id is not None:
        return InteractionContext.ELEMENT_SELECTED
    if state.page_selected:
        return InteractionContext.PAGE_SELECTED
    return InteractionContext.NONE_SELECTED


def shortcut_for_key(key: str, *, ctrl: bool = False, meta: bool = False) -> Optional[Shortcut]:
    """
    Map a key event to a shortcut.

    Example:
        >>> shortcut_for_key("c", ctrl=True)
        <Shortcut.COPY: 'copy'>
    """
    modified = ctrl or meta
    lowered = key.lower()
    if modified and lowered == "c":
        return Shortcut.COPY
    if modified and lowered == "v":
        return Shortcut.PASTE
    if not modified and key in ("Delete", "Backspace"):
        return Shortcut.DELETE
    if not modified and key == "]":
        return Shortcut.LAYER_UP
    if not modified and key == "[":
        return Shortcut.LAYER_DOWN
    return None


@dataclass(order=True)
class _Registration:
    sort_key: Tuple[int, int]
    handler: Handler = field(compare=False)
    name: str = field(compare=False, default="")


class CommandDispatcher:
    """
    Priority-ordered shortcut registry.

    Example:
        >>> dispatcher = CommandDispatcher()
        >>> dispatcher.register(InteractionContext.ELEMENT_SELECTED, Shortcut.DELETE, handler)
        >>> await dispatcher.dispatch(InteractionContext.ELEMENT_SELECTED, Shortcut.DELETE)
        True
    """

    def __init__(self) -> None:
        self._handlers: Dict[Tuple[InteractionContext, Shortcut], List[_Registration]] = {}
        self._counter = 0

    def register(
        self,
        context: InteractionContext,
        shortcut: Shortcut,
        handler: Handler,
        *,
        priority: int = 0,
        name: str = "",
    ) -> Callable[[], None]:
        """
        Register a handler; returns a function that unregisters it.

        Among equal priorities the most recent registration wins.
        """
        self._counter += 1
        registration = _Registration((-priority, -self._counter), handler, name)
        entries = self._handlers.setdefault((context, shortcut), [])
        entries.append(registration)
        entries.sort()

        def unregister() -> None:
            if registration in entries:
                entries.remove(registration)

        return unregister

    def resolve(self, context: InteractionContext, shortcut: Shortcut) -> Optional[Handler]:
        entries = self._handlers.get((context, shortcut))
        return entries[0].handler if entries else None

    async def dispatch(self, context: InteractionContext, shortcut: Shortcut) -> bool:
        """
        Run the winning handler for (context, shortcut).

        Returns:
            True when a handler ran
        """
        handler = self.resolve(context, shortcut)
        if handler is None:
            logger.debug(f"No handler for {shortcut.value} in {context.value}")
            return False
        result = handler()
        if inspect.isawaitable(result):
            await result
        return True
