"""Inject a "Recipe Book" button into the host's fabricator screen.

The host calls :meth:`FabricatorButtonHook.postfix` after it has built the
fabricator GUI.  Building widgets may trigger the host's GUI callbacks, which
can call the hook again on the same thread, so the hook is protected by a
process-wide flag.  A lock would deadlock on that same-thread re-entry.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, Protocol

logger = logging.getLogger(__name__)

# The padded frame of an unmodified fabricator screen holds a label and the inner area.
CANONICAL_CHILD_COUNT = 2


class ButtonHost(Protocol):
    """Host adapter giving access to the fabricator screen layout."""

    def content_child_count(self, screen: Any) -> Optional[int]:
        """Children of the screen's padded frame, ``None`` when there is no frame."""

    def insert_button(self, screen: Any, label: str, on_click: Callable[[], None]) -> None:
        ...


class ReentrancyGuard:
    """Single-thread re-entrancy guard built on a plain flag."""

    def __init__(self) -> None:
        self.active = False

    @contextmanager
    def hold(self) -> Iterator[bool]:
        """Yield ``True`` when entered for the first time, ``False`` on re-entry."""

        if self.active:
            yield False
            return
        self.active = True
        try:
            yield True
        finally:
            self.active = False


INJECTION_GUARD = ReentrancyGuard()


class FabricatorButtonHook:
    def __init__(
        self,
        host: ButtonHost,
        on_click: Callable[[], None],
        *,
        label: str = "Recipe Book",
        guard: ReentrancyGuard = INJECTION_GUARD,
    ) -> None:
        self.host = host
        self.on_click = on_click
        self.label = label
        self.guard = guard

    def postfix(self, screen: Any) -> bool:
        """Add the button to ``screen``; returns whether it was inserted."""

        if screen is None:
            return False
        with self.guard.hold() as entered:
            if not entered:
                logger.debug("Fabricator button hook re-entered, skipping")
                return False
            try:
                count = self.host.content_child_count(screen)
                if count != CANONICAL_CHILD_COUNT:
                    # editor and modded screens use a different layout
                    return False
                self.host.insert_button(screen, self.label, self.on_click)
            except Exception as exc:
                logger.warning("Adding the recipe book button failed: %s", exc, exc_info=True)
                return False
        return True


__all__ = [
    "CANONICAL_CHILD_COUNT",
    "INJECTION_GUARD",
    "ButtonHost",
    "FabricatorButtonHook",
    "ReentrancyGuard",
]
