"""
Incremental pagination over the filtered result list.

The results region emits a ReachedEnd event when its end becomes visible.
Each event grows the rendered window by one page, at most once until the
window is rendered again.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Sequence, TypeVar

from coursefinder.config import PAGE_SIZE

log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ReachedEnd:
    """The end of a scroll region became visible."""

    region: "ScrollRegion"


Listener = Callable[[ReachedEnd], None]


class ScrollRegion:
    """
    Rendering-agnostic stand-in for the scrollable results area.

    A UI (or a test) calls reach_end() when the end sentinel becomes
    visible; subscribers receive a ReachedEnd event.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self.scroll_top = 0
        self.torn_down = False

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that deregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def reach_end(self) -> None:
        if self.torn_down:
            return
        event = ReachedEnd(self)
        for listener in list(self._listeners):
            listener(event)

    def scroll_to_top(self) -> None:
        self.scroll_top = 0

    def teardown(self) -> None:
        self._listeners.clear()
        self.torn_down = True


class PaginationController:
    """
    Fixed-size, growing window over a result list.

    last_page = ceil(total / page_size). advance() moves one page forward
    and disarms itself until current_window() renders the new window, so
    repeated signals before a re-render cannot skip pages.
    """

    def __init__(self, page_size: int = PAGE_SIZE) -> None:
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self.page_size = page_size
        self.page = 1
        self.total = 0
        self._armed = True

    @property
    def last_page(self) -> int:
        return math.ceil(self.total / self.page_size)

    @property
    def extent(self) -> int:
        return min(self.page * self.page_size, self.total)

    def resize(self, total: int) -> None:
        """
        Track the size of the filtered view. A view that shrinks below the
        current window resets to page 1.
        """
        if self.page > 1 and total < self.extent:
            log.debug("Result set shrank to %d, back to page 1", total)
            self.reset()
        self.total = total

    def reset(self) -> None:
        self.page = 1
        self._armed = True

    def advance(self) -> bool:
        """Move to min(last_page, page + 1). Returns True if the page changed."""
        if not self._armed:
            return False

        target = max(1, min(self.last_page, self.page + 1))
        if target == self.page:
            return False

        self.page = target
        self._armed = False
        return True

    def on_reached_end(self, _event: ReachedEnd) -> None:
        self.advance()

    def current_window(self, view: Sequence[T]) -> Sequence[T]:
        """First page * page_size elements of view."""
        self.resize(len(view))
        self._armed = True
        return view[: self.page * self.page_size]

    def current_page(self, view: Sequence[T]) -> Sequence[T]:
        """Only the elements the current page added to the window."""
        return view[(self.page - 1) * self.page_size : self.page * self.page_size]
