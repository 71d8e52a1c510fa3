"""
Search criteria state with debounced updates.

Typing into the query box or ticking checkboxes calls OptionStore.update()
many times in a row. Only the last call inside a quiet period is committed,
so the filter step runs once per pause instead of once per keystroke.

The context hint (clicked day/time cell) bypasses the debounce and is
applied immediately.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Generic, Optional, Protocol, TypeVar

from coursefinder.config import DEBOUNCE_SECONDS
from coursefinder.model import CRITERIA_FIELDS, SearchContext, SearchCriteria

log = logging.getLogger(__name__)

T = TypeVar("T")


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


CallLater = Callable[[float, Callable[[], None]], TimerHandle]


def _loop_call_later(delay: float, callback: Callable[[], None]) -> TimerHandle:
    return asyncio.get_running_loop().call_later(delay, callback)


class Debouncer(Generic[T]):
    """
    Delivers the last scheduled value after `delay` seconds without a new one.

    schedule() cancels the previous handle before arming a new one, so at
    most one commit happens per quiet period.
    """

    def __init__(
        self,
        callback: Callable[[T], None],
        delay: float = DEBOUNCE_SECONDS,
        call_later: Optional[CallLater] = None,
    ) -> None:
        self.callback = callback
        self.delay = delay
        self._call_later = call_later or _loop_call_later
        self._handle: Optional[TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, value: T) -> TimerHandle:
        self.cancel()
        self._handle = self._call_later(self.delay, lambda: self._fire(value))
        return self._handle

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, value: T) -> None:
        self._handle = None
        self.callback(value)


CommitListener = Callable[[SearchCriteria], None]


class OptionStore:
    """
    Holds the current SearchCriteria.

    update() goes through one shared debouncer: the last call wins across
    all fields. apply_context() is synchronous.
    """

    def __init__(
        self,
        criteria: Optional[SearchCriteria] = None,
        delay: float = DEBOUNCE_SECONDS,
        call_later: Optional[CallLater] = None,
    ) -> None:
        self.criteria = criteria if criteria is not None else SearchCriteria()
        self._listeners: list[CommitListener] = []
        self._debouncer: Debouncer[tuple[str, Any]] = Debouncer(self._commit, delay=delay, call_later=call_later)

    def on_commit(self, listener: CommitListener) -> None:
        self._listeners.append(listener)

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def update(self, name: str, value: Any) -> TimerHandle:
        """
        Schedule a change of one criteria field.
        """
        if name not in CRITERIA_FIELDS:
            raise ValueError(f"Unknown search field: {name!r}")
        return self._debouncer.schedule((name, value))

    def apply_context(self, context: Optional[SearchContext]) -> SearchCriteria:
        """
        Replace days/times with the context hint right away.
        """
        day = context.day if context else None
        time = context.time if context else None
        criteria = self.criteria.replace("days", [day] if day else []).replace("times", [time] if time else [])
        self._set(criteria)
        return criteria

    def cancel(self) -> None:
        self._debouncer.cancel()

    def _commit(self, change: tuple[str, Any]) -> None:
        name, value = change
        try:
            criteria = self.criteria.replace(name, value)
        except (TypeError, ValueError) as e:
            log.warning("Ignoring invalid value for %s: %r (%s)", name, value, e)
            return
        log.debug("Committing %s=%r", name, value)
        self._set(criteria)

    def _set(self, criteria: SearchCriteria) -> None:
        self.criteria = criteria
        for listener in self._listeners:
            listener(criteria)
