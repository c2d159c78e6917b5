"""
Highlight Applier.

Owns the set of highlight marks in one editor. Every request clears all
previous marks, runs the locator on the editor's current content, marks
every returned range, moves the caret without auto-scrolling, and then
scrolls the host container a few times after short delays so the target
line survives late layout shifts. A newer request cancels the pending
scroll attempts of the previous one.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, List, Optional, Protocol, Sequence

from rdf_termlocator.config import ScrollConfig
from rdf_termlocator.locator import Locator
from rdf_termlocator.models import (
    HighlightRequest,
    LocateResult,
    Position,
    PrefixTable,
    Quad,
    Range,
    SerializationFormat,
)

logger = logging.getLogger(__name__)


class Mark(Protocol):
    def clear(self) -> None: ...


class EditorAdapter(Protocol):
    """What the applier needs from a text editor widget."""

    def get_value(self) -> str: ...

    def mark_range(self, rng: Range) -> Mark: ...

    def set_cursor(self, position: Position) -> None:
        """Move the caret without scrolling the editor."""
        ...

    def line_top(self, position: Position) -> float:
        """Vertical pixel offset of ``position`` from the editor's top."""
        ...

    def set_container_scroll(self, top: float) -> None:
        """Scroll the host container (not the editor itself)."""
        ...


class ScheduledTask(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask: ...


class ThreadingScheduler:
    """Runs callbacks on ``threading.Timer`` threads."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class ScrollToken:
    """
    Single-owner token for pending scroll attempts.

    Issuing a new token invalidates the previous one and cancels every
    task scheduled under it.
    """

    def __init__(self):
        self._generation = 0
        self._tasks: List[ScheduledTask] = []
        self._lock = threading.RLock()

    @property
    def generation(self) -> int:
        return self._generation

    def renew(self) -> int:
        with self._lock:
            for task in self._tasks:
                task.cancel()
            self._tasks = []
            self._generation += 1
            return self._generation

    def track(self, task: ScheduledTask) -> None:
        with self._lock:
            self._tasks.append(task)

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def run_if_current(self, generation: int, callback: Callable[[], None]) -> bool:
        """
        Run ``callback`` only while ``generation`` is current.

        The check and the call hold the token lock, so a concurrent
        :meth:`renew` cannot slip in between them.
        """
        with self._lock:
            if generation != self._generation:
                return False
            callback()
            return True

    @property
    def pending(self) -> int:
        return len(self._tasks)


class HighlightApplier:
    """
    Applies locate results to an editor.

    Args:
        editor: Editor adapter
        locator: Locator used by :meth:`highlight`
        scheduler: Deferred-call scheduler for scroll attempts
        config: Scroll configuration
    """

    def __init__(
        self,
        editor: EditorAdapter,
        locator: Optional[Locator] = None,
        scheduler: Optional[Scheduler] = None,
        config: Optional[ScrollConfig] = None,
    ):
        self.editor = editor
        self.locator = locator or Locator()
        self.scheduler = scheduler or ThreadingScheduler()
        self.config = config or self.locator.config.scroll
        self._marks: List[Any] = []
        self._token = ScrollToken()
        self.target: Optional[Position] = None

    @property
    def marks(self) -> Sequence[Any]:
        return tuple(self._marks)

    def clear(self) -> None:
        """Remove every mark this applier created."""
        for mark in self._marks:
            mark.clear()
        self._marks = []

    def highlight(
        self,
        request: Optional[HighlightRequest],
        quads: Optional[Sequence[Quad]] = None,
        prefixes: Optional[PrefixTable] = None,
        format: Optional[SerializationFormat] = None,
    ) -> LocateResult:
        """Clear, locate against the editor's current text, then apply."""
        self.clear()
        self._token.renew()
        if request is None or not request.term:
            return LocateResult()
        result = self.locator.locate(
            request,
            self.editor.get_value(),
            quads=quads,
            prefixes=prefixes,
            format=format,
        )
        self.apply(result)
        return result

    def apply(self, result: LocateResult) -> Optional[Position]:
        """
        Mark ``result``'s ranges and schedule scrolling.

        Returns:
            The caret target (first range, else the context anchor), or
            None when there is nothing to show
        """
        self.clear()
        generation = self._token.renew()

        for rng in result.ranges:
            self._marks.append(self.editor.mark_range(rng))

        target = result.first
        self.target = target
        if target is None:
            return None

        self.editor.set_cursor(target)

        for delay_ms in self.config.retry_delays_ms:
            task = self.scheduler.call_later(
                delay_ms / 1000.0,
                lambda: self._scroll(generation, target),
            )
            self._token.track(task)
        return target

    def cancel_pending(self) -> None:
        self._token.renew()

    def scroll_target(self, position: Position) -> float:
        """Container scroll offset placing ``position`` below the header."""
        top = self.editor.line_top(position) - self.config.offset
        return max(0.0, top)

    def _scroll(self, generation: int, position: Position) -> None:
        applied = self._token.run_if_current(
            generation,
            lambda: self.editor.set_container_scroll(self.scroll_target(position)),
        )
        if not applied:
            logger.debug("Dropping stale scroll attempt")
