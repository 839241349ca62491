"""
Debounced place autocomplete.

Every keystroke restarts the timer; only the last input within the debounce
window reaches the geocoder, and only the response for the latest input is
kept.
"""

import asyncio
from typing import Awaitable, Callable, Generic, Optional, TypeVar

import structlog

from babui.exceptions import ExternalServiceError
from babui.services.geocoding import GeocodingClient, Place

logger = structlog.get_logger()

T = TypeVar("T")


class Debouncer(Generic[T]):
    """Runs `func(value)` once input has been quiet for `delay` seconds."""

    def __init__(self, delay: float, func: Callable[[str], Awaitable[T]]):
        self.delay = delay
        self.func = func
        self._task: Optional[asyncio.Task] = None

    def trigger(self, value: str) -> asyncio.Task:
        self.cancel()
        self._task = asyncio.create_task(self._run(value))
        return self._task

    async def _run(self, value: str) -> T:
        await asyncio.sleep(self.delay)
        return await self.func(value)

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()


class PlaceAutocomplete:
    """Suggestion state for one search box."""

    def __init__(self, geocoder: GeocodingClient, delay: float = 0.4, min_length: int = 2):
        self.geocoder = geocoder
        self.min_length = min_length
        self.query = ""
        self.suggestions: list[Place] = []
        self.error: Optional[str] = None
        self._closed = False
        self._debouncer: Debouncer[None] = Debouncer(delay, self._lookup)

    def update(self, text: str) -> Optional[asyncio.Task]:
        """Record a keystroke; returns the pending lookup, if one was scheduled."""
        if self._closed:
            return None
        self.query = text
        if len(text.strip()) < self.min_length:
            self._debouncer.cancel()
            self.suggestions = []
            return None
        return self._debouncer.trigger(text)

    async def _lookup(self, text: str) -> None:
        try:
            places = await self.geocoder.search(text)
        except ExternalServiceError as e:
            if not self._closed and text == self.query:
                self.error = str(e)
                self.suggestions = []
            return

        if self._closed or text != self.query:
            logger.debug("Dropped stale suggestions", query=text)
            return
        self.error = None
        self.suggestions = places

    def close(self) -> None:
        self._closed = True
        self._debouncer.cancel()
