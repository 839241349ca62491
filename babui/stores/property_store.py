"""
Property store: the session's source of truth for fetched listings.

A fetch replaces the whole collection. Each fetch is tagged with a
generation number and only the most recently issued one may write, so a
slow response can never overwrite a newer one. After `close()` (the owning
view went away) no response writes at all.
"""

import asyncio
from typing import Optional

import structlog

from babui.db.mapping import rows_to_properties
from babui.db.repository import PropertyRepository
from babui.exceptions import BackendError
from babui.models.property import Property
from babui.search.filters import Filters
from babui.search.matcher import filter_properties, properties_near

logger = structlog.get_logger()


class PropertyStore:
    """In-memory property collection backed by the properties table."""

    def __init__(self, repository: PropertyRepository):
        self.repository = repository
        self.properties: list[Property] = []
        self.my_properties: list[Property] = []
        self.loading = False
        self.error: Optional[str] = None
        self._index: dict[str, Property] = {}
        self._generation = 0
        self._closed = False

    # ──────────────────────────────────────────────
    # Fetching
    # ──────────────────────────────────────────────

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    def _replace(self, properties: list[Property]) -> None:
        self.properties = properties
        self._index = {p.id: p for p in properties}

    async def fetch(self, filters: Filters | None = None) -> Optional[list[Property]]:
        """
        Fetch matching properties and replace the collection.

        Returns the new collection, or None when the response was discarded
        because a newer fetch was issued or the store was closed.

        Raises:
            BackendError: If the current fetch fails. The previous
                collection is left untouched and `error` is set.
        """
        filters = filters or Filters()
        self._generation += 1
        generation = self._generation
        self.loading = True
        self.error = None

        try:
            rows = await asyncio.to_thread(self.repository.search, filters)
        except BackendError as e:
            if not self._is_current(generation):
                logger.debug("Discarded failed stale fetch", generation=generation)
                return None
            self.loading = False
            self.error = str(e)
            logger.error("Property fetch failed", error=str(e))
            raise

        if not self._is_current(generation):
            logger.debug("Discarded stale fetch", generation=generation, latest=self._generation)
            return None

        result = filter_properties(rows_to_properties(rows), filters)
        self._replace(result)
        self.loading = False
        logger.info("Fetched properties", count=len(result), generation=generation)
        return result

    async def fetch_my_properties(self, user_id: Optional[str]) -> list[Property]:
        """Fetch the listings owned by a user; no user clears the list."""
        if not user_id:
            self.my_properties = []
            return []

        try:
            rows = await asyncio.to_thread(self.repository.list_by_owner, user_id)
        except BackendError as e:
            self.error = str(e)
            self.my_properties = []
            raise

        if self._closed:
            return []
        self.my_properties = rows_to_properties(rows)
        return self.my_properties

    def close(self) -> None:
        """Detach the store; in-flight responses are dropped."""
        self._closed = True
        self.loading = False

    # ──────────────────────────────────────────────
    # Lookups
    # ──────────────────────────────────────────────

    def get_by_id(self, property_id: str) -> Optional[Property]:
        return self._index.get(str(property_id))

    def search(self, filters: Filters | None = None) -> list[Property]:
        """Filter the cached collection without a backend call."""
        return filter_properties(self.properties, filters)

    def near(self, lat: float, lng: float, radius_km: float = 5.0) -> list[Property]:
        return properties_near(self.properties, lat, lng, radius_km)

    # ──────────────────────────────────────────────
    # Local (optimistic) updates
    # ──────────────────────────────────────────────

    def add(self, prop: Property) -> None:
        self._replace([*self.properties, prop])

    def update(self, property_id: str, **changes) -> Optional[Property]:
        current = self.get_by_id(property_id)
        if current is None:
            return None
        updated = current.model_copy(update=changes)
        self._replace([updated if p.id == current.id else p for p in self.properties])
        return updated

    def remove(self, property_id: str) -> None:
        self._replace([p for p in self.properties if p.id != str(property_id)])
