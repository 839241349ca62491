"""
Geocoding (Nominatim) and directions (OSRM) over HTTP.

Both services are single-attempt: a failure is reported to the caller and
the user retries by searching again.
"""

from typing import Any, Literal, Optional

import httpx
import structlog
from pydantic import BaseModel, Field

from babui.config import Settings, get_settings
from babui.exceptions import GeocodingError, RouteNotFoundError

logger = structlog.get_logger()

TravelMode = Literal["car", "bike", "walk"]

# OSRM profile names
OSRM_PROFILES: dict[str, str] = {
    "car": "driving",
    "bike": "cycling",
    "walk": "foot",
}


class Place(BaseModel):
    """One geocoder hit."""

    place_id: str
    display_name: str
    lat: float
    lon: float
    type: str = ""
    importance: float = 0.0


class Route(BaseModel):
    """Driving/cycling/walking route between two points."""

    mode: str
    distance: float = Field(description="meters")
    duration: float = Field(description="seconds")
    geometry: dict[str, Any] = Field(default_factory=dict)
    steps: list[dict[str, Any]] = Field(default_factory=list)


class GeocodingClient:
    """Async client for place search, reverse lookup and routing."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or get_settings()
        self.headers = {"User-Agent": self.settings.geocoder_user_agent}
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=self.headers,
            timeout=self.settings.http_timeout_seconds,
            transport=self._transport,
        )

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        try:
            async with self._client() as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Geocoding request failed", url=url, error=str(e))
            raise GeocodingError(f"Request to {url} failed: {e}") from e

    async def search(self, query: str, limit: int = 8) -> list[Place]:
        """Forward search; an empty query returns no places."""
        query = (query or "").strip()
        if not query:
            return []

        data = await self._get_json(
            f"{self.settings.nominatim_base_url}/search",
            params={
                "format": "json",
                "q": query,
                "countrycodes": self.settings.geocoder_country_codes,
                "limit": limit,
                "addressdetails": 1,
            },
        )

        places = []
        for item in data if isinstance(data, list) else []:
            try:
                places.append(
                    Place(
                        place_id=str(item["place_id"]),
                        display_name=item.get("display_name", ""),
                        lat=float(item["lat"]),
                        lon=float(item["lon"]),
                        type=item.get("type", ""),
                        importance=float(item.get("importance") or 0.0),
                    )
                )
            except (KeyError, TypeError, ValueError):
                continue

        logger.info("Geocoder search", query=query, results=len(places))
        return places

    async def reverse(self, lat: float, lng: float) -> Optional[str]:
        """Display name of the place at a coordinate, if the geocoder knows one."""
        data = await self._get_json(
            f"{self.settings.nominatim_base_url}/reverse",
            params={
                "format": "json",
                "lat": lat,
                "lon": lng,
                "zoom": 18,
                "addressdetails": 1,
            },
        )
        if not isinstance(data, dict):
            return None
        return data.get("display_name")

    async def route(
        self,
        origin: tuple[float, float],
        destination: tuple[float, float],
        mode: TravelMode = "car",
    ) -> Route:
        """
        Route between two (lat, lng) points.

        Raises:
            RouteNotFoundError: If the service has no route between the points
            GeocodingError: If the request fails
        """
        profile = OSRM_PROFILES.get(mode)
        if profile is None:
            raise ValueError(f"Unknown travel mode: {mode}")

        # OSRM takes lng,lat pairs
        start = f"{origin[1]},{origin[0]}"
        end = f"{destination[1]},{destination[0]}"
        data = await self._get_json(
            f"{self.settings.osrm_base_url}/route/v1/{profile}/{start};{end}",
            params={"overview": "full", "geometries": "geojson", "steps": "true"},
        )

        routes = data.get("routes") if isinstance(data, dict) else None
        if not routes:
            raise RouteNotFoundError("No route found.")

        best = routes[0]
        legs = best.get("legs") or [{}]
        return Route(
            mode=mode,
            distance=float(best.get("distance", 0)),
            duration=float(best.get("duration", 0)),
            geometry=best.get("geometry") or {},
            steps=legs[0].get("steps", []),
        )
