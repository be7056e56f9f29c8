import httpx
import logging
import math
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from ..config import Config
from ..models import Prediction, Stop

logger = logging.getLogger(__name__)


class MBTAAPIError(Exception):
    """Raised when the MBTA API is unreachable or returns an unusable response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def seconds_until(target: datetime, now: Optional[datetime] = None) -> int:
    """Whole seconds from now until target; negative if target has passed."""
    if now is None:
        now = datetime.now(timezone.utc)
    return math.floor((target - now).total_seconds())


def _parse_time(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _relationship_id(item: Dict, name: str) -> Optional[str]:
    related = (item.get("relationships") or {}).get(name) or {}
    data = related.get("data") or {}
    return data.get("id")


def parse_stop(item: Dict) -> Stop:
    """Build a Stop from a JSON:API stop resource."""
    attrs = item.get("attributes", {})
    latitude = attrs.get("latitude")
    longitude = attrs.get("longitude")
    if latitude is None or longitude is None:
        raise MBTAAPIError(f"Stop {item.get('id')} has no coordinates")

    return Stop(
        id=item["id"],
        name=attrs.get("name") or item["id"],
        latitude=float(latitude),
        longitude=float(longitude),
    )


def parse_prediction(item: Dict) -> Prediction:
    """Build a Prediction from a JSON:API prediction resource."""
    attrs = item.get("attributes", {})
    return Prediction(
        id=item["id"],
        stop_id=_relationship_id(item, "stop"),
        route_id=_relationship_id(item, "route"),
        direction_id=attrs.get("direction_id"),
        arrival_time=_parse_time(attrs.get("arrival_time")),
        departure_time=_parse_time(attrs.get("departure_time")),
        status=attrs.get("status"),
    )


class MBTAClient:
    """
    Client for the MBTA V3 API: the transit data the confidence core consumes.
    Stop lookups are cached briefly; predictions are always fetched fresh.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        cache_ttl: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_key = api_key
        self.base_url = base_url or Config.MBTA_BASE_URL
        self.timeout = timeout if timeout is not None else Config.MBTA_TIMEOUT_SECONDS
        self.cache_ttl = cache_ttl if cache_ttl is not None else Config.STOP_CACHE_TTL_SECONDS
        self.headers = {"Accept": "application/vnd.api+json"}
        if api_key:
            self.headers["x-api-key"] = api_key
        self._transport = transport

        # {cache_key: (data, timestamp)}
        self._cache: Dict[str, Tuple[Any, float]] = {}

    def _get_cache_key(self, endpoint: str, params: Dict) -> str:
        param_str = "&".join(f"{k}={v}" for k, v in sorted(params.items()))
        return f"{endpoint}?{param_str}"

    def _get_from_cache(self, cache_key: str) -> Optional[Any]:
        entry = self._cache.get(cache_key)
        if entry is None:
            return None
        data, timestamp = entry
        if (time.time() - timestamp) < self.cache_ttl:
            return data
        del self._cache[cache_key]
        return None

    async def _get(self, endpoint: str, params: Optional[Dict] = None, use_cache: bool = True) -> Dict:
        """
        GET an API endpoint, translating transport and HTTP failures into MBTAAPIError.
        """
        if params is None:
            params = {}

        cache_key = self._get_cache_key(endpoint, params)
        if use_cache:
            cached = self._get_from_cache(cache_key)
            if cached is not None:
                return cached

        url = f"{self.base_url}{endpoint}"
        logger.debug("GET %s %s", url, params)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, params=params, headers=self.headers)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning("MBTA API returned %s for %s", status, endpoint)
            if status == 403:
                raise MBTAAPIError("MBTA API authentication failed. Check your API key.", status) from e
            elif status == 429:
                raise MBTAAPIError("MBTA API rate limit exceeded. Please wait before retrying.", status) from e
            raise MBTAAPIError(f"MBTA API error: {status}", status) from e
        except httpx.TimeoutException as e:
            logger.warning("MBTA API request timed out: %s", endpoint)
            raise MBTAAPIError("MBTA API request timed out") from e
        except httpx.HTTPError as e:
            logger.warning("MBTA API unreachable: %s", e)
            raise MBTAAPIError(f"MBTA API unreachable: {e}") from e

        if use_cache:
            self._cache[cache_key] = (data, time.time())
        return data

    async def get_stop(self, stop_id: str) -> Stop:
        data = await self._get(f"/stops/{stop_id}")
        return parse_stop(data["data"])

    async def get_stops(self, route_id: Optional[str] = None) -> List[Stop]:
        """
        Fetch stops, optionally filtered by route.

        Stops without coordinates are skipped.
        """
        params = {}
        if route_id:
            params["filter[route]"] = route_id

        data = await self._get("/stops", params)
        return self._parse_stops(data)

    async def get_stops_near(
        self,
        latitude: float,
        longitude: float,
        radius: float = 0.01
    ) -> List[Stop]:
        """
        Fetch stops within radius (degrees, ~0.01 = 0.69 mi) of a location,
        nearest first.
        """
        params = {
            "filter[latitude]": latitude,
            "filter[longitude]": longitude,
            "filter[radius]": radius,
            "sort": "distance",
        }
        data = await self._get("/stops", params)
        return self._parse_stops(data)

    def _parse_stops(self, data: Dict) -> List[Stop]:
        stops = []
        for item in data.get("data", []):
            try:
                stops.append(parse_stop(item))
            except MBTAAPIError as e:
                logger.warning("Skipping stop: %s", e)
        return stops

    async def get_predictions(
        self,
        stop_id: str,
        route_id: Optional[str] = None,
        direction_id: Optional[int] = None,
        limit: int = 10
    ) -> List[Prediction]:
        """
        Get real-time predictions for a stop, soonest first.

        Predictions carrying neither an arrival nor a departure time are dropped.
        """
        params = {
            "filter[stop]": stop_id,
            "sort": "arrival_time",
            "page[limit]": str(limit),
        }
        if route_id:
            params["filter[route]"] = route_id
        if direction_id is not None:
            params["filter[direction_id]"] = str(direction_id)

        data = await self._get("/predictions", params, use_cache=False)

        predictions = [parse_prediction(item) for item in data.get("data", [])]
        predictions = [p for p in predictions if p.best_time is not None]
        predictions.sort(key=lambda p: p.best_time)
        return predictions

    async def get_next_prediction(
        self,
        stop_id: str,
        route_id: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> Optional[Prediction]:
        """First upcoming prediction at a stop, or None if nothing is coming."""
        if now is None:
            now = datetime.now(timezone.utc)

        for prediction in await self.get_predictions(stop_id, route_id):
            if prediction.best_time >= now:
                return prediction
        return None
