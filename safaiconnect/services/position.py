import asyncio
from typing import Awaitable, Callable, Optional, Sequence

from structlog import get_logger

from safaiconnect.config import settings
from safaiconnect.models.route import GeoPoint, Route, Task
from safaiconnect.services.route import compute_route

logger = get_logger()

PositionProvider = Callable[[], Awaitable[Optional[GeoPoint]]]


class PositionUnavailable(Exception):
    """Raised by a position provider when the device position cannot be read (permission denied, no GPS)."""


def fixed_position(point: Optional[GeoPoint]) -> PositionProvider:
    async def provider() -> Optional[GeoPoint]:
        return point
    return provider


async def resolve_origin(provider: PositionProvider, timeout_s: Optional[float] = None) -> Optional[GeoPoint]:
    """
    Ask `provider` for the worker's current position.
    A timeout or PositionUnavailable yields None so the caller can fall back to an
    unsorted route. Anything else the provider raises propagates.
    """
    if timeout_s is None:
        timeout_s = settings.GEOLOCATION_TIMEOUT_S
    try:
        return await asyncio.wait_for(provider(), timeout=timeout_s)
    except asyncio.TimeoutError:
        logger.warning("Position lookup timed out; route will not be distance sorted", timeout_s=timeout_s)
    except PositionUnavailable as e:
        logger.warning("Position unavailable; route will not be distance sorted", reason=str(e))
    return None


async def plan_route(tasks: Sequence[Task], provider: PositionProvider, timeout_s: Optional[float] = None) -> Route:
    origin = await resolve_origin(provider, timeout_s)
    route = compute_route(origin, tasks)
    logger.info(
        "Route planned",
        task_count=len(tasks),
        stop_count=len(route.ordered_tasks),
        distance_sorted=route.distance_sorted,
    )
    return route
