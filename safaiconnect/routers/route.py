from typing import List, Tuple

from fastapi import APIRouter, Depends, HTTPException, status
from structlog import get_logger

from safaiconnect.config import settings
from safaiconnect.dependencies.position import PositionSource, get_position_source
from safaiconnect.models.route import Route, Task
from safaiconnect.schemas.route import GeoPointOut, RouteRequest, RouteResponse, RouteStop
from safaiconnect.services.position import plan_route
from safaiconnect.services.route import distances_from_origin, route_length_km, unmapped_tasks

logger = get_logger()
router = APIRouter(prefix="/api/v1", tags=["route"])


def _round_km(value: float) -> float:
    return round(value, settings.DISTANCE_DECIMALS)


def validated_tasks(req: RouteRequest) -> List[Task]:
    if len(req.tasks) > settings.MAX_TASKS:
        logger.warning("Too many tasks in route request", task_count=len(req.tasks), max_tasks=settings.MAX_TASKS)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"At most {settings.MAX_TASKS} tasks can be routed at once",
        )

    seen = set()
    duplicates = set()
    for t in req.tasks:
        if t.id in seen:
            duplicates.add(t.id)
        seen.add(t.id)
    if duplicates:
        logger.warning("Duplicate task ids in route request", duplicates=sorted(duplicates))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Duplicate task ids: {', '.join(sorted(duplicates))}",
        )

    return [t.to_task() for t in req.tasks]


async def build_route(req: RouteRequest, position_source: PositionSource) -> Tuple[Route, List[Task]]:
    tasks = validated_tasks(req)
    origin = req.origin.to_point() if req.origin else None
    try:
        route = await plan_route(tasks, position_source(origin))
    except Exception as e:
        logger.error("Route computation failed", task_count=len(tasks), error=str(e), exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Route computation failed")
    return route, tasks


def to_response(route: Route, tasks: List[Task]) -> RouteResponse:
    distances = distances_from_origin(route)
    stops = [
        RouteStop(
            order=i + 1,
            id=t.id,
            title=t.title,
            category=t.category,
            address=t.address,
            status=t.status,
            lat=t.location.lat,
            lng=t.location.lng,
            distance_km=_round_km(d) if d is not None else None,
        )
        for i, (t, d) in enumerate(zip(route.ordered_tasks, distances))
    ]
    return RouteResponse(
        origin=GeoPointOut(lat=route.origin.lat, lng=route.origin.lng) if route.origin else None,
        distance_sorted=route.distance_sorted,
        stops=stops,
        polyline=[GeoPointOut(lat=p.lat, lng=p.lng) for p in route.polyline],
        total_distance_km=_round_km(route_length_km(route)),
        unmapped_task_count=len(unmapped_tasks(tasks)),
    )


@router.post("/route", response_model=RouteResponse)
async def compute_worker_route(req: RouteRequest, position_source: PositionSource = Depends(get_position_source)):
    logger.info("Received route request", task_count=len(req.tasks), has_origin=req.origin is not None)
    route, tasks = await build_route(req, position_source)
    return to_response(route, tasks)
