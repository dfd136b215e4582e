from math import atan2, cos, radians, sin, sqrt
from typing import Iterable, List, Optional, Sequence

from safaiconnect.models.route import GeoPoint, Route, Task, TaskStatus

# Mean Earth radius in kilometers
EARTH_RADIUS_KM = 6371.0


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in km between two points. Non-finite input propagates as NaN."""
    d_lat = radians(b.lat - a.lat)
    d_lng = radians(b.lng - a.lng)
    h = sin(d_lat / 2) ** 2 + cos(radians(a.lat)) * cos(radians(b.lat)) * sin(d_lng / 2) ** 2
    c = 2 * atan2(sqrt(h), sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def routable_tasks(tasks: Iterable[Task]) -> List[Task]:
    return [t for t in tasks if t.location is not None and t.status != TaskStatus.COMPLETED]


def unmapped_tasks(tasks: Iterable[Task]) -> List[Task]:
    """Open tasks that cannot be placed on the route because they have no coordinates."""
    return [t for t in tasks if t.location is None and t.status != TaskStatus.COMPLETED]


def compute_route(origin: Optional[GeoPoint], tasks: Sequence[Task]) -> Route:
    """
    Order a worker's open tasks nearest-first from `origin`.

    Greedy by distance from the origin only, not a shortest-tour solution.
    Completed tasks and tasks without a location are dropped. With no origin the
    remaining tasks keep their input order and the polyline has no leading point.
    The sort is stable, so tasks at equal distance keep their input order.
    The input sequence is never mutated.
    """
    candidates = routable_tasks(tasks)

    if origin is None:
        ordered = candidates
        polyline = [t.location for t in ordered]
    else:
        ordered = sorted(candidates, key=lambda t: haversine_km(origin, t.location))
        polyline = [origin] + [t.location for t in ordered]

    return Route(origin=origin, ordered_tasks=tuple(ordered), polyline=tuple(polyline))


def distances_from_origin(route: Route) -> List[Optional[float]]:
    if route.origin is None:
        return [None] * len(route.ordered_tasks)
    return [haversine_km(route.origin, t.location) for t in route.ordered_tasks]


def route_length_km(route: Route) -> float:
    # sum of straight legs along the polyline
    points = route.polyline
    return sum((haversine_km(points[i], points[i + 1]) for i in range(len(points) - 1)), 0.0)
