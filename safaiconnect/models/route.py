from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


@dataclass(frozen=True)
class GeoPoint:
    """
    A WGS-84 coordinate in decimal degrees.
    Ranges are documented (lat in [-90, 90], lng in [-180, 180]) but not enforced here;
    the producer of the value is responsible for validating it.
    """

    lat: float
    lng: float


class TaskStatus(str, Enum):
    ASSIGNED = "ASSIGNED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


@dataclass(frozen=True)
class Task:
    """One field assignment a worker may have to visit."""

    id: str
    status: TaskStatus
    location: Optional[GeoPoint] = None  # tasks without coordinates cannot be ranked
    title: str = ""
    category: str = ""
    address: str = ""  # free-text location label entered with the complaint


@dataclass(frozen=True)
class Route:
    """
    Visiting order for a worker, nearest first from `origin`.
    `polyline` is origin (when known) followed by each task location in order.
    Derived on demand, never stored.
    """

    origin: Optional[GeoPoint]
    ordered_tasks: Tuple[Task, ...]
    polyline: Tuple[GeoPoint, ...]

    @property
    def distance_sorted(self) -> bool:
        return self.origin is not None
