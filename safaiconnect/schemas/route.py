from typing import List, Optional

from pydantic import BaseModel, Field, confloat, model_validator

from safaiconnect.models.route import GeoPoint, Task, TaskStatus


class GeoPointIn(BaseModel):
    lat: confloat(ge=-90, le=90)
    lng: confloat(ge=-180, le=180)

    def to_point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lng=self.lng)


class TaskIn(BaseModel):
    id: str = Field(..., min_length=1)
    status: TaskStatus
    lat: Optional[confloat(ge=-90, le=90)] = None
    lng: Optional[confloat(ge=-180, le=180)] = None
    title: str = ""
    category: str = ""
    address: str = Field("", description="Free-text location label from the complaint")

    @model_validator(mode="after")
    def check_coordinate_pair(self):
        if (self.lat is None) != (self.lng is None):
            raise ValueError("lat and lng must be given together")
        return self

    def to_task(self) -> Task:
        location = GeoPoint(lat=self.lat, lng=self.lng) if self.lat is not None else None
        return Task(
            id=self.id,
            status=self.status,
            location=location,
            title=self.title,
            category=self.category,
            address=self.address,
        )


class RouteRequest(BaseModel):
    origin: Optional[GeoPointIn] = Field(None, description="Worker position; omit when geolocation is unavailable")
    tasks: List[TaskIn] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "origin": {"lat": 19.0760, "lng": 72.8777},
                "tasks": [
                    {"id": "A", "status": "ASSIGNED", "lat": 19.1136, "lng": 72.8697, "title": "Overflowing bin"},
                    {"id": "B", "status": "IN_PROGRESS", "lat": 18.5362, "lng": 73.8942, "title": "Blocked drain"},
                    {"id": "C", "status": "ASSIGNED", "title": "Garbage dump", "address": "Near bus depot"},
                ]
            }
        }


class GeoPointOut(BaseModel):
    lat: float
    lng: float


class RouteStop(BaseModel):
    order: int = Field(..., description="1-based visiting position")
    id: str
    title: str
    category: str
    address: str
    status: TaskStatus
    lat: float
    lng: float
    distance_km: Optional[float] = Field(None, description="Straight-line distance from the worker, when the position is known")


class RouteResponse(BaseModel):
    origin: Optional[GeoPointOut]
    distance_sorted: bool
    stops: List[RouteStop]
    polyline: List[GeoPointOut]
    total_distance_km: float
    unmapped_task_count: int
