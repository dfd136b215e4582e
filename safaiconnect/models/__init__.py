from .route import GeoPoint, Route, Task, TaskStatus

__all__ = ["GeoPoint", "Route", "Task", "TaskStatus"]
