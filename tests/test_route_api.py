import pytest
from fastapi import status

from safaiconnect.config import settings
from safaiconnect.dependencies.position import get_position_source
from safaiconnect.main import app
from safaiconnect.services.position import PositionUnavailable

ROUTE_BODY = {
    "origin": {"lat": 19.0760, "lng": 72.8777},
    "tasks": [
        {"id": "B", "status": "ASSIGNED", "lat": 18.5362, "lng": 73.8942, "title": "Blocked drain", "category": "drainage"},
        {"id": "A", "status": "IN_PROGRESS", "lat": 19.1136, "lng": 72.8697, "title": "Overflowing bin", "address": "Andheri East"},
        {"id": "C", "status": "COMPLETED", "lat": 19.0800, "lng": 72.8800},
        {"id": "D", "status": "ASSIGNED", "title": "Garbage dump", "address": "Near bus depot"},
    ],
}


def _denied_source(point):
    async def provider():
        raise PositionUnavailable("Location access denied")
    return provider

def _broken_source(point):
    async def provider():
        raise RuntimeError("sensor bridge crashed")
    return provider


@pytest.mark.asyncio
async def test_route_sorted_from_worker_position(client):
    response = await client.post("/api/v1/route", json=ROUTE_BODY)
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["distance_sorted"] is True
    assert [s["id"] for s in body["stops"]] == ["A", "B"]
    assert [s["order"] for s in body["stops"]] == [1, 2]
    assert body["stops"][0]["address"] == "Andheri East"
    assert body["stops"][0]["distance_km"] == pytest.approx(4.3)
    assert body["polyline"][0] == {"lat": 19.0760, "lng": 72.8777}
    assert len(body["polyline"]) == 3
    assert body["unmapped_task_count"] == 1
    assert body["total_distance_km"] > body["stops"][1]["distance_km"]

@pytest.mark.asyncio
async def test_route_without_origin_keeps_order(client):
    response = await client.post("/api/v1/route", json={"tasks": ROUTE_BODY["tasks"]})
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["origin"] is None
    assert body["distance_sorted"] is False
    assert [s["id"] for s in body["stops"]] == ["B", "A"]
    assert all(s["distance_km"] is None for s in body["stops"])
    assert len(body["polyline"]) == 2

@pytest.mark.asyncio
async def test_route_empty_task_list(client):
    response = await client.post("/api/v1/route", json={"origin": ROUTE_BODY["origin"], "tasks": []})
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["stops"] == []
    assert body["polyline"] == [ROUTE_BODY["origin"]]
    assert body["total_distance_km"] == 0.0

@pytest.mark.asyncio
async def test_route_position_denied_falls_back_to_input_order(client):
    app.dependency_overrides[get_position_source] = lambda: _denied_source
    response = await client.post("/api/v1/route", json=ROUTE_BODY)
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["distance_sorted"] is False
    assert [s["id"] for s in body["stops"]] == ["B", "A"]

@pytest.mark.asyncio
async def test_route_unexpected_failure(client):
    app.dependency_overrides[get_position_source] = lambda: _broken_source
    response = await client.post("/api/v1/route", json=ROUTE_BODY)
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["detail"] == "Route computation failed"

@pytest.mark.asyncio
async def test_route_duplicate_task_ids(client):
    tasks = [ROUTE_BODY["tasks"][0], ROUTE_BODY["tasks"][0]]
    response = await client.post("/api/v1/route", json={"tasks": tasks})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "Duplicate task ids: B" in response.json()["detail"]

@pytest.mark.asyncio
async def test_route_too_many_tasks(client, monkeypatch):
    monkeypatch.setattr(settings, "MAX_TASKS", 1)
    response = await client.post("/api/v1/route", json=ROUTE_BODY)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "At most 1 tasks" in response.json()["detail"]

@pytest.mark.asyncio
async def test_route_rejects_half_coordinates(client):
    tasks = [{"id": "E", "status": "ASSIGNED", "lat": 19.1}]
    response = await client.post("/api/v1/route", json={"tasks": tasks})
    assert response.status_code == 422

@pytest.mark.asyncio
async def test_route_rejects_out_of_range_origin(client):
    response = await client.post("/api/v1/route", json={"origin": {"lat": 91, "lng": 0}, "tasks": []})
    assert response.status_code == 422

@pytest.mark.asyncio
async def test_route_rejects_unknown_status(client):
    tasks = [{"id": "F", "status": "CANCELLED", "lat": 19.1, "lng": 72.9}]
    response = await client.post("/api/v1/route", json={"tasks": tasks})
    assert response.status_code == 422

@pytest.mark.asyncio
async def test_route_map_preview(client):
    response = await client.post("/api/v1/route/map", json=ROUTE_BODY)
    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"].startswith("text/html")
    assert "L.polyline" in response.text
    assert "Overflowing bin" in response.text
    assert "4.3 km away" in response.text
    assert "#3b82f6" in response.text

@pytest.mark.asyncio
async def test_route_map_preview_escapes_script_close(client):
    tasks = [{"id": "G", "status": "ASSIGNED", "lat": 19.1, "lng": 72.9, "title": "</script><b>x</b>"}]
    response = await client.post("/api/v1/route/map", json={"tasks": tasks})
    assert response.status_code == status.HTTP_200_OK
    assert "<\\/script><b>x<\\/b>" in response.text

@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/api/v1/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "ok"}
