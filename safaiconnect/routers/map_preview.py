import json

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from safaiconnect.config import settings
from safaiconnect.dependencies.position import PositionSource, get_position_source
from safaiconnect.models.route import Route, TaskStatus
from safaiconnect.routers.route import build_route
from safaiconnect.schemas.route import RouteRequest
from safaiconnect.services.route import distances_from_origin

router = APIRouter(prefix="/api/v1", tags=["map"], include_in_schema=True)

STATUS_COLORS = {
    TaskStatus.ASSIGNED: "#f59e0b",
    TaskStatus.IN_PROGRESS: "#3b82f6",
    TaskStatus.COMPLETED: "#10b981",
}
DEFAULT_COLOR = "#6b7280"


def _route_payload(route: Route) -> dict:
    stops = []
    for i, (task, dist) in enumerate(zip(route.ordered_tasks, distances_from_origin(route))):
        stops.append({
            "order": i + 1,
            "title": task.title or task.id,
            "address": task.address,
            "lat": task.location.lat,
            "lng": task.location.lng,
            "color": STATUS_COLORS.get(task.status, DEFAULT_COLOR),
            "distance": f"{dist:.{settings.DISTANCE_DECIMALS}f} km away" if dist is not None else None,
        })
    return {
        "origin": [route.origin.lat, route.origin.lng] if route.origin else None,
        "stops": stops,
        "path": [[p.lat, p.lng] for p in route.polyline],
    }


def _html_page(payload: dict) -> str:
    data = json.dumps(payload).replace("</", "<\\/")
    return f"""
<!DOCTYPE html>
<html>
<head>
  <meta charset=\"utf-8\" />
  <meta name=\"viewport\" content=\"width=device-width, initial-scale=1.0\" />
  <title>Worker Route</title>
  <link rel=\"stylesheet\" href=\"https://unpkg.com/leaflet@1.9.4/dist/leaflet.css\" crossorigin=\"\" />
  <style>html, body, #map {{ height: 100%; margin: 0; }}</style>
</head>
<body>
<div id=\"map\"></div>
<script src=\"https://unpkg.com/leaflet@1.9.4/dist/leaflet.js\" crossorigin=\"\"></script>
<script>
  const route = {data};
  const map = L.map('map').setView([{settings.MAP_DEFAULT_CENTER_LAT}, {settings.MAP_DEFAULT_CENTER_LNG}], {settings.MAP_DEFAULT_ZOOM});
  L.tileLayer('{settings.MAP_TILE_URL}', {{
    maxZoom: 19,
    attribution: '&copy; OpenStreetMap contributors'
  }}).addTo(map);

  const esc = s => String(s).replace(/[&<>"']/g, c => ({{'&': '&amp;', '<': '&lt;', '>': '&gt;', '"': '&quot;', "'": '&#39;'}})[c]);

  if (route.origin) {{
    L.circleMarker(route.origin, {{ radius: 10, color: '#10b981', fillColor: '#10b981', fillOpacity: 0.9 }})
      .bindPopup('Your Location').addTo(map);
  }}
  route.stops.forEach(stop => {{
    const icon = L.divIcon({{
      html: `<div style="background:${{stop.color}};color:white;width:28px;height:28px;border-radius:50%;display:flex;align-items:center;justify-content:center;font-weight:700;font-size:13px;border:2px solid white;box-shadow:0 2px 6px rgba(0,0,0,0.3)">${{stop.order}}</div>`,
      className: '',
      iconSize: [28, 28],
      iconAnchor: [14, 14]
    }});
    let popup = `<strong>${{stop.order}}. ${{esc(stop.title)}}</strong><br/><small>${{esc(stop.address)}}</small>`;
    if (stop.distance) popup += `<br/><small>${{stop.distance}}</small>`;
    L.marker([stop.lat, stop.lng], {{ icon }}).bindPopup(popup).addTo(map);
  }});
  if (route.path.length > 1) {{
    L.polyline(route.path, {{ color: '#10b981', weight: 3, dashArray: '8, 8', opacity: 0.7 }}).addTo(map);
    map.fitBounds(L.latLngBounds(route.path), {{ padding: [40, 40], maxZoom: {settings.MAP_FIT_MAX_ZOOM} }});
  }} else if (route.path.length === 1) {{
    map.setView(route.path[0], {settings.MAP_FIT_MAX_ZOOM});
  }}
</script>
</body>
</html>
"""


@router.post("/route/map", response_class=HTMLResponse)
async def route_map_preview(req: RouteRequest, position_source: PositionSource = Depends(get_position_source)):
    """
    HTML page drawing the worker position, numbered stops coloured by status and the route polyline.
    """
    route, _ = await build_route(req, position_source)
    return HTMLResponse(content=_html_page(_route_payload(route)))
