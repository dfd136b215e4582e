import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from safaiconnect.main import app
from safaiconnect.models.route import GeoPoint, Task, TaskStatus

MUMBAI = GeoPoint(lat=19.0760, lng=72.8777)
ANDHERI = GeoPoint(lat=19.1136, lng=72.8697)
PUNE = GeoPoint(lat=18.5362, lng=73.8942)

@pytest.fixture
def mumbai_tasks():
    return [
        Task(id="A", status=TaskStatus.ASSIGNED, location=ANDHERI, title="Overflowing bin"),
        Task(id="B", status=TaskStatus.ASSIGNED, location=PUNE, title="Blocked drain"),
    ]

@pytest_asyncio.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides = {}
