from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from safaiconnect.routers import route
from safaiconnect.routers import map_preview
from safaiconnect.routers import health
from safaiconnect.core.logging import setup_logging
from safaiconnect.config import settings

app = FastAPI(title="SafaiConnect Worker Route Service")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(route.router)
app.include_router(map_preview.router)
app.include_router(health.router)

@app.on_event("startup")
async def startup_event():
    setup_logging()
