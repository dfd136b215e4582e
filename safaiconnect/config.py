from typing import List

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["https://*.vercel.app", "https://*.web.app"]
    # Matches the browser geolocation timeout used by the worker dashboard
    GEOLOCATION_TIMEOUT_S: float = 8.0
    DISTANCE_DECIMALS: int = 1
    MAX_TASKS: int = 500
    # Route map preview
    MAP_TILE_URL: str = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
    MAP_DEFAULT_CENTER_LAT: float = 20.5937
    MAP_DEFAULT_CENTER_LNG: float = 78.9629
    MAP_DEFAULT_ZOOM: int = 5
    MAP_FIT_MAX_ZOOM: int = 14
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
