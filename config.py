from __future__ import annotations
import os
from pydantic import BaseModel

class Settings(BaseModel):
    log_level: str = os.getenv("BMP_LOG_LEVEL", "INFO")
    window_width: int = int(os.getenv("BMP_VIEWER_WIDTH", "700"))
    window_height: int = int(os.getenv("BMP_VIEWER_HEIGHT", "400"))
    default_brightness: int = int(os.getenv("BMP_VIEWER_BRIGHTNESS", "100"))  # percent
settings = Settings()
