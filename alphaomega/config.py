from pydantic import field_validator
from pydantic_settings import BaseSettings
import os

# Fixed timing of the pipeline, not exposed as settings
SAMPLING_INTERVAL_MS = 30_000
DEBOUNCE_MS = 5_000

MIN_REGION_SIDE = 50
SENSITIVITY_MIN = 10
SENSITIVITY_MAX = 50
SENSITIVITY_STEP = 5
DEFAULT_SENSITIVITY = 30


class Settings(BaseSettings):
    api_key: str | None = os.getenv("API_KEY")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # read from SENSITIVITY by pydantic-settings
    sensitivity: int = DEFAULT_SENSITIVITY
    # camera | screen | image
    capture_backend: str = os.getenv("CAPTURE_BACKEND", "camera")
    capture_device: str = os.getenv("CAPTURE_DEVICE", "0")
    capture_image: str | None = os.getenv("CAPTURE_IMAGE")
    history_limit: int = int(os.getenv("HISTORY_LIMIT", 300))

    @field_validator("sensitivity")
    @classmethod
    def _sensitivity_step(cls, v: int) -> int:
        if not SENSITIVITY_MIN <= v <= SENSITIVITY_MAX or (v - SENSITIVITY_MIN) % SENSITIVITY_STEP:
            raise ValueError(
                f"SENSITIVITY must be {SENSITIVITY_MIN}..{SENSITIVITY_MAX} in steps of {SENSITIVITY_STEP}, got {v}")
        return v

settings = Settings()
