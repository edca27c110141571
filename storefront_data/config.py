from __future__ import annotations
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

DEFAULT_POSTGREST_URL = "http://postgrest:3000"


def optional_float(raw: str | None) -> float | None:
    return float(raw) if raw else None


@dataclass(frozen=True)
class Settings:
    postgrest_url: str = os.getenv("POSTGREST_URL") or DEFAULT_POSTGREST_URL
    postgrest_api_key: str | None = os.getenv("POSTGREST_API_KEY") or None
    # unset -> httpx default deadline
    request_timeout: float | None = optional_float(os.getenv("POSTGREST_TIMEOUT"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

CFG = Settings()
