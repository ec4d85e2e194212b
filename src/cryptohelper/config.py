from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from .errors import ConfigError

load_dotenv()


class HelperConfig(BaseModel):
    tsa_url: str = ""
    host: str = "0.0.0.0"
    port: int = 8080
    # None means no client-side timeout on the outbound TSA call
    tsa_timeout_s: Optional[float] = None


def load_config() -> HelperConfig:
    timeout = os.getenv("TSA_TIMEOUT_SECONDS", "").strip()
    return HelperConfig(
        tsa_url=os.getenv("TSA_URL", "").strip(),
        host=os.getenv("HELPER_HOST", "0.0.0.0"),
        port=int(os.getenv("HELPER_PORT", "8080")),
        tsa_timeout_s=float(timeout) if timeout else None,
    )


def require_tsa_url(cfg: HelperConfig) -> str:
    if not cfg.tsa_url:
        raise ConfigError("TSA_URL environment variable not set")
    return cfg.tsa_url
