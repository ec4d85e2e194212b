"""FastAPI assembly for the crypto helper service."""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI

from .config import HelperConfig, load_config, require_tsa_url
from .crypto.digest import initialize_artifact_digest
from .crypto.generator import SigningGenerator
from .routes import router
from .tsa.forwarder import TimestampForwarder
from .utils.logging import get_logger

log = get_logger(__name__)


def create_app(config: Optional[HelperConfig] = None, *, tsa_client: Optional[httpx.Client] = None) -> FastAPI:
    """Build the app; raises StartupError on fatal misconfiguration.

    The artifact digest is generated here, once, before any request can be
    served, and injected into the generator.
    """
    cfg = config or load_config()
    tsa_url = require_tsa_url(cfg)
    digest = initialize_artifact_digest()
    forwarder = TimestampForwarder(tsa_url, client=tsa_client, timeout_s=cfg.tsa_timeout_s)
    log.info(f"forwarding timestamp requests to {tsa_url}")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        forwarder.close()

    app = FastAPI(title="Crypto Helper", version="0.1.0", lifespan=lifespan)
    app.state.config = cfg
    app.state.artifact_digest = digest
    app.state.generator = SigningGenerator(digest)
    app.state.forwarder = forwarder
    app.include_router(router)
    return app
