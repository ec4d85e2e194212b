"""Relay a caller-supplied signature to a Timestamp Authority.

The signature bytes are hashed with SHA-256, wrapped in a JSON TSA request
and POSTed once to the configured endpoint. The TSA reply is returned
verbatim; it is not parsed or validated here.
"""
from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Optional

import httpx

from ..crypto.digest import sha256_b64
from ..errors import ConfigError, TsaMarshalError, TsaNetworkError, TsaUpstreamError
from ..models import TsaRequest
from ..utils.logging import get_logger

TSA_OK_STATUSES = (200, 201)
TIMESTAMP_REPLY_MEDIA_TYPE = "application/timestamp-reply"

log = get_logger(__name__)


@dataclass(frozen=True)
class TsaReply:
    status_code: int
    content: bytes


def make_nonce() -> int:
    # replay distinguisher only; not a secret
    return random.Random(time.time_ns()).getrandbits(63)


class TimestampForwarder:
    def __init__(self, tsa_url: str, client: Optional[httpx.Client] = None, timeout_s: Optional[float] = None) -> None:
        if not tsa_url:
            raise ConfigError("TSA_URL environment variable not set")
        self.tsa_url = tsa_url
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=timeout_s)

    def build_request(self, signature: bytes) -> TsaRequest:
        return TsaRequest(
            artifact_hash=sha256_b64(signature),
            certificates=True,
            hash_algorithm="sha256",
            nonce=make_nonce(),
        )

    def forward(self, signature: bytes) -> TsaReply:
        tsa_request = self.build_request(signature)
        try:
            payload = tsa_request.model_dump_json(by_alias=True)
        except ValueError as e:
            raise TsaMarshalError(f"Error marshalling TSA request: {e}") from e

        try:
            resp = self.client.post(
                self.tsa_url,
                content=payload.encode(),
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            raise TsaNetworkError(f"TSA request failed (network error): {e}") from e

        if resp.status_code not in TSA_OK_STATUSES:
            raise TsaUpstreamError(resp.status_code, resp.text)
        log.debug(f"TSA replied {resp.status_code} with {len(resp.content)} bytes")
        return TsaReply(status_code=resp.status_code, content=resp.content)

    def close(self) -> None:
        if self._owns_client:
            self.client.close()


__all__ = ["TimestampForwarder", "TsaReply", "make_nonce", "TIMESTAMP_REPLY_MEDIA_TYPE"]
