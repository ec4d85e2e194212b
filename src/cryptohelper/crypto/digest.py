"""Process-wide artifact digest and SHA-256 helpers."""
from __future__ import annotations

import base64
import hashlib
import os
from dataclasses import dataclass

from ..errors import StartupError
from ..utils.logging import get_logger

DIGEST_SIZE = 32

log = get_logger(__name__)


def sha256_b64(data: bytes) -> str:
    return base64.b64encode(hashlib.sha256(data).digest()).decode()


@dataclass(frozen=True)
class ArtifactDigest:
    """Opaque 32-byte payload signed by every generation call.

    The bytes are random and do not fingerprint any real artifact.
    """

    value: bytes

    def __post_init__(self):
        if not isinstance(self.value, (bytes, bytearray)):
            raise TypeError("artifact digest must be bytes")
        if len(self.value) != DIGEST_SIZE:
            raise ValueError(f"artifact digest must be {DIGEST_SIZE} bytes, got {len(self.value)}")
        object.__setattr__(self, "value", bytes(self.value))

    @classmethod
    def generate(cls) -> "ArtifactDigest":
        return cls(os.urandom(DIGEST_SIZE))

    def hex(self) -> str:
        return self.value.hex()


def initialize_artifact_digest() -> ArtifactDigest:
    log.info("Generating a single, random artifact hash for the service...")
    try:
        digest = ArtifactDigest.generate()
    except (OSError, NotImplementedError) as e:
        raise StartupError(f"Could not generate the global artifact hash: {e}") from e
    log.info(f"Global artifact hash generated and cached: {digest.hex()}")
    return digest


__all__ = ["ArtifactDigest", "DIGEST_SIZE", "initialize_artifact_digest", "sha256_b64"]
