"""Ephemeral ECDSA P-256 signing material for the demo signing workflow.

Each call to ``SigningGenerator.generate`` creates a fresh keypair, signs the
fixed identity string (proof of possession) and signs the process artifact
digest. Only the public key and signatures leave this module.
"""
from __future__ import annotations

import base64
import threading
from typing import Optional

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed

from ..errors import GenerationError, SigningCancelled
from ..models import CryptoComponents
from ..utils.logging import get_logger
from .digest import ArtifactDigest

IDENTITY = "jdoe@redhat.com"

STEP_KEYGEN = "creating ECDSA key"
STEP_MARSHAL = "marshalling public key"
STEP_IDENTITY = "signing email address"
STEP_ARTIFACT = "signing artifact hash"

log = get_logger(__name__)


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode()


def _check_cancelled(cancel: Optional[threading.Event], step: str) -> None:
    if cancel is not None and cancel.is_set():
        raise SigningCancelled(step)


class SigningGenerator:
    def __init__(self, artifact_digest: ArtifactDigest, identity: str = IDENTITY) -> None:
        self.artifact_digest = artifact_digest
        self.identity = identity

    def generate(self, cancel: Optional[threading.Event] = None) -> CryptoComponents:
        """Build one set of signing material.

        ``cancel`` is checked before key generation and around the identity
        signature; a set event aborts with ``SigningCancelled``.
        """
        _check_cancelled(cancel, STEP_KEYGEN)
        try:
            private_key = ec.generate_private_key(ec.SECP256R1())
        except Exception as e:
            raise GenerationError(STEP_KEYGEN, e) from e

        try:
            pub_der = private_key.public_key().public_bytes(
                encoding=serialization.Encoding.DER,
                format=serialization.PublicFormat.SubjectPublicKeyInfo,
            )
        except Exception as e:
            raise GenerationError(STEP_MARSHAL, e) from e

        # proof of possession
        _check_cancelled(cancel, STEP_IDENTITY)
        try:
            identity_sig = private_key.sign(self.identity.encode(), ec.ECDSA(hashes.SHA256()))
        except Exception as e:
            raise GenerationError(STEP_IDENTITY, e) from e
        _check_cancelled(cancel, STEP_IDENTITY)

        log.debug(f"Using the global artifact hash: {self.artifact_digest.hex()}")
        # digest is signed as-is; OpenSSL draws a fresh random k per signature
        try:
            artifact_sig = private_key.sign(
                self.artifact_digest.value, ec.ECDSA(Prehashed(hashes.SHA256()))
            )
        except Exception as e:
            raise GenerationError(STEP_ARTIFACT, e) from e

        return CryptoComponents(
            public_key_base64=_b64(pub_der),
            signed_email_address=_b64(identity_sig),
            artifact_hash=self.artifact_digest.hex(),
            artifact_signature=_b64(artifact_sig),
        )


__all__ = ["IDENTITY", "SigningGenerator"]
