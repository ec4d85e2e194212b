"""Local verification of generated signing material."""
from __future__ import annotations

import base64
import binascii
from typing import Any, Mapping, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed

from ..models import CryptoComponents
from .generator import IDENTITY


def verify_components(components: Union[CryptoComponents, Mapping[str, Any]], identity: str = IDENTITY) -> bool:
    """Return True when both signatures verify against the embedded public key.

    Accepts the model or the JSON body returned by ``/generate-payloads``.
    """
    if not isinstance(components, CryptoComponents):
        components = CryptoComponents.model_validate(components)
    try:
        pub = serialization.load_der_public_key(base64.b64decode(components.public_key_base64))
        digest = bytes.fromhex(components.artifact_hash)
        identity_sig = base64.b64decode(components.signed_email_address)
        artifact_sig = base64.b64decode(components.artifact_signature)
    except (ValueError, binascii.Error):
        return False
    if not isinstance(pub, ec.EllipticCurvePublicKey):
        return False
    try:
        pub.verify(identity_sig, identity.encode(), ec.ECDSA(hashes.SHA256()))
        pub.verify(artifact_sig, digest, ec.ECDSA(Prehashed(hashes.SHA256())))
    except (InvalidSignature, ValueError):
        return False
    return True


__all__ = ["verify_components"]
