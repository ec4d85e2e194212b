import dataclasses

import pytest

from cryptohelper.crypto.digest import (
    DIGEST_SIZE,
    ArtifactDigest,
    initialize_artifact_digest,
    sha256_b64,
)
from cryptohelper.errors import StartupError


def test_generate_is_32_random_bytes():
    a = ArtifactDigest.generate()
    b = ArtifactDigest.generate()
    assert len(a.value) == DIGEST_SIZE == 32
    assert a != b
    assert a.hex() == a.value.hex()


def test_rejects_wrong_length():
    with pytest.raises(ValueError):
        ArtifactDigest(b"\x00" * 31)
    with pytest.raises(ValueError):
        ArtifactDigest(b"\x00" * 33)


def test_is_immutable():
    d = ArtifactDigest(bytes(range(32)))
    with pytest.raises(dataclasses.FrozenInstanceError):
        d.value = b"\x01" * 32


def test_initialize_fails_fatally_without_random_source(monkeypatch):
    def no_entropy(n):
        raise NotImplementedError("no random source")

    monkeypatch.setattr("cryptohelper.crypto.digest.os.urandom", no_entropy)
    with pytest.raises(StartupError) as exc:
        initialize_artifact_digest()
    assert "artifact hash" in str(exc.value)


def test_sha256_b64_known_vector():
    # sha256("abc")
    assert sha256_b64(b"abc") == "ungWv48Bz+pBQUDeXa4iI7ADYaOWF3qctBD/YfIAFa0="
