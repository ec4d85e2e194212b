"""Error taxonomy for the helper service.

Startup errors terminate the process; everything else maps to a single
HTTP status via ``status_code``.
"""
from __future__ import annotations


class CryptoHelperError(Exception):
    status_code = 500


class StartupError(CryptoHelperError):
    """Raised while the app is assembled; the process must not keep serving."""


class ConfigError(StartupError):
    pass


class GenerationError(CryptoHelperError):
    def __init__(self, step: str, cause: BaseException | str | None = None):
        self.step = step
        self.cause = cause
        msg = f"Error {step}"
        if cause is not None:
            msg = f"{msg}: {cause}"
        super().__init__(msg)


class SigningCancelled(GenerationError):
    def __init__(self, step: str):
        super().__init__(step, "request cancelled")


class TsaError(CryptoHelperError):
    pass


class TsaMarshalError(TsaError):
    pass


class TsaNetworkError(TsaError):
    pass


class TsaUpstreamError(TsaError):
    status_code = 502

    def __init__(self, upstream_status: int, body: str):
        self.upstream_status = upstream_status
        self.body = body
        super().__init__(f"TSA server returned non-OK status: {upstream_status}, Body: {body}")


__all__ = [
    "CryptoHelperError",
    "StartupError",
    "ConfigError",
    "GenerationError",
    "SigningCancelled",
    "TsaError",
    "TsaMarshalError",
    "TsaNetworkError",
    "TsaUpstreamError",
]
