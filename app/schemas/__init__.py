from .auth import (
    NonceRequest,
    NonceResponse,
    VerifyRequest,
    VerifyResponse,
    MeResponse,
    HealthResponse,
    ErrorResponse,
)

__all__ = [
    "NonceRequest",
    "NonceResponse",
    "VerifyRequest",
    "VerifyResponse",
    "MeResponse",
    "HealthResponse",
    "ErrorResponse",
]
