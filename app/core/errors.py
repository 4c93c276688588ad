"""
Authentication error taxonomy.

Every failure the nonce/verify/credential flow can produce is one of these.
They carry their own HTTP status and a stable machine-readable code, and are
rendered by the handler installed with register_exception_handlers().
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AuthError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "auth_error"
    default_message: str = "authentication error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingInput(AuthError):
    code = "missing_input"
    default_message = "missing input"


class InvalidAddress(AuthError):
    code = "invalid_address"
    default_message = "invalid address"


class NonceNotFound(AuthError):
    code = "nonce_not_found"
    default_message = "nonce not found; request a new nonce"


class SignatureMismatch(AuthError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "signature_mismatch"
    default_message = "signature verification failed"


class VerificationError(AuthError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "verification_error"
    default_message = "server error verifying signature"


class InvalidCredential(AuthError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "invalid_credential"
    default_message = "invalid token"


class CredentialExpired(AuthError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "credential_expired"
    default_message = "token expired"


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    logger.debug("%s %s -> %s (%s)", request.method, request.url.path, exc.status_code, exc.code)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "code": exc.code},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report unparseable or wrongly typed bodies as a 400 in the same shape."""
    if any(tuple(err.get("loc", ()))[-1:] == ("address",) for err in exc.errors()):
        error: AuthError = InvalidAddress()
    else:
        error = MissingInput("invalid request body")
    return await auth_error_handler(request, error)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthError, auth_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
