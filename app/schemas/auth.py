from typing import Optional

from pydantic import BaseModel


# Request fields are optional so a missing value surfaces as a 400
# "missing_input" error instead of a framework validation error.
class NonceRequest(BaseModel):
    address: Optional[str] = None


class NonceResponse(BaseModel):
    address: str
    nonce: str


class VerifyRequest(BaseModel):
    address: Optional[str] = None
    signature: Optional[str] = None


class VerifyResponse(BaseModel):
    success: bool = True
    token: str


class MeResponse(BaseModel):
    authenticated: bool = True
    address: str


class HealthResponse(BaseModel):
    ok: bool = True


class ErrorResponse(BaseModel):
    error: str
    code: str
