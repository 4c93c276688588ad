from typing import Optional

from fastapi import Depends, Header, Request

from app.core.security import parse_bearer
from app.services.authenticator import SignatureAuthenticator


def get_registry(request: Request):
    return request.app.state.nonce_registry


def get_authenticator(request: Request) -> SignatureAuthenticator:
    return request.app.state.authenticator


def get_current_address(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    authenticator: SignatureAuthenticator = Depends(get_authenticator),
) -> str:
    """Wallet address carried by the bearer token on this request."""
    return authenticator.authenticate(parse_bearer(authorization))
