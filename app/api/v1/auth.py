from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.core.deps import get_authenticator, get_current_address, get_registry
from app.core.errors import MissingInput
from app.schemas.auth import (
    ErrorResponse,
    MeResponse,
    NonceRequest,
    NonceResponse,
    VerifyRequest,
    VerifyResponse,
)
from app.services.authenticator import SignatureAuthenticator

router = APIRouter()

BAD_REQUEST = {400: {"model": ErrorResponse}}
UNAUTHORIZED = {401: {"model": ErrorResponse}}
SERVER_ERROR = {500: {"model": ErrorResponse}}


def _issue(address: Optional[str], registry) -> NonceResponse:
    if not address:
        raise MissingInput("address required")
    challenge = registry.issue(address)
    return NonceResponse(address=challenge.address, nonce=challenge.text)


@router.get("/nonce", response_model=NonceResponse, responses=BAD_REQUEST)
def nonce_query(address: Optional[str] = Query(None), registry=Depends(get_registry)):
    return _issue(address, registry)


@router.post("/nonce", response_model=NonceResponse, responses=BAD_REQUEST)
def nonce_body(payload: Optional[NonceRequest] = None, registry=Depends(get_registry)):
    return _issue(payload.address if payload else None, registry)


@router.post(
    "/verify",
    response_model=VerifyResponse,
    responses={**BAD_REQUEST, **UNAUTHORIZED, **SERVER_ERROR},
)
def verify(
    payload: Optional[VerifyRequest] = None,
    authenticator: SignatureAuthenticator = Depends(get_authenticator),
):
    if payload is None or not payload.address or not payload.signature:
        raise MissingInput("address and signature required")

    credential = authenticator.verify(payload.address, payload.signature)
    return VerifyResponse(token=credential.token)


@router.get("/me", response_model=MeResponse, responses=UNAUTHORIZED)
def me(address: str = Depends(get_current_address)):
    return MeResponse(address=address)
