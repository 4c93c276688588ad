# app/services/authenticator.py
from __future__ import annotations

import logging
from typing import Optional

from app.core.config import Settings
from app.core.errors import NonceNotFound, SignatureMismatch, VerificationError
from app.core.security import SessionCredential, create_access_token, decode_access_token
from app.services.wallet import normalize_address, recover_address

logger = logging.getLogger(__name__)


class SignatureAuthenticator:
    """Exchanges a signed challenge for a session credential."""

    def __init__(self, registry, settings: Settings):
        self.registry = registry
        self.settings = settings

    def verify(self, address: str, signature: str) -> SessionCredential:
        # 1) Canonical address (InvalidAddress on malformed input)
        claimed = normalize_address(address)

        # 2) Challenge must be pending and fresh
        text: Optional[str] = self.registry.consume(claimed)
        if text is None:
            raise NonceNotFound()

        # 3) EIP-191 recovery over the exact text we issued
        try:
            recovered = normalize_address(recover_address(text, signature))
        except Exception as exc:
            logger.exception("signature recovery failed for %s", claimed)
            raise VerificationError() from exc

        # 4) Signer must be the claimed wallet; challenge stays pending on mismatch
        if recovered != claimed:
            logger.warning("signature for %s was produced by %s", claimed, recovered)
            raise SignatureMismatch()

        # 5) Single use: only the verifier that removes the challenge gets a token
        if not self.registry.finalize(claimed, text):
            raise NonceNotFound()

        credential = create_access_token(claimed, self.settings)
        logger.info("authenticated %s", claimed)
        return credential

    def authenticate(self, token: str) -> str:
        payload = decode_access_token(token, self.settings)
        return payload["address"]
