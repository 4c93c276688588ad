# app/services/wallet.py
from __future__ import annotations

import uuid

from eth_account import Account
from eth_account.messages import encode_defunct
from web3 import Web3

from app.core.errors import InvalidAddress

CHALLENGE_TEMPLATE = "Sign this message to authenticate. Nonce: {nonce}"


def normalize_address(address: object) -> str:
    """Return the EIP-55 checksummed form of an Ethereum address.

    All-lowercase and all-uppercase hex are accepted. Mixed-case input must
    carry a valid checksum, otherwise it is rejected like any other malformed
    address.
    """
    if not isinstance(address, str):
        raise InvalidAddress()
    candidate = address.strip()
    if not Web3.is_address(candidate):
        raise InvalidAddress()
    digits = candidate[2:] if candidate[:2].lower() == "0x" else candidate
    if digits != digits.lower() and digits != digits.upper():
        # mixed case means the caller claims a checksum; it has to be right
        if not Web3.is_checksum_address("0x" + digits):
            raise InvalidAddress()
    return Web3.to_checksum_address(candidate)


def generate_nonce() -> str:
    return str(uuid.uuid4())


def build_challenge(nonce: str) -> str:
    return CHALLENGE_TEMPLATE.format(nonce=nonce)


def recover_address(message: str, signature: str) -> str:
    # encode_defunct(text=...) applies the EIP-191 "\x19Ethereum Signed Message:\n<len>"
    # prefix, which is what personal_sign / signMessage produce on the client.
    msg = encode_defunct(text=message)
    recovered = Account.recover_message(msg, signature=signature)
    return Web3.to_checksum_address(recovered)
