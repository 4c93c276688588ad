"""
Walk through the whole wallet login against a running server:
nonce -> personal_sign -> verify -> /api/me

    WALLET_PRIVATE_KEY=0x... AUTH_BASE_URL=http://localhost:5000 python scripts/login_roundtrip.py

Without WALLET_PRIVATE_KEY a throwaway account is generated.
"""
import os
import sys

import httpx
from eth_account import Account
from eth_account.messages import encode_defunct


def main():
    base_url = os.environ.get("AUTH_BASE_URL", "http://localhost:5000")
    private_key = os.environ.get("WALLET_PRIVATE_KEY")
    account = Account.from_key(private_key) if private_key else Account.create()
    print(f"wallet: {account.address}")

    with httpx.Client(base_url=base_url, timeout=10.0) as client:
        r = client.get("/api/nonce", params={"address": account.address})
        r.raise_for_status()
        challenge = r.json()["nonce"]
        print(f"challenge: {challenge}")

        signed = account.sign_message(encode_defunct(text=challenge))
        r = client.post(
            "/api/verify",
            json={"address": account.address, "signature": signed.signature.hex()},
        )
        if r.status_code != 200:
            print(f"verify failed ({r.status_code}): {r.json()}")
            sys.exit(1)
        token = r.json()["token"]
        print("token issued")

        r = client.get("/api/me", headers={"Authorization": f"Bearer {token}"})
        print(f"/api/me -> {r.status_code} {r.json()}")


if __name__ == "__main__":
    main()
