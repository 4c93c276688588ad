import pytest
import sys
from pathlib import Path

from eth_account import Account
from eth_account.messages import encode_defunct
from fastapi.testclient import TestClient

# Add the parent directory to the path so we can import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.config import Settings
from app.main import create_app
from app.services.authenticator import SignatureAuthenticator
from app.services.nonce_registry import InMemoryNonceRegistry

# Well-known local devnet keys (hardhat / anvil accounts #0 and #1)
ALICE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
BOB_KEY = "0x59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d"

TEST_SECRET = "test-secret-key-for-testing-only"


class FakeClock:
    """Manually advanced stand-in for time.time."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _sign(account, text: str) -> str:
    return account.sign_message(encode_defunct(text=text)).signature.hex()


@pytest.fixture
def sign():
    """personal_sign helper: sign(account, text) -> hex signature"""
    return _sign


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        jwt_secret=TEST_SECRET,
        frontend_origin="http://localhost:5173",
        nonce_backend="memory",
        environment="test",
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry(clock, settings):
    return InMemoryNonceRegistry(ttl_seconds=settings.nonce_ttl_seconds, clock=clock)


@pytest.fixture
def authenticator(registry, settings):
    return SignatureAuthenticator(registry, settings)


@pytest.fixture
def alice():
    return Account.from_key(ALICE_KEY)


@pytest.fixture
def bob():
    return Account.from_key(BOB_KEY)


@pytest.fixture
def client(settings, registry, authenticator):
    """TestClient whose app uses the fixed-clock registry."""
    app = create_app(settings)
    app.state.nonce_registry = registry
    app.state.authenticator = authenticator
    with TestClient(app) as test_client:
        yield test_client
