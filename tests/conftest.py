import pytest
import base58
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from authgate.core.config import GatewayConfig
from authgate.core.dependencies import get_gateway
from authgate.core.gateway import AuthGateway
from authgate.core.rate_limit import get_auth_limiter
from authgate.db.base import Base
from authgate.repository.users import InMemoryUserDirectory

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"


class Wallet:
    """Helper wallet holding an ED25519 key pair, exposing base58 like a browser wallet would"""

    def __init__(self):
        self.private_key = Ed25519PrivateKey.generate()
        public_bytes = self.private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
        self.address = base58.b58encode(public_bytes).decode()

    def sign_bytes(self, message: str) -> bytes:
        return self.private_key.sign(message.encode("utf-8"))

    def sign(self, message: str) -> str:
        return base58.b58encode(self.sign_bytes(message)).decode()


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Every test starts with fresh rate limit windows"""
    get_auth_limiter().reset()
    yield
    get_auth_limiter().reset()


@pytest.fixture
def wallet() -> Wallet:
    return Wallet()


@pytest.fixture
def other_wallet() -> Wallet:
    return Wallet()


@pytest.fixture
def gateway_config() -> GatewayConfig:
    return GatewayConfig(secret=TEST_SECRET, project_name="AuthGate")


@pytest.fixture
def gateway(gateway_config) -> AuthGateway:
    return AuthGateway(gateway_config, InMemoryUserDirectory())


@pytest.fixture
def client(gateway) -> TestClient:
    """Create a test client for the FastAPI application"""
    app.dependency_overrides[get_gateway] = lambda: gateway
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def session_factory():
    """In-memory SQLite database with the AuthGate tables created"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()
