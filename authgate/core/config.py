from dataclasses import dataclass

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv(override=True)

INSECURE_DEFAULT_SECRET = "insecure-development-secret-change-me-before-deploying"


class Settings(BaseSettings):
    PROJECT_NAME: str = "AuthGate"
    # Application settings
    PORT: int = 8000
    HOST: str = "127.0.0.1"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "production"
    DOC_PASSWORD: str | None = None
    CORS_ORIGINS: list[str] = ["*"]

    # SSL settings
    SSL_KEY: str | None = None
    SSL_CERT: str | None = None

    # User directory: "memory" or "database"
    USER_STORE: str = "memory"
    DATABASE_URL: str = "sqlite:///./authgate.db"

    # Login configuration
    JWT_SECRET: str = INSECURE_DEFAULT_SECRET
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_SECONDS: int = 24 * 60 * 60  # 24 hours
    REFRESH_TOKEN_EXPIRE_SECONDS: int = 7 * 24 * 60 * 60  # 7 days
    CHALLENGE_EXPIRY_SECONDS: int = 300  # 5 minutes
    REQUIRE_CHALLENGE: bool = False

    # Rate limiting of /challenge, /login and /refresh, per IP and User-Agent
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    RATE_LIMIT_AUTH_TIMES: int = 5
    RATE_LIMIT_AUTH_SECONDS: int = 15 * 60  # 15 minutes
    RATE_LIMIT_AUTH_BLOCK_SECONDS: int = 30 * 60  # 30 minutes

    # Roles seeded into the user directory at startup, wallet address -> role
    WALLET_ROLES: dict[str, str] = {}

    # Debug settings
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"


@dataclass(frozen=True)
class GatewayConfig:
    """Immutable snapshot of the settings the auth gateway depends on."""

    secret: str
    algorithm: str = "HS256"
    access_token_ttl: int = 24 * 60 * 60
    refresh_token_ttl: int = 7 * 24 * 60 * 60
    challenge_ttl: int = 300
    require_challenge: bool = False
    project_name: str = "AuthGate"

    @classmethod
    def from_settings(cls, settings: Settings) -> "GatewayConfig":
        return cls(
            secret=settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            access_token_ttl=settings.ACCESS_TOKEN_EXPIRE_SECONDS,
            refresh_token_ttl=settings.REFRESH_TOKEN_EXPIRE_SECONDS,
            challenge_ttl=settings.CHALLENGE_EXPIRY_SECONDS,
            require_challenge=settings.REQUIRE_CHALLENGE,
            project_name=settings.PROJECT_NAME,
        )

    @property
    def uses_insecure_secret(self) -> bool:
        return self.secret == INSECURE_DEFAULT_SECRET


# Instantiate the settings
settings = Settings()
