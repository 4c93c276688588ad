from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

INSECURE_JWT_SECRET = "dev_secret_change_me"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # HTTP
    frontend_origin: str = "http://localhost:5173"
    host: str = "0.0.0.0"
    port: int = 5000

    # JWT session credentials
    jwt_secret: str = INSECURE_JWT_SECRET
    jwt_alg: str = "HS256"
    access_token_expire_seconds: int = 60 * 60  # 1 hour

    # Nonce registry
    nonce_ttl_seconds: int = 300
    nonce_backend: str = "memory"  # "memory" or "redis"
    redis_url: str = "redis://localhost:6379/0"

    environment: str = "development"
    log_level: str = "INFO"

    @property
    def uses_insecure_secret(self) -> bool:
        return self.jwt_secret == INSECURE_JWT_SECRET

    def ensure_secure(self) -> None:
        """Refuse to run outside development with the placeholder signing secret."""
        if self.environment != "development" and self.uses_insecure_secret:
            raise RuntimeError(
                f"JWT_SECRET must be set when ENVIRONMENT={self.environment!r}"
            )


@lru_cache
def get_settings() -> Settings:
    return Settings()
