import logging
import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Tuple

log = logging.getLogger(__name__)

DEFAULT_SECRET_KEY = "dev-secret-key-change-me"


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, built once at startup and passed around."""

    jwt_secret: str = DEFAULT_SECRET_KEY
    token_ttl: timedelta = timedelta(seconds=360000)
    bcrypt_rounds: int = 10
    github_client_id: Optional[str] = None
    github_secret: Optional[str] = None
    database_url: str = "mongodb://localhost:27017"
    database_name: str = "devconnector"
    port: int = 5000
    log_level: str = "INFO"
    cors_origins: Tuple[str, ...] = ("*",)

    @classmethod
    def from_env(cls) -> "Settings":
        secret = os.getenv("SECRET_KEY", DEFAULT_SECRET_KEY)
        if secret == DEFAULT_SECRET_KEY:
            log.warning("SECRET_KEY is not set, using the development default")

        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            jwt_secret=secret,
            token_ttl=timedelta(seconds=int(os.getenv("ACCESS_TOKEN_EXPIRE_SECONDS", "360000"))),
            bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", "10")),
            github_client_id=os.getenv("GITHUB_CLIENT_ID"),
            github_secret=os.getenv("GITHUB_SECRET"),
            database_url=os.getenv("DATABASE_URL", "mongodb://localhost:27017"),
            database_name=os.getenv("DATABASE_NAME", "devconnector"),
            port=int(os.getenv("PORT", "5000")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        )
