import hashlib
from urllib.parse import urlencode

from passlib.context import CryptContext

from settings import Settings

GRAVATAR_URL = "//www.gravatar.com/avatar/"


def build_password_context(settings: Settings) -> CryptContext:
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=settings.bcrypt_rounds,
    )


def get_password_hash(pwd_context: CryptContext, password: str) -> str:
    # bcrypt salts every hash, two calls never give the same string
    return pwd_context.hash(password)


def verify_password(pwd_context: CryptContext, plain_password: str, password_hash: str) -> bool:
    if not password_hash:
        # unknown usernames cost the same as wrong passwords
        pwd_context.dummy_verify()
        return False
    return pwd_context.verify(plain_password, password_hash)


def avatar_url(email: str, size: int = 200) -> str:
    """Gravatar URL for ``email``: pg rated, mystery-man fallback."""
    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    return GRAVATAR_URL + digest + "?" + urlencode({"s": size, "r": "pg", "d": "mm"})
