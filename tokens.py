"""Issue and verify the signed bearer tokens that identify an account."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt

from settings import Settings

ALGORITHM = "HS256"


class VerificationError(Exception):
    """A token failed verification. The auth gate reports every kind the same way."""


class TokenMalformed(VerificationError):
    pass


class TokenSignatureInvalid(VerificationError):
    pass


class TokenExpired(VerificationError):
    pass


def issue(account_id: str, secret: str, ttl: timedelta, now: Optional[datetime] = None) -> str:
    """Sign a token for ``account_id`` that expires ``ttl`` after ``now``."""
    issued_at = now or datetime.now(timezone.utc)
    claims = {
        "sub": account_id,
        "user": {"id": account_id},
        "iat": issued_at,
        "exp": issued_at + ttl,
    }
    return jwt.encode(claims, secret, algorithm=ALGORITHM)


def verify(token: str, secret: str) -> str:
    """Return the account id carried by ``token``.

    There is no database lookup here: the account may have been deleted
    since the token was issued.
    """
    try:
        jwt.get_unverified_claims(token)
    except JWTError as e:
        raise TokenMalformed(str(e)) from e

    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except ExpiredSignatureError as e:
        raise TokenExpired(str(e)) from e
    except JWTError as e:
        raise TokenSignatureInvalid(str(e)) from e

    account_id = payload.get("sub")
    if not account_id or not isinstance(account_id, str):
        raise TokenMalformed("Token carries no account id")
    return account_id


class TokenService:
    def __init__(self, settings: Settings):
        self.secret = settings.jwt_secret
        self.ttl = settings.token_ttl

    def issue(self, account_id: str, now: Optional[datetime] = None) -> str:
        return issue(account_id, self.secret, self.ttl, now=now)

    def verify(self, token: str) -> str:
        return verify(token, self.secret)
