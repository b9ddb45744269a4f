import logging
from typing import Optional

from fastapi import Depends, Header, Request

from errors import NotFound, Unauthenticated
from stores import AccountStore, get_accounts
from tokens import TokenService, VerificationError

log = logging.getLogger(__name__)

TOKEN_HEADER = "x-auth-token"

MISSING_TOKEN_MSG = "Not token, authorization denied"
INVALID_TOKEN_MSG = "Token is not valid"


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Gets the token from an ``Authorization: Bearer`` header value."""
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        log.debug("Authorization header is not a bearer token")
        return None
    return parts[1]


class AuthGate:
    """Resolves the account id of a request or rejects it with a 401."""

    def __init__(self, tokens: TokenService):
        self.tokens = tokens

    def authenticate(self, token: Optional[str]) -> str:
        if not token:
            raise Unauthenticated(MISSING_TOKEN_MSG)
        try:
            return self.tokens.verify(token)
        except VerificationError as ex:
            # the reason stays in the log, the caller only ever sees one message
            log.debug("Token rejected: %s (%s)", type(ex).__name__, ex)
            raise Unauthenticated(INVALID_TOKEN_MSG) from ex


async def current_account_id(
    request: Request,
    x_auth_token: Optional[str] = Header(None),
    authorization: Optional[str] = Header(None),
) -> str:
    """Dependency for private routes. Attaches the account id to ``request.state``."""
    gate: AuthGate = request.app.state.auth_gate
    account_id = gate.authenticate(x_auth_token or bearer_token(authorization))
    request.state.account_id = account_id
    return account_id


def current_account(account_id: str = Depends(current_account_id),
                    accounts: AccountStore = Depends(get_accounts)) -> dict:
    """The caller's account document. Tokens outlive deleted accounts, those get a 404."""
    account = accounts.get(account_id)
    if account is None:
        log.info("Token for deleted account %s", account_id)
        raise NotFound("User not found")
    return account
