import logging

from fastapi import APIRouter, Depends, Request

from auth import current_account
from errors import InvalidCredentials
from schemas import LoginRequest, TokenResponse
from security import verify_password
from stores import AccountStore, get_accounts, serialize_account

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("")
def me(account: dict = Depends(current_account)):
    return serialize_account(account)


@router.post("", response_model=TokenResponse)
def login(payload: LoginRequest, request: Request,
          accounts: AccountStore = Depends(get_accounts)):
    account = accounts.find_by_username(payload.username)
    password_hash = account.get("password", "") if account else ""
    if not verify_password(request.app.state.pwd_context, payload.password, password_hash):
        log.info("Failed login for username %r", payload.username)
        raise InvalidCredentials()

    return TokenResponse(token=request.app.state.tokens.issue(str(account["_id"])))
