import logging

from fastapi import APIRouter, Depends, Request
from pymongo.errors import DuplicateKeyError

from errors import Conflict, WhitespaceError
from schemas import Account, RegisterRequest, TokenResponse
from security import avatar_url, get_password_hash
from stores import AccountStore, get_accounts, serialize_account

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])

TRIMMED_FIELDS = ("username", "password", "email")


@router.get("")
def list_users(accounts: AccountStore = Depends(get_accounts)):
    return {"users": [serialize_account(doc) for doc in accounts.list()]}


@router.post("", response_model=TokenResponse)
def register(payload: RegisterRequest, request: Request,
             accounts: AccountStore = Depends(get_accounts)):
    for field in TRIMMED_FIELDS:
        value = getattr(payload, field)
        if value.strip() != value:
            raise WhitespaceError(field)

    existing = accounts.find_by_username_or_email(payload.username, payload.email)
    if existing:
        if existing.get("username") == payload.username:
            raise Conflict("That username is already taken", itemized=True)
        raise Conflict("That email address is already registered", itemized=True)

    account = Account(
        name=payload.name,
        username=payload.username,
        email=payload.email,
        password=get_password_hash(request.app.state.pwd_context, payload.password),
        avatar=avatar_url(payload.email),
    )
    try:
        doc = accounts.create(account)
    except DuplicateKeyError as ex:
        # lost a race with a concurrent registration
        log.info("Duplicate registration for %s: %s", payload.username, ex)
        raise Conflict("That username or email is already registered", itemized=True) from ex

    log.info("Registered account %s", doc["_id"])
    return TokenResponse(token=request.app.state.tokens.issue(str(doc["_id"])))
