"""
API error taxonomy.

Every failure a handler can report is one of these. ``main.create_app``
registers a handler that turns an ``ApiError`` into a JSON response using
``body()``; nothing else ever reaches the client.
"""

from typing import List, Optional


class ApiError(Exception):
    status_code = 500
    default_msg = "Internal Server Error"

    def __init__(self, msg: Optional[str] = None):
        self.msg = msg or self.default_msg
        super().__init__(self.msg)

    def body(self) -> dict:
        return {"msg": self.msg}


class ValidationError(ApiError):
    """Malformed or missing input, reported field by field."""

    status_code = 400
    default_msg = "Invalid request"

    def __init__(self, errors: List[dict]):
        self.errors = errors
        super().__init__("; ".join(e["msg"] for e in errors) or None)

    def body(self) -> dict:
        return {"errors": self.errors}


class InvalidCredentials(ValidationError):
    """Login failure. Identical for unknown username and wrong password."""

    def __init__(self):
        super().__init__([{"msg": "Invalid credentials"}])


class WhitespaceError(ApiError):
    status_code = 422
    default_msg = "Cannot start or end with whitespace"

    def __init__(self, location: str):
        self.location = location
        super().__init__()

    def body(self) -> dict:
        return {
            "code": self.status_code,
            "reason": "ValidationError",
            "message": self.msg,
            "location": self.location,
        }


class Unauthenticated(ApiError):
    status_code = 401
    default_msg = "Token is not valid"


class Unauthorized(ApiError):
    # authenticated but not the owner; this API reports it as 400
    status_code = 400
    default_msg = "User not authorized"


class NotFound(ApiError):
    status_code = 404
    default_msg = "Not found"


class Conflict(ApiError):
    status_code = 400
    default_msg = "Conflict"

    def __init__(self, msg: Optional[str] = None, itemized: bool = False):
        self.itemized = itemized
        super().__init__(msg)

    def body(self) -> dict:
        if self.itemized:
            return {"errors": [{"msg": self.msg}]}
        return {"msg": self.msg}


class Internal(ApiError):
    status_code = 500
