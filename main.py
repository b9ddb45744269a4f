import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.database import Database
from pymongo.errors import PyMongoError

import database
from app_logging import setup_logger
from auth import AuthGate
from errors import ApiError, Internal
from github_client import GitHubClient
from routes import auth as auth_routes
from routes import posts as post_routes
from routes import profile as profile_routes
from routes import users as user_routes
from security import build_password_context
from settings import Settings
from tokens import TokenService

log = logging.getLogger(__name__)


def validation_errors(exc: RequestValidationError) -> list:
    """One ``{msg, param, location}`` item per failed field, using the field's own message."""
    items = []
    for err in exc.errors():
        loc = list(err.get("loc", ()))
        location = loc[0] if loc else "body"
        param = ".".join(str(p) for p in loc[1:])
        error = (err.get("ctx") or {}).get("error")
        msg = str(error) if isinstance(error, ValueError) else err.get("msg", "Invalid value")
        items.append({"msg": msg, "param": param, "location": location})
    return items


async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(status_code=exc.status_code, content=exc.body())


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"errors": validation_errors(exc)})


async def store_error_handler(request: Request, exc: PyMongoError):
    log.exception("Database failure on %s %s", request.method, request.url.path)
    error = Internal()
    return JSONResponse(status_code=error.status_code, content=error.body())


async def unexpected_error_handler(request: Request, exc: Exception):
    log.exception("Unhandled error on %s %s", request.method, request.url.path)
    error = Internal()
    return JSONResponse(status_code=error.status_code, content=error.body())


def create_app(settings: Optional[Settings] = None, db: Optional[Database] = None) -> FastAPI:
    if settings is None:
        settings = Settings.from_env()
        setup_logger(settings.log_level)

    app = FastAPI(title="DevConnector API")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if db is None:
        db = database.connect(settings)
    database.ensure_indexes(db)

    tokens = TokenService(settings)
    app.state.settings = settings
    app.state.db = db
    app.state.tokens = tokens
    app.state.auth_gate = AuthGate(tokens)
    app.state.pwd_context = build_password_context(settings)
    app.state.github = GitHubClient(settings)

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(PyMongoError, store_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    app.include_router(user_routes.router)
    app.include_router(auth_routes.router)
    app.include_router(profile_routes.router)
    app.include_router(post_routes.router)

    @app.get("/")
    def read_root():
        return {"message": "API Running"}

    @app.get("/test")
    def test_database(request: Request):
        """Test endpoint to check if database is available and accessible"""
        response = {
            "backend": "Running",
            "database": "Not Available",
            "database_name": settings.database_name,
            "collections": [],
        }
        try:
            response["collections"] = request.app.state.db.list_collection_names()[:10]
            response["database"] = "Connected & Working"
        except PyMongoError as e:
            log.warning("Database check failed: %s", e)
            response["database"] = f"Error: {str(e)[:50]}"
        return response

    log.info("App configured", extra={
        "database_name": settings.database_name,
        "token_ttl_seconds": int(settings.token_ttl.total_seconds()),
        "github_credentials": bool(settings.github_client_id),
    })
    return app


if __name__ == "__main__":
    import uvicorn
    app = create_app()
    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.port)
