from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from redis.exceptions import RedisError
from sqlalchemy.exc import OperationalError
from .error import ClientError, ServerError
import logging

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


async def handle_dependency_unavailable(request: Request, exc: Exception):
    """Counter store, database or breach API failure: refuse rather than allow"""
    error_dict = {
        "code": "SERVICE_UNAVAILABLE",
        "message": "Service temporarily unavailable",
    }
    logger.error(f"Dependency unavailable: {type(exc).__name__}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"error": error_dict}
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    from src.depends import close_clients, init_db

    await init_db()
    yield
    await close_clients()


def create_app(ApplicationConfig) -> FastAPI:
    app = FastAPI(title="Auth Core API", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import (
        auth,
        email_verification,
        health_check,
        passkeys,
        password_reset,
        two_factor,
    )

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(passkeys.router, tags=["Passkeys"])
    app.include_router(email_verification.router, tags=["Email Verification"])
    app.include_router(password_reset.router, tags=["Password Reset"])
    app.include_router(two_factor.router, tags=["Two Factor"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RedisError, handle_dependency_unavailable)
    app.add_exception_handler(OperationalError, handle_dependency_unavailable)
    app.add_exception_handler(httpx.HTTPError, handle_dependency_unavailable)

    return app
