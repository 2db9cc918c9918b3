import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel

from src.app.services.app_invite_options import AppInviteOptions

from .error import ClientError, ServerError

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": str(exc.base_error.code), "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": str(exc.base_error.code), "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code}: {exc.base_error.message}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


def create_app(ApplicationConfig, options: Optional[AppInviteOptions] = None) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        ApplicationConfig: Config class (see config.py)
        options: Host-supplied AppInviteOptions; built from config when omitted
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if ApplicationConfig.CREATE_TABLES_ON_STARTUP:
            from src.depends import engine

            async with engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)
        yield

    app = FastAPI(title="App Invite API", version="0.1.0", lifespan=lifespan)
    app.state.app_invite_options = options or AppInviteOptions.from_config(
        ApplicationConfig
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import app_invite, health_check

    app.include_router(health_check.router, prefix=ApplicationConfig.API_PREFIX, tags=["Health"])
    app.include_router(app_invite.router, prefix=ApplicationConfig.API_PREFIX, tags=["App Invitations"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app
