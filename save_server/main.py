# save_server/main.py

import logging
import os

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from save_server.api import auth, player, status
from save_server.config import Settings
from save_server.core.cipher import ProfileCipher
from save_server.core.credentials import make_password_context
from save_server.core.errors import Internal, InvalidInput, ServiceError
from save_server.core.sessions import SessionTokens
from save_server.database import create_db_engine, create_session_factory, init_db


logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Builds the service around one immutable Settings instance.
    Secrets are read from the environment only when no settings are given.
    """
    settings = settings or Settings.from_env()

    engine = create_db_engine(settings.database_url)
    init_db(engine)

    app = FastAPI(title=settings.service_name, version=settings.version)

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.cipher = ProfileCipher(settings.encryption_key)
    app.state.pwd_context = make_password_context(settings.bcrypt_rounds)
    app.state.session_tokens = SessionTokens(settings.jwt_secret, settings.token_ttl)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(status.router)
    app.include_router(auth.router)
    app.include_router(player.router)

    return app


# -------------------------------
# Error Rendering
# -------------------------------

def _error_response(error: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content={"error": error.message})


def register_error_handlers(app: FastAPI):

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error_response(InvalidInput("Invalid request body"))

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("Unhandled storage error on %s %s", request.method, request.url.path, exc_info=exc)
        return _error_response(Internal())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return _error_response(Internal())


def run():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    app = create_app()
    port = int(os.getenv("PORT", "3000"))
    logger.info("Server running on http://localhost:%d", port)
    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=port)


if __name__ == "__main__":
    run()
