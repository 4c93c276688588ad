import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.router import api_router
from app.core.config import Settings, get_settings
from app.core.errors import register_exception_handlers
from app.core.logging_config import configure_logging
from app.services.authenticator import SignatureAuthenticator
from app.services.nonce_registry import build_registry

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    settings.ensure_secure()
    if settings.uses_insecure_secret:
        logger.warning("JWT_SECRET is the development placeholder; do not deploy like this")

    app = FastAPI(title="Wallet Auth")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_origin],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    registry = build_registry(settings)
    app.state.settings = settings
    app.state.nonce_registry = registry
    app.state.authenticator = SignatureAuthenticator(registry, settings)

    app.include_router(api_router, prefix="/api")
    return app


app = create_app()


def main() -> None:
    settings = app.state.settings
    logger.info("Backend listening on http://%s:%d", settings.host, settings.port)
    logger.info("CORS allowed origin: %s", settings.frontend_origin)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
