import sys
import logging
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError

from donation_checkout.api import routers
from donation_checkout.core.config import Settings, get_settings
from donation_checkout.core.logging_config import configure_logging
from donation_checkout.services.checkout_service import CheckoutService

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return "; ".join(parts) or "Invalid request"


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": _validation_message(exc)})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Builds the donation API. Settings are read from the environment when not
    given, which fails if STRIPE_SECRET_KEY is missing.
    """
    settings = settings or get_settings()

    app = FastAPI(title="Donation Checkout API")
    app.state.settings = settings
    app.state.checkout_service = CheckoutService(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(routers.router)

    # Mounted last so the API routes win over files with the same path
    static_dir = Path(settings.STATIC_DIR)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
    else:
        logger.warning(f"Static directory {static_dir} not found, serving API only")

    return app


def run() -> None:
    try:
        settings = get_settings()
    except ValidationError as e:
        configure_logging()
        logger.error(f"ERROR: invalid configuration, refusing to start: {e}")
        sys.exit(1)

    configure_logging(settings.LOG_LEVEL)
    app = create_app(settings)

    logger.info(f"Donation server running on port {settings.PORT}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
