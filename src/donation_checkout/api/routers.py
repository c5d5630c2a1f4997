from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse
from fastapi.concurrency import run_in_threadpool
from datetime import datetime, timezone
from typing import Optional
import logging

from donation_checkout.core.dependencies import get_checkout_service
from donation_checkout.core.exceptions import CheckoutValidationError, ProviderError
from donation_checkout.models.donation import DonationRequest, SessionSummary
from donation_checkout.services.checkout_service import CheckoutService
from donation_checkout.api.schemas import CheckoutSessionResponse, ErrorResponse, HealthResponse

router = APIRouter()
logger = logging.getLogger(__name__)

ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok", timestamp=datetime.now(timezone.utc))


@router.post(
    "/create-checkout-session",
    response_model=CheckoutSessionResponse,
    responses=ERROR_RESPONSES
)
async def create_checkout_session(
    body: DonationRequest,
    host: Optional[str] = Header(default=None),
    origin: Optional[str] = Header(default=None),
    service: CheckoutService = Depends(get_checkout_service)
):
    """
    Creates a hosted checkout page for a one-time or monthly donation and
    returns the URL the browser should be sent to.
    """
    try:
        context = service.request_context(host=host, origin=origin)
        config = service.build_config(body, context)
        url = await run_in_threadpool(service.create_session, config)
        return CheckoutSessionResponse(url=url)

    except CheckoutValidationError as e:
        logger.warning(f"Rejected donation request: {e}")
        return error_response(400, str(e))
    except ProviderError as e:
        return error_response(500, e.message)
    except Exception as e:
        logger.exception(f"Unexpected error creating checkout session: {e}")
        return error_response(500, str(e))


@router.get(
    "/session/{session_id}",
    response_model=SessionSummary,
    responses=ERROR_RESPONSES
)
async def get_session(
    session_id: str,
    service: CheckoutService = Depends(get_checkout_service)
):
    try:
        return await run_in_threadpool(service.get_session, session_id)
    except ProviderError as e:
        return error_response(500, e.message)
    except Exception as e:
        logger.exception(f"Unexpected error retrieving session {session_id}: {e}")
        return error_response(500, str(e))
