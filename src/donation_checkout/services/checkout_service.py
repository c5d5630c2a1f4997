import math
import logging
import stripe
from decimal import Decimal, ROUND_HALF_UP

from donation_checkout.core.config import Settings
from donation_checkout.core.exceptions import CheckoutValidationError, ProviderError
from donation_checkout.models.donation import (
    CheckoutConfig,
    DonationRequest,
    LineItem,
    PriceData,
    ProductData,
    Recurring,
    RequestContext,
    SessionSummary,
)

logger = logging.getLogger(__name__)

CURRENCY = "usd"
SESSION_ID_PLACEHOLDER = "{CHECKOUT_SESSION_ID}"

ORGANIZATION_DESCRIPTION = (
    "Fair Observer is a 501(c)(3) non-profit news organization. "
    "Our mission is to educate global citizens of today and tomorrow. "
    "We are solely supported by donations. Thank you for your support."
)
ONE_TIME_PRODUCT = ProductData(name="Donation to Fair Observer", description=ORGANIZATION_DESCRIPTION)
MONTHLY_PRODUCT = ProductData(name="Monthly Donation to Fair Observer", description=ORGANIZATION_DESCRIPTION)

DEFAULT_PRODUCTION_URLS = (
    Settings.model_fields["PRODUCTION_URL_COM"].default,
    Settings.model_fields["PRODUCTION_URL_XYZ"].default,
)


def to_minor_units(amount) -> int:
    """
    Converts a major-unit amount (dollars) to an integer count of cents,
    rounding to the nearest cent with halves going away from zero.
    """
    if amount is None:
        raise CheckoutValidationError("amount is required")
    if isinstance(amount, bool) or not isinstance(amount, (int, float, Decimal)):
        raise CheckoutValidationError(f"amount must be a number, got {amount!r}")
    if isinstance(amount, float) and not math.isfinite(amount):
        raise CheckoutValidationError(f"amount must be a finite number, got {amount!r}")
    if isinstance(amount, Decimal) and not amount.is_finite():
        raise CheckoutValidationError(f"amount must be a finite number, got {amount!r}")

    # str() gives the shortest repr, so 1.005 stays 1.005 instead of 1.00499...
    cents = (Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    if cents < 0:
        raise CheckoutValidationError(f"amount must not be negative, got {amount!r}")
    return int(cents)


def resolve_base_url(
    context: RequestContext,
    production_urls: tuple[str, str] = DEFAULT_PRODUCTION_URLS
) -> str:
    com_url, xyz_url = production_urls
    if context.production:
        return xyz_url if ".xyz" in (context.host or "") else com_url
    return context.origin or f"http://localhost:{context.port}"


def build_checkout_config(
    request: DonationRequest,
    context: RequestContext,
    production_urls: tuple[str, str] = DEFAULT_PRODUCTION_URLS
) -> CheckoutConfig:
    """
    Translates a donation form submission into the Checkout Session to create.

    Monthly donations become subscriptions billed every month; any other
    frequency is a one-time payment labelled "Donate" on the hosted page.
    Raises CheckoutValidationError when the amount is unusable.
    """
    unit_amount = to_minor_units(request.amount)
    base_url = resolve_base_url(context, production_urls)

    if request.is_monthly:
        mode = "subscription"
        price_data = PriceData(
            currency=CURRENCY,
            product_data=MONTHLY_PRODUCT,
            unit_amount=unit_amount,
            recurring=Recurring(interval="month")
        )
        submit_type = None
    else:
        mode = "payment"
        price_data = PriceData(
            currency=CURRENCY,
            product_data=ONE_TIME_PRODUCT,
            unit_amount=unit_amount
        )
        submit_type = "donate"

    return CheckoutConfig(
        customer_email=request.email or None,
        success_url=f"{base_url}/success.html?session_id={SESSION_ID_PLACEHOLDER}",
        cancel_url=f"{base_url}/cancel.html",
        metadata={
            "donor_name": request.full_name,
            "donor_first_name": request.first_name,
            "donor_last_name": request.last_name,
        },
        mode=mode,
        line_items=[LineItem(price_data=price_data, quantity=1)],
        submit_type=submit_type
    )


def _provider_message(error: stripe.StripeError) -> str:
    return error.user_message or str(error)


class CheckoutService:
    def __init__(self, settings: Settings):
        self.api_key = settings.STRIPE_SECRET_KEY
        self.production = settings.is_production
        self.port = settings.PORT
        self.production_urls = (settings.PRODUCTION_URL_COM, settings.PRODUCTION_URL_XYZ)

    def request_context(self, host: str | None, origin: str | None) -> RequestContext:
        return RequestContext(
            host=host or "",
            origin=origin or None,
            production=self.production,
            port=self.port
        )

    def build_config(self, request: DonationRequest, context: RequestContext) -> CheckoutConfig:
        return build_checkout_config(request, context, self.production_urls)

    def create_session(self, config: CheckoutConfig) -> str:
        try:
            session = stripe.checkout.Session.create(
                api_key=self.api_key,
                **config.to_stripe_params()
            )
        except stripe.StripeError as e:
            logger.error(f"Error creating checkout session: {e}")
            raise ProviderError(_provider_message(e)) from e

        logger.info(f"Created {config.mode} checkout session {session.id}", extra={"session_id": session.id, "mode": config.mode})
        return session.url

    def get_session(self, session_id: str) -> SessionSummary:
        try:
            session = stripe.checkout.Session.retrieve(session_id, api_key=self.api_key)
        except stripe.StripeError as e:
            logger.error(f"Error retrieving checkout session {session_id}: {e}", extra={"session_id": session_id})
            raise ProviderError(_provider_message(e)) from e

        details = getattr(session, "customer_details", None)
        return SessionSummary(
            customer_email=getattr(details, "email", None) if details else None,
            customer_name=getattr(details, "name", None) if details else None,
            amount_total=getattr(session, "amount_total", None),
            mode=getattr(session, "mode", None)
        )
