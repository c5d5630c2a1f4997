from fastapi import Request

from donation_checkout.services.checkout_service import CheckoutService


def get_checkout_service(request: Request) -> CheckoutService:
    return request.app.state.checkout_service
