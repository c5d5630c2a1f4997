class CheckoutValidationError(ValueError):
    """Raised when donation form fields cannot be turned into a checkout."""


class ProviderError(Exception):
    """The payment provider rejected or failed a request.

    ``message`` is the provider's own text and is returned to the caller as is.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
