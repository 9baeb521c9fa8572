"""
Storefront error taxonomy

Every error carries a user-facing message so the presentation layer can
show it inline without inspecting the exception type.
"""

from typing import Optional


class StorefrontError(Exception):
    """Base class for storefront errors"""

    user_message = "Something went wrong. Please try again."

    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if user_message:
            self.user_message = user_message


class ValidationError(StorefrontError):
    """
    Malformed or incomplete input to a pure core function.

    Always correctable by the customer, never a system fault.
    """

    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message, user_message or message)


class GatewayError(StorefrontError):
    """The payment backend answered with a non-success status or was unreachable"""

    user_message = "Payment could not be started or verified. Please try again."

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        user_message: Optional[str] = None,
    ):
        super().__init__(message, user_message)
        self.status_code = status_code


class ProtocolError(StorefrontError):
    """
    The payment backend answered with malformed or incomplete data.

    Indicates a contract mismatch between storefront and backend rather
    than a transient failure.
    """

    user_message = "We could not process the payment response. Please contact support."


class IntegrationError(StorefrontError):
    """The payment provider's checkout library is not loaded or initialized"""

    user_message = "Payment checkout is unavailable. Please refresh and try again."
