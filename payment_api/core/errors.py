"""API errors rendered as {"error": ..., "message": ...} bodies"""

from typing import Optional


class PaymentAPIError(Exception):
    """An error answered to the storefront with a JSON message"""

    status_code = 500
    error = "Internal server error"

    def __init__(self, message: str, status_code: Optional[int] = None, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error is not None:
            self.error = error

    def to_body(self) -> dict:
        return {"success": False, "error": self.error, "message": self.message}


class BadRequestError(PaymentAPIError):
    status_code = 400
    error = "Invalid request"


class NotFoundError(PaymentAPIError):
    status_code = 404
    error = "Not found"


class ConfigurationError(PaymentAPIError):
    status_code = 500
    error = "Payment gateway not configured"


class UpstreamError(PaymentAPIError):
    status_code = 502
    error = "Payment gateway error"
