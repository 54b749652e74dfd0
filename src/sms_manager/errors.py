from __future__ import annotations


class SmsManagerError(Exception):
    """Base exception for sms_manager."""


class OrderNotFound(SmsManagerError):
    def __init__(self, order_id: object) -> None:
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class GatewayError(SmsManagerError):
    """
    Raised by the Twilio gateway when a message could not be sent.

    The dispatcher turns str(error) into an order note, so messages are
    written for shop staff.
    """


class ConfigurationError(GatewayError):
    def __init__(self, message: str = "Twilio settings are not configured properly.") -> None:
        super().__init__(message)


class TransportError(GatewayError):
    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(f"Could not reach the Twilio API: {cause}")


class GatewayRejected(GatewayError):
    def __init__(self, status_code: int, detail: str | None = None) -> None:
        self.status_code = status_code
        self.detail = detail
        message = f"Twilio API returned an error with response code: {status_code}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
