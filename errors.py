"""
Errors raised by the order flow.

Each error carries the HTTP status it is rendered with and a message that is
safe to show to the client.
"""


class OrderFlowError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def body(self) -> dict:
        return {"message": self.message}


class NotFound(OrderFlowError):
    status_code = 404


class InvalidInput(OrderFlowError):
    status_code = 400


class VerificationFailed(OrderFlowError):
    """The callback signature did not match; reported as an unsuccessful payment"""
    status_code = 400

    def body(self) -> dict:
        return {"success": False, "message": self.message}


class UpstreamFailure(OrderFlowError):
    status_code = 502


class InternalFailure(OrderFlowError):
    status_code = 500
