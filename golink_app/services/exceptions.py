"""
Outward error kinds of the golink service.

Each kind carries the HTTP status it maps to and a message that is safe
to show to clients.
"""


class GolinkServiceError(Exception):
    status_code = 500
    message = "Unexpected error"

    def __init__(self, message: str = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(GolinkServiceError):
    """Malformed alias; raised before storage is touched"""
    status_code = 400

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class ConflictError(GolinkServiceError):
    status_code = 409
    message = "Golink already exists"


class NotFoundError(GolinkServiceError):
    status_code = 404
    message = "Golink not found"


class BackendFailureError(GolinkServiceError):
    """
    Storage fault. detail is for logs only; clients get the generic message.
    """
    status_code = 500
    message = "Internal storage error"

    def __init__(self, detail: str):
        super().__init__()
        self.detail = detail
