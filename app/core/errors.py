"""
Domain errors raised by the service layer. Handlers registered in app.main turn
them into the {"status": "fail", "message": ...} envelope.
"""


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    @property
    def status(self) -> str:
        return "fail" if 400 <= self.status_code < 500 else "error"


class InvalidRequestError(AppError):
    """Missing or malformed input, bad dates, illegal status changes."""
    status_code = 400


class ForbiddenError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404
