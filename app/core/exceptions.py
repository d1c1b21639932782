from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base class for errors surfaced to API callers with a stable kind."""
    kind = "Error"
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int = None):
        self.message = message
        super().__init__(
            status_code=status_code or self.status_code_default,
            detail={"kind": self.kind, "message": message},
        )

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class UnauthorizedError(AppException):
    kind = "Unauthorized"
    status_code_default = status.HTTP_403_FORBIDDEN


class NotFoundError(AppException):
    kind = "NotFound"
    status_code_default = status.HTTP_404_NOT_FOUND


class InvalidStateError(AppException):
    kind = "InvalidState"
    status_code_default = status.HTTP_409_CONFLICT


class UnavailableError(AppException):
    kind = "Unavailable"
    status_code_default = status.HTTP_503_SERVICE_UNAVAILABLE


class ValidationFailedError(AppException):
    kind = "ValidationError"
    status_code_default = status.HTTP_422_UNPROCESSABLE_ENTITY
