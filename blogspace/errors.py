from fastapi import HTTPException, status


class APIError(HTTPException):
    """HTTPException that also carries the underlying error text for the envelope."""

    def __init__(self, status_code: int, message: str, error: str | None = None, headers: dict | None = None):
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.error = error


def bad_request(message: str, error: str | None = None) -> APIError:
    return APIError(status.HTTP_400_BAD_REQUEST, message, error)


def unauthorized(message: str = "Authentication required") -> APIError:
    return APIError(status.HTTP_401_UNAUTHORIZED, message)


def forbidden(message: str = "Access denied") -> APIError:
    return APIError(status.HTTP_403_FORBIDDEN, message)


def not_found(message: str) -> APIError:
    return APIError(status.HTTP_404_NOT_FOUND, message)


def conflict(message: str) -> APIError:
    return APIError(status.HTTP_409_CONFLICT, message)


def internal_error(message: str, error: Exception | str | None = None) -> APIError:
    return APIError(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        message,
        str(error) if error is not None else None,
    )
