from fastapi import status


class AuthGateError(Exception):
    """Base exception for AuthGate. Carries the HTTP status and error code it maps to."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)

    @property
    def headers(self) -> dict[str, str] | None:
        return None


# --- Request Errors (400) ---
class InvalidRequestError(AuthGateError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_REQUEST"

    def __init__(self, message: str = "Invalid request"):
        super().__init__(message)


# --- Authentication/Authorization Errors (401/403) ---
class UnauthorizedError(AuthGateError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ForbiddenError(AuthGateError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


# --- Throttling Errors (429) ---
class RateLimitExceededError(AuthGateError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = "RATE_LIMIT_EXCEEDED"

    def __init__(self, retry_after: int, message: str = "Too many requests"):
        self.retry_after = max(int(retry_after), 1)
        super().__init__(message)

    @property
    def headers(self) -> dict[str, str]:
        return {"Retry-After": str(self.retry_after)}


# --- Server Errors (500) ---
class InternalError(AuthGateError):
    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
