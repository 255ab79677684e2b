from typing import Optional


class ApiError(Exception):
    status_code = 500
    label = "Internal server error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.label, "message": self.message}


class ValidationError(ApiError):
    status_code = 400
    label = "Bad Request"


class AuthenticationError(ApiError):
    status_code = 401
    label = "Authentication failed"


class MissingCredentialsError(ValidationError, AuthenticationError):
    """Username or password was empty; no login exchange was attempted."""
    status_code = 400
    label = "Missing credentials"


class NotAuthenticatedError(ApiError):
    status_code = 503
    label = "Not authenticated"


class UpstreamError(ApiError):
    status_code = 502
    label = "Upstream request failed"

    def __init__(self, http_status: int, message: str):
        self.http_status = http_status
        super().__init__(f"Exposure API Error: {http_status} - {message}")

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["upstream_status"] = self.http_status
        return data


class TransportError(ApiError):
    status_code = 504
    label = "Upstream unreachable"

    def __init__(self, message: str, cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__(message)
