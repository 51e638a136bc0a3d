"""
Error taxonomy for the onboarding service.

Every error is an HTTPException so route handlers can raise it directly;
the registration trigger raises the same classes outside a request.
"""
from fastapi import HTTPException, status


class OnboardingError(HTTPException):
    """Base error with a plain-text detail."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)


class ValidationError(OnboardingError):
    """Missing contact info or missing required request fields."""

    def __init__(self, detail: str = "Invalid data provided"):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail)


class AuthError(OnboardingError):
    """Missing or incorrect shared secret."""

    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail)


class NotFoundError(OnboardingError):
    # Unknown members answer 401, which existing Discord bot clients expect.
    def __init__(self, detail: str = "User does not exist"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail)


class MethodNotAllowedError(OnboardingError):
    def __init__(self, detail: str = "Incorrect method"):
        super().__init__(status.HTTP_405_METHOD_NOT_ALLOWED, detail)


class UpstreamError(OnboardingError):
    """Store or provider failure. Details are logged, never returned."""

    def __init__(self, detail: str = "Internal server error"):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, detail)
