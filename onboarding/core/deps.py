import logging

from fastapi import Depends, Request

from onboarding.core.config import Settings, get_settings
from onboarding.core.exceptions import AuthError
from onboarding.core.security import codes_match

logger = logging.getLogger(__name__)


def require_shared_secret(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Checks the static shared-secret header on privileged endpoints.
    Raises 401 if the header is missing or does not match exactly.
    """
    supplied = request.headers.get(settings.API_SECRET_HEADER)

    if not codes_match(supplied, settings.API_SECRET):
        logger.warning(f"Rejected {request.method} {request.url.path}: bad or missing shared secret")
        raise AuthError()
