import logging

from fastapi import APIRouter, Depends

from onboarding.api.deps import get_member_store
from onboarding.core.exceptions import NotFoundError, OnboardingError, UpstreamError, ValidationError
from onboarding.core.security import codes_match
from onboarding.schemas import VerifyUserRequest, VerifyUserResponse
from onboarding.services.member_store import MemberStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/verifyUser", response_model=VerifyUserResponse)
def verify_user(
    body: VerifyUserRequest,
    store: MemberStore = Depends(get_member_store),
):
    """
    Check a member's verification code and link their Discord account.

    Always answers with the member's current status: a wrong code leaves
    the record untouched, and verified members are not re-checked.
    """
    logger.info(f"Received verification request for user {body.user_id}")

    if not body.user_id or not body.verification_code or not body.discord_id:
        raise ValidationError()

    try:
        record = store.get(body.user_id)
        if record is None:
            raise NotFoundError()

        if not record.get("is_verified"):
            if codes_match(body.verification_code, record.get("verification_code")):
                record["is_verified"] = True
                record["discord_id"] = body.discord_id
                store.set(body.user_id, record)
                logger.info(f"✅ Verified member {body.user_id} as discord user {body.discord_id}")
            else:
                logger.info(f"Wrong verification code for member {body.user_id}")

        return VerifyUserResponse(is_verified=bool(record.get("is_verified")))

    except OnboardingError:
        raise
    except Exception as e:
        logger.error(f"Error verifying member {body.user_id}: {str(e)}", exc_info=True)
        raise UpstreamError()
