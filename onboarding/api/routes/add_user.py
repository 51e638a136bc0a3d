import logging

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from onboarding.api.deps import get_member_store
from onboarding.core.deps import require_shared_secret
from onboarding.core.exceptions import OnboardingError, UpstreamError, ValidationError
from onboarding.schemas import AddUserRequest
from onboarding.services.member_store import MemberStore
from onboarding.services.registration import has_contact_info

router = APIRouter()
logger = logging.getLogger(__name__)


@router.put(
    "/addUser",
    response_class=PlainTextResponse,
    dependencies=[Depends(require_shared_secret)],
)
def add_user(
    body: AddUserRequest,
    store: MemberStore = Depends(get_member_store),
):
    """
    Insert a new member record for a trusted external system.
    The create trigger then assigns the code and sends the email.
    """
    data = body.model_dump(exclude_none=True)

    # Reject before writing so a record without contact info is never stored
    if not has_contact_info(data):
        raise ValidationError("Either 'email' or 'unsw_id' must be provided")

    try:
        member_id = store.create(data)
    except OnboardingError:
        raise
    except Exception as e:
        logger.error(f"addUser error: {str(e)}", exc_info=True)
        raise UpstreamError()

    logger.info(f"✅ Added member {member_id} ({body.first_name} {body.last_name})")
    return "OK"
