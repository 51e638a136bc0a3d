import logging

from fastapi import APIRouter, Depends

from onboarding.api.deps import get_member_store
from onboarding.core.deps import require_shared_secret
from onboarding.core.exceptions import OnboardingError, UpstreamError, ValidationError
from onboarding.schemas import FindUserRequest, FindUserResponse
from onboarding.services.member_store import MemberStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/findUser",
    response_model=FindUserResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(require_shared_secret)],
)
def find_user(
    body: FindUserRequest,
    store: MemberStore = Depends(get_member_store),
):
    """
    Search members by Discord id and/or Minecraft username.
    Every supplied field must match; no matches is an empty list.
    """
    filters = body.model_dump(exclude_none=True)
    filters = {field: value for field, value in filters.items() if value != ""}
    if not filters:
        raise ValidationError("Provide 'discord_id' and/or 'minecraft_username'")

    try:
        results = store.find(**filters)
    except OnboardingError:
        raise
    except Exception as e:
        logger.error(f"findUser error ({filters}): {str(e)}", exc_info=True)
        raise UpstreamError()

    logger.info(f"findUser {filters} matched {len(results)} member(s)")
    return {"results": results}
