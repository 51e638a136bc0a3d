"""
Registration Handler

Runs once for every new member record: assigns the verification code,
marks the member unverified, then sends the welcome email.
"""
import logging
from typing import Callable, Dict

from sqlalchemy.orm import sessionmaker

from onboarding.core.exceptions import NotFoundError, ValidationError
from onboarding.core.security import generate_verification_code
from onboarding.services.member_store import MemberStore
from onboarding.services.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)


def has_contact_info(record: Dict) -> bool:
    return bool(record.get("email") or record.get("unsw_id"))


def register_new_member(
    member_id: str,
    store: MemberStore,
    dispatcher: NotificationDispatcher,
) -> Dict:
    """
    Complete registration for a freshly created record.

    The record write is committed before the email goes out, so an email
    failure (raised to the caller) leaves a registered but unnotified member.
    """
    record = store.get(member_id)
    if record is None:
        raise NotFoundError(f"Member {member_id} does not exist")

    if not has_contact_info(record):
        raise ValidationError("Both fields 'email' and 'unsw_id' are empty!")

    if record.get("verification_code"):
        logger.warning(f"Member {member_id} already has a verification code, skipping")
        return record

    record["is_verified"] = False
    record["verification_code"] = generate_verification_code()
    record = store.set(member_id, record)

    if record.get("minecraft_username"):
        dispatcher.notify_whitelist_in_background(record["minecraft_username"])

    dispatcher.send_welcome_email(member_id, record)
    return record


def make_new_member_handler(
    session_factory: sessionmaker,
    dispatcher: NotificationDispatcher,
) -> Callable[[str], Dict]:
    """Bind the handler to its own sessions so it can run off-request"""

    def on_new_member(member_id: str) -> Dict:
        db = session_factory()
        try:
            return register_new_member(member_id, MemberStore(db), dispatcher)
        finally:
            db.close()

    return on_new_member
