from fastapi import Depends
from sqlalchemy.orm import Session

from onboarding.db.session import get_db
from onboarding.services.member_store import MemberStore


def get_member_store(db: Session = Depends(get_db)) -> MemberStore:
    """Dependency for a member store bound to the request's session"""
    return MemberStore(db)
