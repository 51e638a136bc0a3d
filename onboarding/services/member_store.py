import logging
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from onboarding.core.exceptions import UpstreamError, ValidationError
from onboarding.db.base import new_document_id
from onboarding.models.member import MEMBER_FIELDS, Member

logger = logging.getLogger(__name__)


class MemberStore:
    """
    Document-style access to the member collection.

    Records go in and come out as plain dicts keyed by field name.
    Every write commits immediately.
    """

    def __init__(self, db: Session):
        self.db = db

    def create(self, data: Dict) -> str:
        """Insert a new record and return its assigned id"""
        member_id = new_document_id()
        member = Member(id=member_id)
        member.apply(data)

        try:
            self.db.add(member)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to create member: {e}")
            raise UpstreamError() from e

        logger.info(f"✅ Created member {member_id}")
        return member_id

    def get(self, member_id: str) -> Optional[Dict]:
        try:
            member = self.db.get(Member, member_id, populate_existing=True)
        except SQLAlchemyError as e:
            logger.error(f"❌ Failed to read member {member_id}: {e}")
            raise UpstreamError() from e

        return member.to_dict() if member else None

    def set(self, member_id: str, data: Dict) -> Dict:
        """Overwrite the whole record stored under `member_id`"""
        try:
            member = self.db.get(Member, member_id, populate_existing=True)
            if member is None:
                member = Member(id=member_id)
                self.db.add(member)
            member.apply(data)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to write member {member_id}: {e}")
            raise UpstreamError() from e

        return member.to_dict()

    def find(self, **filters) -> List[Dict]:
        """All records where every `field == value` filter holds"""
        unknown = [field for field in filters if field not in MEMBER_FIELDS]
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

        try:
            members = (
                self.db.query(Member)
                .populate_existing()
                .filter_by(**filters)
                .order_by(Member.created_at)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"❌ Member query failed ({filters}): {e}")
            raise UpstreamError() from e

        return [member.to_dict() for member in members]
