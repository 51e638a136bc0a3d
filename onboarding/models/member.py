from sqlalchemy import Boolean, Column, String

from onboarding.core.config import get_settings
from onboarding.db.base import Base, BaseModel

# Fields that make up a member record body, in display order
MEMBER_FIELDS = (
    "timestamp",
    "first_name",
    "last_name",
    "email",
    "unsw_id",
    "discord_username",
    "minecraft_username",
    "discord_id",
    "is_verified",
    "verification_code",
)


class Member(Base, BaseModel):
    __tablename__ = get_settings().DEFAULT_COLLECTION

    # Supplied by the caller, opaque to us
    timestamp = Column(String, nullable=True)

    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    unsw_id = Column(String, nullable=True, index=True)

    discord_username = Column(String, nullable=True)
    minecraft_username = Column(String, nullable=True, index=True)

    # Verification fields (set by the registration handler / verifyUser)
    discord_id = Column(String, nullable=True, index=True)
    is_verified = Column(Boolean, nullable=True)
    verification_code = Column(String, nullable=True)

    def to_dict(self) -> dict:
        """Record body with its id; fields that were never set are left out."""
        record = {"id": self.id}
        for field in MEMBER_FIELDS:
            value = getattr(self, field)
            if value is not None:
                record[field] = value
        return record

    def apply(self, data: dict):
        """Overwrite every record field from `data`; missing fields are cleared."""
        for field in MEMBER_FIELDS:
            setattr(self, field, data.get(field))

    def __repr__(self):
        return f"<Member {self.id} ({self.first_name} {self.last_name})>"
