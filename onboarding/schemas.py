from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class AddUserRequest(BaseModel):
    timestamp: str
    first_name: str
    last_name: str
    # stored exactly as given, never normalized
    email: Optional[str] = None
    unsw_id: Optional[str] = None
    discord_username: Optional[str] = None
    minecraft_username: Optional[str] = None

    @field_validator("email", "unsw_id", "discord_username", "minecraft_username", mode="before")
    @classmethod
    def blank_as_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


# verifyUser/findUser fields are optional here so that missing and empty
# values both get the same 400 from the route.
class VerifyUserRequest(BaseModel):
    user_id: Optional[str] = None
    verification_code: Optional[str] = None
    discord_id: Optional[str] = None


class VerifyUserResponse(BaseModel):
    is_verified: bool


class FindUserRequest(BaseModel):
    discord_id: Optional[str] = None
    minecraft_username: Optional[str] = None


class MemberRecord(BaseModel):
    id: str
    timestamp: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    unsw_id: Optional[str] = None
    discord_username: Optional[str] = None
    minecraft_username: Optional[str] = None
    discord_id: Optional[str] = None
    is_verified: Optional[bool] = None
    verification_code: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class FindUserResponse(BaseModel):
    results: List[MemberRecord]
