"""
User profile model and identity-provider payloads.

Identity is Clerk; the profile document lives in our "users" collection,
keyed by the Clerk user id. Stored field names are camelCase.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for models stored/served with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StatKind(str, Enum):
    """Content kinds that have a per-user counter."""

    NOTES = "notes"
    IDEAS = "ideas"
    RESOURCES = "resources"

    @property
    def field(self) -> str:
        return f"{self.value}Count"


class Preferences(CamelModel):
    theme: Literal["light", "dark"] = "light"
    notifications: bool = True


class PreferencesUpdate(CamelModel):
    """Partial preferences; unset fields keep their stored value."""

    theme: Optional[Literal["light", "dark"]] = None
    notifications: Optional[bool] = None


class UserStats(CamelModel):
    notes_count: int = Field(default=0, ge=0)
    ideas_count: int = Field(default=0, ge=0)
    resources_count: int = Field(default=0, ge=0)


class UserProfile(CamelModel):
    """
    Internal profile for one identity.
    preferences and stats are app-local: identity syncs never overwrite them.
    """

    id: str
    email: str = ""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: str = "User"
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    last_sign_in_at: Optional[datetime] = None
    email_verified: bool = False
    preferences: Preferences = Field(default_factory=Preferences)
    stats: UserStats = Field(default_factory=UserStats)


class EmailVerification(BaseModel):
    status: str = "unverified"


class EmailAddress(BaseModel):
    email_address: str
    verification: Optional[EmailVerification] = None


class IdentityUser(BaseModel):
    """
    User object as sent by Clerk (webhook "data" and Backend API /users/{id}).
    Timestamps are epoch milliseconds.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    email_addresses: List[EmailAddress] = Field(default_factory=list)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[int] = None
    updated_at: Optional[int] = None
    last_sign_in_at: Optional[int] = None


class UserMetadata(CamelModel):
    """Read-only projection of the signed-in identity."""

    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: str = ""
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    last_sign_in_at: Optional[datetime] = None


def from_epoch_ms(value: Optional[int]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
