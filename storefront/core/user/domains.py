import datetime
from typing import Optional

from pydantic import EmailStr, Field, computed_field, field_validator

from storefront.common.domain import BaseDomain
from storefront.common.nanoid import NanoId, NanoIdType
from storefront.core.user.constants import USER_PK_ABBREV, UserRoleEnum


class UserCreate(BaseDomain):
    id: Optional[NanoIdType] = Field(default_factory=NanoId.factory(USER_PK_ABBREV))
    email: EmailStr
    username: str | None = None
    display_name: str | None = None
    role: UserRoleEnum = UserRoleEnum.USER

    @field_validator('username', 'display_name')
    @classmethod
    def strip_names(cls, value: str | None) -> str | None:
        return (value.strip() or None) if value else None


class UserRead(BaseDomain):
    id: NanoIdType
    email: str
    username: str | None = None
    display_name: str | None = None
    role: UserRoleEnum
    created_at: datetime.datetime | None = None

    @computed_field
    @property
    def public_username(self) -> str:
        """
        username when set, otherwise the local part of the email
        """
        return self.username or self.email.split('@')[0]


class TransferCandidate(BaseDomain):
    id: NanoIdType
    email: str
    username: str
    display_name: str | None = None
    role: UserRoleEnum

    @classmethod
    def from_user(cls, user: UserRead) -> 'TransferCandidate':
        return cls(
            id=user.id,
            email=user.email,
            username=user.public_username,
            display_name=user.display_name,
            role=user.role,
        )
