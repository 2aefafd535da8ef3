from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from storefront.common.model import BaseModel
from storefront.core.user.constants import USER_PK_ABBREV, UserRoleEnum
from storefront.core.user.domains import UserCreate, UserRead


class User(BaseModel[UserRead, UserCreate]):
    email: Mapped[str] = mapped_column(String(length=320), unique=True, index=True, nullable=False)
    username: Mapped[Optional[str]] = mapped_column(String(length=150), nullable=True)
    display_name: Mapped[Optional[str]] = mapped_column(String(length=255), nullable=True)
    role: Mapped[str] = mapped_column(
        String(length=20),
        nullable=False,
        default=UserRoleEnum.USER.value,
        server_default=UserRoleEnum.USER.value,
        comment=f'User roles: {UserRoleEnum.describe()}',
    )

    __pk_abbrev__ = USER_PK_ABBREV
    __read_domain__ = UserRead
    __create_domain__ = UserCreate
