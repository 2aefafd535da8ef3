from typing import Literal, Union

from storefront.common.domain import BaseDomain
from storefront.common.nanoid import NanoIdType
from storefront.core.user.constants import UserRoleEnum


class AdminPrincipal(BaseDomain):
    """Platform wide override, never subject to ownership or grants"""

    kind: Literal['admin'] = 'admin'
    id: NanoIdType

    @property
    def user_id(self) -> NanoIdType:
        return self.id

    @property
    def role(self) -> UserRoleEnum:
        return UserRoleEnum.ADMIN


class UserPrincipal(BaseDomain):
    kind: Literal['user'] = 'user'
    id: NanoIdType
    role: UserRoleEnum

    @property
    def user_id(self) -> NanoIdType:
        return self.id


class PublicPrincipal(BaseDomain):
    """Anonymous storefront visitor"""

    kind: Literal['public'] = 'public'

    @property
    def user_id(self) -> None:
        return None

    @property
    def role(self) -> None:
        return None


# Each variant carries a literal kind, used to tell them apart when serialized
Principal = Union[AdminPrincipal, UserPrincipal, PublicPrincipal]


class BuyerIdentity(BaseDomain):
    """
    Wallet address proven by the buyer credential pair. Deliberately shares
    nothing with Principal so one can never be passed where the other is expected.
    """

    wallet_address: str


class SessionTokenContent(BaseDomain):
    sub: NanoIdType
    exp: int
    iat: int | None = None
