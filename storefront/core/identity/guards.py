from typing import Optional

from fastapi import Depends, Header, Request, params, status
from fastapi.security import OAuth2PasswordBearer
from fastapi.security.utils import get_authorization_scheme_param

from storefront import settings
from storefront.common import context
from storefront.common.exceptions import APIException
from storefront.core.identity.domains import AdminPrincipal, BuyerIdentity, Principal, PublicPrincipal
from storefront.core.identity.service import IdentityService


class _RouterGuard(params.Security):
    def __call__(self, *args, **kwargs):
        return self


class SessionToken(OAuth2PasswordBearer):
    """
    Optional bearer token, anonymous callers resolve to the public principal
    """

    async def __call__(self, request: Request) -> Optional[str]:
        authorization = request.headers.get('Authorization')
        scheme, token = get_authorization_scheme_param(authorization)
        if not authorization or scheme.lower() != 'bearer':
            return None
        return token


session_token = SessionToken(
    scheme_name='merchant-session',
    tokenUrl='api/auth/token',
    description='Merchant / admin session issued by the credential service',
    auto_error=False,
)


def resolve_principal(
    token: Optional[str] = Depends(session_token),
    identity_service: IdentityService = Depends(IdentityService.factory),
) -> Principal:
    principal = identity_service.resolve_principal(token)
    if isinstance(principal, PublicPrincipal):
        context.set_user(user_type=context.AppContextUserType.PUBLIC)
    else:
        context.set_user(user_type=context.AppContextUserType.USER, user_id=principal.id)
    return principal


PrincipalGuard = _RouterGuard(dependency=resolve_principal)


def _require_authenticated_principal(principal: Principal = PrincipalGuard()) -> Principal:
    if isinstance(principal, PublicPrincipal):
        raise APIException(code=status.HTTP_401_UNAUTHORIZED, message='Not authenticated')
    return principal


AuthenticatedPrincipalGuard = _RouterGuard(dependency=_require_authenticated_principal)


def _require_admin(principal: Principal = AuthenticatedPrincipalGuard()) -> AdminPrincipal:
    if not isinstance(principal, AdminPrincipal):
        raise APIException(code=status.HTTP_403_FORBIDDEN, message='Denied')
    return principal


AdminGuard = _RouterGuard(dependency=_require_admin)


def resolve_buyer(
    wallet_address: Optional[str] = Header(None, alias=settings.WALLET_ADDRESS_HEADER),
    wallet_token: Optional[str] = Header(None, alias=settings.WALLET_TOKEN_HEADER),
    identity_service: IdentityService = Depends(IdentityService.factory),
) -> BuyerIdentity:
    """
    Buyer endpoints only ever see this dependency, never the session principal
    """
    buyer = identity_service.resolve_buyer(wallet_address=wallet_address, wallet_token=wallet_token)
    if buyer is None:
        raise APIException(code=status.HTTP_401_UNAUTHORIZED, message='Wallet not connected')

    context.set_user(user_type=context.AppContextUserType.BUYER)
    context.set_wallet_address(buyer.wallet_address)
    return buyer


BuyerGuard = _RouterGuard(dependency=resolve_buyer)
