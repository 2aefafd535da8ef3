from storefront.core.identity.domains import (
    AdminPrincipal,
    BuyerIdentity,
    Principal,
    PublicPrincipal,
    UserPrincipal,
)
from storefront.core.identity.service import IdentityService, issue_wallet_token

__all__ = [
    'AdminPrincipal',
    'BuyerIdentity',
    'IdentityService',
    'Principal',
    'PublicPrincipal',
    'UserPrincipal',
    'issue_wallet_token',
]
