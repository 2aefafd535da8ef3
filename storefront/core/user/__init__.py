from storefront.core.user.constants import COLLECTION_OWNER_ROLES, UserRoleEnum
from storefront.core.user.domains import TransferCandidate, UserCreate, UserRead
from storefront.core.user.exceptions import UserNotFound
from storefront.core.user.models import User
from storefront.core.user.service import UserService

__all__ = [
    'COLLECTION_OWNER_ROLES',
    'TransferCandidate',
    'User',
    'UserCreate',
    'UserNotFound',
    'UserRead',
    'UserRoleEnum',
    'UserService',
]
