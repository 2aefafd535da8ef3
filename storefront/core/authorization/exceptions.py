from fastapi import status

from storefront.common.exceptions import InternalException


class AuthorizationException(InternalException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid request.'
    default_code = 'invalid_request'


class ResourceNotFound(AuthorizationException):
    """The referenced collection, category, product, order or user does not exist"""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'

    @property
    def public_detail(self) -> str:
        return self.default_detail


class AccessDenied(AuthorizationException):
    """
    Exists but the principal may not touch it. Rendered exactly like
    ResourceNotFound so private resources do not leak.
    """

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'

    @property
    def public_detail(self) -> str:
        return self.default_detail


class InvalidAccessType(AuthorizationException):
    default_detail = 'Access type must be one of: view, edit.'
    default_code = 'invalid_access_type'


class SelfGrant(AuthorizationException):
    default_detail = 'You cannot grant access to yourself.'
    default_code = 'self_grant'


class OwnerGrant(AuthorizationException):
    default_detail = 'The collection owner already has full access.'
    default_code = 'owner_grant'


class OwnerRevoke(AuthorizationException):
    default_detail = "The owner's access can only change through an ownership transfer."
    default_code = 'owner_revoke'


class AlreadyOwner(AuthorizationException):
    default_detail = 'User already owns this collection.'
    default_code = 'already_owner'


class RoleIneligible(AuthorizationException):
    default_detail = 'New owner must be a merchant or admin.'
    default_code = 'role_ineligible'


class OwnershipTransferConflict(AuthorizationException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Collection owner changed during transfer, please retry.'
    default_code = 'ownership_transfer_conflict'
