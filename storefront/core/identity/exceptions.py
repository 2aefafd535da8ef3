from fastapi import status

from storefront.common.exceptions import InternalException


class IdentityException(InternalException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Not authenticated.'
    default_code = 'not_authenticated'


class SessionTokenInvalid(IdentityException):
    default_detail = 'Invalid access token.'
    default_code = 'invalid_session_token'


class SessionTokenExpired(IdentityException):
    default_detail = 'Expired access token.'
    default_code = 'expired_session_token'


class WalletTokenInvalid(IdentityException):
    default_detail = 'Invalid wallet credentials.'
    default_code = 'invalid_wallet_token'


class WalletTokenExpired(IdentityException):
    default_detail = 'Expired wallet credentials.'
    default_code = 'expired_wallet_token'
