from fastapi import status

from storefront.common.exceptions import InternalException


class UserNotFound(InternalException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'
