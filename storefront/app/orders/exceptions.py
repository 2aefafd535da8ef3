from fastapi import status

from storefront.common.exceptions import InternalException


class OrderException(InternalException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid order request.'
    default_code = 'invalid_order_request'


class OrderNotFound(OrderException):
    """Missing and foreign orders look the same to buyers"""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'

    @property
    def public_detail(self) -> str:
        return self.default_detail


class ProductUnavailable(OrderException):
    default_detail = 'Product is not available for purchase.'
    default_code = 'product_unavailable'


class SnapshotImmutable(OrderException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Internal failure.'
    default_code = 'snapshot_immutable'
