from fastapi import status

from storefront.common.exceptions import InternalException


class CatalogException(InternalException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid catalog request.'
    default_code = 'invalid_catalog_request'


class CategoryCollectionMismatch(CatalogException):
    default_detail = 'Category belongs to a different collection.'
    default_code = 'category_collection_mismatch'
