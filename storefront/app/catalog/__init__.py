from storefront.app.catalog.constants import CATEGORY_PK_ABBREV, COLLECTION_PK_ABBREV, PRODUCT_PK_ABBREV
from storefront.app.catalog.domains import (
    CategoryCreate,
    CategoryRead,
    CategoryUpdate,
    CollectionCreate,
    CollectionCreatePayload,
    CollectionRead,
    CollectionUpdate,
    ProductCreate,
    ProductRead,
    ProductUpdate,
)
from storefront.app.catalog.exceptions import CategoryCollectionMismatch
from storefront.app.catalog.models import Category, Collection, Product
from storefront.app.catalog.resource_handler import (
    CategoryResourceHandler,
    CollectionResourceHandler,
    ProductResourceHandler,
)
from storefront.app.catalog.service import CatalogService

__all__ = [
    'CATEGORY_PK_ABBREV',
    'COLLECTION_PK_ABBREV',
    'PRODUCT_PK_ABBREV',
    'CatalogService',
    'Category',
    'CategoryCollectionMismatch',
    'CategoryCreate',
    'CategoryRead',
    'CategoryResourceHandler',
    'CategoryUpdate',
    'Collection',
    'CollectionCreate',
    'CollectionCreatePayload',
    'CollectionRead',
    'CollectionResourceHandler',
    'CollectionUpdate',
    'Product',
    'ProductCreate',
    'ProductRead',
    'ProductResourceHandler',
    'ProductUpdate',
]
