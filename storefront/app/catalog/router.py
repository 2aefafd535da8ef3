from typing import List

from fastapi import APIRouter, Depends

from storefront.app.catalog.domains import (
    CategoryCreate,
    CategoryRead,
    CategoryUpdate,
    CollectionCreatePayload,
    CollectionRead,
    CollectionUpdate,
    ProductCreate,
    ProductRead,
    ProductUpdate,
)
from storefront.app.catalog.service import CatalogService
from storefront.common.nanoid import NanoIdType
from storefront.core.identity.domains import Principal
from storefront.core.identity.guards import AuthenticatedPrincipalGuard, PrincipalGuard

router = APIRouter()


@router.post('/create-collection')
def create_collection(
    payload: CollectionCreatePayload,
    principal: Principal = AuthenticatedPrincipalGuard(),
    catalog_service: CatalogService = Depends(CatalogService.factory),
) -> CollectionRead:
    """Create a collection owned by the caller (merchants and admins only)"""
    return catalog_service.create_collection(principal, payload)


@router.get('/list-collections')
def list_collections(
    principal: Principal = PrincipalGuard(),
    catalog_service: CatalogService = Depends(CatalogService.factory),
) -> List[CollectionRead]:
    """Visible collections plus anything the caller owns or was granted"""
    return catalog_service.list_collections(principal)


@router.get('/get-collection/{collection_id}')
def get_collection(
    collection_id: NanoIdType,
    principal: Principal = PrincipalGuard(),
    catalog_service: CatalogService = Depends(CatalogService.factory),
) -> CollectionRead:
    return catalog_service.get_collection(principal, collection_id)


@router.patch('/update-collection/{collection_id}')
def update_collection(
    collection_id: NanoIdType,
    payload: CollectionUpdate,
    principal: Principal = AuthenticatedPrincipalGuard(),
    catalog_service: CatalogService = Depends(CatalogService.factory),
) -> CollectionRead:
    return catalog_service.update_collection(principal, collection_id, payload)


@router.delete('/delete-collection/{collection_id}')
def delete_collection(
    collection_id: NanoIdType,
    principal: Principal = AuthenticatedPrincipalGuard(),
    catalog_service: CatalogService = Depends(CatalogService.factory),
) -> None:
    catalog_service.delete_collection(principal, collection_id)


@router.post('/create-category')
def create_category(
    payload: CategoryCreate,
    principal: Principal = AuthenticatedPrincipalGuard(),
    catalog_service: CatalogService = Depends(CatalogService.factory),
) -> CategoryRead:
    return catalog_service.create_category(principal, payload)


@router.get('/list-categories/{collection_id}')
def list_categories(
    collection_id: NanoIdType,
    principal: Principal = PrincipalGuard(),
    catalog_service: CatalogService = Depends(CatalogService.factory),
) -> List[CategoryRead]:
    return catalog_service.list_categories_for_collection(principal, collection_id)


@router.patch('/update-category/{category_id}')
def update_category(
    category_id: NanoIdType,
    payload: CategoryUpdate,
    principal: Principal = AuthenticatedPrincipalGuard(),
    catalog_service: CatalogService = Depends(CatalogService.factory),
) -> CategoryRead:
    return catalog_service.update_category(principal, category_id, payload)


@router.delete('/delete-category/{category_id}')
def delete_category(
    category_id: NanoIdType,
    principal: Principal = AuthenticatedPrincipalGuard(),
    catalog_service: CatalogService = Depends(CatalogService.factory),
) -> None:
    catalog_service.delete_category(principal, category_id)


@router.post('/create-product')
def create_product(
    payload: ProductCreate,
    principal: Principal = AuthenticatedPrincipalGuard(),
    catalog_service: CatalogService = Depends(CatalogService.factory),
) -> ProductRead:
    return catalog_service.create_product(principal, payload)


@router.get('/get-product/{product_id}')
def get_product(
    product_id: NanoIdType,
    principal: Principal = PrincipalGuard(),
    catalog_service: CatalogService = Depends(CatalogService.factory),
) -> ProductRead:
    return catalog_service.get_product(principal, product_id)


@router.patch('/update-product/{product_id}')
def update_product(
    product_id: NanoIdType,
    payload: ProductUpdate,
    principal: Principal = AuthenticatedPrincipalGuard(),
    catalog_service: CatalogService = Depends(CatalogService.factory),
) -> ProductRead:
    return catalog_service.update_product(principal, product_id, payload)


@router.delete('/delete-product/{product_id}')
def delete_product(
    product_id: NanoIdType,
    principal: Principal = AuthenticatedPrincipalGuard(),
    catalog_service: CatalogService = Depends(CatalogService.factory),
) -> None:
    catalog_service.delete_product(principal, product_id)


@router.get('/list-products/{collection_id}')
def list_products(
    collection_id: NanoIdType,
    principal: Principal = PrincipalGuard(),
    catalog_service: CatalogService = Depends(CatalogService.factory),
) -> List[ProductRead]:
    return catalog_service.list_products_for_collection(principal, collection_id)
