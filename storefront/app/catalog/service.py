from typing import List

from loguru import logger

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
from storefront.common.nanoid import NanoIdType
from storefront.core.authorization import AccessDecisionService, RequiredLevelEnum, ResourceRef, ResourceTypeEnum
from storefront.core.identity.domains import Principal


class CatalogService:
    """
    Collections, categories and products. Every public method takes the
    calling principal and authorizes through the AccessDecisionService first.
    """

    def __init__(self, access_decision_service: AccessDecisionService):
        self.access_decision_service = access_decision_service

    @classmethod
    def factory(cls) -> 'CatalogService':
        return cls(access_decision_service=AccessDecisionService.factory())

    # Collections

    def create_collection(self, principal: Principal, payload: CollectionCreatePayload) -> CollectionRead:
        self.access_decision_service.check_access(principal, ResourceRef.new_collection(), RequiredLevelEnum.CREATE)
        collection = Collection.create(CollectionCreate(**payload.to_dict(), owner_id=principal.user_id))
        logger.info(f'collection {collection.id} created by {principal.user_id}')
        return collection

    def get_collection(self, principal: Principal, collection_id: NanoIdType) -> CollectionRead:
        self.access_decision_service.check_access(
            principal, ResourceRef.collection(collection_id), RequiredLevelEnum.VIEW
        )
        return Collection.get(Collection.id == collection_id)

    def list_collections(self, principal: Principal) -> List[CollectionRead]:
        collection_ids = self.access_decision_service.list_accessible_collection_ids(principal)
        if not collection_ids:
            return []
        return Collection.list(Collection.id.in_(collection_ids), ordering=['-created_at'])

    def update_collection(
        self, principal: Principal, collection_id: NanoIdType, payload: CollectionUpdate
    ) -> CollectionRead:
        self.access_decision_service.check_access(
            principal, ResourceRef.collection(collection_id), RequiredLevelEnum.EDIT
        )
        updates = payload.get_provided_fields()
        if not updates:
            return Collection.get(Collection.id == collection_id)
        return Collection.update(collection_id, **updates)

    def delete_collection(self, principal: Principal, collection_id: NanoIdType) -> None:
        """
        Categories, products and grants cascade. Orders keep their snapshots
        and lose the foreign keys.
        """
        # Import here to avoid circular imports
        from storefront.app.orders.service import OrderService

        self.access_decision_service.check_access(
            principal, ResourceRef.collection(collection_id), RequiredLevelEnum.EDIT
        )
        order_service = OrderService.factory()
        for product_id in Product.list_attribute('id', Product.collection_id == collection_id):
            order_service.detach_product(product_id)
        for category_id in Category.list_attribute('id', Category.collection_id == collection_id):
            order_service.detach_category(category_id)
        order_service.detach_collection(collection_id)

        # Children go first so the identity map never holds rows the database cascaded away
        Product.delete(Product.collection_id == collection_id)
        Category.delete(Category.collection_id == collection_id)
        Collection.delete(Collection.id == collection_id)
        logger.info(f'collection {collection_id} deleted by {principal.user_id}')

    # Categories

    def create_category(self, principal: Principal, category: CategoryCreate) -> CategoryRead:
        self.access_decision_service.check_access(
            principal, ResourceRef.collection(category.collection_id), RequiredLevelEnum.EDIT
        )
        return Category.create(category)

    def get_category(self, principal: Principal, category_id: NanoIdType) -> CategoryRead:
        self.access_decision_service.check_access(principal, ResourceRef.category(category_id), RequiredLevelEnum.VIEW)
        return Category.get(Category.id == category_id)

    def list_categories_for_collection(self, principal: Principal, collection_id: NanoIdType) -> List[CategoryRead]:
        self.access_decision_service.check_access(
            principal, ResourceRef.collection(collection_id), RequiredLevelEnum.VIEW
        )
        return Category.list(Category.collection_id == collection_id, ordering=['name'])

    def update_category(self, principal: Principal, category_id: NanoIdType, payload: CategoryUpdate) -> CategoryRead:
        self.access_decision_service.check_access(principal, ResourceRef.category(category_id), RequiredLevelEnum.EDIT)
        updates = payload.get_provided_fields()
        if not updates:
            return Category.get(Category.id == category_id)
        return Category.update(category_id, **updates)

    def delete_category(self, principal: Principal, category_id: NanoIdType) -> None:
        # Import here to avoid circular imports
        from storefront.app.orders.service import OrderService

        self.access_decision_service.check_access(principal, ResourceRef.category(category_id), RequiredLevelEnum.EDIT)
        OrderService.factory().detach_category(category_id)
        Product.bulk_update(updates={'category_id': None}, clauses=[Product.category_id == category_id])
        Category.delete(Category.id == category_id)

    # Products

    def _validate_category(self, collection_id: NanoIdType, category_id: NanoIdType | None) -> None:
        if category_id is None:
            return
        category = Category.get_or_none(Category.id == category_id)
        if category is None or category.collection_id != collection_id:
            raise CategoryCollectionMismatch(context={'collection_id': collection_id, 'category_id': category_id})

    def create_product(self, principal: Principal, product: ProductCreate) -> ProductRead:
        self.access_decision_service.check_access(
            principal, ResourceRef.collection(product.collection_id), RequiredLevelEnum.EDIT
        )
        self._validate_category(product.collection_id, product.category_id)
        return Product.create(product)

    def get_product(self, principal: Principal, product_id: NanoIdType) -> ProductRead:
        self.access_decision_service.check_access(principal, ResourceRef.product(product_id), RequiredLevelEnum.VIEW)
        return Product.get(Product.id == product_id)

    def get_product_or_none(self, product_id: NanoIdType) -> ProductRead | None:
        """Unchecked lookup for internal callers such as order creation"""
        return Product.get_or_none(Product.id == product_id)

    def list_products_for_collection(self, principal: Principal, collection_id: NanoIdType) -> List[ProductRead]:
        self.access_decision_service.check_access(
            principal, ResourceRef.collection(collection_id), RequiredLevelEnum.VIEW
        )
        return Product.list(Product.collection_id == collection_id, ordering=['name'])

    def list_products(self, principal: Principal) -> List[ProductRead]:
        product_ids = self.access_decision_service.list_permitted_ids(principal, ResourceTypeEnum.PRODUCT)
        if not product_ids:
            return []
        return Product.list(Product.id.in_(product_ids), ordering=['name'])

    def update_product(self, principal: Principal, product_id: NanoIdType, payload: ProductUpdate) -> ProductRead:
        self.access_decision_service.check_access(principal, ResourceRef.product(product_id), RequiredLevelEnum.EDIT)
        updates = payload.get_provided_fields()
        if 'category_id' in updates:
            product = Product.get(Product.id == product_id)
            self._validate_category(product.collection_id, updates['category_id'])
        if not updates:
            return Product.get(Product.id == product_id)
        return Product.update(product_id, **updates)

    def delete_product(self, principal: Principal, product_id: NanoIdType) -> None:
        # Import here to avoid circular imports
        from storefront.app.orders.service import OrderService

        self.access_decision_service.check_access(principal, ResourceRef.product(product_id), RequiredLevelEnum.EDIT)
        OrderService.factory().detach_product(product_id)
        Product.delete(Product.id == product_id)
