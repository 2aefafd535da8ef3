import pytest

from storefront.app.catalog import (
    CatalogService,
    Category,
    CategoryCollectionMismatch,
    CategoryUpdate,
    Collection,
    CollectionUpdate,
    Product,
    ProductUpdate,
)
from storefront.core.authorization import (
    AccessDenied,
    AccessTypeEnum,
    CollectionAccess,
    CollectionAccessCreate,
    ResourceNotFound,
)


@pytest.fixture
def catalog_service() -> CatalogService:
    return CatalogService.factory()


class TestCollections:
    def test_merchant_creates_and_owns(self, catalog_service, merchant_principal, collection_payload_factory):
        collection = catalog_service.create_collection(merchant_principal, collection_payload_factory.build())

        assert collection.owner_id == merchant_principal.id
        assert collection.id.startswith('coll-')
        assert not collection.visible

    def test_admin_creates(self, catalog_service, admin_principal, collection_payload_factory):
        collection = catalog_service.create_collection(admin_principal, collection_payload_factory.build())

        assert collection.owner_id == admin_principal.id

    def test_plain_user_cannot_create(self, catalog_service, collaborator_principal, collection_payload_factory):
        with pytest.raises(AccessDenied):
            catalog_service.create_collection(collaborator_principal, collection_payload_factory.build())

    def test_public_cannot_create(self, catalog_service, public_principal, collection_payload_factory):
        with pytest.raises(AccessDenied):
            catalog_service.create_collection(public_principal, collection_payload_factory.build())

    def test_private_collection_hidden(self, catalog_service, other_merchant_principal, collection):
        with pytest.raises(AccessDenied):
            catalog_service.get_collection(other_merchant_principal, collection.id)

    def test_visible_collection_public(self, catalog_service, public_principal, visible_collection):
        assert catalog_service.get_collection(public_principal, visible_collection.id).id == visible_collection.id

    def test_list_collections(
        self, catalog_service, merchant_principal, public_principal, collection, visible_collection
    ):
        assert {c.id for c in catalog_service.list_collections(merchant_principal)} >= {
            collection.id,
            visible_collection.id,
        }
        public_ids = {c.id for c in catalog_service.list_collections(public_principal)}
        assert visible_collection.id in public_ids
        assert collection.id not in public_ids

    def test_partial_update(self, catalog_service, merchant_principal, collection):
        updated = catalog_service.update_collection(
            merchant_principal, collection.id, CollectionUpdate(visible=True)
        )

        assert updated.visible
        assert updated.name == collection.name

    def test_view_grantee_cannot_update(self, catalog_service, merchant, collaborator_principal, collection):
        CollectionAccess.create(
            CollectionAccessCreate(
                collection_id=collection.id,
                user_id=collaborator_principal.id,
                access_type=AccessTypeEnum.VIEW,
                granted_by=merchant.id,
            )
        )

        with pytest.raises(AccessDenied):
            catalog_service.update_collection(collaborator_principal, collection.id, CollectionUpdate(name='Mine'))

    def test_delete_cascades(self, catalog_service, merchant_principal, collaborator, product, category):
        collection_id = product.collection_id
        CollectionAccess.create(
            CollectionAccessCreate(
                collection_id=collection_id, user_id=collaborator.id, access_type=AccessTypeEnum.VIEW
            )
        )

        catalog_service.delete_collection(merchant_principal, collection_id)

        assert Collection.get_or_none(Collection.id == collection_id) is None
        assert Product.get_or_none(Product.id == product.id) is None
        assert Category.get_or_none(Category.id == category.id) is None
        assert CollectionAccess.count(CollectionAccess.collection_id == collection_id) == 0

    def test_delete_missing(self, catalog_service, merchant_principal):
        with pytest.raises(ResourceNotFound):
            catalog_service.delete_collection(merchant_principal, 'coll-doesnotexist')


class TestCategories:
    def test_edit_grantee_creates_category(
        self, catalog_service, merchant, collaborator_principal, collection, category_factory
    ):
        CollectionAccess.create(
            CollectionAccessCreate(
                collection_id=collection.id,
                user_id=collaborator_principal.id,
                access_type=AccessTypeEnum.EDIT,
                granted_by=merchant.id,
            )
        )

        category = catalog_service.create_category(
            collaborator_principal, category_factory.build(collection_id=collection.id)
        )

        assert category.collection_id == collection.id

    def test_update_category(self, catalog_service, merchant_principal, category):
        updated = catalog_service.update_category(merchant_principal, category.id, CategoryUpdate(name='Hoodies'))

        assert updated.name == 'Hoodies'

    def test_delete_category_keeps_products(self, catalog_service, merchant_principal, category, product):
        catalog_service.delete_category(merchant_principal, category.id)

        assert Category.get_or_none(Category.id == category.id) is None
        assert Product.get(Product.id == product.id).category_id is None

    def test_public_reads_but_cannot_delete(self, catalog_service, public_principal, category):
        assert catalog_service.get_category(public_principal, category.id).id == category.id

        with pytest.raises(AccessDenied):
            catalog_service.delete_category(public_principal, category.id)


class TestProducts:
    def test_create_product(self, catalog_service, merchant_principal, category, product_factory):
        product = catalog_service.create_product(
            merchant_principal, product_factory.build(collection_id=category.collection_id, category_id=category.id)
        )

        assert product.category_id == category.id

    def test_category_from_another_collection(
        self, catalog_service, merchant_principal, collection, category, product_factory
    ):
        with pytest.raises(CategoryCollectionMismatch):
            catalog_service.create_product(
                merchant_principal, product_factory.build(collection_id=collection.id, category_id=category.id)
            )

    def test_move_product_to_foreign_category(
        self, catalog_service, merchant_principal, collection, product, category_factory
    ):
        foreign_category = Category.create(category_factory.build(collection_id=collection.id))

        with pytest.raises(CategoryCollectionMismatch):
            catalog_service.update_product(
                merchant_principal, product.id, ProductUpdate(category_id=foreign_category.id)
            )

    def test_clear_product_category(self, catalog_service, merchant_principal, product):
        updated = catalog_service.update_product(merchant_principal, product.id, ProductUpdate(category_id=None))

        assert updated.category_id is None

    def test_clear_optional_product_fields(self, catalog_service, merchant_principal, product):
        updated = catalog_service.update_product(
            merchant_principal, product.id, ProductUpdate(description=None, sku=None)
        )

        assert updated.description is None
        assert updated.sku is None
        assert updated.name == product.name
        assert updated.images == product.images

    def test_list_products(self, catalog_service, public_principal, collection, product, product_factory):
        hidden = Product.create(product_factory.build(collection_id=collection.id))

        listed = {p.id for p in catalog_service.list_products(public_principal)}

        assert product.id in listed
        assert hidden.id not in listed

    def test_stranger_cannot_edit(self, catalog_service, other_merchant_principal, product):
        with pytest.raises(AccessDenied):
            catalog_service.update_product(other_merchant_principal, product.id, ProductUpdate(name='Mine'))

    def test_delete_product(self, catalog_service, merchant_principal, product):
        catalog_service.delete_product(merchant_principal, product.id)

        assert catalog_service.get_product_or_none(product.id) is None
