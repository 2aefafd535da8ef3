"""
Integration tests for AccessDecisionService.

Cover resolution of every resource type through its handler, the not found /
denied split, and that listings agree with point checks against real rows.
"""

import pytest

from storefront.app.catalog import Collection, CollectionCreate, Product
from storefront.app.orders import Order, OrderService
from storefront.app.orders.domains import OrderCreatePayload
from storefront.core.authorization import (
    AccessDecisionService,
    AccessDenied,
    AccessOutcomeEnum,
    AccessTypeEnum,
    CollectionAccess,
    CollectionAccessCreate,
    RequiredLevelEnum,
    ResourceNotFound,
    ResourceRef,
    ResourceTypeEnum,
)
from storefront.core.identity import BuyerIdentity


@pytest.fixture
def access_decision_service() -> AccessDecisionService:
    return AccessDecisionService.factory()


def _grant(collection_id, user_id, access_type, granted_by=None):
    return CollectionAccess.create(
        CollectionAccessCreate(
            collection_id=collection_id, user_id=user_id, access_type=access_type, granted_by=granted_by
        )
    )


@pytest.fixture
def order(product):
    buyer = BuyerIdentity(wallet_address='wallet-resolver-test')
    return OrderService.factory().create_order(buyer, OrderCreatePayload(product_id=product.id))


class TestResolution:
    def test_collection_resolves_to_itself(self, access_decision_service, collection):
        assert access_decision_service.resolve_collection(ResourceRef.collection(collection.id)) == collection.id

    def test_children_resolve_to_their_collection(self, access_decision_service, product, category, order):
        collection_id = product.collection_id

        assert access_decision_service.resolve_collection(ResourceRef.category(category.id)) == collection_id
        assert access_decision_service.resolve_collection(ResourceRef.product(product.id)) == collection_id
        assert access_decision_service.resolve_collection(ResourceRef.order(order.id)) == collection_id

    @pytest.mark.parametrize('resource_type', list(ResourceTypeEnum))
    def test_missing_resource_not_found(self, access_decision_service, resource_type):
        ref = ResourceRef(resource_type=resource_type, resource_id='nope-1234567890123')

        with pytest.raises(ResourceNotFound):
            access_decision_service.resolve_collection(ref)

    def test_new_collection_ref_does_not_resolve(self, access_decision_service):
        with pytest.raises(ResourceNotFound):
            access_decision_service.resolve_collection(ResourceRef.new_collection())

    def test_unregistered_handler(self, collection):
        from storefront.app.catalog import CollectionResourceHandler

        service = AccessDecisionService(resource_handlers=[CollectionResourceHandler()])

        with pytest.raises(ValueError):
            service.get_handler_for_resource_type(ResourceTypeEnum.ORDER)

    def test_collection_handler_required(self):
        from storefront.app.catalog import ProductResourceHandler

        with pytest.raises(ValueError):
            AccessDecisionService(resource_handlers=[ProductResourceHandler()])


class TestCanAccess:
    def test_owner_edits_product(self, access_decision_service, merchant_principal, product):
        assert access_decision_service.can_access(
            merchant_principal, ResourceRef.product(product.id), RequiredLevelEnum.EDIT
        ).is_allowed

    def test_public_views_visible_product_but_cannot_edit(self, access_decision_service, public_principal, product):
        ref = ResourceRef.product(product.id)

        assert access_decision_service.can_access(public_principal, ref, RequiredLevelEnum.VIEW).is_allowed
        assert not access_decision_service.can_access(public_principal, ref, RequiredLevelEnum.EDIT).is_allowed

    def test_public_cannot_view_private_collection(self, access_decision_service, public_principal, collection):
        decision = access_decision_service.can_access(
            public_principal, ResourceRef.collection(collection.id), RequiredLevelEnum.VIEW
        )

        assert decision.outcome == AccessOutcomeEnum.DENIED

    def test_missing_resource_is_not_found(self, access_decision_service, merchant_principal):
        decision = access_decision_service.can_access(
            merchant_principal, ResourceRef.product('prod-doesnotexist'), RequiredLevelEnum.VIEW
        )

        assert decision.outcome == AccessOutcomeEnum.NOT_FOUND

    def test_admin_overrides_everything(self, access_decision_service, admin_principal, collection):
        assert access_decision_service.can_access(
            admin_principal, ResourceRef.collection(collection.id), RequiredLevelEnum.EDIT
        ).is_allowed

    def test_grant_scenario(self, access_decision_service, merchant, collaborator_principal, collection):
        """Owner grants view, then upgrades to edit"""
        ref = ResourceRef.collection(collection.id)

        _grant(collection.id, collaborator_principal.id, AccessTypeEnum.VIEW, granted_by=merchant.id)
        assert access_decision_service.can_access(collaborator_principal, ref, RequiredLevelEnum.VIEW).is_allowed
        assert not access_decision_service.can_access(collaborator_principal, ref, RequiredLevelEnum.EDIT).is_allowed

        CollectionAccess.bulk_update(
            updates={'access_type': AccessTypeEnum.EDIT.value},
            clauses=[CollectionAccess.collection_id == collection.id],
        )
        assert access_decision_service.can_access(collaborator_principal, ref, RequiredLevelEnum.EDIT).is_allowed
        assert not access_decision_service.can_access(collaborator_principal, ref, RequiredLevelEnum.CREATE).is_allowed

    def test_grant_reaches_children(self, access_decision_service, merchant, collaborator_principal, product):
        _grant(product.collection_id, collaborator_principal.id, AccessTypeEnum.EDIT, granted_by=merchant.id)

        assert access_decision_service.can_access(
            collaborator_principal, ResourceRef.product(product.id), RequiredLevelEnum.EDIT
        ).is_allowed

    def test_include_public_false_ignores_visibility(self, access_decision_service, public_principal, product):
        decision = access_decision_service.can_access(
            public_principal,
            ResourceRef.collection(product.collection_id),
            RequiredLevelEnum.VIEW,
            include_public=False,
        )

        assert not decision.is_allowed


class TestCheckAccess:
    def test_denied_raises_access_denied(self, access_decision_service, other_merchant_principal, collection):
        with pytest.raises(AccessDenied):
            access_decision_service.check_access(
                other_merchant_principal, ResourceRef.collection(collection.id), RequiredLevelEnum.VIEW
            )

    def test_missing_raises_not_found(self, access_decision_service, other_merchant_principal):
        with pytest.raises(ResourceNotFound):
            access_decision_service.check_access(
                other_merchant_principal, ResourceRef.collection('coll-doesnotexist'), RequiredLevelEnum.VIEW
            )

    def test_both_render_identically(self, access_decision_service, other_merchant_principal, collection):
        with pytest.raises(AccessDenied) as denied:
            access_decision_service.check_access(
                other_merchant_principal, ResourceRef.collection(collection.id), RequiredLevelEnum.EDIT
            )
        with pytest.raises(ResourceNotFound) as missing:
            access_decision_service.check_access(
                other_merchant_principal, ResourceRef.collection('coll-doesnotexist'), RequiredLevelEnum.EDIT
            )

        assert denied.value.status_code == missing.value.status_code
        assert denied.value.public_detail == missing.value.public_detail


class TestListing:
    @pytest.fixture
    def catalog(self, merchant, other_merchant, collaborator):
        def _collection(owner, visible):
            return Collection.create(
                CollectionCreate(name=f'{owner.username}-{visible}', owner_id=owner.id, visible=visible)
            )

        collections = {
            'merchant_private': _collection(merchant, False),
            'merchant_visible': _collection(merchant, True),
            'other_private': _collection(other_merchant, False),
            'other_visible': _collection(other_merchant, True),
            'other_shared_view': _collection(other_merchant, False),
            'other_shared_edit': _collection(other_merchant, False),
        }
        _grant(collections['other_shared_view'].id, collaborator.id, AccessTypeEnum.VIEW)
        _grant(collections['other_shared_edit'].id, collaborator.id, AccessTypeEnum.EDIT)
        _grant(collections['other_shared_edit'].id, merchant.id, AccessTypeEnum.VIEW)
        return collections

    @pytest.mark.parametrize(
        'principal_fixture',
        [
            'merchant_principal',
            'other_merchant_principal',
            'collaborator_principal',
            'admin_principal',
            'public_principal',
        ],
    )
    @pytest.mark.parametrize('level', [RequiredLevelEnum.VIEW, RequiredLevelEnum.EDIT])
    def test_listing_matches_point_checks(self, request, access_decision_service, catalog, principal_fixture, level):
        principal = request.getfixturevalue(principal_fixture)
        all_collection_ids = Collection.list_attribute('id')

        listed = access_decision_service.list_accessible_collection_ids(principal, level)
        pointwise = {
            collection_id
            for collection_id in all_collection_ids
            if access_decision_service.can_access(principal, ResourceRef.collection(collection_id), level).is_allowed
        }

        assert listed == pointwise

    def test_collaborator_view_listing(self, access_decision_service, catalog, collaborator_principal):
        listed = access_decision_service.list_accessible_collection_ids(collaborator_principal)

        assert catalog['other_shared_view'].id in listed
        assert catalog['other_shared_edit'].id in listed
        assert catalog['merchant_visible'].id in listed
        assert catalog['other_private'].id not in listed

    def test_collaborator_edit_listing(self, access_decision_service, catalog, collaborator_principal):
        listed = access_decision_service.list_accessible_collection_ids(collaborator_principal, RequiredLevelEnum.EDIT)

        assert listed == {catalog['other_shared_edit'].id}

    def test_permitted_product_ids(self, access_decision_service, catalog, other_merchant_principal, product_factory):
        private_product = Product.create(product_factory.build(collection_id=catalog['merchant_private'].id))
        visible_product = Product.create(product_factory.build(collection_id=catalog['merchant_visible'].id))

        permitted = access_decision_service.list_permitted_ids(other_merchant_principal, ResourceTypeEnum.PRODUCT)

        assert visible_product.id in permitted
        assert private_product.id not in permitted

    def test_permitted_ids_empty_without_collections(self, access_decision_service, public_principal):
        assert access_decision_service.list_permitted_ids(public_principal, ResourceTypeEnum.CATEGORY) == set()


def test_order_detached_from_deleted_collection_only_admin(
    access_decision_service, order, merchant_principal, admin_principal
):
    Order.bulk_update(updates={'collection_id': None}, clauses=[Order.id == order.id])
    ref = ResourceRef.order(order.id)

    assert access_decision_service.can_access(merchant_principal, ref, RequiredLevelEnum.VIEW).outcome == (
        AccessOutcomeEnum.NOT_FOUND
    )
    assert access_decision_service.can_access(admin_principal, ref, RequiredLevelEnum.VIEW).is_allowed

