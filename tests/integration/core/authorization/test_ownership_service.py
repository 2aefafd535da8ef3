import pytest

from storefront.core.authorization import (
    AccessDecisionService,
    AccessDenied,
    AccessTypeEnum,
    AlreadyOwner,
    CollectionAccess,
    CollectionAccessCreate,
    OwnershipService,
    OwnershipTransferConflict,
    RequiredLevelEnum,
    ResourceNotFound,
    ResourceRef,
    RoleIneligible,
)
from storefront.core.user import UserNotFound


@pytest.fixture
def ownership_service() -> OwnershipService:
    return OwnershipService.factory()


def _grant_for(collection_id, user_id):
    return CollectionAccess.get_or_none(
        CollectionAccess.collection_id == collection_id, CollectionAccess.user_id == user_id
    )


def _can(principal, collection_id, level) -> bool:
    return (
        AccessDecisionService.factory()
        .can_access(principal, ResourceRef.collection(collection_id), level)
        .is_allowed
    )


class TestTransferOwnership:
    def test_transfer_without_preserving_access(
        self,
        ownership_service,
        admin_principal,
        merchant,
        merchant_principal,
        other_merchant,
        other_merchant_principal,
        collection,
    ):
        result = ownership_service.transfer_ownership(admin_principal, collection.id, other_merchant.id)

        assert result.success
        assert result.old_owner_id == merchant.id
        assert result.new_owner_id == other_merchant.id
        assert result.old_owner_username == 'merchant'
        assert result.new_owner_username == 'othermerchant'
        assert result.collection_name == collection.name
        assert not result.preserved_access

        assert _can(other_merchant_principal, collection.id, RequiredLevelEnum.EDIT)
        assert not _can(merchant_principal, collection.id, RequiredLevelEnum.VIEW)
        assert _grant_for(collection.id, merchant.id) is None

    def test_transfer_preserving_access(
        self, ownership_service, admin_principal, merchant, merchant_principal, other_merchant, collection
    ):
        result = ownership_service.transfer_ownership(
            admin_principal, collection.id, other_merchant.id, preserve_old_owner_access=True
        )

        grant = _grant_for(collection.id, merchant.id)
        assert result.preserved_access
        assert grant.access_type == AccessTypeEnum.EDIT
        assert grant.granted_by == admin_principal.id
        assert _can(merchant_principal, collection.id, RequiredLevelEnum.EDIT)

    def test_new_owner_grant_is_dropped(self, ownership_service, admin_principal, merchant, other_merchant, collection):
        CollectionAccess.create(
            CollectionAccessCreate(
                collection_id=collection.id,
                user_id=other_merchant.id,
                access_type=AccessTypeEnum.VIEW,
                granted_by=merchant.id,
            )
        )

        ownership_service.transfer_ownership(admin_principal, collection.id, other_merchant.id)

        assert _grant_for(collection.id, other_merchant.id) is None

    def test_other_grants_survive(
        self, ownership_service, admin_principal, merchant, other_merchant, collaborator, collection
    ):
        CollectionAccess.create(
            CollectionAccessCreate(
                collection_id=collection.id, user_id=collaborator.id, access_type=AccessTypeEnum.EDIT
            )
        )

        ownership_service.transfer_ownership(admin_principal, collection.id, other_merchant.id)

        assert _grant_for(collection.id, collaborator.id).access_type == AccessTypeEnum.EDIT

    def test_admin_may_receive(self, ownership_service, admin_principal, admin_user, collection):
        result = ownership_service.transfer_ownership(admin_principal, collection.id, admin_user.id)

        assert result.new_owner_id == admin_user.id

    @pytest.mark.parametrize('actor_fixture', ['merchant_principal', 'collaborator_principal', 'public_principal'])
    def test_only_admins_transfer(self, request, ownership_service, other_merchant, collection, actor_fixture):
        actor = request.getfixturevalue(actor_fixture)

        with pytest.raises(AccessDenied):
            ownership_service.transfer_ownership(actor, collection.id, other_merchant.id)

    def test_missing_collection(self, ownership_service, admin_principal, other_merchant):
        with pytest.raises(ResourceNotFound):
            ownership_service.transfer_ownership(admin_principal, 'coll-doesnotexist', other_merchant.id)

    def test_already_owner(self, ownership_service, admin_principal, merchant, collection):
        with pytest.raises(AlreadyOwner):
            ownership_service.transfer_ownership(admin_principal, collection.id, merchant.id)

    def test_missing_new_owner(self, ownership_service, admin_principal, collection):
        with pytest.raises(UserNotFound):
            ownership_service.transfer_ownership(admin_principal, collection.id, 'user-doesnotexist')

    def test_plain_user_is_ineligible(self, ownership_service, admin_principal, merchant, collaborator, collection):
        with pytest.raises(RoleIneligible):
            ownership_service.transfer_ownership(admin_principal, collection.id, collaborator.id)

    def test_lost_race_is_a_conflict(self, ownership_service, admin_principal, other_merchant, collection, monkeypatch):
        monkeypatch.setattr(ownership_service.collection_handler, 'reassign_owner', lambda *args: False)

        with pytest.raises(OwnershipTransferConflict):
            ownership_service.transfer_ownership(
                admin_principal, collection.id, other_merchant.id, preserve_old_owner_access=True
            )


class TestLockedCollectionRead:
    def test_locked_read_matches_plain_read(self, ownership_service, collection):
        handler = ownership_service.collection_handler

        locked = handler.get_access_target_or_none(collection.id, for_update=True)

        assert locked == handler.get_access_target_or_none(collection.id)
        assert locked.owner_id == collection.owner_id

    def test_locked_read_of_missing_collection(self, ownership_service):
        handler = ownership_service.collection_handler

        assert handler.get_access_target_or_none('coll-doesnotexist', for_update=True) is None
