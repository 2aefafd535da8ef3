from loguru import logger

from storefront.common.nanoid import NanoIdType
from storefront.core.authorization.constants import AccessTypeEnum
from storefront.core.authorization.domains import OwnershipTransferResult
from storefront.core.authorization.exceptions import (
    AccessDenied,
    AlreadyOwner,
    OwnershipTransferConflict,
    ResourceNotFound,
    RoleIneligible,
)
from storefront.core.authorization.models import CollectionAccess
from storefront.core.authorization.resource_handler import CollectionHandler
from storefront.core.identity.domains import AdminPrincipal, Principal
from storefront.core.user import UserService
from storefront.core.user.constants import COLLECTION_OWNER_ROLES
from storefront.network.database.session import db


class OwnershipService:
    def __init__(self, collection_handler: CollectionHandler, user_service: UserService):
        self.collection_handler = collection_handler
        self.user_service = user_service

    @classmethod
    def factory(cls) -> 'OwnershipService':
        # Import here to avoid circular imports
        from storefront.app.catalog.resource_handler import CollectionResourceHandler

        return cls(collection_handler=CollectionResourceHandler(), user_service=UserService.factory())

    def transfer_ownership(
        self,
        actor: Principal,
        collection_id: NanoIdType,
        new_owner_id: NanoIdType,
        preserve_old_owner_access: bool = False,
    ) -> OwnershipTransferResult:
        """
        Hand a collection to another merchant or admin.

        Runs inside one transaction with the collection row locked: the owner
        swap, removal of the old owner's stale grant and the optional edit grant
        that keeps them on as a collaborator either all land or none do. Any
        grant the new owner held becomes redundant and is dropped too.

        Raises:
            AccessDenied: actor is not an admin
            ResourceNotFound: collection does not exist
            AlreadyOwner: new_owner_id already owns it
            UserNotFound: new owner does not exist
            RoleIneligible: new owner is not a merchant or admin
            OwnershipTransferConflict: a concurrent transfer changed the owner first
        """
        if not isinstance(actor, AdminPrincipal):
            logger.warning(f'non admin {actor.kind}:{actor.user_id} attempted to transfer {collection_id}')
            raise AccessDenied(message='only admins may transfer ownership', context={'collection_id': collection_id})

        with db(commit_on_success=True):
            target = self.collection_handler.get_access_target_or_none(collection_id, for_update=True)
            if target is None:
                raise ResourceNotFound(message=f'collection {collection_id} not found')
            old_owner_id = target.owner_id
            if new_owner_id == old_owner_id:
                raise AlreadyOwner(context={'collection_id': collection_id, 'user_id': new_owner_id})

            new_owner = self.user_service.get_user_for_id(new_owner_id)
            if new_owner.role not in COLLECTION_OWNER_ROLES:
                raise RoleIneligible(context={'user_id': new_owner_id, 'role': new_owner.role})
            old_owner = self.user_service.get_user_for_id_or_none(old_owner_id)

            if not self.collection_handler.reassign_owner(collection_id, old_owner_id, new_owner_id):
                raise OwnershipTransferConflict(context={'collection_id': collection_id})

            CollectionAccess.delete(
                CollectionAccess.collection_id == collection_id,
                CollectionAccess.user_id.in_([old_owner_id, new_owner_id]),
            )
            if preserve_old_owner_access:
                CollectionAccess.upsert(
                    values={
                        'id': CollectionAccess.generate_id(),
                        'collection_id': collection_id,
                        'user_id': old_owner_id,
                        'access_type': AccessTypeEnum.EDIT.value,
                        'granted_by': actor.user_id,
                    },
                    conflict_columns=['collection_id', 'user_id'],
                    update_columns=['access_type', 'granted_by'],
                )

        logger.info(
            f'collection {collection_id} transferred from {old_owner_id} to {new_owner_id} '
            f'by {actor.user_id} (preserved={preserve_old_owner_access})'
        )
        return OwnershipTransferResult(
            collection_id=collection_id,
            collection_name=target.name,
            old_owner_id=old_owner_id,
            old_owner_username=old_owner.public_username if old_owner else None,
            new_owner_id=new_owner_id,
            new_owner_username=new_owner.public_username,
            preserved_access=preserve_old_owner_access,
        )
