from typing import List

from loguru import logger
from sqlalchemy import func

from storefront.common.nanoid import NanoIdType
from storefront.core.authorization.constants import AccessTypeEnum, RequiredLevelEnum
from storefront.core.authorization.domains import (
    AccessTarget,
    CollectionAccessRead,
    CollectionGrantWithUser,
    ResourceRef,
)
from storefront.core.authorization.exceptions import (
    InvalidAccessType,
    OwnerGrant,
    OwnerRevoke,
    ResourceNotFound,
    SelfGrant,
)
from storefront.core.authorization.models import CollectionAccess
from storefront.core.authorization.services.access_decision_service import AccessDecisionService
from storefront.core.identity.domains import Principal
from storefront.core.user import UserService


class GrantService:
    """
    Collaborator management. Every mutation first passes the same authority
    check, edit on the collection (admins pass it by override).
    """

    def __init__(self, access_decision_service: AccessDecisionService, user_service: UserService):
        self.access_decision_service = access_decision_service
        self.user_service = user_service

    @classmethod
    def factory(cls) -> 'GrantService':
        return cls(
            access_decision_service=AccessDecisionService.factory(),
            user_service=UserService.factory(),
        )

    def _require_grant_authority(self, actor: Principal, collection_id: NanoIdType) -> AccessTarget:
        self.access_decision_service.check_access(actor, ResourceRef.collection(collection_id), RequiredLevelEnum.EDIT)
        target = self.access_decision_service.collection_handler.get_access_target_or_none(collection_id)
        if target is None:
            raise ResourceNotFound(message=f'collection {collection_id} not found')
        return target

    def grant_access(
        self,
        actor: Principal,
        collection_id: NanoIdType,
        target_user_id: NanoIdType,
        access_type: str,
    ) -> CollectionAccessRead:
        """
        Create or overwrite the target's grant. Repeating the same call is a
        no-op, a different access_type replaces the old one.

        Raises:
            ResourceNotFound / AccessDenied: actor lacks edit on the collection
            InvalidAccessType: access_type is not view or edit
            SelfGrant: actor targeted themselves
            OwnerGrant: target already owns the collection
            UserNotFound: target user does not exist
        """
        target = self._require_grant_authority(actor, collection_id)

        if not AccessTypeEnum.has(access_type):
            raise InvalidAccessType(context={'access_type': access_type})
        if target_user_id == actor.user_id:
            raise SelfGrant(context={'collection_id': collection_id, 'user_id': target_user_id})
        if target_user_id == target.owner_id:
            raise OwnerGrant(context={'collection_id': collection_id, 'user_id': target_user_id})
        self.user_service.get_user_for_id(target_user_id)

        grant = CollectionAccess.upsert(
            values={
                'id': CollectionAccess.generate_id(),
                'collection_id': collection_id,
                'user_id': target_user_id,
                'access_type': AccessTypeEnum(access_type).value,
                'granted_by': actor.user_id,
                'modified_at': func.now(),
            },
            conflict_columns=['collection_id', 'user_id'],
            update_columns=['access_type', 'granted_by', 'modified_at'],
        )
        logger.info(f'{actor.user_id} granted {access_type} on {collection_id} to {target_user_id}')
        return grant

    def revoke_access(self, actor: Principal, collection_id: NanoIdType, target_user_id: NanoIdType) -> bool:
        """
        Returns whether a grant was actually removed, revoking twice is fine.

        Raises:
            OwnerRevoke: target owns the collection
        """
        target = self._require_grant_authority(actor, collection_id)
        if target_user_id == target.owner_id:
            raise OwnerRevoke(context={'collection_id': collection_id, 'user_id': target_user_id})

        deleted = CollectionAccess.delete(
            CollectionAccess.collection_id == collection_id,
            CollectionAccess.user_id == target_user_id,
        )
        logger.info(f'{actor.user_id} revoked access on {collection_id} from {target_user_id} (removed={deleted})')
        return deleted > 0

    def list_grants_for_collection(self, actor: Principal, collection_id: NanoIdType) -> List[CollectionGrantWithUser]:
        self._require_grant_authority(actor, collection_id)

        grants = CollectionAccess.list(CollectionAccess.collection_id == collection_id, ordering=['created_at'])
        users_by_id = {
            user.id: user for user in self.user_service.list_users_for_ids({grant.user_id for grant in grants})
        }
        return [
            CollectionGrantWithUser(
                **grant.to_dict(),
                email=users_by_id[grant.user_id].email,
                username=users_by_id[grant.user_id].public_username,
            )
            for grant in grants
            if grant.user_id in users_by_id
        ]
