from typing import Dict, List, Mapping, Optional, Set

from loguru import logger

from storefront.common.nanoid import NanoIdType
from storefront.core.authorization.constants import (
    GRANT_SATISFIES,
    AccessOutcomeEnum,
    AccessTypeEnum,
    RequiredLevelEnum,
    ResourceTypeEnum,
)
from storefront.core.authorization.domains import AccessDecision, AccessTarget, ResourceRef
from storefront.core.authorization.exceptions import AccessDenied, ResourceNotFound
from storefront.core.authorization.models import CollectionAccess
from storefront.core.authorization.resource_handler import CollectionHandler, ResourceHandler
from storefront.core.identity.domains import AdminPrincipal, Principal
from storefront.core.user.constants import COLLECTION_OWNER_ROLES


def evaluate_access(
    principal: Principal,
    required_level: RequiredLevelEnum,
    target: Optional[AccessTarget],
    grant: Optional[AccessTypeEnum] = None,
    is_new_collection: bool = False,
    include_public: bool = True,
) -> AccessDecision:
    """
    The access rule, as a pure function of explicit inputs.

    Point checks and listings both funnel through here so the two can never
    disagree. Evaluation order matters:

    1. Admins are allowed everything, before anything is resolved.
    2. Creating a brand new collection needs the admin or merchant role.
    3. An unresolved target is NOT_FOUND.
    4. The owner is allowed every level on their collection.
    5. VIEW on a visible collection is allowed for anyone, public included.
    6. A grant allows the levels in GRANT_SATISFIES (edit covers view).
    7. Everything else is DENIED.

    Args:
        principal: Caller in the merchant / admin channel
        required_level: view, edit or create
        target: The resolved collection, None when resolution failed
        grant: The principal's grant on target, if any
        is_new_collection: True for a create request that has no id yet
        include_public: False skips step 5, for data only collaborators may see
    """
    required_level = RequiredLevelEnum(required_level)

    if isinstance(principal, AdminPrincipal):
        return AccessDecision.allow('admin override', collection_id=target.collection_id if target else None)

    if is_new_collection:
        if required_level == RequiredLevelEnum.CREATE and principal.role in COLLECTION_OWNER_ROLES:
            return AccessDecision.allow(f'{principal.role} may create collections')
        if required_level == RequiredLevelEnum.CREATE:
            return AccessDecision.deny('only merchants and admins may create collections')
        return AccessDecision.not_found('no collection id to resolve')

    if target is None:
        return AccessDecision.not_found('resource does not resolve to a collection')

    collection_id = target.collection_id
    if principal.user_id is not None and principal.user_id == target.owner_id:
        return AccessDecision.allow('owner', collection_id=collection_id)

    if include_public and required_level == RequiredLevelEnum.VIEW and target.visible:
        return AccessDecision.allow('collection is visible', collection_id=collection_id)

    if grant is None:
        return AccessDecision.deny('no grant', collection_id=collection_id)

    grant = AccessTypeEnum(grant)
    if required_level in GRANT_SATISFIES[grant]:
        return AccessDecision.allow(f'{grant} grant', collection_id=collection_id)

    return AccessDecision.deny(f'{grant} grant does not satisfy {required_level}', collection_id=collection_id)


class AccessDecisionService:
    """
    Database backed front of evaluate_access.

    Resolves references through the registered resource handlers, loads the
    principal's grant, then hands everything to the pure rule. Read only, it
    never writes and needs no locking.
    """

    def __init__(self, resource_handlers: List[ResourceHandler]):
        self._handler_map: Dict[ResourceTypeEnum, ResourceHandler] = {
            ResourceTypeEnum(handler.resource_type): handler for handler in resource_handlers
        }
        collection_handler = self._handler_map.get(ResourceTypeEnum.COLLECTION)
        if not isinstance(collection_handler, CollectionHandler):
            raise ValueError('A CollectionHandler must be registered')
        self.collection_handler: CollectionHandler = collection_handler

    @classmethod
    def factory(cls) -> 'AccessDecisionService':
        # Import here to avoid circular imports
        from storefront.app.catalog.resource_handler import (
            CategoryResourceHandler,
            CollectionResourceHandler,
            ProductResourceHandler,
        )
        from storefront.app.orders.resource_handler import OrderResourceHandler

        return cls(
            resource_handlers=[
                CollectionResourceHandler(),
                CategoryResourceHandler(),
                ProductResourceHandler(),
                OrderResourceHandler(),
            ]
        )

    def get_handler_for_resource_type(self, resource_type: ResourceTypeEnum) -> ResourceHandler:
        handler = self._handler_map.get(ResourceTypeEnum(resource_type))
        if not handler:
            raise ValueError(f'No resource handler registered for resource type: {resource_type}')
        return handler

    def resolve_access_target(self, ref: ResourceRef) -> Optional[AccessTarget]:
        if ref.resource_id is None:
            return None

        handler = self.get_handler_for_resource_type(ref.resource_type)
        collection_id = handler.get_collection_id_or_none(ref.resource_id)
        if collection_id is None:
            return None
        return self.collection_handler.get_access_target_or_none(collection_id)

    def resolve_collection(self, ref: ResourceRef) -> NanoIdType:
        """
        Raises:
            ResourceNotFound: the referenced row (or its collection) does not exist
        """
        target = self.resolve_access_target(ref)
        if target is None:
            raise ResourceNotFound(
                message=f'{ref.resource_type} {ref.resource_id} not found',
                context=ref.to_dict(),
            )
        return target.collection_id

    def get_grant_access_type(
        self, collection_id: NanoIdType, user_id: NanoIdType | None
    ) -> Optional[AccessTypeEnum]:
        if user_id is None:
            return None
        grant = CollectionAccess.get_or_none(
            CollectionAccess.collection_id == collection_id,
            CollectionAccess.user_id == user_id,
        )
        return AccessTypeEnum(grant.access_type) if grant else None

    def can_access(
        self,
        principal: Principal,
        ref: ResourceRef,
        required_level: RequiredLevelEnum,
        include_public: bool = True,
    ) -> AccessDecision:
        """
        Never raises for an ordinary denial, inspect decision.outcome instead.
        """
        if isinstance(principal, AdminPrincipal):
            return evaluate_access(principal, required_level, target=None, is_new_collection=ref.is_new_collection)

        target = None if ref.is_new_collection else self.resolve_access_target(ref)
        grant = self.get_grant_access_type(target.collection_id, principal.user_id) if target else None
        decision = evaluate_access(
            principal,
            required_level,
            target=target,
            grant=grant,
            is_new_collection=ref.is_new_collection,
            include_public=include_public,
        )
        logger.debug(
            f'access {decision.outcome} for {principal.kind}:{principal.user_id} '
            f'{required_level} {ref.resource_type}:{ref.resource_id} ({decision.reason})'
        )
        return decision

    def check_access(
        self,
        principal: Principal,
        ref: ResourceRef,
        required_level: RequiredLevelEnum,
        include_public: bool = True,
    ) -> AccessDecision:
        """
        can_access for callers that want an exception. Both failures render as
        a generic not found, the logs keep them apart.

        Raises:
            ResourceNotFound: the reference does not resolve
            AccessDenied: it resolves but the principal lacks the level
        """
        decision = self.can_access(principal, ref, required_level, include_public=include_public)
        if decision.is_allowed:
            return decision

        failure_context = {
            'principal': principal.kind,
            'user_id': principal.user_id,
            'resource_type': str(ref.resource_type),
            'resource_id': ref.resource_id,
            'required_level': str(required_level),
            'reason': decision.reason,
        }
        if decision.outcome == AccessOutcomeEnum.NOT_FOUND:
            logger.info(f'resource not found: {failure_context}')
            raise ResourceNotFound(message=decision.reason, context=failure_context)

        logger.warning(f'access denied: {failure_context}')
        raise AccessDenied(message=decision.reason, context=failure_context)

    def list_accessible_collections(
        self,
        principal: Principal,
        required_level: RequiredLevelEnum = RequiredLevelEnum.VIEW,
    ) -> List[AccessTarget]:
        """
        Fetch every candidate collection and the principal's grants in two
        queries, then keep what evaluate_access allows.
        """
        candidates = self.collection_handler.list_access_targets()
        grants = self._get_grants_by_collection_id(principal.user_id)
        return filter_accessible(principal, required_level, candidates, grants)

    def list_accessible_collection_ids(
        self,
        principal: Principal,
        required_level: RequiredLevelEnum = RequiredLevelEnum.VIEW,
    ) -> Set[NanoIdType]:
        return {target.collection_id for target in self.list_accessible_collections(principal, required_level)}

    def list_permitted_ids(
        self,
        principal: Principal,
        resource_type: ResourceTypeEnum,
        required_level: RequiredLevelEnum = RequiredLevelEnum.VIEW,
    ) -> Set[NanoIdType]:
        collection_ids = self.list_accessible_collection_ids(principal, required_level)
        if not collection_ids:
            return set()
        handler = self.get_handler_for_resource_type(resource_type)
        return handler.list_resource_ids_for_collection_ids(collection_ids)

    def _get_grants_by_collection_id(self, user_id: NanoIdType | None) -> Dict[NanoIdType, AccessTypeEnum]:
        if user_id is None:
            return {}
        return {
            grant.collection_id: AccessTypeEnum(grant.access_type)
            for grant in CollectionAccess.list(CollectionAccess.user_id == user_id)
        }


def filter_accessible(
    principal: Principal,
    required_level: RequiredLevelEnum,
    candidates: List[AccessTarget],
    grants: Mapping[NanoIdType, AccessTypeEnum],
) -> List[AccessTarget]:
    return [
        target
        for target in candidates
        if evaluate_access(principal, required_level, target, grants.get(target.collection_id)).is_allowed
    ]
