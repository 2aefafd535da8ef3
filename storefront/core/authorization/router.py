from typing import Optional

from fastapi import APIRouter, Depends

from storefront.common.nanoid import NanoIdType
from storefront.core.authorization.domains import (
    AccessDecision,
    CheckAccessPayload,
    CollectionAccessRead,
    CollectionGrantWithUser,
    GrantAccessPayload,
    Me,
    OwnershipTransferResult,
    ResourceRef,
    RevokeAccessPayload,
    TransferOwnershipPayload,
)
from storefront.core.authorization.guards import CollectionEditGuard
from storefront.core.authorization.services import AccessDecisionService, GrantService, OwnershipService
from storefront.core.identity.guards import AdminGuard, AuthenticatedPrincipalGuard, PrincipalGuard
from storefront.core.identity.domains import AdminPrincipal, Principal
from storefront.core.user import TransferCandidate, UserService

authorization_router = APIRouter()
me_router = APIRouter()


@me_router.get('/me')
def get_me(
    principal: Principal = PrincipalGuard(),
    user_service: UserService = Depends(UserService.factory),
) -> Me:
    if principal.user_id is None:
        return Me(kind=principal.kind)

    user = user_service.get_user_for_id(principal.user_id)
    return Me(
        kind=principal.kind,
        user_id=user.id,
        email=user.email,
        username=user.public_username,
        role=user.role,
    )


@authorization_router.post('/check-access')
def check_access(
    payload: CheckAccessPayload,
    principal: Principal = PrincipalGuard(),
    access_decision_service: AccessDecisionService = Depends(AccessDecisionService.factory),
) -> AccessDecision:
    """
    Lets the dashboard decide which controls to render. Answers for the
    caller only, and does not raise on denial.
    """
    ref = ResourceRef(resource_type=payload.resource_type, resource_id=payload.resource_id)
    decision = access_decision_service.can_access(principal, ref, payload.required_level)
    # Outsiders learn nothing beyond the boolean
    if not decision.is_allowed:
        return AccessDecision.deny('Not found.')
    return decision


@authorization_router.get('/list-grants/{collection_id}', dependencies=[CollectionEditGuard()])
def list_grants(
    collection_id: NanoIdType,
    principal: Principal = AuthenticatedPrincipalGuard(),
    grant_service: GrantService = Depends(GrantService.factory),
) -> list[CollectionGrantWithUser]:
    return grant_service.list_grants_for_collection(actor=principal, collection_id=collection_id)


@authorization_router.post('/grant-access')
def grant_access(
    payload: GrantAccessPayload,
    principal: Principal = AuthenticatedPrincipalGuard(),
    grant_service: GrantService = Depends(GrantService.factory),
) -> CollectionAccessRead:
    return grant_service.grant_access(
        actor=principal,
        collection_id=payload.collection_id,
        target_user_id=payload.user_id,
        access_type=payload.access_type,
    )


@authorization_router.post('/revoke-access')
def revoke_access(
    payload: RevokeAccessPayload,
    principal: Principal = AuthenticatedPrincipalGuard(),
    grant_service: GrantService = Depends(GrantService.factory),
) -> None:
    grant_service.revoke_access(actor=principal, collection_id=payload.collection_id, target_user_id=payload.user_id)


@authorization_router.post('/transfer-ownership')
def transfer_ownership(
    payload: TransferOwnershipPayload,
    admin: AdminPrincipal = AdminGuard(),
    ownership_service: OwnershipService = Depends(OwnershipService.factory),
) -> OwnershipTransferResult:
    return ownership_service.transfer_ownership(
        actor=admin,
        collection_id=payload.collection_id,
        new_owner_id=payload.new_owner_id,
        preserve_old_owner_access=payload.preserve_old_owner_access,
    )


@authorization_router.get('/search-transfer-candidates', dependencies=[AdminGuard()])
def search_transfer_candidates(
    search: Optional[str] = None,
    exclude_user_id: Optional[NanoIdType] = None,
    user_service: UserService = Depends(UserService.factory),
) -> list[TransferCandidate]:
    return user_service.search_transfer_candidates(search=search, exclude_user_id=exclude_user_id)
