from storefront.common.nanoid import NanoIdType
from storefront.core.authorization.constants import RequiredLevelEnum
from storefront.core.authorization.domains import ResourceRef
from storefront.core.authorization.services import AccessDecisionService
from storefront.core.identity.domains import Principal
from storefront.core.identity.guards import PrincipalGuard, _RouterGuard


def _authorize_collection_access(
    collection_id: NanoIdType,
    principal: Principal,
    required_level: RequiredLevelEnum,
) -> Principal:
    access_decision_service = AccessDecisionService.factory()
    access_decision_service.check_access(principal, ResourceRef.collection(collection_id), required_level)
    return principal


def create_collection_authorization_guard(required_level: RequiredLevelEnum):
    """
    Guard for routes taking a collection_id path or query parameter. Failures
    surface as the usual not found response.
    """

    def _authorize_collection(
        collection_id: NanoIdType,
        principal: Principal = PrincipalGuard(),
    ) -> Principal:
        return _authorize_collection_access(collection_id, principal, required_level)

    return _RouterGuard(dependency=_authorize_collection)


CollectionEditGuard = create_collection_authorization_guard(RequiredLevelEnum.EDIT)
