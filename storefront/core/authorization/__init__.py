from storefront.core.authorization.constants import (
    COLLECTION_ACCESS_PK_ABBREV,
    AccessOutcomeEnum,
    AccessTypeEnum,
    RequiredLevelEnum,
    ResourceTypeEnum,
)
from storefront.core.authorization.domains import (
    AccessDecision,
    AccessTarget,
    CollectionAccessCreate,
    CollectionAccessRead,
    CollectionGrantWithUser,
    OwnershipTransferResult,
    ResourceRef,
)
from storefront.core.authorization.exceptions import (
    AccessDenied,
    AlreadyOwner,
    InvalidAccessType,
    OwnerGrant,
    OwnerRevoke,
    OwnershipTransferConflict,
    ResourceNotFound,
    RoleIneligible,
    SelfGrant,
)

# Guards are not imported here to avoid circular imports
# Import them directly from storefront.core.authorization.guards when needed
from storefront.core.authorization.models import CollectionAccess
from storefront.core.authorization.resource_handler import CollectionHandler, ResourceHandler
from storefront.core.authorization.services import (
    AccessDecisionService,
    GrantService,
    OwnershipService,
    evaluate_access,
)

__all__ = [
    # Constants
    'COLLECTION_ACCESS_PK_ABBREV',
    'AccessOutcomeEnum',
    'AccessTypeEnum',
    'RequiredLevelEnum',
    'ResourceTypeEnum',
    # Domains
    'AccessDecision',
    'AccessTarget',
    'CollectionAccessCreate',
    'CollectionAccessRead',
    'CollectionGrantWithUser',
    'OwnershipTransferResult',
    'ResourceRef',
    # Exceptions
    'AccessDenied',
    'AlreadyOwner',
    'InvalidAccessType',
    'OwnerGrant',
    'OwnerRevoke',
    'OwnershipTransferConflict',
    'ResourceNotFound',
    'RoleIneligible',
    'SelfGrant',
    # Models
    'CollectionAccess',
    # Resource handlers
    'CollectionHandler',
    'ResourceHandler',
    # Services
    'AccessDecisionService',
    'GrantService',
    'OwnershipService',
    'evaluate_access',
]
