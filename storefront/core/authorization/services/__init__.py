from storefront.core.authorization.services.access_decision_service import (
    AccessDecisionService,
    evaluate_access,
    filter_accessible,
)
from storefront.core.authorization.services.grant_service import GrantService
from storefront.core.authorization.services.ownership_service import OwnershipService

__all__ = [
    'AccessDecisionService',
    'GrantService',
    'OwnershipService',
    'evaluate_access',
    'filter_accessible',
]
