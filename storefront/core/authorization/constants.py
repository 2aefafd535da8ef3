from storefront.common.enum import BaseEnum


class AccessTypeEnum(BaseEnum):
    """Delegated grant levels, EDIT is a superset of VIEW"""

    VIEW = 'view'
    EDIT = 'edit'


class RequiredLevelEnum(BaseEnum):
    VIEW = 'view'
    EDIT = 'edit'
    CREATE = 'create'


class ResourceTypeEnum(BaseEnum):
    COLLECTION = 'collection'
    CATEGORY = 'category'
    PRODUCT = 'product'
    ORDER = 'order'


class AccessOutcomeEnum(BaseEnum):
    ALLOWED = 'allowed'
    DENIED = 'denied'
    NOT_FOUND = 'not_found'


# Which required levels each grant satisfies. CREATE is never satisfied by a grant
GRANT_SATISFIES: dict[AccessTypeEnum, frozenset[RequiredLevelEnum]] = {
    AccessTypeEnum.VIEW: frozenset({RequiredLevelEnum.VIEW}),
    AccessTypeEnum.EDIT: frozenset({RequiredLevelEnum.VIEW, RequiredLevelEnum.EDIT}),
}

COLLECTION_ACCESS_PK_ABBREV = 'cacc'
