from storefront.common.enum import BaseEnum

USER_PK_ABBREV = 'user'

# How many people the ownership transfer picker will show at once
TRANSFER_CANDIDATE_LIMIT = 20


class UserRoleEnum(BaseEnum):
    ADMIN = 'admin'
    MERCHANT = 'merchant'
    USER = 'user'


# Roles allowed to own collections
COLLECTION_OWNER_ROLES = (UserRoleEnum.ADMIN, UserRoleEnum.MERCHANT)
