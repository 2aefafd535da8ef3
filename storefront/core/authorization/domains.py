import datetime
from typing import Optional

from pydantic import Field, model_validator

from storefront.common.domain import BaseDomain
from storefront.common.nanoid import NanoId, NanoIdType
from storefront.core.authorization.constants import (
    COLLECTION_ACCESS_PK_ABBREV,
    AccessOutcomeEnum,
    AccessTypeEnum,
    RequiredLevelEnum,
    ResourceTypeEnum,
)


class ResourceRef(BaseDomain):
    """
    Points at a collection, category, product or order. A collection ref
    without an id stands for a collection that does not exist yet.
    """

    resource_type: ResourceTypeEnum
    resource_id: Optional[NanoIdType] = None

    @model_validator(mode='after')
    def only_collections_may_be_new(self):
        if self.resource_id is None and self.resource_type != ResourceTypeEnum.COLLECTION:
            raise ValueError(f'{self.resource_type} reference requires a resource id')
        return self

    @property
    def is_new_collection(self) -> bool:
        return self.resource_type == ResourceTypeEnum.COLLECTION and self.resource_id is None

    @classmethod
    def new_collection(cls) -> 'ResourceRef':
        return cls(resource_type=ResourceTypeEnum.COLLECTION)

    @classmethod
    def collection(cls, collection_id: NanoIdType) -> 'ResourceRef':
        return cls(resource_type=ResourceTypeEnum.COLLECTION, resource_id=collection_id)

    @classmethod
    def category(cls, category_id: NanoIdType) -> 'ResourceRef':
        return cls(resource_type=ResourceTypeEnum.CATEGORY, resource_id=category_id)

    @classmethod
    def product(cls, product_id: NanoIdType) -> 'ResourceRef':
        return cls(resource_type=ResourceTypeEnum.PRODUCT, resource_id=product_id)

    @classmethod
    def order(cls, order_id: NanoIdType) -> 'ResourceRef':
        return cls(resource_type=ResourceTypeEnum.ORDER, resource_id=order_id)


class AccessTarget(BaseDomain):
    """The collection level facts every decision is anchored on"""

    collection_id: NanoIdType
    owner_id: NanoIdType
    visible: bool
    name: str | None = None


class AccessDecision(BaseDomain):
    is_allowed: bool
    outcome: AccessOutcomeEnum
    reason: str
    collection_id: Optional[NanoIdType] = None

    @classmethod
    def allow(cls, reason: str, collection_id: NanoIdType | None = None) -> 'AccessDecision':
        return cls(is_allowed=True, outcome=AccessOutcomeEnum.ALLOWED, reason=reason, collection_id=collection_id)

    @classmethod
    def deny(cls, reason: str, collection_id: NanoIdType | None = None) -> 'AccessDecision':
        return cls(is_allowed=False, outcome=AccessOutcomeEnum.DENIED, reason=reason, collection_id=collection_id)

    @classmethod
    def not_found(cls, reason: str) -> 'AccessDecision':
        return cls(is_allowed=False, outcome=AccessOutcomeEnum.NOT_FOUND, reason=reason)


class CollectionAccessCreate(BaseDomain):
    id: Optional[NanoIdType] = Field(default_factory=NanoId.factory(COLLECTION_ACCESS_PK_ABBREV))
    collection_id: NanoIdType
    user_id: NanoIdType
    access_type: AccessTypeEnum
    granted_by: Optional[NanoIdType] = None


class CollectionAccessRead(CollectionAccessCreate):
    id: NanoIdType
    created_at: datetime.datetime | None = None
    modified_at: datetime.datetime | None = None


class CollectionGrantWithUser(CollectionAccessRead):
    email: str
    username: str


class CheckAccessPayload(ResourceRef):
    required_level: RequiredLevelEnum


class GrantAccessPayload(BaseDomain):
    collection_id: NanoIdType
    user_id: NanoIdType
    # Validated by the grant service so bad values surface as InvalidAccessType
    access_type: str


class RevokeAccessPayload(BaseDomain):
    collection_id: NanoIdType
    user_id: NanoIdType


class TransferOwnershipPayload(BaseDomain):
    collection_id: NanoIdType
    new_owner_id: NanoIdType
    preserve_old_owner_access: bool = False


class OwnershipTransferResult(BaseDomain):
    success: bool = True
    collection_id: NanoIdType
    collection_name: str | None = None
    old_owner_id: NanoIdType
    old_owner_username: str | None = None
    new_owner_id: NanoIdType
    new_owner_username: str | None = None
    preserved_access: bool


class Me(BaseDomain):
    """Who the merchant channel thinks the caller is"""

    kind: str
    user_id: Optional[NanoIdType] = None
    email: Optional[str] = None
    username: Optional[str] = None
    role: Optional[str] = None
