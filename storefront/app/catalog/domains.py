from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from storefront.app.catalog.constants import CATEGORY_PK_ABBREV, COLLECTION_PK_ABBREV, PRODUCT_PK_ABBREV
from storefront.common.domain import BaseDomain
from storefront.common.nanoid import NanoId, NanoIdType


def _reject_null(value: Any) -> Any:
    # Omit a field to leave it unchanged, null would violate a NOT NULL column
    if value is None:
        raise ValueError('may be omitted but not null')
    return value


class CollectionCreate(BaseDomain):
    id: Optional[NanoIdType] = Field(default_factory=NanoId.factory(COLLECTION_PK_ABBREV))
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    owner_id: NanoIdType
    visible: bool = False


class CollectionRead(BaseDomain):
    id: NanoIdType
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    owner_id: NanoIdType
    visible: bool
    created_at: datetime | None = None
    modified_at: Optional[datetime] = None


class CollectionCreatePayload(BaseDomain):
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    visible: bool = False


class CollectionUpdate(BaseDomain):
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    visible: Optional[bool] = None

    @field_validator('name', 'visible')
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        return _reject_null(value)


class CategoryCreate(BaseDomain):
    id: Optional[NanoIdType] = Field(default_factory=NanoId.factory(CATEGORY_PK_ABBREV))
    collection_id: NanoIdType
    name: str
    description: Optional[str] = None


class CategoryRead(BaseDomain):
    id: NanoIdType
    collection_id: NanoIdType
    name: str
    description: Optional[str] = None
    created_at: datetime | None = None


class CategoryUpdate(BaseDomain):
    name: Optional[str] = None
    description: Optional[str] = None

    @field_validator('name')
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        return _reject_null(value)


class ProductCreate(BaseDomain):
    id: Optional[NanoIdType] = Field(default_factory=NanoId.factory(PRODUCT_PK_ABBREV))
    collection_id: NanoIdType
    category_id: Optional[NanoIdType] = None
    name: str
    sku: Optional[str] = None
    description: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    variants: List[Dict[str, Any]] = Field(default_factory=list)
    variant_prices: Dict[str, Any] = Field(default_factory=dict)
    blank_code: Optional[str] = None
    technique: Optional[str] = None
    note_for_supplier: Optional[str] = None
    design_files: List[str] = Field(default_factory=list)
    slug: Optional[str] = None
    visible: bool = True


class ProductRead(ProductCreate):
    id: NanoIdType
    created_at: datetime | None = None
    modified_at: Optional[datetime] = None


class ProductUpdate(BaseDomain):
    """Partial update, only provided fields are written. Nullable columns accept an explicit null"""

    category_id: Optional[NanoIdType] = None
    name: Optional[str] = None
    sku: Optional[str] = None
    description: Optional[str] = None
    images: Optional[List[str]] = None
    variants: Optional[List[Dict[str, Any]]] = None
    variant_prices: Optional[Dict[str, Any]] = None
    blank_code: Optional[str] = None
    technique: Optional[str] = None
    note_for_supplier: Optional[str] = None
    design_files: Optional[List[str]] = None
    slug: Optional[str] = None
    visible: Optional[bool] = None

    @field_validator('name', 'images', 'variants', 'variant_prices', 'design_files', 'visible')
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        return _reject_null(value)
