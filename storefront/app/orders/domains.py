from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import Field

from storefront.app.orders.constants import ORDER_PK_ABBREV, SNAPSHOT_SCHEMA_VERSION, DisplaySourceEnum, OrderStatusEnum
from storefront.common.domain import BaseDomain
from storefront.common.nanoid import NanoId, NanoIdType


class CategorySnapshot(BaseDomain):
    id: NanoIdType
    name: str


class ProductSnapshot(BaseDomain):
    """
    Product as the buyer saw it when ordering. Written once with the order
    and never refreshed.
    """

    schema_version: int = SNAPSHOT_SCHEMA_VERSION
    id: NanoIdType
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
    product_url: str
    design_url: str
    category: Optional[CategorySnapshot] = None


class CollectionSnapshot(BaseDomain):
    schema_version: int = SNAPSHOT_SCHEMA_VERSION
    id: NanoIdType
    name: str
    description: Optional[str] = None
    owner_id: NanoIdType
    slug: Optional[str] = None


class OrderCreatePayload(BaseDomain):
    product_id: NanoIdType
    quantity: int = Field(default=1, ge=1)
    variant_selections: Dict[str, Any] = Field(default_factory=dict)


class OrderStatusUpdate(BaseDomain):
    status: OrderStatusEnum


class OrderCreate(BaseDomain):
    id: Optional[NanoIdType] = Field(default_factory=NanoId.factory(ORDER_PK_ABBREV))
    wallet_address: str
    product_id: Optional[NanoIdType] = None
    collection_id: Optional[NanoIdType] = None
    category_id: Optional[NanoIdType] = None
    quantity: int = 1
    variant_selections: Dict[str, Any] = Field(default_factory=dict)
    status: OrderStatusEnum = OrderStatusEnum.PENDING
    product_snapshot: Dict[str, Any]
    collection_snapshot: Dict[str, Any]


class OrderRead(BaseDomain):
    id: NanoIdType
    wallet_address: str
    product_id: Optional[NanoIdType] = None
    collection_id: Optional[NanoIdType] = None
    category_id: Optional[NanoIdType] = None
    quantity: int
    variant_selections: Dict[str, Any]
    status: OrderStatusEnum
    product_snapshot: ProductSnapshot
    collection_snapshot: CollectionSnapshot
    created_at: datetime | None = None
    modified_at: Optional[datetime] = None


class ProductDisplay(BaseDomain):
    id: NanoIdType
    name: str
    sku: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    product_url: str
    design_url: str
    category_name: Optional[str] = None


class CollectionDisplay(BaseDomain):
    id: NanoIdType
    name: str
    owner_id: NanoIdType
    slug: Optional[str] = None


DisplayType = TypeVar('DisplayType', bound=BaseDomain)


class LiveOrSnapshot(BaseDomain, Generic[DisplayType]):
    """Display data plus where it came from"""

    source: DisplaySourceEnum
    data: DisplayType


class OrderDisplayData(BaseDomain):
    order_id: NanoIdType
    product: LiveOrSnapshot[ProductDisplay]
    collection: LiveOrSnapshot[CollectionDisplay]
