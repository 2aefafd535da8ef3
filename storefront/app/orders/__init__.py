from storefront.app.orders.constants import ORDER_PK_ABBREV, SNAPSHOT_SCHEMA_VERSION, DisplaySourceEnum, OrderStatusEnum
from storefront.app.orders.domains import (
    CollectionSnapshot,
    OrderCreatePayload,
    OrderDisplayData,
    OrderRead,
    ProductSnapshot,
)
from storefront.app.orders.exceptions import OrderNotFound, ProductUnavailable, SnapshotImmutable
from storefront.app.orders.models import Order
from storefront.app.orders.policy import can_access_order
from storefront.app.orders.resource_handler import OrderResourceHandler
from storefront.app.orders.service import OrderService

__all__ = [
    'ORDER_PK_ABBREV',
    'SNAPSHOT_SCHEMA_VERSION',
    'CollectionSnapshot',
    'DisplaySourceEnum',
    'Order',
    'OrderCreatePayload',
    'OrderDisplayData',
    'OrderNotFound',
    'OrderRead',
    'OrderResourceHandler',
    'OrderService',
    'OrderStatusEnum',
    'ProductSnapshot',
    'ProductUnavailable',
    'SnapshotImmutable',
    'can_access_order',
]
