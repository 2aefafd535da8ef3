from storefront.common.enum import BaseEnum

ORDER_PK_ABBREV = 'ordr'

# Bump when the frozen snapshot shape changes, readers branch on it
SNAPSHOT_SCHEMA_VERSION = 1

PRODUCT_URL_FALLBACK_PATH = 'products'
DESIGN_URL_SUFFIX = '/design'


class OrderStatusEnum(BaseEnum):
    PENDING_PAYMENT = 'pending_payment'
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    SHIPPED = 'shipped'
    DELIVERED = 'delivered'
    CANCELLED = 'cancelled'


class DisplaySourceEnum(BaseEnum):
    LIVE = 'live'
    SNAPSHOT = 'snapshot'


SNAPSHOT_FIELDS = ('product_snapshot', 'collection_snapshot')
