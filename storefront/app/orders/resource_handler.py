from typing import Optional, Set

from storefront.app.orders.models import Order
from storefront.common.nanoid import NanoIdType
from storefront.core.authorization.constants import ResourceTypeEnum
from storefront.core.authorization.resource_handler import ResourceHandler


class OrderResourceHandler(ResourceHandler):
    """
    Merchant side resolution of orders. An order detached from a deleted
    collection resolves to nothing, so only admins can still act on it.
    Buyers never come through here, see orders.policy.
    """

    @property
    def resource_type(self) -> ResourceTypeEnum:
        return ResourceTypeEnum.ORDER

    def get_collection_id_or_none(self, resource_id: NanoIdType) -> Optional[NanoIdType]:
        collection_ids = Order.list_attribute('collection_id', Order.id == resource_id)
        return collection_ids[0] if collection_ids else None

    def list_resource_ids_for_collection_ids(self, collection_ids: Set[NanoIdType]) -> Set[NanoIdType]:
        return set(Order.list_attribute('id', Order.collection_id.in_(collection_ids)))
