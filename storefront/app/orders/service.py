from typing import List

from loguru import logger

from storefront.app.catalog.domains import CategoryRead, CollectionRead, ProductRead
from storefront.app.catalog.models import Category, Collection, Product
from storefront.app.orders.constants import DisplaySourceEnum, OrderStatusEnum
from storefront.app.orders.domains import (
    CollectionDisplay,
    LiveOrSnapshot,
    OrderCreate,
    OrderCreatePayload,
    OrderDisplayData,
    OrderRead,
    ProductDisplay,
)
from storefront.app.orders.exceptions import OrderNotFound, ProductUnavailable
from storefront.app.orders.models import Order
from storefront.app.orders.policy import can_access_order
from storefront.app.orders.snapshots import (
    build_collection_snapshot,
    build_design_url,
    build_product_snapshot,
    build_product_url,
)
from storefront.common.nanoid import NanoIdType
from storefront.core.authorization import AccessDecisionService, RequiredLevelEnum, ResourceRef
from storefront.core.identity.domains import BuyerIdentity, Principal


class OrderService:
    def __init__(self, access_decision_service: AccessDecisionService):
        self.access_decision_service = access_decision_service

    @classmethod
    def factory(cls) -> 'OrderService':
        return cls(access_decision_service=AccessDecisionService.factory())

    def create_order(self, buyer: BuyerIdentity, payload: OrderCreatePayload) -> OrderRead:
        """
        Place an order for the buyer's wallet, freezing the product and its
        collection into the row in the same flush.

        Raises:
            ProductUnavailable: product missing, hidden, or in a hidden collection
        """
        product = Product.get_or_none(Product.id == payload.product_id)
        collection = Collection.get_or_none(Collection.id == product.collection_id) if product else None
        if product is None or collection is None or not product.visible or not collection.visible:
            raise ProductUnavailable(context={'product_id': payload.product_id})

        category = Category.get_or_none(Category.id == product.category_id) if product.category_id else None
        order = Order.create(
            OrderCreate(
                wallet_address=buyer.wallet_address,
                product_id=product.id,
                collection_id=collection.id,
                category_id=category.id if category else None,
                quantity=payload.quantity,
                variant_selections=payload.variant_selections,
                status=OrderStatusEnum.PENDING,
                product_snapshot=build_product_snapshot(product, collection, category).to_dict(),
                collection_snapshot=build_collection_snapshot(collection).to_dict(),
            )
        )
        logger.info(f'order {order.id} placed for product {product.id} in collection {collection.id}')
        return order

    def get_order_for_id_or_none(self, order_id: NanoIdType) -> OrderRead | None:
        return Order.get_or_none(Order.id == order_id)

    def can_access_order(self, buyer: BuyerIdentity, order_id: NanoIdType) -> bool:
        return can_access_order(buyer, self.get_order_for_id_or_none(order_id))

    def get_order_for_buyer(self, buyer: BuyerIdentity, order_id: NanoIdType) -> OrderRead:
        order = self.get_order_for_id_or_none(order_id)
        if not can_access_order(buyer, order):
            logger.info(f'order {order_id} not visible to wallet {buyer.wallet_address}')
            raise OrderNotFound(context={'order_id': order_id})
        return order

    def list_orders_for_buyer(self, buyer: BuyerIdentity) -> List[OrderRead]:
        return Order.list(Order.wallet_address == buyer.wallet_address, ordering=['-created_at'])

    def list_orders_for_collection(self, principal: Principal, collection_id: NanoIdType) -> List[OrderRead]:
        """
        Merchant side listing. Public visibility of the collection does not
        count, only admins, the owner and grant holders see buyers.
        """
        self.access_decision_service.check_access(
            principal,
            ResourceRef.collection(collection_id),
            RequiredLevelEnum.VIEW,
            include_public=False,
        )
        return Order.list(Order.collection_id == collection_id, ordering=['-created_at'])

    def update_order_status(self, principal: Principal, order_id: NanoIdType, status: OrderStatusEnum) -> OrderRead:
        self.access_decision_service.check_access(principal, ResourceRef.order(order_id), RequiredLevelEnum.EDIT)
        order = Order.update(order_id, status=OrderStatusEnum(status).value)
        logger.info(f'order {order_id} moved to {status} by {principal.user_id}')
        return order

    def get_order_display_data(self, order_id: NanoIdType) -> OrderDisplayData:
        """
        Live catalog rows win while they exist, the frozen snapshot covers
        anything that has since been deleted.
        """
        order = Order.get(Order.id == order_id)

        product = Product.get_or_none(Product.id == order.product_id) if order.product_id else None
        collection = Collection.get_or_none(Collection.id == order.collection_id) if order.collection_id else None

        if collection is not None:
            collection_display = LiveOrSnapshot[CollectionDisplay](
                source=DisplaySourceEnum.LIVE, data=self._collection_display(collection)
            )
        else:
            snapshot = order.collection_snapshot
            collection_display = LiveOrSnapshot[CollectionDisplay](
                source=DisplaySourceEnum.SNAPSHOT,
                data=CollectionDisplay(
                    id=snapshot.id, name=snapshot.name, owner_id=snapshot.owner_id, slug=snapshot.slug
                ),
            )

        if product is not None:
            category = Category.get_or_none(Category.id == product.category_id) if product.category_id else None
            product_display = LiveOrSnapshot[ProductDisplay](
                source=DisplaySourceEnum.LIVE,
                data=self._product_display(product, collection, category),
            )
        else:
            snapshot = order.product_snapshot
            product_display = LiveOrSnapshot[ProductDisplay](
                source=DisplaySourceEnum.SNAPSHOT,
                data=ProductDisplay(
                    id=snapshot.id,
                    name=snapshot.name,
                    sku=snapshot.sku,
                    images=snapshot.images,
                    product_url=snapshot.product_url,
                    design_url=snapshot.design_url,
                    category_name=snapshot.category.name if snapshot.category else None,
                ),
            )

        return OrderDisplayData(order_id=order.id, product=product_display, collection=collection_display)

    def detach_product(self, product_id: NanoIdType) -> int:
        return Order.bulk_update(updates={'product_id': None}, clauses=[Order.product_id == product_id])

    def detach_collection(self, collection_id: NanoIdType) -> int:
        detached = Order.bulk_update(updates={'collection_id': None}, clauses=[Order.collection_id == collection_id])
        if detached:
            logger.info(f'{detached} order(s) detached from deleted collection {collection_id}')
        return detached

    def detach_category(self, category_id: NanoIdType) -> int:
        return Order.bulk_update(updates={'category_id': None}, clauses=[Order.category_id == category_id])

    def _collection_display(self, collection: CollectionRead) -> CollectionDisplay:
        return CollectionDisplay(
            id=collection.id, name=collection.name, owner_id=collection.owner_id, slug=collection.slug
        )

    def _product_display(
        self,
        product: ProductRead,
        collection: CollectionRead | None,
        category: CategoryRead | None,
    ) -> ProductDisplay:
        # A live product always has a live collection, the fallback covers a detached order
        if collection is None:
            collection = Collection.get(Collection.id == product.collection_id)
        product_url = build_product_url(product, collection)
        return ProductDisplay(
            id=product.id,
            name=product.name,
            sku=product.sku,
            images=product.images,
            product_url=product_url,
            design_url=build_design_url(product_url),
            category_name=category.name if category else None,
        )
