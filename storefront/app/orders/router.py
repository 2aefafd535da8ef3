from typing import List

from fastapi import APIRouter, Depends

from storefront.app.orders.domains import OrderCreatePayload, OrderDisplayData, OrderRead, OrderStatusUpdate
from storefront.app.orders.service import OrderService
from storefront.common.nanoid import NanoIdType
from storefront.core.identity.domains import BuyerIdentity, Principal
from storefront.core.identity.guards import AuthenticatedPrincipalGuard, BuyerGuard

router = APIRouter()


# Buyer endpoints, authenticated by wallet only


@router.post('/create-order')
def create_order(
    payload: OrderCreatePayload,
    buyer: BuyerIdentity = BuyerGuard(),
    order_service: OrderService = Depends(OrderService.factory),
) -> OrderRead:
    return order_service.create_order(buyer, payload)


@router.get('/my-orders')
def list_my_orders(
    buyer: BuyerIdentity = BuyerGuard(),
    order_service: OrderService = Depends(OrderService.factory),
) -> List[OrderRead]:
    return order_service.list_orders_for_buyer(buyer)


@router.get('/get-order/{order_id}')
def get_order(
    order_id: NanoIdType,
    buyer: BuyerIdentity = BuyerGuard(),
    order_service: OrderService = Depends(OrderService.factory),
) -> OrderRead:
    return order_service.get_order_for_buyer(buyer, order_id)


@router.get('/get-order-display/{order_id}')
def get_order_display(
    order_id: NanoIdType,
    buyer: BuyerIdentity = BuyerGuard(),
    order_service: OrderService = Depends(OrderService.factory),
) -> OrderDisplayData:
    """Product and collection details, live when they still exist"""
    order = order_service.get_order_for_buyer(buyer, order_id)
    return order_service.get_order_display_data(order.id)


# Merchant endpoints


@router.get('/list-collection-orders/{collection_id}')
def list_collection_orders(
    collection_id: NanoIdType,
    principal: Principal = AuthenticatedPrincipalGuard(),
    order_service: OrderService = Depends(OrderService.factory),
) -> List[OrderRead]:
    return order_service.list_orders_for_collection(principal, collection_id)


@router.patch('/update-order-status/{order_id}')
def update_order_status(
    order_id: NanoIdType,
    payload: OrderStatusUpdate,
    principal: Principal = AuthenticatedPrincipalGuard(),
    order_service: OrderService = Depends(OrderService.factory),
) -> OrderRead:
    return order_service.update_order_status(principal, order_id, payload.status)
