from storefront.app.orders.domains import OrderRead
from storefront.core.identity.domains import BuyerIdentity


def can_access_order(buyer: BuyerIdentity | None, order: OrderRead | None) -> bool:
    """
    Buyer side rule, kept apart from the merchant AccessDecisionService on
    purpose. The wallet that placed the order sees it and nobody else does.
    Matching is exact and case sensitive, there is no fallthrough to
    ownership, grants or visibility.
    """
    if buyer is None or order is None:
        return False
    if not isinstance(buyer, BuyerIdentity):
        return False
    return bool(buyer.wallet_address) and buyer.wallet_address == order.wallet_address
