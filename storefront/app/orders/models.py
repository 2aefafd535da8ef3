from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import JSON, ForeignKey, Integer, String, event, inspect
from sqlalchemy.orm import Mapped, mapped_column

from storefront.app.orders.constants import ORDER_PK_ABBREV, SNAPSHOT_FIELDS, OrderStatusEnum
from storefront.app.orders.domains import OrderCreate, OrderRead
from storefront.app.orders.exceptions import SnapshotImmutable
from storefront.common.model import BaseModel
from storefront.common.nanoid import NanoIdType


class Order(BaseModel[OrderRead, OrderCreate]):
    """
    Catalog references are nullable and SET NULL on delete, an order outlives
    the product and collection it was placed against.
    """

    __pk_abbrev__ = ORDER_PK_ABBREV
    __create_domain__ = OrderCreate
    __read_domain__ = OrderRead

    wallet_address: Mapped[str] = mapped_column(String(100), index=True)
    product_id: Mapped[Optional[NanoIdType]] = mapped_column(
        ForeignKey('product.id', ondelete='SET NULL'), nullable=True, index=True
    )
    collection_id: Mapped[Optional[NanoIdType]] = mapped_column(
        ForeignKey('collection.id', ondelete='SET NULL'), nullable=True, index=True
    )
    category_id: Mapped[Optional[NanoIdType]] = mapped_column(
        ForeignKey('category.id', ondelete='SET NULL'), nullable=True
    )
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    variant_selections: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    status: Mapped[str] = mapped_column(
        String(20), default=OrderStatusEnum.PENDING.value, comment=f'Order statuses: {OrderStatusEnum.describe()}'
    )
    product_snapshot: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    collection_snapshot: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    @classmethod
    def bulk_update(cls, updates: Dict[Any, Any], clauses: List[Any]) -> int:
        # Query.update skips mapper events, so the before_update hook below never sees it
        _reject_snapshot_writes(updates)
        return super().bulk_update(updates=updates, clauses=clauses)

    @classmethod
    def upsert(
        cls, values: Dict[str, Any], conflict_columns: Sequence[str], update_columns: Sequence[str]
    ) -> OrderRead:
        _reject_snapshot_writes(update_columns)
        return super().upsert(values=values, conflict_columns=conflict_columns, update_columns=update_columns)


def _reject_snapshot_writes(columns: Iterable[Any]) -> None:
    # Keys may be column names or mapped attributes such as Order.product_snapshot
    frozen = sorted({getattr(column, 'key', column) for column in columns} & set(SNAPSHOT_FIELDS))
    if frozen:
        raise SnapshotImmutable(message=f'{", ".join(frozen)} cannot change after insert')


@event.listens_for(Order, 'before_update')
def _prevent_snapshot_changes(mapper: Any, connection: Any, target: Order) -> None:
    state = inspect(target)
    for field in SNAPSHOT_FIELDS:
        if state.attrs[field].history.has_changes():
            raise SnapshotImmutable(message=f'{field} of order {target.id} cannot change after insert')
