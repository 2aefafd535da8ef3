from typing import Optional

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from storefront.common.model import BaseModel
from storefront.common.nanoid import NanoIdType
from storefront.core.authorization.constants import COLLECTION_ACCESS_PK_ABBREV, AccessTypeEnum
from storefront.core.authorization.domains import CollectionAccessCreate, CollectionAccessRead


class CollectionAccess(BaseModel[CollectionAccessRead, CollectionAccessCreate]):
    """
    Delegated access to a collection. Ownership lives on collection.owner_id
    and is never mirrored here.
    """

    __tablename__ = 'collection_access'

    collection_id: Mapped[NanoIdType] = mapped_column(ForeignKey('collection.id', ondelete='CASCADE'), index=True)
    user_id: Mapped[NanoIdType] = mapped_column(ForeignKey('user.id', ondelete='CASCADE'), index=True)
    access_type: Mapped[str] = mapped_column(String(10), comment=f'Access types: {AccessTypeEnum.describe()}')
    granted_by: Mapped[Optional[NanoIdType]] = mapped_column(
        ForeignKey('user.id', ondelete='SET NULL'), nullable=True
    )

    __pk_abbrev__ = COLLECTION_ACCESS_PK_ABBREV
    __read_domain__ = CollectionAccessRead
    __create_domain__ = CollectionAccessCreate

    __table_args__ = (
        # One grant per user per collection, upserts conflict on this
        UniqueConstraint('collection_id', 'user_id', name='uq_collection_access_collection_user'),
    )
