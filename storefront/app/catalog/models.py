from typing import Any, Optional

from sqlalchemy import JSON, Boolean, ForeignKey, String, Text, false, true
from sqlalchemy.orm import Mapped, mapped_column

from storefront.app.catalog.constants import CATEGORY_PK_ABBREV, COLLECTION_PK_ABBREV, PRODUCT_PK_ABBREV
from storefront.app.catalog.domains import (
    CategoryCreate,
    CategoryRead,
    CollectionCreate,
    CollectionRead,
    ProductCreate,
    ProductRead,
)
from storefront.common.model import BaseModel
from storefront.common.nanoid import NanoIdType


class Collection(BaseModel[CollectionRead, CollectionCreate]):
    __pk_abbrev__ = COLLECTION_PK_ABBREV
    __create_domain__ = CollectionCreate
    __read_domain__ = CollectionRead

    name: Mapped[str] = mapped_column(String(200))
    slug: Mapped[Optional[str]] = mapped_column(String(200), nullable=True, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # Exactly one owner, changed only by ownership transfer
    owner_id: Mapped[NanoIdType] = mapped_column(ForeignKey('user.id', ondelete='RESTRICT'), index=True)
    visible: Mapped[bool] = mapped_column(Boolean, default=False, server_default=false())


class Category(BaseModel[CategoryRead, CategoryCreate]):
    __pk_abbrev__ = CATEGORY_PK_ABBREV
    __create_domain__ = CategoryCreate
    __read_domain__ = CategoryRead

    collection_id: Mapped[NanoIdType] = mapped_column(ForeignKey('collection.id', ondelete='CASCADE'), index=True)
    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class Product(BaseModel[ProductRead, ProductCreate]):
    __pk_abbrev__ = PRODUCT_PK_ABBREV
    __create_domain__ = ProductCreate
    __read_domain__ = ProductRead

    collection_id: Mapped[NanoIdType] = mapped_column(ForeignKey('collection.id', ondelete='CASCADE'), index=True)
    category_id: Mapped[Optional[NanoIdType]] = mapped_column(
        ForeignKey('category.id', ondelete='SET NULL'), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String(200))
    sku: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    images: Mapped[list[Any]] = mapped_column(JSON, default=list)
    variants: Mapped[list[Any]] = mapped_column(JSON, default=list)
    variant_prices: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    blank_code: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    technique: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    note_for_supplier: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    design_files: Mapped[list[Any]] = mapped_column(JSON, default=list)
    slug: Mapped[Optional[str]] = mapped_column(String(200), nullable=True, index=True)
    visible: Mapped[bool] = mapped_column(Boolean, default=True, server_default=true())
