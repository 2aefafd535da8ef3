"""
Frozen copies of catalog rows taken when an order is placed.

Orders reference products and collections with SET NULL foreign keys, so the
snapshot is the only record of what was bought once the catalog entry is gone.
"""

from typing import Optional

from storefront import settings
from storefront.app.catalog.domains import CategoryRead, CollectionRead, ProductRead
from storefront.app.orders.constants import DESIGN_URL_SUFFIX, PRODUCT_URL_FALLBACK_PATH
from storefront.app.orders.domains import CategorySnapshot, CollectionSnapshot, ProductSnapshot


def build_product_url(product: ProductRead, collection: CollectionRead, base_url: str | None = None) -> str:
    """
    {base}/{collection slug}/{product slug} when both slugs exist,
    {base}/products/{product id} otherwise
    """
    base_url = (base_url or settings.STOREFRONT_BASE_URL).rstrip('/')
    if collection.slug and product.slug:
        return f'{base_url}/{collection.slug}/{product.slug}'
    return f'{base_url}/{PRODUCT_URL_FALLBACK_PATH}/{product.id}'


def build_design_url(product_url: str) -> str:
    return f'{product_url}{DESIGN_URL_SUFFIX}'


def build_product_snapshot(
    product: ProductRead,
    collection: CollectionRead,
    category: Optional[CategoryRead] = None,
) -> ProductSnapshot:
    product_url = build_product_url(product, collection)
    return ProductSnapshot(
        id=product.id,
        name=product.name,
        sku=product.sku,
        description=product.description,
        images=list(product.images),
        variants=list(product.variants),
        variant_prices=dict(product.variant_prices),
        blank_code=product.blank_code,
        technique=product.technique,
        note_for_supplier=product.note_for_supplier,
        design_files=list(product.design_files),
        slug=product.slug,
        product_url=product_url,
        design_url=build_design_url(product_url),
        category=CategorySnapshot(id=category.id, name=category.name) if category else None,
    )


def build_collection_snapshot(collection: CollectionRead) -> CollectionSnapshot:
    return CollectionSnapshot(
        id=collection.id,
        name=collection.name,
        description=collection.description,
        owner_id=collection.owner_id,
        slug=collection.slug,
    )
