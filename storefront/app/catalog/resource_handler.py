from typing import List, Optional, Set

from storefront.app.catalog.models import Category, Collection, Product
from storefront.common.nanoid import NanoIdType
from storefront.core.authorization.constants import ResourceTypeEnum
from storefront.core.authorization.domains import AccessTarget
from storefront.core.authorization.resource_handler import CollectionHandler, ResourceHandler
from storefront.network.database.repository.exceptions import RepositoryObjectNotFound


class CollectionResourceHandler(CollectionHandler):
    def get_access_target_or_none(self, collection_id: NanoIdType, for_update: bool = False) -> Optional[AccessTarget]:
        if for_update:
            try:
                collection = Collection.get_for_update(Collection.id == collection_id)
            except RepositoryObjectNotFound:
                return None
        else:
            collection = Collection.get_or_none(Collection.id == collection_id)

        if collection is None:
            return None
        return AccessTarget(
            collection_id=collection.id,
            owner_id=collection.owner_id,
            visible=collection.visible,
            name=collection.name,
        )

    def list_access_targets(self) -> List[AccessTarget]:
        rows = Collection.get_query().with_entities(
            Collection.id, Collection.owner_id, Collection.visible, Collection.name
        )
        return [
            AccessTarget(collection_id=row.id, owner_id=row.owner_id, visible=row.visible, name=row.name)
            for row in rows
        ]

    def reassign_owner(
        self, collection_id: NanoIdType, expected_owner_id: NanoIdType, new_owner_id: NanoIdType
    ) -> bool:
        updated = Collection.bulk_update(
            updates={'owner_id': new_owner_id},
            clauses=[Collection.id == collection_id, Collection.owner_id == expected_owner_id],
        )
        return updated == 1


class CategoryResourceHandler(ResourceHandler):
    @property
    def resource_type(self) -> ResourceTypeEnum:
        return ResourceTypeEnum.CATEGORY

    def get_collection_id_or_none(self, resource_id: NanoIdType) -> Optional[NanoIdType]:
        collection_ids = Category.list_attribute('collection_id', Category.id == resource_id)
        return collection_ids[0] if collection_ids else None

    def list_resource_ids_for_collection_ids(self, collection_ids: Set[NanoIdType]) -> Set[NanoIdType]:
        return set(Category.list_attribute('id', Category.collection_id.in_(collection_ids)))


class ProductResourceHandler(ResourceHandler):
    @property
    def resource_type(self) -> ResourceTypeEnum:
        return ResourceTypeEnum.PRODUCT

    def get_collection_id_or_none(self, resource_id: NanoIdType) -> Optional[NanoIdType]:
        collection_ids = Product.list_attribute('collection_id', Product.id == resource_id)
        return collection_ids[0] if collection_ids else None

    def list_resource_ids_for_collection_ids(self, collection_ids: Set[NanoIdType]) -> Set[NanoIdType]:
        return set(Product.list_attribute('id', Product.collection_id.in_(collection_ids)))
