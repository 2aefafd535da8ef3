from abc import ABC, abstractmethod
from typing import List, Optional, Set

from storefront.common.nanoid import NanoIdType
from storefront.core.authorization.constants import ResourceTypeEnum
from storefront.core.authorization.domains import AccessTarget


class ResourceHandler(ABC):
    """
    Resolves one resource type to the collection that owns it.

    Ownership, grants and visibility are all anchored at the collection, so
    the only thing the decision engine needs to know about a category, product
    or order is which collection it belongs to. Each resource type registers a
    handler with the AccessDecisionService, which dispatches on ResourceTypeEnum
    and stays ignorant of the catalog and order tables.
    """

    @property
    @abstractmethod
    def resource_type(self) -> ResourceTypeEnum:
        """
        Return the resource type this handler is responsible for.
        """
        pass

    @abstractmethod
    def get_collection_id_or_none(self, resource_id: NanoIdType) -> Optional[NanoIdType]:
        """
        Single lookup from a resource to its owning collection.

        Returns:
            The collection id, or None when the resource does not exist (or,
            for orders, when its collection has since been deleted)
        """
        pass

    @abstractmethod
    def list_resource_ids_for_collection_ids(self, collection_ids: Set[NanoIdType]) -> Set[NanoIdType]:
        """
        Bulk form used by listing endpoints. Children inherit exactly the
        access of their collection, so permitted ids are the children of
        permitted collections.
        """
        pass


class CollectionHandler(ResourceHandler):
    """
    Root of the hierarchy. Besides resolving ids it exposes the facts the
    decision engine evaluates (owner and visibility) and the one mutation
    ownership transfer needs.
    """

    @property
    def resource_type(self) -> ResourceTypeEnum:
        return ResourceTypeEnum.COLLECTION

    def get_collection_id_or_none(self, resource_id: NanoIdType) -> Optional[NanoIdType]:
        target = self.get_access_target_or_none(resource_id)
        return target.collection_id if target else None

    def list_resource_ids_for_collection_ids(self, collection_ids: Set[NanoIdType]) -> Set[NanoIdType]:
        return set(collection_ids)

    @abstractmethod
    def get_access_target_or_none(self, collection_id: NanoIdType, for_update: bool = False) -> Optional[AccessTarget]:
        """
        Args:
            collection_id: Collection to load
            for_update: Hold a row lock until the surrounding transaction ends
        """
        pass

    @abstractmethod
    def list_access_targets(self) -> List[AccessTarget]:
        """
        Every collection, the candidate set listing filters through the engine
        """
        pass

    @abstractmethod
    def reassign_owner(
        self, collection_id: NanoIdType, expected_owner_id: NanoIdType, new_owner_id: NanoIdType
    ) -> bool:
        """
        Compare and set on owner_id.

        Returns:
            False when the owner is no longer expected_owner_id, meaning a
            concurrent transfer won
        """
        pass
