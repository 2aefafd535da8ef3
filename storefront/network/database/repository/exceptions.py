from fastapi import status

from storefront.common.exceptions import InternalException


class RepositoryObjectNotFound(InternalException):
    """Raised by get() style lookups in place of sqlalchemy's NoResultFound"""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'


class MultipleRepositoryObjectsFound(InternalException):
    """A single-row lookup matched several rows"""


class PreventingModelTruncation(InternalException):
    """bulk_update or delete was called without any filtering clauses"""
