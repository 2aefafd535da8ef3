from typing import TYPE_CHECKING, Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar, Union

from loguru import logger
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, MultipleResultsFound, NoResultFound
from sqlalchemy.orm import Query, Session
from sqlalchemy.sql.elements import BinaryExpression, ColumnElement, UnaryExpression

from storefront.common.domain import BaseDomain
from storefront.network.database.repository.exceptions import (
    MultipleRepositoryObjectsFound,
    PreventingModelTruncation,
    RepositoryObjectNotFound,
)
from storefront.network.database.session import db

if TYPE_CHECKING:
    from storefront.common.model import BaseModel


class BaseQueryManager:
    def __init__(self, model: Type['BaseModel']) -> None:  # type: ignore[type-arg]
        self.model = model

    def get_query(self, *clauses: Any, **specification: Any) -> 'Query[BaseModel]':  # type: ignore[type-arg]
        query = self.model._get_session().query(self.model)
        for clause in clauses:
            query = query.where(clause)
        for key, value in specification.items():
            query = self.model._parse_specification(query, key, value)
        return query


ReadDomainType = TypeVar('ReadDomainType', bound=BaseDomain)
CreateDomainType = TypeVar('CreateDomainType', bound=BaseDomain)


class RepositoryMixin(Generic[ReadDomainType, CreateDomainType]):
    """
    Database access layer. All interaction with the database should be routed
    through this layer. all public interfaces accept domains subclasses from the
    pydantic base class with from_attributes for simple domain -> orm mapping
    """

    __create_domain__: Type[CreateDomainType] = NotImplemented
    __read_domain__: Type[ReadDomainType] = NotImplemented
    query_manager: Type[BaseQueryManager] = BaseQueryManager

    @classmethod
    def _get_session(cls) -> Session:
        return db.session

    @classmethod
    def get_query(cls, *clauses: Any, **specification: Any) -> 'Query[BaseModel]':  # type: ignore[type-arg]
        return cls.query_manager(cls).get_query(*clauses, **specification)  # type: ignore[arg-type]

    @classmethod
    def get(cls, *clauses: Union[BinaryExpression[Any], ColumnElement[bool]], **specification: Any) -> ReadDomainType:
        instance = cls._get(*clauses, **specification)

        return cls._to_domain(instance)

    @classmethod
    def get_or_none(cls, *clauses: Any, **specification: Any) -> ReadDomainType | None:
        try:
            instance = cls._get(*clauses, **specification)
        except RepositoryObjectNotFound:
            return None

        return cls._to_domain(instance)

    @classmethod
    def get_for_update(cls, *clauses: Any, **specification: Any) -> ReadDomainType:
        """
        Same as get but holds a row lock until the transaction ends. sqlite
        ignores the lock and serializes writers at the database level instead.
        """
        try:
            instance = cls.get_query(*clauses, **specification).with_for_update().populate_existing().one()
        except NoResultFound:
            raise RepositoryObjectNotFound(f'{cls.__name__}: {specification or clauses} not found!')

        return cls._to_domain(instance)

    @classmethod
    def _get(cls, *clauses: Any, **specification: Any) -> 'BaseModel[Any, Any]':
        try:
            return cls.get_query(*clauses, **specification).one()
        except MultipleResultsFound:
            raise MultipleRepositoryObjectsFound(f'Multiple results found for {cls.__name__}: {specification}!')
        except NoResultFound:
            raise RepositoryObjectNotFound(f'{cls.__name__}: {specification or clauses} not found!')

    @classmethod
    def list(
        cls,
        *clauses: Any,
        ordering: Optional[List[Union[str, UnaryExpression]]] = None,
        limit: int | None = None,
        **specification: Any,
    ) -> List[ReadDomainType]:
        query = cls.get_query(*clauses, **specification)
        if ordering:
            query = query.order_by(*cls._parse_ordering(ordering))
        if limit is not None:
            query = query.limit(limit)
        return [cls._to_domain(obj) for obj in query]

    @classmethod
    def list_attribute(cls, attribute: str, *clauses: Any, **specification: Any) -> List[Any]:
        model_attribute = getattr(cls, attribute)
        return [row[0] for row in cls.get_query(*clauses, **specification).with_entities(model_attribute)]

    @classmethod
    def count(cls, *clauses: Any, **specification: Any) -> int:
        return int(cls.get_query(*clauses, **specification).count())

    @classmethod
    def create(cls, domain_obj: CreateDomainType) -> ReadDomainType:
        model_instance = cls._create(**domain_obj.to_dict())
        return cls._to_domain(model_instance)

    @classmethod
    def upsert(
        cls,
        values: Dict[str, Any],
        conflict_columns: Sequence[str],
        update_columns: Sequence[str],
    ) -> ReadDomainType:
        """
        INSERT ... ON CONFLICT (conflict_columns) DO UPDATE SET update_columns.
        Concurrent writers on the same key serialize in the database and the
        last one to commit wins.
        """
        session = cls._get_session()
        dialect_name = session.get_bind().dialect.name
        if dialect_name == 'postgresql':
            insert = postgresql.insert
        elif dialect_name == 'sqlite':
            insert = sqlite.insert
        else:
            raise NotImplementedError(f'upsert is not supported for dialect {dialect_name}')

        statement = insert(cls).values(**values)
        statement = statement.on_conflict_do_update(
            index_elements=list(conflict_columns),
            set_={column: statement.excluded[column] for column in update_columns},
        )
        try:
            session.execute(statement)
        except IntegrityError:
            session.rollback()
            raise

        # Core statements bypass the identity map, refresh whatever is loaded
        clauses = [getattr(cls, column) == values[column] for column in conflict_columns]
        instance = cls.get_query(*clauses).populate_existing().one()
        return cls._to_domain(instance)

    @classmethod
    def delete(cls, *clauses: Union[BinaryExpression[Any], ColumnElement[bool]]) -> int:
        if not clauses:
            raise PreventingModelTruncation(f'Must pass clauses to avoid truncating {cls.__name__}')

        # Ensure clauses like and_() that ultimately evaluate to nothing are checked as well
        if not any(str(clause.compile()) for clause in clauses):
            raise PreventingModelTruncation(f'Empty clauses would cause truncating {cls.__name__}!')

        try:
            deleted = cls.get_query(*clauses).delete(synchronize_session='fetch')
        except IntegrityError:
            cls._get_session().rollback()
            raise

        logger.debug(f'deleted {deleted} {cls.__name__} row(s)')
        return deleted

    @classmethod
    def update(cls, id: str, **updates: Any) -> ReadDomainType:
        try:
            model_instance = cls.get_query(id=id).one()
        except NoResultFound:
            raise RepositoryObjectNotFound(f'{cls.__name__}: {id} not found!')

        for key, value in updates.items():
            if not hasattr(model_instance, key):
                raise ValueError(f"The key '{key}' is not a valid attribute for this model.")
            setattr(model_instance, key, value)

        try:
            cls._get_session().flush([model_instance])
        except IntegrityError:
            cls._get_session().rollback()
            raise

        return cls._to_domain(model_instance)

    @classmethod
    def bulk_update(cls, updates: Dict[str, Any], clauses: List[Any]) -> int:
        """
        Returns the number of matched rows, callers use it for compare-and-set updates
        """
        return int(cls.get_query(*clauses).update(updates, synchronize_session='fetch'))

    @classmethod
    def _create(cls, **attributes: Any) -> 'BaseModel[Any, Any]':
        model_instance = cls(**attributes)
        cls._get_session().add(model_instance)
        try:
            cls._get_session().flush([model_instance])
        except IntegrityError:
            cls._get_session().rollback()
            raise

        return model_instance  # type: ignore[return-value]

    @classmethod
    def _parse_ordering(
        cls, ordering: List[Union[str, 'UnaryExpression[Any]']] | None = None
    ) -> List['UnaryExpression[Any]']:
        """
        Parses str references for a field like:
        ['-created_at', 'name']
        """
        order_expressions = []
        for order in ordering or []:
            if isinstance(order, str):
                if order[0] == '-':
                    order_expressions.append(getattr(cls, order[1:]).desc())
                else:
                    order_expressions.append(getattr(cls, order).asc())
            else:
                # Assume already an expression
                order_expressions.append(order)

        return order_expressions

    @classmethod
    def _parse_specification(cls, query: Any, key: Any, value: Any) -> Any:
        return query.where(getattr(cls, key) == value)

    @classmethod
    def _to_domain(cls, model_instance: 'BaseModel[Any, Any]') -> ReadDomainType:
        return cls.__read_domain__.model_validate(model_instance)  # type: ignore[no-any-return]
