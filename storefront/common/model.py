from datetime import datetime
from importlib import import_module
from types import ModuleType
from typing import List, Optional

from loguru import logger
from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column

from storefront import settings
from storefront.common.nanoid import NanoId, NanoIdType
from storefront.network.database.repository.mixin import (
    CreateDomainType,
    ReadDomainType,
    RepositoryMixin,
)


class BaseModel(DeclarativeBase, RepositoryMixin[ReadDomainType, CreateDomainType]):
    """
    Every storefront table gets a prefixed nanoid key plus created/modified stamps.
    Subclasses set __pk_abbrev__, e.g. 'coll' -> coll-XSqS5h9vFTSgP
    """

    __pk_abbrev__: str = NotImplemented

    @declared_attr
    def id(cls) -> Mapped[str]:
        if cls.__pk_abbrev__ == NotImplemented:
            raise NotImplementedError(f'__pk_abbrev__ must be implemented for {cls.__name__}')

        # Generated in python so sqlite test databases need no gen_nanoid() function
        return mapped_column(String(length=50), primary_key=True, default=NanoId.factory(cls.__pk_abbrev__))

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(DateTime, server_default=func.now())

    @declared_attr
    def modified_at(cls) -> Mapped[Optional[datetime]]:
        return mapped_column(DateTime, onupdate=func.now(), nullable=True)

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return cls.__name__.lower()

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.id}>'

    @classmethod
    def generate_id(cls) -> NanoIdType:
        """For bulk inserts and upserts that bypass the column default"""
        return NanoId.gen(abbrev=cls.__pk_abbrev__)


def import_model_modules() -> List[ModuleType]:
    """
    Declarative mappings only exist once their module is imported. Alembic,
    the server and the test suite call this so foreign keys like
    "user.id" resolve no matter which model is touched first.
    """
    modules = []
    for boundary in settings.BOUNDARIES:
        module_path = f'{settings.BASE_MODULE}.{boundary}.models'
        logger.debug(f'loading models from {module_path}')
        modules.append(import_module(module_path))
    return modules
