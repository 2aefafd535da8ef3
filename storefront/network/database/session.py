import sys
import time
from contextvars import ContextVar
from typing import Any, Dict, Optional

from loguru import logger
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.session import Session as SqlAlchemySession
from sqlalchemy.pool import NullPool

from storefront import settings


def create_db_engine(database_url: str) -> Engine:
    url = make_url(database_url)
    if url.get_backend_name() == 'sqlite':
        engine = create_engine(url, connect_args={'check_same_thread': False})

        # Foreign key actions (SET NULL on orders, CASCADE on grants) are off by default in sqlite
        @event.listens_for(engine, 'connect')
        def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute('PRAGMA foreign_keys=ON')
            cursor.close()

        return engine

    return create_engine(
        url,
        poolclass=NullPool,
        connect_args={
            'options': '-c timezone=utc -c statement_timeout=300000 -c idle_in_transaction_session_timeout=600000',
            'connect_timeout': 10,
        },
        pool_pre_ping=True,
    )


_engine = create_db_engine(settings.DATABASE_URL)
_session_maker = sessionmaker(autocommit=False, autoflush=False, bind=_engine)


def get_engine() -> Engine:
    return _engine


if settings.DB_LOG_STATEMENTS:
    # Log statements and their execution times
    @event.listens_for(Engine, 'before_cursor_execute')
    def before_cursor_execute(
        conn: Any, cursor: Any, statement: str, parameters: Any, context: Any, executemany: bool
    ) -> None:
        conn.info.setdefault('query_start_time', []).append(time.time())
        logger.debug(f'Start Query: {statement} {parameters}')

    @event.listens_for(Engine, 'after_cursor_execute')
    def after_cursor_execute(
        conn: Any, cursor: Any, statement: str, parameters: Any, context: Any, executemany: bool
    ) -> None:
        total = time.time() - conn.info['query_start_time'].pop(-1)
        logger.debug(f'Query Time: {total}')


# Should be thread safe as well as coroutine safe!
_session_storage: ContextVar[SqlAlchemySession | None] = ContextVar('_session_storage', default=None)


class SessionNotAvailable(Exception):
    def __init__(self) -> None:
        msg = """
        Either you are not currently in a request context, or you need to manually
        create a session context by using a `db` instance as a context manager e.g.:
        with db():
            db.session.execute(select(Collection))
        """
        super().__init__(msg)


class SessionManagerMeta(type):
    """
    Access session as a property on context manager
    without having to init
    """

    @property
    def session(self) -> SqlAlchemySession:
        session = _session_storage.get()
        if session is None:
            raise SessionNotAvailable

        return session


class SessionManager(metaclass=SessionManagerMeta):
    def __init__(
        self,
        session_kwargs: Dict[str, Any] | None = None,
        commit_on_success: bool = False,
    ):
        self.session_token: Optional[Any] = None
        self.session_kwargs = session_kwargs or {}
        self.commit_on_success = commit_on_success

    def enter(self) -> Any:
        # Pytest will open a session per test and API tests route through the
        # session middleware as well, an existing session is always shared
        if _session_storage.get() is None:
            session = _session_maker(**self.session_kwargs)
            self.session_token = _session_storage.set(session)

        return type(self)

    def exit(self, exception: Exception | None = None) -> None:
        exc_type, exc_value, exc_tb = sys.exc_info()
        self.__exit__(exc_type, exc_value, exc_tb)

    def cleanup(self) -> None:
        # Only the manager that opened the session may close it
        if self.session_token:
            session = _session_storage.get()
            if session is not None:
                session.close()
            _session_storage.reset(self.session_token)

    def __enter__(self) -> Any:
        return self.enter()

    def __exit__(self, exc_type: Any, exc_value: Any, traceback: Any) -> None:
        session = _session_storage.get()
        is_success = exc_type is None

        if session is not None and self.session_token:
            if self.commit_on_success and is_success:
                session.commit()
            else:
                session.rollback()

        self.cleanup()


# This is what external callers should access!
db: SessionManagerMeta = SessionManager
