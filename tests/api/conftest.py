from contextlib import contextmanager
from typing import Callable, Dict

import pytest
from fastapi.testclient import TestClient
from starlette.middleware import Middleware

from storefront import settings
from storefront.core.identity import IdentityService, issue_wallet_token
from storefront.core.user import UserRead


class _SharedSessionStorage:
    """
    Stands in for the session context variable so requests handled on the
    TestClient's worker threads see the per test session opened by the db fixture.
    """

    def __init__(self, session):
        self.session = session

    def get(self):
        return self.session

    def set(self, session):
        return None

    def reset(self, token):
        return None


@contextmanager
def _make_persistent_client(session):
    """
    TestClient that shares the test session with every request.

    Removes HTTPSessionManagerMiddleware so requests neither commit nor roll
    back, the db fixture rolls everything back once the test is done.
    """
    from storefront.network.database.middleware import HTTPSessionManagerMiddleware
    from storefront.network.http.server import server

    @contextmanager
    def _temporary_remove_middleware(target_name: str):
        original_middleware = server.user_middleware.copy()

        new_middlewares: list[Middleware] = []
        for middleware in server.user_middleware:
            if not middleware.cls.__name__ == target_name:
                new_middlewares.append(middleware)
        server.user_middleware = new_middlewares
        server.middleware_stack = server.build_middleware_stack()

        try:
            yield server
        finally:
            server.user_middleware = original_middleware
            server.middleware_stack = server.build_middleware_stack()

    with pytest.MonkeyPatch.context() as monkeypatch:
        monkeypatch.setattr('storefront.network.database.session._session_storage', _SharedSessionStorage(session))
        with _temporary_remove_middleware(HTTPSessionManagerMiddleware.__name__) as modified_server:
            with TestClient(modified_server) as client:
                yield client


@pytest.fixture(scope='module')
def client() -> TestClient:
    from storefront.network.http.server import server

    with TestClient(server) as c:
        yield c


@pytest.fixture(scope='function')
def persistent_client(db) -> TestClient:
    """
    Requests see fixture data and each other's writes within a single test.
    """
    with _make_persistent_client(db) as client:
        yield client


@pytest.fixture(scope='session')
def auth_headers() -> Callable[[UserRead], Dict[str, str]]:
    """Bearer session for a user, the way the credential service would issue it"""

    def _auth_headers(user: UserRead) -> Dict[str, str]:
        return {'Authorization': f'Bearer {IdentityService.issue_session_token(user.id)}'}

    return _auth_headers


@pytest.fixture(scope='session')
def wallet_headers() -> Callable[[str], Dict[str, str]]:
    def _wallet_headers(wallet_address: str) -> Dict[str, str]:
        return {
            settings.WALLET_ADDRESS_HEADER: wallet_address,
            settings.WALLET_TOKEN_HEADER: issue_wallet_token(wallet_address),
        }

    return _wallet_headers
