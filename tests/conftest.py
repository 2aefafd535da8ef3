import os
import sys
import tempfile

from sqlalchemy.orm import Session

# Test Environment Overrides will override .env files
# THESE MUST BE IMPORTED BEFORE ANYTHING
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

EXPECTED_SECRET_KEY = 'test'
TEST_DATABASE_PATH = os.path.join(tempfile.gettempdir(), f'storefront-test-{os.getpid()}.sqlite3')

os.environ.setdefault('SECRET_KEY', EXPECTED_SECRET_KEY)
os.environ.setdefault('WALLET_TOKEN_SECRET', 'test-wallet-secret')
os.environ.setdefault('ENVIRONMENT', 'testing')
os.environ.setdefault('DATABASE_URL', f'sqlite:///{TEST_DATABASE_PATH}')
os.environ.setdefault('ATOMIC_REQUESTS', 'False')
os.environ.setdefault('USE_MOCK_SENTRY_CLIENT', 'True')
os.environ.setdefault('STOREFRONT_BASE_URL', 'https://store.fun')
os.environ.setdefault('LOG_LEVEL', 'WARNING')

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from storefront import setup

setup.run()

import pytest

# ruff: noqa: E402
from storefront import settings
from storefront.common import context
from storefront.common.model import BaseModel
from storefront.core.identity import AdminPrincipal, PublicPrincipal, UserPrincipal
from storefront.core.user import UserRoleEnum, UserService
from storefront.network.database.session import db as session_manager
from storefront.network.database.session import get_engine

# Add fixtures here
pytest_plugins = [
    'tests.factories.core.user',
    'tests.factories.app.catalog',
]


# When storefront files are imported before the above patching, tests will use
# incorrect database settings.
if settings.SECRET_KEY != EXPECTED_SECRET_KEY:
    raise ValueError(
        'Patching of environment variables failed.\n'
        'This will cause unexpected test failures. '
        'Check all storefront imports are delayed until after patching.\n'
    )


@pytest.fixture(scope='session', autouse=True)
def database_schema():
    engine = get_engine()
    BaseModel.metadata.drop_all(engine)
    BaseModel.metadata.create_all(engine)
    yield
    BaseModel.metadata.drop_all(engine)
    engine.dispose()
    if os.path.exists(TEST_DATABASE_PATH):
        os.remove(TEST_DATABASE_PATH)


@pytest.fixture(scope='function', autouse=True)
def db() -> Session:
    # This needs to be set first for fixtures to be able to create
    context.initialize(
        user_type=context.AppContextUserType.SYSTEM.value,
        user_id='user-system',
        breadcrumb='testing',
    )

    with session_manager(commit_on_success=False):
        session = session_manager.session

        # Production code may commit, in tests flush instead so everything
        # stays inside the transaction rolled back below
        def no_op_commit():
            session.flush()

        session.commit = no_op_commit

        yield session_manager.session

        session.rollback()


def _create_user(user_factory, role: UserRoleEnum, email: str, username: str | None = None):
    return UserService.factory().create_user(user_factory.build(email=email, username=username, role=role))


@pytest.fixture(scope='function')
def merchant(user_factory):
    return _create_user(user_factory, UserRoleEnum.MERCHANT, 'merchant@store.fun', username='merchant')


@pytest.fixture(scope='function')
def other_merchant(user_factory):
    return _create_user(user_factory, UserRoleEnum.MERCHANT, 'other-merchant@store.fun', username='othermerchant')


@pytest.fixture(scope='function')
def collaborator(user_factory):
    """Plain user, the usual target of grants"""
    return _create_user(user_factory, UserRoleEnum.USER, 'collaborator@store.fun', username='collaborator')


@pytest.fixture(scope='function')
def admin_user(user_factory):
    return _create_user(user_factory, UserRoleEnum.ADMIN, 'admin@store.fun', username='admin')


@pytest.fixture(scope='function')
def merchant_principal(merchant) -> UserPrincipal:
    return UserPrincipal(id=merchant.id, role=merchant.role)


@pytest.fixture(scope='function')
def other_merchant_principal(other_merchant) -> UserPrincipal:
    return UserPrincipal(id=other_merchant.id, role=other_merchant.role)


@pytest.fixture(scope='function')
def collaborator_principal(collaborator) -> UserPrincipal:
    return UserPrincipal(id=collaborator.id, role=collaborator.role)


@pytest.fixture(scope='function')
def admin_principal(admin_user) -> AdminPrincipal:
    return AdminPrincipal(id=admin_user.id)


@pytest.fixture(scope='function')
def public_principal() -> PublicPrincipal:
    return PublicPrincipal()


@pytest.fixture(scope='function')
def collection(merchant, collection_payload_factory):
    """Private collection owned by merchant"""
    from storefront.app.catalog import Collection, CollectionCreate

    payload = collection_payload_factory.build(visible=False)
    return Collection.create(CollectionCreate(**payload.to_dict(), owner_id=merchant.id))


@pytest.fixture(scope='function')
def visible_collection(merchant, collection_payload_factory):
    from storefront.app.catalog import Collection, CollectionCreate

    payload = collection_payload_factory.build(visible=True)
    return Collection.create(CollectionCreate(**payload.to_dict(), owner_id=merchant.id))


@pytest.fixture(scope='function')
def category(visible_collection, category_factory):
    from storefront.app.catalog import Category

    return Category.create(category_factory.build(collection_id=visible_collection.id))


@pytest.fixture(scope='function')
def product(visible_collection, category, product_factory):
    """Purchasable product, visible and in a visible collection"""
    from storefront.app.catalog import Product

    return Product.create(product_factory.build(collection_id=visible_collection.id, category_id=category.id))
