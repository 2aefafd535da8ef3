from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def forbid_database():
    """
    Unit tests cover the pure rules (access evaluation, tokens, snapshots).
    Anything that reaches for a connection belongs under tests/integration.
    """
    with patch(
        'storefront.network.database.session._engine.connect',
        side_effect=RuntimeError('unit tests may not touch the database, move this to tests/integration'),
    ):
        yield
