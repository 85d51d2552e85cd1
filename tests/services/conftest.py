"""Service test fixtures: fake remote services.

Design Decisions:
    - Mock at the remote boundary (FakeCommerce, FakeRights), real DB via root conftest
"""

import pytest

from tests.services.fake_remotes import FakeCommerce, FakeRights


@pytest.fixture
def commerce():
    return FakeCommerce()


@pytest.fixture
def rights():
    return FakeRights()
