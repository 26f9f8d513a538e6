"""
Shared fixtures: test configuration and fake sessions for both HTTP stacks.

No test touches the network; the fakes and reply builders live in ``helpers``.
"""

import pytest

from helpers import FakeAsyncSession, FakeSession
from musicbrainz_client.runtime.config import ServiceConfig


@pytest.fixture
def config():
    """Configuration with request spacing disabled."""
    return ServiceConfig(user_agent="TestApp/1.0", request_interval=0)


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def fake_async_session():
    return FakeAsyncSession()
