"""Pytest fixtures for Visitor Logbook tests."""

from unittest.mock import Mock

import pytest
import responses

from visitor_logbook.utils.api_client import APIClient

from tests.factories import BASE_URL, CSRF_URL


@pytest.fixture
def navigate():
    return Mock()


@pytest.fixture
def client(navigate):
    return APIClient(base_url=BASE_URL, navigate=navigate, login_page="login.py")


@pytest.fixture
def mocked_api():
    """Backend double with the CSRF endpoint already registered."""
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, CSRF_URL, status=204)
        yield rsps


class FakeSessionState(dict):
    """Dict with attribute access, like st.session_state."""

    def __getattr__(self, key):
        try:
            return self[key]
        except KeyError:
            raise AttributeError(key)

    def __setattr__(self, key, value):
        self[key] = value


@pytest.fixture
def fake_st():
    """Streamlit stand-in for helpers that only touch session state."""
    fake = Mock()
    fake.session_state = FakeSessionState()
    fake.query_params = {}
    return fake
