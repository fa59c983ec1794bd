import json
from unittest.mock import patch

import pytest
import requests
import responses

from visitor_logbook.schemas import VisitorForm
from visitor_logbook.utils import api_client as api_client_module
from visitor_logbook.utils import session as session_module
from visitor_logbook.utils.api_client import (
    GENERIC_ERROR_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    APIClient,
)

from tests.factories import API_URL, BASE_URL, CSRF_URL, make_visitor


def csrf_calls(rsps):
    return [c for c in rsps.calls if c.request.url == CSRF_URL]


class TestCsrfHandshake:
    def test_primes_once_across_many_calls(self, client, mocked_api):
        mocked_api.add(responses.GET, f"{API_URL}/visitor", json=[])
        mocked_api.add(responses.PATCH, f"{API_URL}/visitor/3/timeout", json=make_visitor(3))
        mocked_api.add(responses.DELETE, f"{API_URL}/visitor/3", status=204)

        client.get_visitors()
        client.timeout_visitor(3)
        client.delete_visitor(3)
        client.get_visitors()

        assert len(csrf_calls(mocked_api)) == 1
        assert mocked_api.calls[0].request.url == CSRF_URL
        assert client.csrf_initialized is True

    def test_separate_clients_prime_separately(self, mocked_api):
        mocked_api.add(responses.GET, f"{API_URL}/visitor", json=[])

        APIClient(base_url=BASE_URL).get_visitors()
        APIClient(base_url=BASE_URL).get_visitors()

        assert len(csrf_calls(mocked_api)) == 2

    def test_failed_priming_is_a_network_error_and_retried(self, client):
        with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
            # CSRF endpoint unregistered: the transport raises ConnectionError
            rsps.add(responses.GET, f"{API_URL}/visitor", json=[])
            result = client.get_visitors()

            assert result.success is False
            assert result.message == NETWORK_ERROR_MESSAGE
            assert client.csrf_initialized is False

            rsps.add(responses.GET, CSRF_URL, status=204)
            assert client.get_visitors().success is True
            assert client.csrf_initialized is True

    def test_request_headers(self, client, mocked_api):
        mocked_api.add(responses.GET, f"{API_URL}/visitor", json=[])
        client.session.cookies.set("XSRF-TOKEN", "abc%3D%3D")

        client.get_visitors()

        headers = mocked_api.calls[-1].request.headers
        assert headers["Content-Type"] == "application/json"
        assert headers["Accept"] == "application/json"
        assert headers["X-Requested-With"] == "XMLHttpRequest"
        assert headers["X-XSRF-TOKEN"] == "abc=="

    def test_missing_cookie_sends_empty_token(self, client, mocked_api):
        mocked_api.add(responses.GET, f"{API_URL}/visitor", json=[])

        client.get_visitors()

        assert mocked_api.calls[-1].request.headers["X-XSRF-TOKEN"] == ""


class TestResponseNormalization:
    def test_visitor_list_is_returned_unmodified(self, client, mocked_api):
        payload = [
            make_visitor(1, extra_field="kept"),
            make_visitor(2, time_out="2024-05-01T11:30:00.000000Z"),
        ]
        mocked_api.add(responses.GET, f"{API_URL}/visitor", json=payload)

        result = client.get_visitors()

        assert result.success is True
        assert result.data == payload
        assert result.message is None
        assert result.errors == {}

    def test_validation_failure(self, client, mocked_api):
        mocked_api.add(
            responses.POST,
            f"{API_URL}/visitor",
            json={"message": "Invalid", "errors": {"age": ["too small"]}},
            status=422,
        )

        result = client.create_visitor({"firstname": "Jane"})

        assert result.success is False
        assert result.data is None
        assert result.message == "Invalid"
        assert result.errors == {"age": ["too small"]}

    def test_error_without_body(self, client, mocked_api):
        mocked_api.add(
            responses.GET,
            f"{API_URL}/visitor",
            body="<html>Server Error</html>",
            status=500,
            content_type="text/html",
        )

        result = client.get_visitors()

        assert result.success is False
        assert result.message == GENERIC_ERROR_MESSAGE
        assert result.errors == {}

    def test_json_error_without_message(self, client, mocked_api):
        mocked_api.add(responses.DELETE, f"{API_URL}/visitor/9", json={}, status=404)

        result = client.delete_visitor(9)

        assert result.success is False
        assert result.message == GENERIC_ERROR_MESSAGE

    def test_no_content_has_no_payload(self, client, mocked_api):
        mocked_api.add(responses.DELETE, f"{API_URL}/visitor/4", status=204)

        result = client.delete_visitor(4)

        assert result.success is True
        assert result.data is None

    def test_network_failure(self, client, mocked_api):
        mocked_api.add(
            responses.GET,
            f"{API_URL}/visitor",
            body=requests.exceptions.ConnectionError("connection refused"),
        )

        result = client.get_visitors()

        assert result.success is False
        assert result.message == NETWORK_ERROR_MESSAGE
        assert result.errors == {}


class TestVisitorEndpoints:
    def test_create_visitor_from_form(self, client, mocked_api):
        mocked_api.add(responses.POST, f"{API_URL}/visitor", json=make_visitor(7), status=201)
        form = VisitorForm(
            firstname="Jane",
            middlename="",
            lastname="Doe",
            age=30,
            sex="Female",
            contact_number="09171234567",
            purpose_of_visit="Meeting",
        )

        result = client.create_visitor(form)

        assert result.success is True
        assert json.loads(mocked_api.calls[-1].request.body) == {
            "firstname": "Jane",
            "lastname": "Doe",
            "age": 30,
            "sex": "Female",
            "contact_number": "09171234567",
            "purpose_of_visit": "Meeting",
        }

    def test_update_visitor_uses_patch(self, client, mocked_api):
        mocked_api.add(responses.PATCH, f"{API_URL}/visitor/5", json=make_visitor(5))

        result = client.update_visitor(5, {"firstname": "Janet"})

        assert result.success is True
        assert mocked_api.calls[-1].request.method == "PATCH"
        assert json.loads(mocked_api.calls[-1].request.body) == {"firstname": "Janet"}

    def test_timeout_sends_empty_body(self, client, mocked_api):
        mocked_api.add(responses.PATCH, f"{API_URL}/visitor/5/timeout", json=make_visitor(5))

        client.timeout_visitor(5)

        assert json.loads(mocked_api.calls[-1].request.body) == {}

    def test_get_visitor_wraps_bare_payload(self, client, mocked_api):
        visitor = make_visitor(5)
        mocked_api.add(responses.GET, f"{API_URL}/visitor/5/edit", json=visitor)

        result = client.get_visitor(5)

        assert result.data == {"visitor": visitor, "sexes": []}

    def test_get_visitor_keeps_wrapped_payload(self, client, mocked_api):
        payload = {
            "visitor": make_visitor(5),
            "sexes": [{"id": 1, "sex": "Male"}, {"id": 2, "sex": "Female"}],
        }
        mocked_api.add(responses.GET, f"{API_URL}/visitor/5/edit", json=payload)

        result = client.get_visitor(5)

        assert result.data == payload


class TestAdminEndpoints:
    def test_login_posts_credentials(self, client, mocked_api):
        admin = {"id": 1, "name": "Root", "email": "root@example.com"}
        mocked_api.add(responses.POST, f"{API_URL}/auth/adminLogin", json=admin)

        result = client.login("root@example.com", "secret")

        assert result.data == admin
        assert json.loads(mocked_api.calls[-1].request.body) == {
            "email": "root@example.com",
            "password": "secret",
        }

    def test_logout(self, client, mocked_api):
        mocked_api.add(responses.POST, f"{API_URL}/auth/adminLogout", status=204)

        assert client.logout().success is True

    def test_admin_panel_payload(self, client, mocked_api, navigate):
        payload = {"admins": [{"id": 1, "name": "Root", "email": "root@example.com"}], "visitors": [make_visitor()]}
        mocked_api.add(responses.GET, f"{API_URL}/admin", json=payload)

        result = client.get_admin_panel()

        assert result.data == payload
        navigate.assert_not_called()

    def test_unauthenticated_admin_panel_redirects_once(self, client, mocked_api, navigate):
        mocked_api.add(
            responses.GET,
            f"{API_URL}/admin",
            json={"message": "Unauthenticated."},
            status=401,
        )

        result = client.get_admin_panel()

        navigate.assert_called_once_with("login.py")
        assert result.success is False
        assert result.message == "Unauthenticated."

    @pytest.mark.parametrize(
        "status,body",
        [
            (403, {"message": "Forbidden"}),
            (500, {}),
        ],
    )
    def test_other_admin_failures_do_not_redirect(self, client, mocked_api, navigate, status, body):
        mocked_api.add(responses.GET, f"{API_URL}/admin", json=body, status=status)

        result = client.get_admin_panel()

        assert result.success is False
        navigate.assert_not_called()

    def test_unauthenticated_on_other_endpoints_does_not_redirect(self, client, mocked_api, navigate):
        mocked_api.add(
            responses.GET,
            f"{API_URL}/visitor",
            json={"message": "Unauthenticated."},
            status=401,
        )

        client.get_visitors()

        navigate.assert_not_called()


class TestSessionClient:
    def test_one_client_per_session(self, fake_st):
        with patch.object(api_client_module, "st", fake_st), patch.object(api_client_module, "configure_logging"):
            first = api_client_module.get_api_client()
            second = api_client_module.get_api_client()

        assert first is second
        assert fake_st.session_state["api_client"] is first

    def test_redirect_clears_admin_session(self, fake_st):
        fake_st.session_state["admin_authenticated"] = True
        fake_st.session_state["admin_name"] = "Root"

        with patch.object(api_client_module, "st", fake_st), patch.object(session_module, "st", fake_st):
            api_client_module._redirect_to_login("pages/login.py")

        assert "admin_authenticated" not in fake_st.session_state
        fake_st.switch_page.assert_called_once_with("pages/login.py")
