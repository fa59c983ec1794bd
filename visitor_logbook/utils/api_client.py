import logging
from typing import Any, Callable, Dict, List, Optional, Union
from urllib.parse import unquote

import requests
import streamlit as st

from ..config import configure_logging, settings
from ..schemas import ApiResponse, VisitorForm
from .session import ADMIN_LOGIN_PAGE, clear_admin_session

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network error occurred"
GENERIC_ERROR_MESSAGE = "An error occurred"
UNAUTHENTICATED_MESSAGE = "Unauthenticated."


class APIClient:
    """Client for the Visitor Logbook API

    Holds one cookie jar per instance so the backend session and the
    XSRF-TOKEN cookie survive between calls.
    """

    def __init__(
        self,
        base_url: str = settings.API_BASE_URL,
        api_prefix: str = settings.API_PREFIX,
        timeout: float = settings.REQUEST_TIMEOUT,
        navigate: Optional[Callable[[str], None]] = None,
        login_page: str = ADMIN_LOGIN_PAGE,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_url = f"{self.base_url}{api_prefix}"
        self.timeout = timeout
        self.navigate = navigate
        self.login_page = login_page
        self.session = requests.Session()
        self.csrf_initialized = False

    def _ensure_csrf(self):
        """Fetch the CSRF cookie once per client"""
        if self.csrf_initialized:
            return
        logger.debug(f"Priming CSRF cookie from {settings.CSRF_COOKIE_PATH}")
        self.session.get(
            f"{self.base_url}{settings.CSRF_COOKIE_PATH}",
            timeout=self.timeout
        )
        self.csrf_initialized = True

    def _get_cookie(self, name: str) -> Optional[str]:
        value = self.session.cookies.get(name)
        return unquote(value) if value else None

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "X-Requested-With": "XMLHttpRequest",
            "X-XSRF-TOKEN": self._get_cookie(settings.CSRF_COOKIE_NAME) or "",
        }

    def _request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Union[Dict, VisitorForm]] = None,
    ) -> ApiResponse:
        """Make HTTP request to API and normalize the result"""
        url = f"{self.api_url}{endpoint}"

        if isinstance(data, VisitorForm):
            data = data.to_payload()

        try:
            self._ensure_csrf()
            response = self.session.request(
                method=method,
                url=url,
                json=data,
                headers=self._get_headers(),
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.warning(f"{method} {endpoint} failed: {e}")
            return ApiResponse(success=False, message=NETWORK_ERROR_MESSAGE)

        body = _json_body(response)

        if not response.ok:
            logger.info(f"{method} {endpoint} returned {response.status_code}")
            if not isinstance(body, dict):
                body = {}
            return ApiResponse(
                success=False,
                message=body.get("message") or GENERIC_ERROR_MESSAGE,
                errors=_normalize_errors(body.get("errors")),
            )

        return ApiResponse(success=True, data=body)

    # ==================== Visitors ====================

    def get_visitors(self) -> ApiResponse:
        return self._request("GET", "/visitor")

    def create_visitor(self, visitor_data: Union[Dict, VisitorForm]) -> ApiResponse:
        return self._request("POST", "/visitor", data=visitor_data)

    def get_visitor(self, visitor_id: int) -> ApiResponse:
        """Fetch a visitor for editing as {"visitor": ..., "sexes": [...]}"""
        result = self._request("GET", f"/visitor/{visitor_id}/edit")
        if result.success and isinstance(result.data, dict) and "visitor" not in result.data:
            result.data = {"visitor": result.data, "sexes": []}
        return result

    def update_visitor(self, visitor_id: int, visitor_data: Union[Dict, VisitorForm]) -> ApiResponse:
        return self._request("PATCH", f"/visitor/{visitor_id}", data=visitor_data)

    def delete_visitor(self, visitor_id: int) -> ApiResponse:
        return self._request("DELETE", f"/visitor/{visitor_id}")

    def timeout_visitor(self, visitor_id: int) -> ApiResponse:
        """Sign a visitor out"""
        return self._request("PATCH", f"/visitor/{visitor_id}/timeout", data={})

    # ==================== Admin ====================

    def login(self, email: str, password: str) -> ApiResponse:
        return self._request(
            "POST", "/auth/adminLogin",
            data={"email": email, "password": password}
        )

    def logout(self) -> ApiResponse:
        return self._request("POST", "/auth/adminLogout")

    def get_admin_panel(self) -> ApiResponse:
        """Fetch admins and visitors for the dashboard

        An unauthenticated response sends the browser to the login page.
        The failed result is still returned to the caller.
        """
        result = self._request("GET", "/admin")
        if not result.success and result.message == UNAUTHENTICATED_MESSAGE:
            logger.info("Admin session missing, redirecting to login")
            if self.navigate:
                self.navigate(self.login_page)
        return result


def _json_body(response: requests.Response) -> Any:
    """Parsed JSON body, or None for 204 and non-JSON responses"""
    if response.status_code == 204 or not response.content:
        return None
    if "application/json" not in response.headers.get("Content-Type", ""):
        return None
    try:
        return response.json()
    except ValueError:
        return None


def _normalize_errors(errors: Any) -> Dict[str, List[str]]:
    if not isinstance(errors, dict):
        return {}
    normalized = {}
    for field, messages in errors.items():
        if isinstance(messages, (list, tuple)):
            normalized[str(field)] = [str(m) for m in messages]
        else:
            normalized[str(field)] = [str(messages)]
    return normalized


def _redirect_to_login(page: str):
    clear_admin_session()
    st.switch_page(page)


def get_api_client() -> APIClient:
    """API client for the current browser session"""
    if "api_client" not in st.session_state:
        configure_logging()
        st.session_state.api_client = APIClient(navigate=_redirect_to_login)
    return st.session_state.api_client
