"""
CargoDesk - Backend API Communication Module

Handles all communication with the freight backend via REST API.
Attaches the session's bearer token, unwraps the {success, message, data}
envelope and recovers once from an expired token.
"""

import json
import logging
import requests
from typing import Optional, Any, Tuple

from cargodesk.admin_sessions import SetCredentials, ClearCredentials
from cargodesk.exceptions import (
    CargoDeskAuthError,
    CargoDeskServerError,
    CargoDeskRequestError,
    CargoDeskNotFoundError
)
from cargodesk.models.api import ApiEnvelope
from cargodesk.models.infrastructure import AdminSession

# Configure logging
logger = logging.getLogger(__name__)

# Factory for the underlying HTTP session
requests_session_factory = requests.Session

LOGIN_ENDPOINT = "/auth/login"
REFRESH_ENDPOINT = "/auth/refresh"
PROFILE_ENDPOINT = "/auth/profile"
CHANGE_PASSWORD_ENDPOINT = "/auth/change-password"

# Status codes treated as an expired or rejected token
AUTH_FAILURE_CODES = (401, 403)


def _ErrorMessage(response, default: str) -> str:
    try:
        error_data = response.json()
    except ValueError:
        return response.text or default

    if not isinstance(error_data, dict):
        return default
    message = error_data.get("message") or error_data.get("detail") or default
    if isinstance(message, list):
        message = "; ".join(str(part) for part in message)
    return str(message)


class BackendAPI:
    """
    API client for communicating with the freight backend.

    Responsibilities:
    - Authenticate (login) and fetch the signed-in user's profile
    - Attach the session's bearer token to every request
    - Refresh an expired token exactly once and replay the request
    - Map HTTP failures onto the CargoDesk exception types
    """

    def __init__(self, base_url: str, session: Optional[AdminSession] = None,
                 timeout: int = 30, verify_ssl: bool = True):
        """
        Initialize API client.

        Args:
            base_url: Backend base URL (e.g., "http://localhost:3000/api/v1")
            session: Admin session holding the credential record, None before login
            timeout: Request timeout in seconds
            verify_ssl: Whether to verify SSL certificates
        """
        self.base_url = base_url.rstrip("/")
        self.credentials = session
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        # Use session for connection pooling to avoid TCP handshake overhead on each request
        self.http = requests_session_factory()
        logger.debug(f"Initialized backend API client for {self.base_url}")

    def close(self):
        """Close the HTTP session and release resources."""
        if self.http is not None:
            self.http.close()
            logger.debug("Backend API client session closed")

    # ==================== Authentication ====================

    def login(self, email: str, password: str) -> Tuple[dict, str]:
        """
        Authenticate with the backend.

        Args:
            email: User's email address
            password: User's password

        Returns:
            Tuple of (user record, access token)

        Raises:
            CargoDeskAuthError: If the credentials are rejected
            CargoDeskServerError: If the backend fails or cannot be reached
        """
        logger.info(f"Attempting login for user: {email}")

        data = self.request("POST", LOGIN_ENDPOINT, json={"email": email, "password": password})
        if not isinstance(data, dict) or not data.get("accessToken"):
            logger.error("Login response did not contain an access token")
            raise CargoDeskServerError("Login response did not contain an access token")

        logger.info(f"Login successful for user: {email}")
        return data.get("user") or {}, data["accessToken"]

    def get_profile(self) -> dict:
        """
        Fetch the signed-in user's profile.

        Returns:
            User record
        """
        return self.request("GET", PROFILE_ENDPOINT)

    def change_password(self, payload: dict) -> Any:
        """
        Change the signed-in user's password.

        Args:
            payload: {"currentPassword": ..., "newPassword": ...}

        Returns:
            Response data
        """
        return self.request("POST", CHANGE_PASSWORD_ENDPOINT, json=payload)

    def refresh_token(self) -> Optional[str]:
        """
        Ask the backend for a new access token.

        On success the new token is stored through SetCredentials.

        Returns:
            New token, or None if the refresh was refused or failed
        """
        if self.credentials is None or not self.credentials.token:
            return None

        try:
            response = self._send("POST", REFRESH_ENDPOINT)
        except CargoDeskServerError as e:
            logger.warning(f"Token refresh error: {e}")
            return None

        if not 200 <= response.status_code < 300:
            logger.warning(f"Token refresh refused with status {response.status_code}")
            return None

        try:
            payload = response.json()
        except ValueError:
            return None

        data = payload.get("data") if isinstance(payload, dict) else None
        token = data.get("accessToken") if isinstance(data, dict) else None
        if not token:
            return None

        SetCredentials(self.credentials, self.credentials.user, token)
        logger.info("Token refresh successful")
        return token

    # ==================== Requests ====================

    def request(self, method: str, endpoint: str, params: Optional[dict] = None,
                json: Optional[Any] = None) -> Any:
        """
        Make an authenticated API request.

        A 401/403 on anything other than the login call triggers one token
        refresh. If the refresh succeeds the request is replayed once; if the
        refresh fails, or the replay is rejected again, the credentials are
        cleared and CargoDeskAuthError is raised.

        Args:
            method: HTTP method (GET, POST, PATCH, PUT, DELETE)
            endpoint: API endpoint (e.g., "/master/carriers")
            params: Query string parameters
            json: JSON body

        Returns:
            The envelope's data (or the raw JSON when not enveloped)

        Raises:
            CargoDeskAuthError: If authentication fails and cannot be recovered
            CargoDeskNotFoundError: If the record does not exist
            CargoDeskRequestError: If the backend rejects the request
            CargoDeskServerError: If a server or connection error occurs
        """
        response = self._send(method, endpoint, params=params, json=json)

        if response.status_code in AUTH_FAILURE_CODES and endpoint != LOGIN_ENDPOINT:
            logger.warning("Authentication error detected, attempting token refresh...")
            if self.refresh_token():
                response = self._send(method, endpoint, params=params, json=json)
                if response.status_code in AUTH_FAILURE_CODES:
                    self._force_logout("Request rejected after token refresh")
            else:
                self._force_logout("Token refresh failed")

        return self._handle_response(response)

    def _send(self, method: str, endpoint: str, params: Optional[dict] = None,
              json: Optional[Any] = None):
        """Send one HTTP request with the current bearer token."""
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"API request: {method} {endpoint}")

        headers = {"Accept": "application/json"}
        token = self.credentials.token if self.credentials is not None else None
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            return self.http.request(
                method,
                url,
                headers=headers,
                params=params,
                json=json,
                timeout=self.timeout,
                verify=self.verify_ssl
            )
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Cannot connect to backend at {self.base_url}: {e}")
            raise CargoDeskServerError(f"Cannot connect to backend at {self.base_url}")
        except requests.exceptions.Timeout:
            logger.error("Request timed out")
            raise CargoDeskServerError("Request timed out")
        except requests.exceptions.RequestException as e:
            logger.error(f"Request error: {str(e)}")
            raise CargoDeskServerError(f"Request error: {str(e)}")

    def _force_logout(self, reason: str):
        """Clear the credential record and abort with an auth error."""
        logger.warning(f"{reason}, logging out...")
        if self.credentials is not None:
            ClearCredentials(self.credentials)
        raise CargoDeskAuthError("Your session has expired - please log in again")

    def _handle_response(self, response) -> Any:
        """Map status codes onto exceptions and unwrap the envelope."""
        status_code = response.status_code

        if status_code in AUTH_FAILURE_CODES:
            message = _ErrorMessage(response, "Invalid email or password")
            logger.warning(f"Authentication rejected: {message}")
            raise CargoDeskAuthError(message)

        if status_code == 404:
            raise CargoDeskNotFoundError(_ErrorMessage(response, "Record not found"))

        if status_code >= 500:
            logger.error(f"Server error {status_code}: {response.text}")
            raise CargoDeskServerError(f"Server error {status_code}: {_ErrorMessage(response, 'Internal server error')}")

        if status_code >= 400:
            message = _ErrorMessage(response, f"Request failed with status {status_code}")
            logger.error(f"Request failed with status {status_code}: {message}")
            raise CargoDeskRequestError(message, status_code=status_code)

        if status_code == 204 or not response.content:
            return None

        try:
            payload = response.json()
        except (json.JSONDecodeError, ValueError):
            return response.content

        if ApiEnvelope.IsEnvelope(payload):
            envelope = ApiEnvelope.model_validate(payload)
            if not envelope.success:
                raise CargoDeskRequestError(envelope.message or "Request failed", status_code=status_code)
            return envelope.data

        return payload
