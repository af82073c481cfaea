"""Auth0-specific exceptions for error handling."""
from __future__ import annotations
from typing import Optional


class Auth0Error(Exception):
    """Base exception for all Auth0 operations."""
    pass


class ConfigurationError(Auth0Error):
    """Required settings are missing or a settings file is unreadable."""
    pass


class TokenRequestError(Auth0Error):
    """The token endpoint answered with a non-success status.

    Attributes:
        status_code: HTTP status code
        body: Raw response body
    """

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Getting token failed: {body}")


class MalformedResponseError(Auth0Error):
    """A response could not be parsed or lacked a required field."""
    pass


class Auth0APIError(Auth0Error):
    """HTTP error from the Auth0 Management API.

    Attributes:
        status_code: HTTP status code
        message: Error message from response
        endpoint: API endpoint that failed
        error_code: Machine-readable Auth0 error code (e.g. "invalid_uri")
    """

    def __init__(self, status_code: int, message: str, endpoint: str, error_code: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        self.endpoint = endpoint
        self.error_code = error_code
        code = f" ({error_code})" if error_code else ""
        super().__init__(f"[{status_code}]{code} {endpoint}: {message}")


class OrganizationMappingError(Auth0Error):
    """A client references an organization that was not exported to the target."""

    def __init__(self, org_id: str):
        self.org_id = org_id
        super().__init__(f"No target organization mapped for source organization '{org_id}'")


class ActionDeployError(Auth0Error):
    """A freshly created action could not be deployed on the target."""

    def __init__(self, action_name: str, action_id: str, reason: str = ""):
        self.action_name = action_name
        self.action_id = action_id
        detail = f": {reason}" if reason else ""
        super().__init__(f"Failed to deploy action '{action_name}' (id={action_id}){detail}")
