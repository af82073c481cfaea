"""Auth0 client (application) operations."""
from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List, Optional

from .client import ManagementClient, Page, DEFAULT_PAGE_SIZE


class ClientApplicationType(str, Enum):
    """Valid values for a client's ``app_type``."""
    BOX = "box"
    CLOUDBEES = "cloudbees"
    CONCUR = "concur"
    DROPBOX = "dropbox"
    ECHOSIGN = "echosign"
    EGNYTE = "egnyte"
    MSCRM = "mscrm"
    NATIVE = "native"
    NEWRELIC = "newrelic"
    NON_INTERACTIVE = "non_interactive"
    OAG = "oag"
    OFFICE365 = "office365"
    REGULAR_WEB = "regular_web"
    RMS = "rms"
    SALESFORCE = "salesforce"
    SENTRY = "sentry"
    SHAREPOINT = "sharepoint"
    SLACK = "slack"
    SPA = "spa"
    SPRINGCM = "springcm"
    SSO_INTEGRATION = "sso_integration"
    ZENDESK = "zendesk"
    ZOOM = "zoom"

    def __str__(self) -> str:
        return self.value


class ClientService:
    """Service for managing Auth0 clients and client grants."""

    def __init__(self, client: ManagementClient):
        """Initialize client service.

        Args:
            client: Authenticated Management API client
        """
        self.client = client

    def list(self, page: int = 0, per_page: int = DEFAULT_PAGE_SIZE) -> Page:
        """Return one page of clients."""
        return self.client.list_page("/clients", "clients", page=page, per_page=per_page)

    def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create a client; Auth0 generates the client_id and secret."""
        return self.client.post_json("/clients", json=payload)

    def list_grants(self, page: int = 0, per_page: int = DEFAULT_PAGE_SIZE) -> Page:
        """Return one page of client grants."""
        return self.client.list_page("/client-grants", "client_grants", page=page, per_page=per_page)


def split_csv(value: Optional[str]) -> Optional[List[str]]:
    """Split a comma delimited argument; empty input gives None."""
    if not value:
        return None
    return value.split(",")


def build_client_request(
    application_type: ClientApplicationType,
    description: Optional[str] = None,
    grant_types: Optional[str] = None,
    callbacks: Optional[str] = None,
    allowed_origins: Optional[str] = None,
    allowed_logout_urls: Optional[str] = None,
) -> Dict[str, Any]:
    """Assemble a client create body from command-line style values.

    List arguments are comma delimited strings. Unset values are left out.
    """
    request = {
        "app_type": ClientApplicationType(application_type).value,
        "description": description,
        "grant_types": split_csv(grant_types),
        "callbacks": split_csv(callbacks),
        "allowed_origins": split_csv(allowed_origins),
        "allowed_logout_urls": split_csv(allowed_logout_urls),
    }
    return {k: v for k, v in request.items() if v is not None}
