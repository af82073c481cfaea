"""Auth0 Management API client library.

Architecture:
- client.py: HTTP client, token acquisition and paging helpers
- api.py: ManagementApi, one handle bundling every service for a tenant
- organizations.py, users.py, clients.py, roles.py,
  resource_servers.py, rules.py, actions.py: one service per object type
- exceptions.py: Typed exceptions for error handling

Usage:
    from auth0_admin.core.auth0 import ManagementApi, ManagementClient, base_url_for_domain, get_access_token

    base_url = base_url_for_domain("tenant.eu.auth0.com")
    api = ManagementApi(ManagementClient(base_url, get_access_token(base_url, client_id, client_secret)))
    page = api.roles.list(page=0)
"""
from .client import (
    ManagementClient,
    Page,
    get_access_token,
    base_url_for_domain,
    audience_for,
    iter_pages,
    REQUEST_TIMEOUT,
    DEFAULT_PAGE_SIZE,
)
from .exceptions import (
    Auth0Error,
    Auth0APIError,
    ConfigurationError,
    TokenRequestError,
    MalformedResponseError,
    OrganizationMappingError,
    ActionDeployError,
)
from .api import ManagementApi
from .organizations import OrganizationService, build_invitation
from .users import UserService
from .clients import ClientService, ClientApplicationType, build_client_request
from .roles import RoleService, permission_identity
from .resource_servers import ResourceServerService, MANAGEMENT_API_NAME
from .rules import RuleService
from .actions import ActionService, binding_by_action_name, CURRENT_TRIGGER_STATUS

__all__ = [
    # Client
    "ManagementClient",
    "ManagementApi",
    "Page",
    "get_access_token",
    "base_url_for_domain",
    "audience_for",
    "iter_pages",
    "REQUEST_TIMEOUT",
    "DEFAULT_PAGE_SIZE",

    # Exceptions
    "Auth0Error",
    "Auth0APIError",
    "ConfigurationError",
    "TokenRequestError",
    "MalformedResponseError",
    "OrganizationMappingError",
    "ActionDeployError",

    # Services
    "OrganizationService",
    "UserService",
    "ClientService",
    "RoleService",
    "ResourceServerService",
    "RuleService",
    "ActionService",

    # Helpers
    "ClientApplicationType",
    "build_client_request",
    "build_invitation",
    "permission_identity",
    "binding_by_action_name",
    "MANAGEMENT_API_NAME",
    "CURRENT_TRIGGER_STATUS",
]
