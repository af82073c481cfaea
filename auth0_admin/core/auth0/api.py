"""One handle per tenant bundling every service over a shared client."""
from __future__ import annotations

from .actions import ActionService
from .client import ManagementClient
from .clients import ClientService
from .organizations import OrganizationService
from .resource_servers import ResourceServerService
from .roles import RoleService
from .rules import RuleService
from .users import UserService


class ManagementApi:
    """Management API handle for a single tenant.

    Usage:
        token = get_access_token(base_url, client_id, client_secret)
        api = ManagementApi(ManagementClient(base_url, token))
        first_page = api.organizations.list(page=0)
    """

    def __init__(self, client: ManagementClient):
        self.client = client
        self.organizations = OrganizationService(client)
        self.users = UserService(client)
        self.clients = ClientService(client)
        self.roles = RoleService(client)
        self.resource_servers = ResourceServerService(client)
        self.rules = RuleService(client)
        self.actions = ActionService(client)

    @property
    def base_url(self) -> str:
        return self.client.base_url
