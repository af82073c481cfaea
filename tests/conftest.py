"""Pytest shared fixtures: network guard rails and an in-memory Auth0 tenant."""
import json
import pathlib
import sys
from types import SimpleNamespace

import pytest
import requests

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from auth0_admin.core.auth0.client import Page


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
class StubResponse:
    def __init__(self, payload=None, status_code: int = 200, text=None, url: str = ""):
        self._payload = payload
        self.status_code = status_code
        if text is None:
            text = "" if payload is None else json.dumps(payload)
        self.text = text
        self.url = url

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class HttpStub:
    """Routes requests.<method>(url) calls to canned responses and records them."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method: str, url: str, payload=None, status_code: int = 200, text=None):
        response = StubResponse(payload, status_code, text, url)
        self.routes.setdefault((method.upper(), url), []).append(response)
        return response

    def calls_to(self, method: str, url: str):
        return [c for c in self.calls if c.method == method.upper() and c.url == url]

    def _handler(self, method: str):
        def _send(url, *args, **kwargs):
            self.calls.append(SimpleNamespace(
                method=method,
                url=url,
                params=kwargs.get("params"),
                json=kwargs.get("json"),
                headers=kwargs.get("headers") or {},
            ))
            queue = self.routes.get((method, url))
            if not queue:
                raise RuntimeError(f"Unexpected HTTP {method} in unit test: {url}")
            return queue.pop(0) if len(queue) > 1 else queue[0]
        return _send


@pytest.fixture(autouse=True)
def http(monkeypatch):
    """Prevent unit tests from reaching a real tenant; every request must be routed."""
    stub = HttpStub()
    for method in ("get", "post", "patch", "delete"):
        monkeypatch.setattr(requests, method, stub._handler(method.upper()))
    return stub


# ─────────────────────────────────────────────────────────────────────────────
# In-memory tenant
# ─────────────────────────────────────────────────────────────────────────────
def paginate(items, page: int, per_page: int) -> Page:
    chunk = list(items[page * per_page:(page + 1) * per_page])
    return Page(items=chunk, start=page * per_page, limit=per_page, length=len(chunk), total=len(items))


class FakeCollection:
    def __init__(self, tenant, kind, items=()):
        self.tenant = tenant
        self.kind = kind
        self.items = [dict(i) for i in items]
        self.requested_pages = []
        self.created = []

    def list(self, page=0, per_page=100, **filters):
        self.requested_pages.append(page)
        return paginate(self.items, page, per_page)

    def create(self, payload):
        self.created.append(payload)
        return dict(payload, id=f"{self.tenant.name}_{self.kind}_{len(self.created)}")


class FakeOrganizations(FakeCollection):
    def __init__(self, tenant, items=()):
        super().__init__(tenant, "org", items)
        self.invitations = []

    def create_invitation(self, org_id, payload):
        self.invitations.append((org_id, payload))
        return dict(payload, id="uinv_1", organization_id=org_id)

    def list_members(self, org_id, page=0, per_page=100):
        return paginate([], page, per_page)


class FakeClients(FakeCollection):
    def __init__(self, tenant, items=()):
        super().__init__(tenant, "client", items)

    def list_grants(self, page=0, per_page=100):
        return paginate([], page, per_page)


class FakeRoles(FakeCollection):
    def __init__(self, tenant, items=(), permissions=None):
        super().__init__(tenant, "rol", items)
        self.permissions = permissions or {}
        self.permission_pages = []
        self.assigned = []

    def list_permissions(self, role_id, page=0, per_page=100):
        self.permission_pages.append((role_id, page))
        return paginate(self.permissions.get(role_id, []), page, per_page)

    def assign_permissions(self, role_id, permissions):
        self.assigned.append((role_id, list(permissions)))


class FakeActions(FakeCollection):
    def __init__(self, tenant, items=(), triggers=(), bindings=None, deploy_error=None):
        super().__init__(tenant, "act", items)
        self.triggers = list(triggers)
        self.bindings = bindings or {}
        self.deploy_error = deploy_error
        self.deployed = []
        self.binding_pages = []
        self.binding_updates = []

    def deploy(self, action_id):
        if self.deploy_error is not None:
            raise self.deploy_error
        self.deployed.append(action_id)
        return {"id": action_id}

    def list_triggers(self):
        return self.triggers

    def list_trigger_bindings(self, trigger_id, page=0, per_page=100):
        self.binding_pages.append((trigger_id, page))
        return paginate(self.bindings.get(trigger_id, []), page, per_page)

    def update_trigger_bindings(self, trigger_id, bindings):
        self.binding_updates.append((trigger_id, list(bindings)))
        return {"bindings": bindings}


class FakeTenant:
    """Stand-in for ManagementApi backed by plain lists."""

    def __init__(
        self,
        name="source",
        *,
        organizations=(),
        users=(),
        clients=(),
        resource_servers=(),
        roles=(),
        role_permissions=None,
        rules=(),
        actions=(),
        triggers=(),
        trigger_bindings=None,
        deploy_error=None,
    ):
        self.name = name
        self.base_url = f"https://{name}.auth0.test"
        self.organizations = FakeOrganizations(self, organizations)
        self.users = FakeCollection(self, "user", users)
        self.clients = FakeClients(self, clients)
        self.resource_servers = FakeCollection(self, "api", resource_servers)
        self.roles = FakeRoles(self, roles, role_permissions)
        self.rules = FakeCollection(self, "rul", rules)
        self.actions = FakeActions(self, actions, triggers, trigger_bindings, deploy_error)


@pytest.fixture
def make_tenant():
    """Factory for in-memory tenants."""
    return FakeTenant
