"""Tenant-to-tenant export.

Reads every supported object type from a source tenant and recreates it on
a target tenant. Each stage walks the source collection page by page,
reshapes each item into a create body and submits it to the target.

Stages run in a fixed order because clients reference organizations:
organizations, clients, APIs, roles, rules, actions, trigger bindings.
Every stage is insert-only; re-running an export duplicates objects.
"""
from __future__ import annotations
import logging
import time
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Dict, List, Tuple

from auth0_admin.core.auth0 import (
    ManagementApi,
    iter_pages,
    permission_identity,
    binding_by_action_name,
    MANAGEMENT_API_NAME,
    CURRENT_TRIGGER_STATUS,
    DEFAULT_PAGE_SIZE,
)
from auth0_admin.core.auth0.exceptions import (
    Auth0APIError,
    ActionDeployError,
    OrganizationMappingError,
)

logger = logging.getLogger(__name__)

DEFAULT_TRIGGER_BINDING_DELAY = 2.0

ORGANIZATION_READ_ONLY = frozenset({"id"})
CLIENT_READ_ONLY = frozenset({
    "client_id", "client_secret", "tenant", "global", "signing_keys",
    "callback_url_template", "owners", "config_route",
})
RESOURCE_SERVER_READ_ONLY = frozenset({"id", "signing_secret", "signing_alg", "is_system"})
ROLE_READ_ONLY = frozenset({"id"})
RULE_READ_ONLY = frozenset({"id", "stage"})
ACTION_READ_ONLY = frozenset({
    "id", "all_changes_deployed", "created_at", "updated_at", "status",
    "deployed_version", "installed_integration_id", "integration", "built_at", "deploy",
})

ORG_METADATA_KEY = "org_id"


@dataclass
class ExportContext:
    """State shared by the stages of one export run.

    ``org_id_mapping`` maps source organization ids to the ids the target
    assigned; it lives only as long as the run.
    """
    org_id_mapping: Dict[str, str] = field(default_factory=dict)
    per_page: int = DEFAULT_PAGE_SIZE
    throttle_seconds: float = DEFAULT_TRIGGER_BINDING_DELAY
    sleep: Callable[[float], None] = time.sleep


@dataclass
class ExportSummary:
    organizations: int = 0
    clients: int = 0
    apis: int = 0
    roles: int = 0
    rules: int = 0
    actions: int = 0
    trigger_bindings: int = 0

    LABELS = {
        "organizations": "orgs",
        "clients": "clients",
        "apis": "apis",
        "roles": "roles",
        "rules": "rules",
        "actions": "actions",
        "trigger_bindings": "flow-action-trigger-bindings",
    }

    def lines(self) -> List[str]:
        return [f"{getattr(self, f.name)} {self.LABELS[f.name]} exported" for f in fields(self)]

    def as_dict(self) -> Dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def remove_none_values(data: Any) -> Any:
    """Recursively remove keys with None values from dictionaries."""
    if isinstance(data, dict):
        return {k: remove_none_values(v) for k, v in data.items() if v is not None}
    if isinstance(data, list):
        return [remove_none_values(item) for item in data if item is not None]
    return data


def clean_for_creation(item: Dict[str, Any], read_only: frozenset) -> Dict[str, Any]:
    """Drop fields the create endpoint does not accept."""
    return remove_none_values({k: v for k, v in item.items() if k not in read_only})


# ─────────────────────────────────────────────────────────────────────────────
# Read-to-create transforms
# ─────────────────────────────────────────────────────────────────────────────
def organization_create_request(org: Dict[str, Any]) -> Dict[str, Any]:
    return clean_for_creation(org, ORGANIZATION_READ_ONLY)


def client_create_request(client: Dict[str, Any], org_id_mapping: Dict[str, str]) -> Dict[str, Any]:
    """Build a client create body, pointing its org reference at the target tenant.

    The client secret is never copied; the target issues a new one.

    Raises:
        OrganizationMappingError: metadata references an organization that
            was not exported in this run
    """
    request = clean_for_creation(client, CLIENT_READ_ONLY)
    metadata = request.get("client_metadata")
    if metadata and metadata.get(ORG_METADATA_KEY) is not None:
        source_org_id = str(metadata[ORG_METADATA_KEY])
        try:
            target_org_id = org_id_mapping[source_org_id]
        except KeyError:
            raise OrganizationMappingError(source_org_id) from None
        request["client_metadata"] = {**metadata, ORG_METADATA_KEY: target_org_id}
    return request


def resource_server_create_request(api: Dict[str, Any]) -> Dict[str, Any]:
    """Signing secret, algorithm and id are regenerated by the target."""
    return clean_for_creation(api, RESOURCE_SERVER_READ_ONLY)


def role_create_request(role: Dict[str, Any]) -> Dict[str, Any]:
    return clean_for_creation(role, ROLE_READ_ONLY)


def rule_create_request(rule: Dict[str, Any]) -> Dict[str, Any]:
    return clean_for_creation(rule, RULE_READ_ONLY)


def action_create_request(action: Dict[str, Any]) -> Dict[str, Any]:
    return clean_for_creation(action, ACTION_READ_ONLY)


# ─────────────────────────────────────────────────────────────────────────────
# Stages
# ─────────────────────────────────────────────────────────────────────────────
def export_organizations(source: ManagementApi, target: ManagementApi, context: ExportContext) -> int:
    """Copy organizations and record source id -> target id."""
    count = 0
    pages = iter_pages(lambda page: source.organizations.list(page=page, per_page=context.per_page), context.per_page)
    for page in pages:
        for org in page:
            created = target.organizations.create(organization_create_request(org))
            context.org_id_mapping[org["id"]] = created["id"]
            logger.info("[export] Organization '%s' created (id=%s)", org.get("name"), created["id"])
            count += 1
    return count


def export_clients(source: ManagementApi, target: ManagementApi, context: ExportContext) -> int:
    """Copy clients, remapping ``client_metadata.org_id`` through the org mapping.

    The tenant's global client cannot be created through the API and is skipped.
    """
    count = 0
    pages = iter_pages(lambda page: source.clients.list(page=page, per_page=context.per_page), context.per_page)
    for page in pages:
        for client in page:
            if client.get("global"):
                logger.debug("[export] Skipping global client '%s'", client.get("name"))
                continue
            target.clients.create(client_create_request(client, context.org_id_mapping))
            logger.info("[export] Client '%s' created", client.get("name"))
            count += 1
    return count


def export_resource_servers(source: ManagementApi, target: ManagementApi, context: ExportContext) -> int:
    """Copy APIs other than the built-in Management API."""
    count = 0
    pages = iter_pages(
        lambda page: source.resource_servers.list(page=page, per_page=context.per_page), context.per_page
    )
    for page in pages:
        for api in page:
            if api.get("name") == MANAGEMENT_API_NAME:
                continue
            target.resource_servers.create(resource_server_create_request(api))
            logger.info("[export] API '%s' created", api.get("name"))
            count += 1
    return count


def export_roles(source: ManagementApi, target: ManagementApi, context: ExportContext) -> int:
    """Copy roles, then grant each new role the source role's permissions page by page."""
    count = 0
    pages = iter_pages(lambda page: source.roles.list(page=page, per_page=context.per_page), context.per_page)
    for page in pages:
        for role in page:
            new_role = target.roles.create(role_create_request(role))
            granted = _copy_role_permissions(source, target, role["id"], new_role["id"], context.per_page)
            logger.info("[export] Role '%s' created with %d permissions", role.get("name"), granted)
            count += 1
    return count


def _copy_role_permissions(
    source: ManagementApi,
    target: ManagementApi,
    source_role_id: str,
    target_role_id: str,
    per_page: int,
) -> int:
    granted = 0
    pages = iter_pages(
        lambda page: source.roles.list_permissions(source_role_id, page=page, per_page=per_page), per_page
    )
    for page in pages:
        permissions = [permission_identity(p) for p in page]
        target.roles.assign_permissions(target_role_id, permissions)
        granted += len(permissions)
    return granted


def export_rules(source: ManagementApi, target: ManagementApi, context: ExportContext) -> int:
    count = 0
    pages = iter_pages(lambda page: source.rules.list(page=page, per_page=context.per_page), context.per_page)
    for page in pages:
        for rule in page:
            target.rules.create(rule_create_request(rule))
            logger.info("[export] Rule '%s' created", rule.get("name"))
            count += 1
    return count


def export_actions(source: ManagementApi, target: ManagementApi, context: ExportContext) -> int:
    """Copy actions and deploy each one before moving to the next.

    Raises:
        ActionDeployError: the target refused to deploy an action
    """
    count = 0
    pages = iter_pages(lambda page: source.actions.list(page=page, per_page=context.per_page), context.per_page)
    for page in pages:
        for action in page:
            new_action = target.actions.create(action_create_request(action))
            try:
                target.actions.deploy(new_action["id"])
            except Auth0APIError as exc:
                raise ActionDeployError(action.get("name", ""), new_action["id"], str(exc)) from exc
            logger.info("[export] Action '%s' created and deployed", action.get("name"))
            count += 1
    return count


def export_trigger_bindings(source: ManagementApi, target: ManagementApi, context: ExportContext) -> int:
    """Replay trigger bindings for every current trigger of the target.

    Each source page replaces the target's whole binding list for that
    trigger, so a later page overwrites an earlier one. Returns the number
    of pages replayed. Pages are spaced by ``context.throttle_seconds`` to
    stay under the Management API rate limit.
    """
    count = 0
    triggers = [t for t in target.actions.list_triggers() if t.get("status") == CURRENT_TRIGGER_STATUS]
    for trigger in triggers:
        trigger_id = trigger["id"]
        page = 0
        while True:
            bindings = source.actions.list_trigger_bindings(trigger_id, page=page, per_page=context.per_page)
            target.actions.update_trigger_bindings(trigger_id, [binding_by_action_name(b) for b in bindings])
            logger.info("[export] Trigger '%s' page %d: %d bindings replayed", trigger_id, page, len(bindings))
            count += 1
            page += 1
            if len(bindings) < context.per_page:
                break
            context.sleep(context.throttle_seconds)
    return count


EXPORT_STAGES: List[Tuple[str, Callable[[ManagementApi, ManagementApi, ExportContext], int]]] = [
    ("organizations", export_organizations),
    ("clients", export_clients),
    ("apis", export_resource_servers),
    ("roles", export_roles),
    ("rules", export_rules),
    ("actions", export_actions),
    ("trigger_bindings", export_trigger_bindings),
]


def run_export(
    source: ManagementApi,
    target: ManagementApi,
    throttle_seconds: float = DEFAULT_TRIGGER_BINDING_DELAY,
    per_page: int = DEFAULT_PAGE_SIZE,
    context: ExportContext | None = None,
) -> ExportSummary:
    """Run every export stage in order and return per-type counts.

    The first error aborts the run; objects already created stay on the target.
    """
    context = context or ExportContext(per_page=per_page, throttle_seconds=throttle_seconds)
    summary = ExportSummary()
    for name, stage in EXPORT_STAGES:
        logger.info("[export] Exporting %s from %s to %s", name, source.base_url, target.base_url)
        setattr(summary, name, stage(source, target, context))
    return summary
