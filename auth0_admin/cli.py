"""Command-line tool for administering Auth0 tenants through the Management API.

This module serves as a CLI wrapper around auth0_admin.core services.
"""
from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from typing import Any, Optional, Sequence

from auth0_admin import audit
from auth0_admin.config.settings import (
    AppConfig,
    load_settings,
    BASE_SETTINGS_FILE,
    LOCAL_SETTINGS_FILE,
)
from auth0_admin.core.auth0 import (
    ManagementApi,
    ManagementClient,
    ClientApplicationType,
    base_url_for_domain,
    build_client_request,
    build_invitation,
    get_access_token,
)
from auth0_admin.core.auth0.exceptions import Auth0Error, Auth0APIError
from auth0_admin.core.tenant_export import run_export

logger = logging.getLogger(__name__)


def _str_to_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got '{value}'")


def print_response(response: Any) -> None:
    print(json.dumps(response, indent=2, ensure_ascii=False))


def connect(domain: str, client_id: str, client_secret: str) -> ManagementApi:
    """Acquire a Management API token for ``domain`` and return a tenant handle."""
    base_url = base_url_for_domain(domain)
    token = get_access_token(base_url, client_id, client_secret)
    return ManagementApi(ManagementClient(base_url, token))


def configure_logging(level: str, verbose: bool = False) -> None:
    """Send log records to stderr so stdout only carries command output."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s" if verbose else "%(message)s",
        stream=sys.stderr,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Command handlers
# ─────────────────────────────────────────────────────────────────────────────
def cmd_get_token(api: ManagementApi, args: argparse.Namespace, settings: AppConfig) -> None:
    print_response(get_access_token(settings.base_url, settings.client_id, settings.client_secret))


def cmd_list_orgs(api, args, settings) -> None:
    print_response(api.organizations.list(page=args.page).to_dict("organizations"))


def cmd_create_org(api, args, settings) -> None:
    try:
        organization = api.organizations.create({"name": args.name, "display_name": args.display_name})
    except Auth0APIError as e:
        audit.safe_log_admin_event(
            "create_org", args.name, operator=args.operator, tenant=settings.domain,
            details={"error": str(e)}, success=False,
        )
        raise
    audit.safe_log_admin_event(
        "create_org", args.name, operator=args.operator, tenant=settings.domain,
        details={"id": organization.get("id"), "display_name": args.display_name},
    )
    print_response(organization)


def cmd_list_org_members(api, args, settings) -> None:
    print_response(api.organizations.list_members(args.org_id, page=args.page).to_dict("members"))


def cmd_invite_org_member(api, args, settings) -> None:
    request = build_invitation(args.client_id, args.invitee_email, inviter=args.inviter, send_email=args.send_email)
    try:
        invite = api.organizations.create_invitation(args.org_id, request)
    except Auth0APIError as e:
        audit.safe_log_admin_event(
            "invite_org_member", args.invitee_email, operator=args.operator, tenant=settings.domain,
            details={"org_id": args.org_id, "error": str(e)}, success=False,
        )
        raise
    audit.safe_log_admin_event(
        "invite_org_member", args.invitee_email, operator=args.operator, tenant=settings.domain,
        details={"org_id": args.org_id, "client_id": args.client_id, "send_email": args.send_email},
    )
    print_response(invite)


def cmd_list_users(api, args, settings) -> None:
    print_response(api.users.list(page=args.page).to_dict("users"))


def cmd_list_clients(api, args, settings) -> None:
    print_response(api.clients.list(page=args.page).to_dict("clients"))


def cmd_list_client_application_types(api, args, settings) -> None:
    print_response([t.value for t in ClientApplicationType])


def cmd_list_client_grants(api, args, settings) -> None:
    print_response(api.clients.list_grants(page=args.page).to_dict("client_grants"))


def cmd_create_client(api, args, settings) -> None:
    # TODO: submit through api.clients.create once the accepted arguments cover a usable client
    build_client_request(
        args.application_type,
        description=args.description,
        grant_types=args.grant_types,
        callbacks=args.callbacks,
        allowed_origins=args.allowed_origins,
        allowed_logout_urls=args.allowed_logout_urls,
    )
    logger.warning("[create-client] Client request built but not submitted; creation is not supported yet")


def cmd_list_roles(api, args, settings) -> None:
    print_response(api.roles.list(page=args.page).to_dict("roles"))


def cmd_list_permissions(api, args, settings) -> None:
    print_response(api.roles.list_permissions(args.role, page=args.page).to_dict("permissions"))


def cmd_list_apis(api, args, settings) -> None:
    print_response(api.resource_servers.list(page=args.page).to_dict("resource_servers"))


def cmd_list_rules(api, args, settings) -> None:
    print_response(api.rules.list(page=args.page, enabled=args.enabled_only).to_dict("rules"))


def cmd_list_actions(api, args, settings) -> None:
    print_response(api.actions.list(page=args.page, deployed=args.deployed).to_dict("actions"))


def cmd_list_action_triggers(api, args, settings) -> None:
    print_response(api.actions.list_triggers())


def cmd_list_action_trigger_bindings(api, args, settings) -> None:
    try:
        bindings = api.actions.list_trigger_bindings(args.trigger_id, page=args.page)
    except Auth0APIError as e:
        if e.error_code != "invalid_uri":
            raise
        print("Invalid triggerId")
        return
    print_response(bindings.to_dict("bindings"))


def cmd_export_tenant(api, args, settings) -> None:
    target = connect(args.target_domain, args.target_client_id, args.target_client_secret)
    try:
        summary = run_export(
            api,
            target,
            throttle_seconds=settings.trigger_binding_delay,
            per_page=settings.page_size,
        )
    except Auth0Error as e:
        audit.safe_log_admin_event(
            "export_tenant", args.target_domain, operator=args.operator, tenant=settings.domain,
            details={"error": str(e)}, success=False,
        )
        raise
    audit.safe_log_admin_event(
        "export_tenant", args.target_domain, operator=args.operator, tenant=settings.domain,
        details=summary.as_dict(),
    )
    for line in summary.lines():
        print(line)


# ─────────────────────────────────────────────────────────────────────────────
# Parser
# ─────────────────────────────────────────────────────────────────────────────
def _add_page(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("page", nargs="?", type=int, default=0, help="Zero-based page index")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Auth0 Management API helper")
    parser.add_argument("--config", default=BASE_SETTINGS_FILE, help="Base settings file")
    parser.add_argument("--local-config", default=LOCAL_SETTINGS_FILE, help="Optional local override file")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--operator", default=os.environ.get("AUTH0_ADMIN_OPERATOR", "cli"),
                        help="Operator identifier for audit logs (default: cli)")

    sub = parser.add_subparsers(dest="cmd")

    sub.add_parser("get-token").set_defaults(handler=cmd_get_token)

    lo = sub.add_parser("list-orgs")
    _add_page(lo)
    lo.set_defaults(handler=cmd_list_orgs)

    co = sub.add_parser("create-org")
    co.add_argument("name")
    co.add_argument("display_name")
    co.set_defaults(handler=cmd_create_org)

    lm = sub.add_parser("list-org-members")
    lm.add_argument("org_id")
    _add_page(lm)
    lm.set_defaults(handler=cmd_list_org_members)

    im = sub.add_parser("invite-org-member")
    im.add_argument("org_id")
    im.add_argument("client_id")
    im.add_argument("invitee_email")
    im.add_argument("--inviter", default=None, help="Inviter name shown in the email (default: Welcome)")
    im.add_argument("--send-email", action="store_true")
    im.set_defaults(handler=cmd_invite_org_member)

    lu = sub.add_parser("list-users")
    _add_page(lu)
    lu.set_defaults(handler=cmd_list_users)

    lc = sub.add_parser("list-clients")
    _add_page(lc)
    lc.set_defaults(handler=cmd_list_clients)

    sub.add_parser("list-client-application-types").set_defaults(handler=cmd_list_client_application_types)

    lg = sub.add_parser("list-client-grants")
    _add_page(lg)
    lg.set_defaults(handler=cmd_list_client_grants)

    cc = sub.add_parser("create-client")
    cc.add_argument("application_type", type=ClientApplicationType,
                    help="use 'list-client-application-types' for the list of valid values")
    cc.add_argument("description", nargs="?")
    cc.add_argument("grant_types", nargs="?", help="a comma delimited list of grant types")
    cc.add_argument("callbacks", nargs="?", help="a comma delimited list of callbacks")
    cc.add_argument("allowed_origins", nargs="?", help="a comma delimited list of allowed origins")
    cc.add_argument("allowed_logout_urls", nargs="?", help="a comma delimited list of allowed logout urls")
    cc.set_defaults(handler=cmd_create_client)

    lr = sub.add_parser("list-roles")
    _add_page(lr)
    lr.set_defaults(handler=cmd_list_roles)

    lp = sub.add_parser("list-permissions")
    lp.add_argument("role")
    _add_page(lp)
    lp.set_defaults(handler=cmd_list_permissions)

    la = sub.add_parser("list-apis")
    _add_page(la)
    la.set_defaults(handler=cmd_list_apis)

    lru = sub.add_parser("list-rules")
    lru.add_argument("enabled_only", nargs="?", type=_str_to_bool, default=None)
    _add_page(lru)
    lru.set_defaults(handler=cmd_list_rules)

    lac = sub.add_parser("list-actions")
    lac.add_argument("deployed", nargs="?", type=_str_to_bool, default=None)
    _add_page(lac)
    lac.set_defaults(handler=cmd_list_actions)

    sub.add_parser("list-action-triggers").set_defaults(handler=cmd_list_action_triggers)

    lb = sub.add_parser("list-action-trigger-bindings")
    lb.add_argument("trigger_id")
    _add_page(lb)
    lb.set_defaults(handler=cmd_list_action_trigger_bindings)

    ex = sub.add_parser("export-tenant")
    ex.add_argument("target_domain", help="The domain of the tenant you are exporting to")
    ex.add_argument("target_client_id",
                    help="The client Id of the client to call the management api on the target tenant")
    ex.add_argument("target_client_secret",
                    help="The client secret of the client to call the management api on the target tenant")
    ex.set_defaults(handler=cmd_export_tenant)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Command-line entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.cmd:
        parser.print_help()
        return

    try:
        settings = load_settings(args.config, args.local_config)
    except Auth0Error as e:
        print(f"[config] Error: {e}", file=sys.stderr)
        sys.exit(1)

    configure_logging(settings.log_level, args.verbose)

    try:
        api = connect(settings.domain, settings.client_id, settings.client_secret)
    except Auth0Error as e:
        print(f"[auth] Error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        args.handler(api, args, settings)
    except Auth0Error as e:
        print(f"[{args.cmd}] Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
