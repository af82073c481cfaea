import json
from pathlib import Path

import pytest

import auth0_admin.cli as cli
from auth0_admin.config.settings import AppConfig
from auth0_admin.core.auth0.exceptions import Auth0APIError, TokenRequestError
from auth0_admin import audit


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Fixed settings and a throwaway audit trail for every CLI run."""
    monkeypatch.setattr(
        cli,
        "load_settings",
        lambda base_file, local_file: AppConfig(
            domain="src.eu.auth0.com",
            client_id="cid",
            client_secret="csecret",
            trigger_binding_delay=0,
        ),
    )
    monkeypatch.setattr(audit, "AUDIT_LOG_DIR", tmp_path / "audit")
    monkeypatch.setattr(audit, "AUDIT_LOG_FILE", tmp_path / "audit" / "admin-events.jsonl")
    monkeypatch.setenv("AUDIT_LOG_SIGNING_KEY", "test-key")


@pytest.fixture
def tenants(monkeypatch, make_tenant):
    """Route connect() to in-memory tenants keyed by domain."""
    registry = {
        "src.eu.auth0.com": make_tenant("source"),
        "dst.eu.auth0.com": make_tenant("target"),
    }
    connections = []

    def fake_connect(domain, client_id, client_secret):
        connections.append((domain, client_id, client_secret))
        return registry[domain]

    monkeypatch.setattr(cli, "connect", fake_connect)
    registry["connections"] = connections
    return registry


def test_token_failure_aborts_before_export(monkeypatch, capsys):
    """A rejected source credential must stop the run before any export work."""
    def reject(base_url, client_id, client_secret):
        raise TokenRequestError(401, '{"error":"access_denied"}')

    def fail_if_called(*args, **kwargs):
        raise AssertionError("run_export should not be invoked when the token request fails")

    monkeypatch.setattr(cli, "get_access_token", reject)
    monkeypatch.setattr(cli, "run_export", fail_if_called)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["export-tenant", "dst.eu.auth0.com", "tid", "tsecret"])

    assert excinfo.value.code == 1
    assert "Getting token failed" in capsys.readouterr().err


def test_connect_requests_token_for_domain(monkeypatch):
    seen = {}

    def fake_token(base_url, client_id, client_secret):
        seen["args"] = (base_url, client_id, client_secret)
        return "tok"

    monkeypatch.setattr(cli, "get_access_token", fake_token)

    api = cli.connect("dst.eu.auth0.com", "tid", "tsecret")

    assert seen["args"] == ("https://dst.eu.auth0.com/", "tid", "tsecret")
    assert api.base_url == "https://dst.eu.auth0.com"
    assert api.client._token == "tok"


def test_list_orgs_prints_page_json(tenants, capsys):
    tenants["src.eu.auth0.com"].organizations.items = [{"id": "org_1", "name": "acme"}]

    cli.main(["list-orgs"])

    output = json.loads(capsys.readouterr().out)
    assert output["organizations"] == [{"id": "org_1", "name": "acme"}]
    assert output["total"] == 1
    assert tenants["src.eu.auth0.com"].organizations.requested_pages == [0]


def test_list_users_passes_page_argument(tenants, capsys):
    cli.main(["list-users", "4"])

    assert tenants["src.eu.auth0.com"].users.requested_pages == [4]


def test_list_client_application_types(tenants, capsys):
    cli.main(["list-client-application-types"])

    values = json.loads(capsys.readouterr().out)
    assert "spa" in values
    assert "non_interactive" in values


def test_invalid_application_type_is_a_usage_error(tenants):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["create-client", "desktop-toaster"])

    assert excinfo.value.code == 2
    assert tenants["connections"] == []


def test_create_client_does_not_submit(tenants, caplog):
    cli.main(["create-client", "spa", "My SPA", "authorization_code", "https://app/cb"])

    assert tenants["src.eu.auth0.com"].clients.created == []
    assert "not submitted" in caplog.text


def test_invalid_trigger_id_message(tenants, capsys):
    def invalid(trigger_id, page=0, per_page=100):
        raise Auth0APIError(400, "Invalid uri", f"/actions/triggers/{trigger_id}/bindings", "invalid_uri")

    tenants["src.eu.auth0.com"].actions.list_trigger_bindings = invalid

    cli.main(["list-action-trigger-bindings", "nope"])

    assert capsys.readouterr().out.strip() == "Invalid triggerId"


def test_other_api_errors_exit_non_zero(tenants, capsys):
    def boom(page=0, per_page=100):
        raise Auth0APIError(403, "Insufficient scope", "/roles", "insufficient_scope")

    tenants["src.eu.auth0.com"].roles.list = boom

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["list-roles"])

    assert excinfo.value.code == 1
    assert "[list-roles] Error" in capsys.readouterr().err


def test_invite_uses_default_inviter_and_audits(tenants, capsys):
    cli.main(["--operator", "alice", "invite-org-member", "org_1", "cid_app", "bob@example.com"])

    ((org_id, body),) = tenants["src.eu.auth0.com"].organizations.invitations
    assert org_id == "org_1"
    assert body == {
        "inviter": {"name": "Welcome"},
        "invitee": {"email": "bob@example.com"},
        "client_id": "cid_app",
        "send_invitation_email": False,
    }
    event = json.loads(audit.AUDIT_LOG_FILE.read_text().splitlines()[0])
    assert event["event_type"] == "invite_org_member"
    assert event["operator"] == "alice"


def test_create_org_audits_result(tenants, capsys):
    cli.main(["create-org", "acme", "Acme Inc"])

    assert tenants["src.eu.auth0.com"].organizations.created == [{"name": "acme", "display_name": "Acme Inc"}]
    assert json.loads(capsys.readouterr().out)["id"] == "source_org_1"
    event = json.loads(audit.AUDIT_LOG_FILE.read_text().splitlines()[0])
    assert event["event_type"] == "create_org"
    assert event["tenant"] == "src.eu.auth0.com"


def test_export_tenant_prints_summary(tenants, capsys):
    source = tenants["src.eu.auth0.com"]
    source.organizations.items = [{"id": "org_1", "name": "acme"}]
    source.clients.items = [{"client_id": "c1", "name": "acme-app", "client_metadata": {"org_id": "org_1"}}]

    cli.main(["export-tenant", "dst.eu.auth0.com", "tid", "tsecret"])

    assert tenants["connections"] == [
        ("src.eu.auth0.com", "cid", "csecret"),
        ("dst.eu.auth0.com", "tid", "tsecret"),
    ]
    out = capsys.readouterr().out.splitlines()
    assert out == [
        "1 orgs exported",
        "1 clients exported",
        "0 apis exported",
        "0 roles exported",
        "0 rules exported",
        "0 actions exported",
        "0 flow-action-trigger-bindings exported",
    ]
    created = tenants["dst.eu.auth0.com"].clients.created[0]
    assert created["client_metadata"]["org_id"] == "target_org_1"

    event = json.loads(audit.AUDIT_LOG_FILE.read_text().splitlines()[0])
    assert event["event_type"] == "export_tenant"
    assert event["subject"] == "dst.eu.auth0.com"
    assert event["details"]["organizations"] == 1


def test_export_failure_is_audited(tenants, capsys):
    tenants["src.eu.auth0.com"].clients.items = [
        {"client_id": "c1", "name": "orphan", "client_metadata": {"org_id": "org_gone"}},
    ]

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["export-tenant", "dst.eu.auth0.com", "tid", "tsecret"])

    assert excinfo.value.code == 1
    assert "org_gone" in capsys.readouterr().err
    event = json.loads(audit.AUDIT_LOG_FILE.read_text().splitlines()[0])
    assert event["success"] is False


def test_no_command_prints_help(capsys):
    cli.main([])

    assert "usage" in capsys.readouterr().out.lower()


def test_console_script_points_into_package():
    pyproject = (Path(__file__).resolve().parents[1] / "pyproject.toml").read_text()

    assert 'auth0-admin = "auth0_admin.cli:main"' in pyproject
    assert 'include = ["auth0_admin*"]' in pyproject
    assert callable(cli.main)
