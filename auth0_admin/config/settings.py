"""Settings loader with JSON files, environment variables and Docker secrets."""
from __future__ import annotations
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlparse

from auth0_admin.core.auth0.client import base_url_for_domain, DEFAULT_PAGE_SIZE
from auth0_admin.core.auth0.exceptions import ConfigurationError

BASE_SETTINGS_FILE = "appSettings.json"
LOCAL_SETTINGS_FILE = "appSettings.local.json"
ENV_SEPARATOR = "__"
# Auth0 caps per_page at 100 on every paged endpoint
MAX_PAGE_SIZE = 100


def _load_secret_from_file(secret_name: str) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Args:
        secret_name: Name of the secret file in /run/secrets

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name
    if secret_file.exists() and secret_file.is_file():
        secret_value = secret_file.read_text().strip()
        if secret_value:
            return secret_value
    return None


def _read_json(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in configuration file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a JSON object")
    return data


def _merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Deep-merge ``override`` into ``base``; keys compare case-insensitively."""
    for key, value in override.items():
        existing = next((k for k in base if k.lower() == key.lower()), key)
        if isinstance(value, dict) and isinstance(base.get(existing), dict):
            _merge(base[existing], value)
        else:
            base.pop(existing, None)
            base[key] = value
    return base


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    """Turn ``AUTH0__CLIENTID=x`` style variables into a nested dictionary."""
    overrides: Dict[str, Any] = {}
    for name, value in environ.items():
        if ENV_SEPARATOR not in name:
            continue
        parts = [p for p in name.split(ENV_SEPARATOR) if p]
        if len(parts) < 2 or parts[0].lower() not in ("auth0", "export", "logging"):
            continue
        node = overrides
        for part in parts[:-1]:
            node = node.setdefault(part.lower(), {})
        node[parts[-1].lower()] = value
    return overrides


def _section_value(section: Mapping[str, Any], key: str, default: Any = None) -> Any:
    for name, value in section.items():
        if name.lower() == key.lower():
            return value
    return default


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = _section_value(data, name, {})
    return value if isinstance(value, dict) else {}


def _domain_from_base_url(base_url: str) -> str:
    parsed = urlparse(base_url if "://" in base_url else f"https://{base_url}")
    return parsed.netloc or parsed.path.strip("/")


@dataclass
class AppConfig:
    """Application configuration container."""
    # Auth0 source tenant
    domain: str
    client_id: str
    client_secret: str

    # Export
    trigger_binding_delay: float = 2.0
    page_size: int = DEFAULT_PAGE_SIZE

    # Logging
    log_level: str = "INFO"

    @property
    def base_url(self) -> str:
        """Tenant base URL, e.g. https://tenant.eu.auth0.com/"""
        return base_url_for_domain(self.domain)


def load_raw_settings(
    base_file: str | Path = BASE_SETTINGS_FILE,
    local_file: str | Path = LOCAL_SETTINGS_FILE,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Merge the base file, the optional local override and environment variables."""
    environ = os.environ if environ is None else environ
    merged: Dict[str, Any] = {}
    for path in (Path(base_file), Path(local_file)):
        if path.exists():
            _merge(merged, _read_json(path))
    return _merge(merged, _env_overrides(environ))


def load_settings(
    base_file: str | Path = BASE_SETTINGS_FILE,
    local_file: str | Path = LOCAL_SETTINGS_FILE,
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """Load application settings.

    Priority (highest first):
    1. Environment variables (AUTH0__DOMAIN, AUTH0__CLIENTID, AUTH0__CLIENTSECRET)
    2. appSettings.local.json
    3. appSettings.json
    4. /run/secrets/auth0_client_secret for the client secret only

    Raises:
        ConfigurationError: If a file is not valid JSON or a required value is missing
    """
    raw = load_raw_settings(base_file, local_file, environ)
    auth0 = _section(raw, "auth0")
    export = _section(raw, "export")
    logging_section = _section(raw, "logging")

    domain = _section_value(auth0, "domain")
    if not domain:
        # Older settings files carried a full base URL instead of a domain
        base_url = _section_value(auth0, "baseUrl")
        if base_url:
            domain = _domain_from_base_url(base_url)

    client_id = _section_value(auth0, "clientId")
    client_secret = _section_value(auth0, "clientSecret") or _load_secret_from_file("auth0_client_secret")

    missing = [
        key for key, value in (("auth0.domain", domain), ("auth0.clientId", client_id), ("auth0.clientSecret", client_secret))
        if not value
    ]
    if missing:
        raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")

    try:
        delay = float(_section_value(export, "triggerBindingDelaySeconds", 2.0))
        page_size = int(_section_value(export, "pageSize", DEFAULT_PAGE_SIZE))
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid export configuration: {e}") from e
    if not 1 <= page_size <= MAX_PAGE_SIZE:
        raise ConfigurationError(f"export.pageSize must be between 1 and {MAX_PAGE_SIZE}, got {page_size}")
    if delay < 0:
        raise ConfigurationError(f"export.triggerBindingDelaySeconds must not be negative, got {delay}")

    return AppConfig(
        domain=str(domain),
        client_id=str(client_id),
        client_secret=str(client_secret),
        trigger_binding_delay=delay,
        page_size=page_size,
        log_level=str(_section_value(logging_section, "level", "INFO")).upper(),
    )
