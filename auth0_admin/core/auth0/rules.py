"""Auth0 rule operations."""
from __future__ import annotations
from typing import Any, Dict, Optional

from .client import ManagementClient, Page, DEFAULT_PAGE_SIZE


class RuleService:
    """Service for managing Auth0 rules."""

    def __init__(self, client: ManagementClient):
        self.client = client

    def list(self, page: int = 0, per_page: int = DEFAULT_PAGE_SIZE, enabled: Optional[bool] = None) -> Page:
        """Return one page of rules, optionally only enabled (or disabled) ones."""
        return self.client.list_page("/rules", "rules", page=page, per_page=per_page, params={"enabled": enabled})

    def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create a rule (name, script, order, enabled)."""
        return self.client.post_json("/rules", json=payload)
