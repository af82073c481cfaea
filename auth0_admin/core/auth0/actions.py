"""Auth0 action, trigger and trigger-binding operations."""
from __future__ import annotations
from typing import Any, Dict, List, Optional

from .client import ManagementClient, Page, DEFAULT_PAGE_SIZE

CURRENT_TRIGGER_STATUS = "CURRENT"


class ActionService:
    """Service for managing Auth0 actions and their trigger bindings."""

    def __init__(self, client: ManagementClient):
        """Initialize action service.

        Args:
            client: Authenticated Management API client
        """
        self.client = client

    def list(self, page: int = 0, per_page: int = DEFAULT_PAGE_SIZE, deployed: Optional[bool] = None) -> Page:
        """Return one page of actions, optionally filtered on deployment state."""
        return self.client.list_page(
            "/actions/actions", "actions", page=page, per_page=per_page, params={"deployed": deployed}
        )

    def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create an action; it is not live until deployed."""
        return self.client.post_json("/actions/actions", json=payload)

    def deploy(self, action_id: str) -> Dict[str, Any]:
        """Deploy the current draft of an action.

        Args:
            action_id: Action ID returned by create

        Raises:
            Auth0APIError: If the deployment is rejected
        """
        return self.client.post_json(f"/actions/actions/{action_id}/deploy")

    def list_triggers(self) -> List[Dict[str, Any]]:
        """Return every action trigger (id, version, status, runtimes)."""
        data = self.client.get_json("/actions/triggers") or {}
        if isinstance(data, list):
            return data
        return data.get("triggers", [])

    def list_trigger_bindings(self, trigger_id: str, page: int = 0, per_page: int = DEFAULT_PAGE_SIZE) -> Page:
        """Return one page of the actions bound to a trigger, in execution order."""
        return self.client.list_page(
            f"/actions/triggers/{trigger_id}/bindings", "bindings", page=page, per_page=per_page
        )

    def update_trigger_bindings(self, trigger_id: str, bindings: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Replace the full binding list of a trigger.

        Args:
            trigger_id: Trigger ID (e.g. "post-login")
            bindings: Items of {"ref": {"type", "value"}, "display_name"}
        """
        resp = self.client.patch(f"/actions/triggers/{trigger_id}/bindings", json={"bindings": bindings})
        return resp.json() if resp.text else {}


def binding_by_action_name(binding: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a listed binding into an update entry referencing the action by name.

    Action ids differ between tenants; names do not.
    """
    return {
        "ref": {"type": "action_name", "value": binding["action"]["name"]},
        "display_name": binding.get("display_name"),
    }
