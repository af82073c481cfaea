"""Auth0 role and permission operations."""
from __future__ import annotations
import logging
from typing import Any, Dict, List

from .client import ManagementClient, Page, DEFAULT_PAGE_SIZE

logger = logging.getLogger(__name__)


class RoleService:
    """Service for managing Auth0 roles."""

    def __init__(self, client: ManagementClient):
        """Initialize role service.

        Args:
            client: Authenticated Management API client
        """
        self.client = client

    def list(self, page: int = 0, per_page: int = DEFAULT_PAGE_SIZE) -> Page:
        """Return one page of roles."""
        return self.client.list_page("/roles", "roles", page=page, per_page=per_page)

    def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create a role (name, description) and return it with its new id."""
        return self.client.post_json("/roles", json=payload)

    def list_permissions(self, role_id: str, page: int = 0, per_page: int = DEFAULT_PAGE_SIZE) -> Page:
        """Return one page of the permissions granted to a role.

        Args:
            role_id: Role ID
            page: Zero-based page index
            per_page: Page size
        """
        return self.client.list_page(f"/roles/{role_id}/permissions", "permissions", page=page, per_page=per_page)

    def assign_permissions(self, role_id: str, permissions: List[Dict[str, str]]) -> None:
        """Grant permissions to a role.

        Args:
            role_id: Role ID
            permissions: Items of {"resource_server_identifier", "permission_name"}

        An empty list is a no-op; Auth0 rejects an empty permissions array.
        """
        if not permissions:
            logger.debug("[roles] No permissions to assign to role %s", role_id)
            return
        self.client.post(f"/roles/{role_id}/permissions", json={"permissions": permissions})


def permission_identity(permission: Dict[str, Any]) -> Dict[str, str]:
    """Reduce a permission listing entry to the identity the assign call expects."""
    return {
        "resource_server_identifier": permission["resource_server_identifier"],
        "permission_name": permission["permission_name"],
    }
