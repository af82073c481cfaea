"""Auth0 organization operations."""
from __future__ import annotations
from typing import Any, Dict, Optional

from .client import ManagementClient, Page, DEFAULT_PAGE_SIZE


class OrganizationService:
    """Service for managing Auth0 organizations."""

    def __init__(self, client: ManagementClient):
        """Initialize organization service.

        Args:
            client: Authenticated Management API client
        """
        self.client = client

    def list(self, page: int = 0, per_page: int = DEFAULT_PAGE_SIZE) -> Page:
        """Return one page of organizations."""
        return self.client.list_page("/organizations", "organizations", page=page, per_page=per_page)

    def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create an organization and return its representation (including the new id).

        Args:
            payload: Organization create body (name, display_name, branding, metadata)
        """
        return self.client.post_json("/organizations", json=payload)

    def create_invitation(self, org_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Invite someone to an organization.

        Args:
            org_id: Organization ID
            payload: Invitation body (inviter, invitee, client_id, send_invitation_email)
        """
        return self.client.post_json(f"/organizations/{org_id}/invitations", json=payload)

    def list_members(self, org_id: str, page: int = 0, per_page: int = DEFAULT_PAGE_SIZE) -> Page:
        """Return one page of an organization's members."""
        return self.client.list_page(f"/organizations/{org_id}/members", "members", page=page, per_page=per_page)


def build_invitation(
    client_id: str,
    invitee_email: str,
    inviter: Optional[str] = None,
    send_email: bool = False,
) -> Dict[str, Any]:
    """Build an organization invitation body; the inviter defaults to "Welcome"."""
    return {
        "inviter": {"name": inviter or "Welcome"},
        "invitee": {"email": invitee_email},
        "client_id": client_id,
        "send_invitation_email": send_email,
    }
