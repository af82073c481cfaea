"""Auth0 resource server (API) operations."""
from __future__ import annotations
from typing import Any, Dict

from .client import ManagementClient, Page, DEFAULT_PAGE_SIZE

MANAGEMENT_API_NAME = "Auth0 Management API"


class ResourceServerService:
    """Service for managing Auth0 resource servers."""

    def __init__(self, client: ManagementClient):
        self.client = client

    def list(self, page: int = 0, per_page: int = DEFAULT_PAGE_SIZE) -> Page:
        """Return one page of resource servers."""
        return self.client.list_page("/resource-servers", "resource_servers", page=page, per_page=per_page)

    def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create a resource server and return it."""
        return self.client.post_json("/resource-servers", json=payload)
