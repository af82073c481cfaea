"""Auth0 user operations."""
from __future__ import annotations

from .client import ManagementClient, Page, DEFAULT_PAGE_SIZE


class UserService:
    """Service for reading Auth0 users."""

    def __init__(self, client: ManagementClient):
        self.client = client

    def list(self, page: int = 0, per_page: int = DEFAULT_PAGE_SIZE) -> Page:
        """Return one page of users."""
        return self.client.list_page("/users", "users", page=page, per_page=per_page)
