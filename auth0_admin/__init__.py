"""Auth0 tenant administration package.

To use the Management API services:
    from auth0_admin.core.auth0 import ManagementApi, ManagementClient

To export one tenant into another:
    from auth0_admin.core.tenant_export import run_export
"""
__version__ = "0.3.0"
