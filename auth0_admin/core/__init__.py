"""Core logic for Auth0 tenant administration.

Module Structure:
    - auth0/            : Low-level Auth0 Management API client and services
    - tenant_export.py  : Tenant-to-tenant export stages

These modules carry no CLI dependencies; the command surface lives in
auth0_admin/cli.py.
"""
