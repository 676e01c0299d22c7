"""Tenant context resolution for the multi-tenant dashboard."""

__version__ = "0.1.0"
