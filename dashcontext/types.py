"""Enums and type aliases for dashcontext."""

from enum import StrEnum


class ContextType(StrEnum):
    SUPER_ADMIN = "super_admin"
    AGENCY = "agency"
    CLIENT = "client"
