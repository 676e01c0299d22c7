"""Exception hierarchy for dashcontext."""


class DashContextError(Exception):
    """Base exception for all dashcontext errors."""


class ContextInputError(DashContextError):
    """Raised when a resolution request is missing its domain or path."""


class DirectoryLookupError(DashContextError):
    """Raised when the agency directory backend fails."""


class VerificationError(DashContextError):
    """Raised when a whitelabel domain cannot be verified for an agency."""


class ConfigError(DashContextError):
    """Raised when configuration is invalid."""
