"""Request-time tenant context resolution."""
