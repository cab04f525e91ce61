"""Core infrastructure: access control, authentication, errors, logging."""
