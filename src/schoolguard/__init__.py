"""Role-based access control for the school record-management API."""

__version__ = "0.1.0"
