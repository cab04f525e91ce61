"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# String field lengths
MAX_ID_LENGTH = 36
MAX_NAME_LENGTH = 255
MAX_EMERGENCY_CONTACT_LENGTH = 32

# Pagination defaults
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Token settings
ACCESS_TOKEN_JTI_LENGTH = 32
ACCESS_TOKEN_TYPE = "access"

# Secret key requirements
MIN_SECRET_KEY_LENGTH = 32
DEFAULT_INSECURE_SECRET = "change-me-in-production"

# Resource types understood by the relationship resolver
STUDENT_RESOURCE = "student"
