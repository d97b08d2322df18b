"""Shared error code constants.

Component-specific codes live next to the component that raises them; this
module only holds the domain-agnostic set.
"""

INVALID_ARGUMENT = "INVALID_ARGUMENT"
RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
CONFLICT = "CONFLICT"
ALREADY_EXISTS = "ALREADY_EXISTS"

# Dependency / external system
FILESYSTEM_FAILURE = "FILESYSTEM_FAILURE"
DATABASE_FAILURE = "DATABASE_FAILURE"

# Internal
INTERNAL_ERROR = "INTERNAL_ERROR"
UNEXPECTED_EXCEPTION = "UNEXPECTED_EXCEPTION"
