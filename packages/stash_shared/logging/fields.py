"""Canonical structured logging field names.

Every component binds context under these keys so log lines stay queryable
across the storage service, owner records and the CLI.
"""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EVENT = "event"
EXCEPTION = "exception"

# Public API invocation fields.
COMPONENT_ID = "component_id"
API_NAME = "api_name"
PUBLIC_API_INVOCATION_EVENT = "public_api_invocation"
PUBLIC_API_COMPLETION_EVENT = "public_api_completion"
SUCCESS = "success"
DURATION_MS = "duration_ms"
ERRORS = "errors"
ERROR_CATEGORY = "error_category"

# Storage fields.
VIRTUAL_PATH = "virtual_path"
REAL_PATH = "real_path"
CANONICAL_PATH = "canonical_path"
UNIT_ID = "unit_id"

# Common process-level fields.
SERVICE = "service"
ENVIRONMENT = "environment"
