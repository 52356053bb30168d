"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .validate import (
    ValidationError,
    ValidationResult,
    GenerationRequest,
    UploadedFile,
    validate_request,
    validate_uploads,
)
from .logging_config import configure_logging, generation_context, get_logger
from .id import UuidAllocator, new_workspace_id, new_generation_id

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Validation
    "ValidationError",
    "ValidationResult",
    "GenerationRequest",
    "UploadedFile",
    "validate_request",
    "validate_uploads",
    # Logging
    "configure_logging",
    "get_logger",
    "generation_context",
    # IDs
    "UuidAllocator",
    "new_workspace_id",
    "new_generation_id",
]
