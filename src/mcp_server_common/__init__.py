from .log import configure_logging, log_error, log_info
from .registry import (
    ToolInputError,
    ToolRegistry,
    ToolResult,
    ToolRoute,
    name_contains,
    name_in,
    validate_arguments,
)

__all__ = [
    "configure_logging",
    "log_error",
    "log_info",
    "ToolInputError",
    "ToolRegistry",
    "ToolResult",
    "ToolRoute",
    "name_contains",
    "name_in",
    "validate_arguments",
]
