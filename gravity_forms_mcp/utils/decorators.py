"""Decorators shared by the MCP tool modules."""

from functools import wraps

from mcp.server.fastmcp.exceptions import ToolError

from ..exceptions import GravityFormsMCPError
from ..exceptions import ValidationError
from ..logger_config import ErrorCategory
from ..logger_config import log_structured_error


def raise_tool_errors(func):
    """Turn domain errors raised by an async tool into MCP tool errors.

    The agent host sees ``user_message``; the full error is logged with its
    code and details.
    """

    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except GravityFormsMCPError as e:
            log_structured_error(
                category=ErrorCategory.ERROR,
                message=f"{func.__name__} failed: {e.message}",
                context={"error_code": e.error_code, **e.details},
                operation=func.__name__,
            )
            raise ToolError(e.user_message) from e

    return wrapper


def require_valid(is_valid: bool, error_message: str, field: str | None = None) -> None:
    """Raise a ValidationError unless a ``(is_valid, error)`` check passed."""
    if not is_valid:
        raise ValidationError(error_message, field=field)
