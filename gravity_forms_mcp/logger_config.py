import functools
import inspect
import json
import logging
import traceback
from datetime import datetime
from datetime import timezone
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from .metrics_config import METRICS_ENABLED
from .metrics_config import record_tool_call_error
from .metrics_config import record_tool_call_start
from .metrics_config import record_tool_call_success

METRICS_AVAILABLE = METRICS_ENABLED

# Attributes every LogRecord carries; anything else was passed through ``extra``.
_STANDARD_RECORD_ATTRS = set(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime"}


class ErrorCategory(Enum):
    """Severity buckets for structured error logging."""

    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


_CATEGORY_LEVELS = {
    ErrorCategory.CRITICAL: logging.CRITICAL,
    ErrorCategory.ERROR: logging.ERROR,
    ErrorCategory.WARNING: logging.WARNING,
    ErrorCategory.INFO: logging.INFO,
}


class StructuredLogFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            log_data["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(exc_type, exc_value, exc_tb),
            }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_"):
                log_data[key] = value

        return json.dumps(log_data, default=str)


# --- Logging Setup ---
_log_dir = Path(__file__).resolve().parent

mcp_call_logger = logging.getLogger("mcp_call_logger")
mcp_call_logger.setLevel(logging.INFO)

# maxBytes: 10MB per file, backupCount: 5 files (total ~50MB)
file_handler = RotatingFileHandler(
    _log_dir / "mcp_calls.log", maxBytes=10 * 1024 * 1024, backupCount=5, delay=True
)
file_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
mcp_call_logger.addHandler(file_handler)
mcp_call_logger.propagate = False

error_logger = logging.getLogger("error_logger")
error_logger.setLevel(logging.INFO)

error_file_handler = RotatingFileHandler(
    _log_dir / "errors.log", maxBytes=10 * 1024 * 1024, backupCount=5, delay=True
)
error_file_handler.setFormatter(StructuredLogFormatter())
error_logger.addHandler(error_file_handler)
error_logger.propagate = False


def log_structured_error(
    category: ErrorCategory,
    message: str,
    exception: Exception | None = None,
    context: dict[str, Any] | None = None,
    **kwargs,
) -> None:
    """Log an error with its category and context as structured JSON."""
    extra: dict[str, Any] = {"error_category": category.value}
    if context:
        extra.update(context)
    extra.update(kwargs)

    error_logger.log(
        _CATEGORY_LEVELS.get(category, logging.ERROR),
        message,
        exc_info=exception,
        extra=extra,
    )


def safe_operation(
    operation_name: str,
    operation_func,
    *args,
    error_category: ErrorCategory = ErrorCategory.ERROR,
    context: dict[str, Any] | None = None,
    **kwargs,
) -> tuple[bool, Any, Exception | None]:
    """Run ``operation_func`` and report failures as data instead of raising.

    Returns:
        (success, result, error) - ``result`` is None on failure and ``error``
        is None on success.
    """
    try:
        return True, operation_func(*args, **kwargs), None
    except Exception as e:
        log_structured_error(
            category=error_category,
            message=f"Operation '{operation_name}' failed: {e}",
            exception=e,
            context=context,
            operation=operation_name,
        )
        return False, None, e


def _format_value(value: Any) -> str:
    if hasattr(value, "model_dump_json"):
        return value.model_dump_json(indent=None, exclude_none=True)
    return repr(value)


def _format_arguments(args: tuple, kwargs: dict) -> str:
    try:
        logged_args = [_format_value(arg) for arg in args]
        logged_kwargs = {k: _format_value(v) for k, v in kwargs.items()}
        return f"args={logged_args}, kwargs={logged_kwargs}"
    except Exception as e:
        return f"args/kwargs logging error: {e}"


def _format_result(result: Any) -> str:
    try:
        if isinstance(result, list) and result and hasattr(result[0], "model_dump_json"):
            return "[" + ", ".join(_format_value(item) for item in result) + "]"
        return _format_value(result)
    except Exception as e:
        return f"Result logging error: {e}"


def _record_start(func_name: str, args: tuple, kwargs: dict) -> float | None:
    if not METRICS_AVAILABLE:
        return None
    try:
        return record_tool_call_start(func_name, args, kwargs)
    except Exception as e:
        # Don't let metrics errors break the function call
        mcp_call_logger.warning(f"Metrics recording failed for {func_name}: {e}")
        return None


def _record_success(func_name: str, start_time: float | None, result: Any) -> None:
    if not METRICS_AVAILABLE:
        return
    try:
        record_tool_call_success(func_name, start_time, len(str(result)) if result else 0)
    except Exception as e:
        mcp_call_logger.warning(f"Metrics success recording failed for {func_name}: {e}")


def _record_failure(func_name: str, start_time: float | None, error: Exception) -> None:
    if METRICS_AVAILABLE:
        try:
            record_tool_call_error(func_name, start_time, error)
        except Exception as metrics_error:
            mcp_call_logger.warning(f"Metrics error recording failed for {func_name}: {metrics_error}")

    mcp_call_logger.error(f"Tool {func_name} raised exception: {error}", exc_info=True)
    log_structured_error(
        category=ErrorCategory.ERROR,
        message=f"Tool {func_name} failed: {error}",
        exception=error,
        operation="tool_execution",
        function=func_name,
    )


# --- Decorator for Logging MCP Calls with Metrics ---
def log_mcp_call(func):
    """Log arguments, results and exceptions of an MCP tool, sync or async."""
    func_name = getattr(func, "__name__", "unknown_function")

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            start_time = _record_start(func_name, args, kwargs)
            mcp_call_logger.info(f"Calling tool: {func_name} with {_format_arguments(args, kwargs)}")
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                _record_failure(func_name, start_time, e)
                raise
            _record_success(func_name, start_time, result)
            mcp_call_logger.info(f"Tool {func_name} returned: {_format_result(result)}")
            return result

        return async_wrapper

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = _record_start(func_name, args, kwargs)
        mcp_call_logger.info(f"Calling tool: {func_name} with {_format_arguments(args, kwargs)}")
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            _record_failure(func_name, start_time, e)
            raise
        _record_success(func_name, start_time, result)
        mcp_call_logger.info(f"Tool {func_name} returned: {_format_result(result)}")
        return result

    return wrapper
