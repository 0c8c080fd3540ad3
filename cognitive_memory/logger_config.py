import datetime
import functools
import inspect
import json
import logging
import traceback
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Import metrics functionality (will gracefully handle if not available)
try:
    from .metrics_config import record_tool_call_error
    from .metrics_config import record_tool_call_start
    from .metrics_config import record_tool_call_success

    METRICS_AVAILABLE = True
except ImportError:
    METRICS_AVAILABLE = False

DEFAULT_LOG_DIR = Path(__file__).resolve().parent
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5

_STANDARD_RECORD_ATTRS = frozenset(
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
        log_entry = {
            "timestamp": datetime.datetime.fromtimestamp(
                record.created, tz=datetime.timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            log_entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(exc_type, exc_value, exc_tb),
            }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_"):
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


# --- Logging Setup ---
mcp_call_logger = logging.getLogger("mcp_call_logger")
mcp_call_logger.setLevel(logging.INFO)
mcp_call_logger.propagate = False

error_logger = logging.getLogger("error_logger")
error_logger.setLevel(logging.INFO)
error_logger.propagate = False


def _file_handler(path: Path, formatter: logging.Formatter) -> RotatingFileHandler:
    # delay=True so importing the package never touches the filesystem
    handler = RotatingFileHandler(
        path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUP_COUNT, delay=True, encoding="utf-8"
    )
    handler.setFormatter(formatter)
    return handler


def configure_logging(
    log_dir: str | Path | None = None,
    level: str = "INFO",
    structured: bool = True,
) -> None:
    """(Re)attach the call and error log handlers under ``log_dir``."""
    directory = Path(log_dir) if log_dir else DEFAULT_LOG_DIR
    directory.mkdir(parents=True, exist_ok=True)

    for logger in (mcp_call_logger, error_logger):
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    call_formatter = (
        StructuredLogFormatter()
        if structured
        else logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    mcp_call_logger.addHandler(_file_handler(directory / "mcp_calls.log", call_formatter))
    mcp_call_logger.setLevel(level.upper())

    # The error log is always JSON
    error_logger.addHandler(_file_handler(directory / "errors.log", StructuredLogFormatter()))
    error_logger.setLevel(level.upper())


mcp_call_logger.addHandler(
    _file_handler(
        DEFAULT_LOG_DIR / "mcp_calls.log",
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
    )
)
error_logger.addHandler(_file_handler(DEFAULT_LOG_DIR / "errors.log", StructuredLogFormatter()))


def log_structured_error(
    category: ErrorCategory,
    message: str,
    exception: Exception | None = None,
    context: dict | None = None,
    operation: str | None = None,
    **kwargs,
) -> None:
    """Log an error with a category, operation name and flat context fields."""
    extra = {"error_category": category.value}
    if operation:
        extra["operation"] = operation
    if context:
        extra.update(context)
    extra.update(kwargs)
    if exception is not None and hasattr(exception, "to_dict"):
        extra["error_details"] = exception.to_dict()

    error_logger.log(
        _CATEGORY_LEVELS[category],
        message,
        exc_info=exception is not None,
        extra=extra,
    )


def safe_operation(
    operation_name: str,
    func,
    *args,
    error_category: ErrorCategory = ErrorCategory.ERROR,
    **kwargs,
):
    """Run ``func`` and report ``(success, result, error)`` instead of raising."""
    try:
        return True, func(*args, **kwargs), None
    except Exception as e:
        log_structured_error(
            category=error_category,
            message=f"Operation {operation_name} failed: {e}",
            exception=e,
            operation=operation_name,
        )
        return False, None, e


def _describe(value) -> str:
    if hasattr(value, "model_dump_json"):
        return value.model_dump_json(indent=None, exclude_none=True)
    if isinstance(value, list) and value and hasattr(value[0], "model_dump_json"):
        return "[" + ", ".join(_describe(item) for item in value) + "]"
    return repr(value)


def _result_size(result) -> int:
    try:
        if isinstance(result, str):
            return len(result.encode("utf-8"))
        return len(_describe(result))
    except Exception:
        return 0


def _log_call_start(func_name: str, args, kwargs):
    start_time = None
    if METRICS_AVAILABLE:
        try:
            start_time = record_tool_call_start(func_name, args, kwargs)
        except Exception as e:
            mcp_call_logger.warning(f"Metrics recording failed for {func_name}: {e}")

    try:
        logged_args = [_describe(arg) for arg in args]
        logged_kwargs = {k: _describe(v) for k, v in kwargs.items()}
        arg_str = f"args={logged_args}, kwargs={logged_kwargs}"
    except Exception as e:
        arg_str = f"args/kwargs logging error: {e}"

    mcp_call_logger.info(f"Calling tool: {func_name} with {arg_str}")
    return start_time


def _log_call_success(func_name: str, start_time, result) -> None:
    if METRICS_AVAILABLE:
        try:
            record_tool_call_success(func_name, start_time, _result_size(result))
        except Exception as e:
            mcp_call_logger.warning(f"Metrics success recording failed for {func_name}: {e}")

    try:
        result_str = _describe(result)
    except Exception as e:
        result_str = f"Result logging error: {e}"
    mcp_call_logger.info(f"Tool {func_name} returned: {result_str}")


def _log_call_error(func_name: str, start_time, error: Exception) -> None:
    if METRICS_AVAILABLE:
        try:
            record_tool_call_error(func_name, start_time, error)
        except Exception as metrics_error:
            mcp_call_logger.warning(f"Metrics error recording failed for {func_name}: {metrics_error}")

    mcp_call_logger.error(f"Tool {func_name} raised exception: {error}")
    log_structured_error(
        category=ErrorCategory.ERROR,
        message=f"Tool {func_name} failed: {error}",
        exception=error,
        operation="tool_execution",
        function=func_name,
    )


# --- Decorator for Logging MCP Calls with Metrics ---
def log_mcp_call(func):
    """Log arguments, result and failures of a tool function.

    Works for both plain and ``async def`` tools; the wrapper keeps the
    wrapped signature so FastMCP can still build the tool's input schema.
    """
    func_name = getattr(func, "__name__", "unknown_function")

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            start_time = _log_call_start(func_name, args, kwargs)
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                _log_call_error(func_name, start_time, e)
                raise
            _log_call_success(func_name, start_time, result)
            return result

        return async_wrapper

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = _log_call_start(func_name, args, kwargs)
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            _log_call_error(func_name, start_time, e)
            raise
        _log_call_success(func_name, start_time, result)
        return result

    return wrapper
