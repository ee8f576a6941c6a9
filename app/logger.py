"""
Custom logging configuration for the task balancer.
Provides clear, presentable logs, with banners around balancing
operations (auto-assign, rebalance) so each pass is easy to follow.
"""
import logging
import sys
import time
from datetime import datetime
from functools import wraps
from typing import Any, Callable, Optional


# ANSI color codes for terminal output
class Colors:
    """ANSI color codes for terminal formatting."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    WHITE = "\033[37m"
    CYAN = "\033[36m"

    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"
    BRIGHT_BLUE = "\033[94m"
    BRIGHT_CYAN = "\033[96m"


# Component icons, keyed by the last segment of the logger name
COMPONENT_ICONS = {
    "workload": "📊",
    "assigner": "🎯",
    "rebalancer": "⚖️",
    "balancing": "⚖️",
    "team": "👥",
    "store": "🗄️",
    "db": "🗄️",
    "auth": "🔑",
    "default": "▶️",
}


class BalancerFormatter(logging.Formatter):
    """
    Custom formatter that provides clean, presentable log output.
    """

    LEVEL_FORMATS = {
        logging.DEBUG: (Colors.DIM, "DEBUG"),
        logging.INFO: (Colors.BRIGHT_CYAN, "INFO "),
        logging.WARNING: (Colors.BRIGHT_YELLOW, "WARN "),
        logging.ERROR: (Colors.BRIGHT_RED, "ERROR"),
        logging.CRITICAL: (Colors.BOLD + Colors.BRIGHT_RED, "CRIT "),
    }

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        color, level_text = self.LEVEL_FORMATS.get(
            record.levelno,
            (Colors.WHITE, record.levelname[:5])
        )

        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        module = record.name.split(".")[-1] if record.name else "root"
        icon = COMPONENT_ICONS.get(module, COMPONENT_ICONS["default"])

        if self.use_colors:
            level_str = f"{color}{level_text}{Colors.RESET}"
            time_str = f"{Colors.DIM}{timestamp}{Colors.RESET}"
            module_str = f"{Colors.BRIGHT_BLUE}{module:12}{Colors.RESET}"
            formatted = f"{time_str} │ {level_str} │ {icon} {module_str} │ {record.getMessage()}"
        else:
            # Plain text output (for file logging)
            formatted = f"{timestamp} | {level_text} | {icon} {module:12} | {record.getMessage()}"

        if record.exc_info:
            formatted += "\n" + self.formatException(record.exc_info)

        return formatted


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    use_colors: bool = True
) -> None:
    """
    Configure logging for the task balancer.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        use_colors: Whether to use ANSI colors in console output
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(BalancerFormatter(use_colors=use_colors))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(BalancerFormatter(use_colors=False))
        root_logger.addHandler(file_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


# ============================================================================
# Balancing operation logging
# ============================================================================

def log_operation_start(operation: str, logger: logging.Logger, context: Optional[dict] = None) -> None:
    """Log the start of a balancing operation."""
    if sys.stdout.isatty():
        logger.info(f"{Colors.BOLD}{Colors.BRIGHT_CYAN}▶ {operation.upper()}{Colors.RESET}")
    else:
        logger.info(f"▶ {operation.upper()}")
    if context:
        for key, value in context.items():
            logger.info(f"    {key}: {value}")


def log_operation_end(
    operation: str,
    logger: logging.Logger,
    success: bool = True,
    duration_ms: Optional[float] = None
) -> None:
    """Log the end of a balancing operation."""
    status = "✓ COMPLETED" if success else "✗ FAILED"
    duration_str = f" ({duration_ms:.0f}ms)" if duration_ms is not None else ""

    if sys.stdout.isatty():
        color = Colors.BRIGHT_GREEN if success else Colors.BRIGHT_RED
        logger.info(f"{Colors.BOLD}{color}◀ {status}: {operation.upper()}{duration_str}{Colors.RESET}")
    else:
        logger.info(f"◀ {status}: {operation.upper()}{duration_str}")


def balancing_operation(operation: Optional[str] = None):
    """
    Decorator to log entry and exit of a balancing operation.

    The first positional argument after ``self`` is treated as the owner id
    and included in the start banner.

    Usage:
        @balancing_operation("rebalance")
        def rebalance(self, owner_id: int) -> RebalanceReport:
            ...
    """
    def decorator(func: Callable) -> Callable:
        name = operation or func.__name__
        op_logger = logging.getLogger(func.__module__)

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start_time = time.time()
            owner_id = kwargs.get("owner_id", args[1] if len(args) > 1 else None)
            log_operation_start(name, op_logger, {"owner": owner_id})

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration_ms = (time.time() - start_time) * 1000
                op_logger.warning(f"{name} aborted: {e}")
                log_operation_end(name, op_logger, success=False, duration_ms=duration_ms)
                raise

            duration_ms = (time.time() - start_time) * 1000
            log_operation_end(name, op_logger, success=True, duration_ms=duration_ms)
            return result

        return wrapper
    return decorator
