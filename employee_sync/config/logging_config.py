# employee_sync/config/logging_config.py
# =============================================================================
# File: employee_sync/config/logging_config.py
# Description: Logging configuration using Rich framework
# =============================================================================

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime
from typing import Optional, Dict, Any

from rich.box import DOUBLE, MINIMAL
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.theme import Theme


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean value from environment variable."""
    value = os.getenv(key, '').lower()
    return value in ('true', '1', 'yes', 'on') if value else default


def get_env_int(key: str, default: int) -> int:
    """Get integer value from environment variable."""
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        return default


# Muted theme shared by the handler and the banner/status panels
EMPLOYEE_SYNC_THEME = Theme({
    "debug": "magenta dim",
    "info": "green",
    "warning": "dark_goldenrod",
    "error": "red",
    "critical": "bold red",
    "timestamp": "grey70",
    "logger_name": "grey35",
    "message": "grey85",
})

_BORDER_COLORS = {
    'publisher': 'bright_green',
    'consumer': 'magenta',
}

_service_type = os.getenv('SERVICE_TYPE', 'consumer')

PLAIN_FORMAT = "[%(asctime)s] [%(levelname)-8s] [%(name)-40s] %(message)s"
PLAIN_DATEFMT = "%Y-%m-%d %H:%M:%S"


class ProductionFormatter(logging.Formatter):
    """JSON formatter for production environments"""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON"""
        log_obj = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if get_env_bool('LOG_JSON_INCLUDE_EXTRAS', True):
            for attr in ("event_id", "country", "event_type", "routing_key"):
                if hasattr(record, attr):
                    log_obj[attr] = getattr(record, attr)

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, default=str)


def get_logger_level_from_env(logger_name: str, default_level: int) -> int:
    """Get logger level from environment variable.

    e.g. "aio_pika" -> LOGLEVEL_AIO_PIKA
    """
    env_name = f"LOGLEVEL_{logger_name.replace('.', '_').upper()}"

    level_str = os.getenv(env_name, '').upper()
    if level_str:
        level_map = {
            'DEBUG': logging.DEBUG,
            'INFO': logging.INFO,
            'WARNING': logging.WARNING,
            'WARN': logging.WARNING,
            'ERROR': logging.ERROR,
            'CRITICAL': logging.CRITICAL,
        }
        return level_map.get(level_str, default_level)

    return default_level


def setup_logging(
        service_name: str = "employee_sync",
        log_level: Optional[str] = None,
        log_file: Optional[str] = None,
        enable_json: bool = None,
        rich_tracebacks: bool = True,
        service_type: str = None,
) -> None:
    """
    Configure logging with Rich framework.

    Args:
        service_name: Name of the service (e.g., "consumer")
        log_level: Override log level
        log_file: Optional log file path
        enable_json: Enable JSON formatting for production
        rich_tracebacks: Enable rich tracebacks (pretty exceptions)
        service_type: Type of service ("consumer", "publisher")
    """
    global _service_type
    _service_type = service_type or os.getenv('SERVICE_TYPE', 'consumer')

    level = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_file = log_file or os.getenv("LOG_FILE")

    if enable_json is None:
        enable_json = get_env_bool('LOG_JSON_FORMAT', False)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    use_rich = not enable_json and (sys.stdout.isatty() or get_env_bool("FORCE_COLOR", False))

    if use_rich:
        console = Console(
            theme=EMPLOYEE_SYNC_THEME,
            force_terminal=get_env_bool("FORCE_COLOR", False),
            width=get_env_int('LOG_CONSOLE_WIDTH', 0) or None,
        )
        rich_handler = RichHandler(
            console=console,
            rich_tracebacks=rich_tracebacks,
            show_path=False,
            log_time_format="[%X]",
        )
        root_logger.addHandler(rich_handler)

    elif enable_json:
        json_handler = logging.StreamHandler(sys.stdout)
        json_handler.setFormatter(ProductionFormatter())
        root_logger.addHandler(json_handler)

    else:
        plain_handler = logging.StreamHandler(sys.stdout)
        plain_handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt=PLAIN_DATEFMT))
        root_logger.addHandler(plain_handler)

    if log_file:
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=get_env_int('LOG_MAX_SIZE_MB', 100) * 1024 * 1024,
            backupCount=get_env_int('LOG_BACKUP_COUNT', 5),
            encoding=os.getenv('LOG_FILE_ENCODING', 'utf-8'),
        )
        # Always plain for files
        file_handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt=PLAIN_DATEFMT))
        root_logger.addHandler(file_handler)

    default_noise_config = {
        "aio_pika": logging.WARNING,
        "aiormq": logging.WARNING,
        "asyncio": logging.WARNING,
        "httpx": logging.WARNING,
        "httpcore": logging.WARNING,
        "redis": logging.WARNING,

        "employee_sync.event_bus": logging.INFO,
        "employee_sync.worker_core": logging.INFO,
    }

    for logger_name, default_level in default_noise_config.items():
        logging.getLogger(logger_name).setLevel(get_logger_level_from_env(logger_name, default_level))

    logging.getLogger(f"{service_name}.startup").info(f"Logging configured for {service_name} service")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def log_worker_banner(logger: logging.Logger, worker_name: str, instance_id: str, version: str | None = None,
                      service_type: str = "consumer"):
    """Log a banner for worker startup"""
    if version is None:
        from employee_sync import __version__
        version = __version__

    global _service_type
    _service_type = service_type

    if not sys.stdout.isatty() and not get_env_bool("FORCE_COLOR", False):
        logger.info(f"{worker_name} v{version} starting (instance={instance_id}, pid={os.getpid()})")
        return

    console = Console(theme=EMPLOYEE_SYNC_THEME)

    banner_text = f"""[bold cyan]{worker_name.upper()}[/bold cyan]
[dim]Version {version}[/dim]

[bold]Instance:[/bold] {instance_id}
[bold]PID:[/bold] {os.getpid()}
[bold]Started:[/bold] {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}"""

    banner = Panel(
        banner_text,
        title="[bold]WORKER STARTUP[/bold]",
        title_align="center",
        border_style=_BORDER_COLORS.get(service_type, 'bright_blue'),
        box=DOUBLE,
        padding=(1, 2),
        width=min(console.width - 2, 60),
    )

    console.print()
    console.print(banner)
    console.print()


def log_status_update(logger: logging.Logger, status: str, details: Optional[Dict[str, Any]] = None):
    """Log a status update with optional details"""
    if not sys.stdout.isatty() and not get_env_bool("FORCE_COLOR", False):
        suffix = ", ".join(f"{k}={v}" for k, v in (details or {}).items())
        logger.info(f"Status: {status}" + (f" ({suffix})" if suffix else ""))
        return

    console = Console(theme=EMPLOYEE_SYNC_THEME)

    status_text = f"[bold]Status:[/bold] [info]{status}[/info]"
    if details:
        status_text += "\n\n[bold]Details:[/bold]\n"
        for key, value in details.items():
            formatted_key = key.replace('_', ' ').title()
            status_text += f"  • {formatted_key}: {value}\n"

    panel = Panel(
        status_text.strip(),
        border_style=_BORDER_COLORS.get(_service_type, 'info'),
        box=MINIMAL,
        padding=(1, 2),
        width=min(console.width - 2, 90),
    )

    console.print()
    console.print(panel)
