"""Process-wide plumbing: logging, config files, tasks and timers."""

from .asyncio_utils import cancel_and_wait, create_logged_task
from .config_manager import ConfigManager, get_config_manager
from .logging_config import configure_logging
from .logging_utils import StructuredLogger, get_module_logger
from .scheduler import LoopScheduler, Scheduler

__all__ = [
    "ConfigManager",
    "LoopScheduler",
    "Scheduler",
    "StructuredLogger",
    "cancel_and_wait",
    "configure_logging",
    "create_logged_task",
    "get_config_manager",
    "get_module_logger",
]
