"""
Centralized logging configuration for TrackLife.
Provides component-specific loggers with separate log files.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Dict, Any
from datetime import datetime

from ..config import get_config, config_manager


DETAILED_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s'
SIMPLE_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


class ComponentLogger:
    """Manages component-specific logging with separate files."""

    _loggers: Dict[str, logging.Logger] = {}
    _initialized = False
    _log_dir: Optional[Path] = None
    _to_file = True
    _debug = False

    # Component definitions with their log levels
    COMPONENTS = {
        'storage': {'level': logging.INFO, 'file': 'storage.log'},
        'api': {'level': logging.INFO, 'file': 'api.log'},
        'aggregation': {'level': logging.INFO, 'file': 'aggregation.log'},
        'cli': {'level': logging.INFO, 'file': 'cli.log'},
        'main': {'level': logging.INFO, 'file': 'main.log'},
        'error': {'level': logging.ERROR, 'file': 'errors.log'},  # Centralized error log
    }

    @classmethod
    def initialize(cls, log_dir: Optional[str] = None, debug: bool = False) -> None:
        """
        Initialize the logging system with component-specific loggers.

        Args:
            log_dir: Directory for log files. Defaults to the configured log directory
            debug: Enable debug logging for all components
        """
        if cls._initialized:
            return

        config = get_config()
        debug = debug or config.app.log_level.upper() == "DEBUG"
        cls._debug = debug
        cls._to_file = config.app.log_to_file

        if cls._to_file:
            base_dir = Path(log_dir) if log_dir else config_manager.get_log_directory()
            session_dir = datetime.now().strftime("%Y%m%d_%H%M%S")
            cls._log_dir = base_dir / session_dir
            cls._log_dir.mkdir(parents=True, exist_ok=True)

        root_level = logging.DEBUG if debug else logging.INFO

        for component_name, component_config in cls.COMPONENTS.items():
            level = logging.DEBUG if debug else component_config['level']
            cls._loggers[component_name] = cls._build_logger(
                component_name, level, component_config['file']
            )

        if cls._to_file:
            # A unified log file for all components
            unified_logger = logging.getLogger('tracklife.unified')
            unified_logger.handlers.clear()
            unified_logger.setLevel(root_level)
            unified_logger.propagate = False

            unified_handler = logging.handlers.RotatingFileHandler(
                cls._log_dir / 'unified.log',
                maxBytes=20 * 1024 * 1024,  # 20MB
                backupCount=3,
                encoding='utf-8'
            )
            unified_handler.setLevel(root_level)
            unified_handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
            unified_logger.addHandler(unified_handler)
            cls._loggers['unified'] = unified_logger

            for name, logger in cls._loggers.items():
                if name != 'unified':
                    logger.addHandler(unified_handler)

        # Mark as initialized before logging to avoid recursion
        cls._initialized = True

        main_logger = cls._loggers['main']
        main_logger.debug("TrackLife logging initialized (log directory: %s)", cls._log_dir)

    @classmethod
    def _build_logger(cls, component: str, level: int, filename: str) -> logging.Logger:
        """Create one component logger with its file and console handlers."""
        logger = logging.getLogger(f"tracklife.{component}")
        logger.handlers.clear()
        logger.setLevel(level)

        if not cls._to_file:
            # Without log files, let records reach the root logger
            logger.propagate = True
            return logger

        logger.propagate = False

        file_handler = logging.handlers.RotatingFileHandler(
            cls._log_dir / filename,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)

        # Console handler for errors
        if component in ('error', 'main', 'cli'):
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(logging.ERROR)
            console_handler.setFormatter(logging.Formatter(SIMPLE_FORMAT, datefmt='%H:%M:%S'))
            logger.addHandler(console_handler)

        return logger

    @classmethod
    def get_logger(cls, component: str) -> logging.Logger:
        """
        Get a logger for a specific component.

        Args:
            component: Component name (storage, api, aggregation, cli, ...)
                      Can also be a module path like 'tracklife.store.domain_store'

        Returns:
            Logger instance for the component
        """
        if not cls._initialized:
            cls.initialize()

        if component.startswith('tracklife.') or component == 'tracklife':
            component = cls._component_for_module(component)

        if component not in cls._loggers:
            level = logging.DEBUG if cls._debug else logging.INFO
            logger = cls._build_logger(component, level, f'{component}.log')
            if 'unified' in cls._loggers:
                for handler in cls._loggers['unified'].handlers:
                    logger.addHandler(handler)
            cls._loggers[component] = logger

        return cls._loggers[component]

    @staticmethod
    def _component_for_module(module_name: str) -> str:
        """Map a module path to the component it logs under."""
        parts = module_name.split('.')
        if len(parts) < 2:
            return 'main'
        if parts[1] in ('storage', 'store', 'db'):
            return 'storage'
        if parts[1] in ('api', 'main'):
            return 'api'
        if parts[1] == 'aggregation':
            return 'aggregation'
        if parts[1] == 'cli':
            return 'cli'
        return 'main'

    @classmethod
    def log_exception(cls, component: str, exc: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Log an exception with context to both component and error logs.

        Args:
            component: Component where the exception occurred
            exc: The exception to log
            context: Additional context information
        """
        component_logger = cls.get_logger(component)
        error_logger = cls.get_logger('error')

        context_str = ""
        if context:
            context_str = " | Context: " + ", ".join(f"{k}={v}" for k, v in context.items())

        component_logger.error(f"Exception in {component}: {type(exc).__name__}: {exc}{context_str}", exc_info=True)
        if error_logger is not component_logger:
            error_logger.error(f"[{component}] {type(exc).__name__}: {exc}{context_str}", exc_info=True)

    @classmethod
    def get_log_directory(cls) -> Optional[Path]:
        """Get the current log directory path."""
        return cls._log_dir

    @classmethod
    def shutdown(cls) -> None:
        """Close every handler and forget the loggers so the next call re-initializes."""
        for logger in cls._loggers.values():
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
        cls._loggers = {}
        cls._initialized = False
        cls._log_dir = None


# Convenience functions
def get_logger(component: str) -> logging.Logger:
    """Get a logger for a specific component."""
    return ComponentLogger.get_logger(component)


def get_module_logger(module_name: str) -> logging.Logger:
    """
    Get a logger for a module using its __name__.
    This automatically maps module paths to appropriate components.

    Example:
        logger = get_module_logger(__name__)  # Works from any module
    """
    return ComponentLogger.get_logger(module_name)


def initialize_logging(log_dir: Optional[str] = None, debug: bool = False) -> None:
    """Initialize the logging system."""
    ComponentLogger.initialize(log_dir=log_dir, debug=debug)


def log_exception(component: str, exc: Exception, context: Optional[Dict[str, Any]] = None) -> None:
    """Log an exception with context."""
    ComponentLogger.log_exception(component, exc, context)


def get_log_directory() -> Optional[Path]:
    """Get the current log directory path."""
    return ComponentLogger.get_log_directory()
