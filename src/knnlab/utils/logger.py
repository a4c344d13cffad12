# ============================================
# KNNLab - src/knnlab/utils/logger.py
# The 'knnlab' logger tree, configured from config/logging.yaml
# ============================================

import sys
import logging
import logging.config
from typing import Any, Dict, Optional

from .config_loader import get_config

ROOT_LOGGER_NAME = "knnlab"

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
CONSOLE_DATEFMT = '%Y-%m-%d %H:%M:%S'

class KNNLabLogger:
    """
    Owns the 'knnlab' logger tree

    The logging configuration is applied with dictConfig once, when the
    package is imported. A missing or rejected configuration leaves a
    single stdout handler on the package logger instead.
    """

    def __init__(self, logging_config: Optional[Dict[str, Any]] = None):
        self._loggers: Dict[str, logging.Logger] = {}

        if logging_config is None:
            logging_config = get_config('logging')
        self.configured_from = self._configure(logging_config)

    def _configure(self, logging_config: Dict[str, Any]) -> str:
        """Apply the dictConfig mapping; returns 'config' or 'console'"""
        if logging_config:
            try:
                logging.config.dictConfig(logging_config)
                return 'config'
            except (ValueError, TypeError, AttributeError, ImportError) as e:
                print(f"Warning: logging config rejected, using console output: {e}", file=sys.stderr)

        self._install_console_handler()
        return 'console'

    def _install_console_handler(self):
        package_logger = logging.getLogger(ROOT_LOGGER_NAME)
        package_logger.handlers.clear()

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=CONSOLE_DATEFMT))

        package_logger.addHandler(handler)
        package_logger.setLevel(logging.INFO)

    def get_logger(self, name: str) -> logging.Logger:
        """
        Logger for one component, under the package namespace

        Args:
            name: Dotted component name, e.g. 'models.neighbors.selector'
        """
        if name not in self._loggers:
            full_name = name if name.split('.')[0] == ROOT_LOGGER_NAME else f"{ROOT_LOGGER_NAME}.{name}"
            self._loggers[name] = logging.getLogger(full_name)

        return self._loggers[name]

# Global logger instance
logger_system = KNNLabLogger()

def get_logger(name: str) -> logging.Logger:
    """Logger for one component, under the package namespace"""
    return logger_system.get_logger(name)
