# ============================================
# KNNLab - src/knnlab/utils/exceptions.py
# Errors raised at the package boundary
# ============================================

import re
import json
from typing import Any, Dict, List, Optional

def _error_code(class_name: str) -> str:
    """KNNLabBaseException -> KNN_LAB_BASE_ERROR"""
    snake = re.sub('(.)([A-Z][a-z]+)', r'\1_\2', class_name)
    snake = re.sub('([a-z0-9])([A-Z])', r'\1_\2', snake).upper()
    return snake.replace('_EXCEPTION', '_ERROR')

class KNNLabBaseException(Exception):
    """
    Base class for every error KNNLab raises on purpose

    Each error carries an error code derived from its class name, a
    severity that picks the level log_exception logs at, and a context
    dict with the offending values (parameter name, config name, the
    individual validation failures).
    """

    default_severity = "error"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None,
                 severity: Optional[str] = None, cause: Optional[Exception] = None):
        super().__init__(message)

        self.message = message
        self.error_code = _error_code(type(self).__name__)
        self.severity = severity or self.default_severity
        self.cause = cause
        self.context = {'exception_type': type(self).__name__, **(context or {})}

    def add_context(self, **kwargs):
        self.context.update(kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'error_code': self.error_code,
            'message': self.message,
            'severity': self.severity,
            'context': self.context,
            'cause': repr(self.cause) if self.cause is not None else None,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str, indent=2)

# ============================================
# Dataset Errors
# ============================================

class DataError(KNNLabBaseException):
    """Base class for dataset errors"""

class DataValidationError(DataError):
    """A dataset breaks the caller contract: duplicate ids or non-finite coordinates"""

    def __init__(self, message: str, validation_errors: Optional[List[str]] = None, **kwargs):
        context = kwargs.pop('context', None) or {}
        if validation_errors:
            context['validation_errors'] = list(validation_errors)
        super().__init__(message, context=context, **kwargs)

# ============================================
# Parameter Errors
# ============================================

class BusinessLogicError(KNNLabBaseException):
    """A k-NN operation was asked for something it cannot do"""

    default_severity = "warning"

class InvalidParameterError(BusinessLogicError):
    """Bad k, Minkowski p, count or enum name"""

    def __init__(self, message: str, parameter_name: Optional[str] = None, provided_value: Any = None, **kwargs):
        context = kwargs.pop('context', None) or {}
        if parameter_name:
            context['parameter_name'] = parameter_name
        if provided_value is not None:
            context['provided_value'] = provided_value
        super().__init__(message, context=context, **kwargs)

# ============================================
# Configuration Errors
# ============================================

class ConfigurationError(KNNLabBaseException):
    """knn_config or logging configuration is unusable"""

    default_severity = "critical"

    def __init__(self, message: str, config_name: Optional[str] = None, **kwargs):
        context = kwargs.pop('context', None) or {}
        if config_name:
            context['config_name'] = config_name
        super().__init__(message, context=context, **kwargs)

def log_exception(exception: Exception, logger=None):
    """Log a KNNLab error at its severity level, anything else as an unexpected error"""
    if logger is None:
        from .logger import get_logger
        logger = get_logger('exceptions')

    if not isinstance(exception, KNNLabBaseException):
        logger.error(f"Unexpected exception: {exception}", exc_info=True)
        return

    log_func = getattr(logger, exception.severity, logger.error)
    log_func(
        f"[{exception.error_code}] {exception.message}",
        extra={'error_context': exception.context},
        exc_info=exception.severity in ('error', 'critical')
    )
