# ============================================
# KNNLab - src/knnlab/utils/validators.py
# Dataset and parameter validation
# ============================================

import math
import numbers
import numpy as np
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from .exceptions import DataValidationError
from .logger import get_logger

logger = get_logger('validators')

# Canonical canvas bounds shared by every collaborator
CANVAS_MIN = 0.0
CANVAS_MAX = 100.0

# ============================================
# Validation Results
# ============================================

@dataclass
class ValidationResult:
    """Errors block a run; warnings are only reported"""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, error: str):
        self.errors.append(error)

    def add_warning(self, warning: str):
        self.warnings.append(warning)

    def merge(self, other: 'ValidationResult'):
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)

    def raise_if_invalid(self):
        """Raise DataValidationError listing every error"""
        if self.errors:
            raise DataValidationError(f"Validation failed: {'; '.join(self.errors)}", validation_errors=self.errors)

    def __str__(self) -> str:
        parts = [f"Validation: {'VALID' if self.is_valid else 'INVALID'}"]
        if self.errors:
            parts.append(f"Errors: {', '.join(self.errors)}")
        if self.warnings:
            parts.append(f"Warnings: {', '.join(self.warnings)}")
        return " | ".join(parts)

class BaseValidator:
    """Strict mode turns a validator's warnings into errors"""

    def __init__(self, strict_mode: bool = False):
        self.strict_mode = strict_mode

    def _report(self, result: ValidationResult, message: str):
        if self.strict_mode:
            result.add_error(message)
        else:
            result.add_warning(message)

def _is_integer(value: Any) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)

def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)

# ============================================
# Dataset Validation
# ============================================

class DatasetValidator(BaseValidator):
    """
    Checks the caller-side contract of a labeled dataset.

    Duplicate ids break leave-one-out exclusion and non-finite coordinates
    break every metric, so both are errors. Points outside the canvas still
    compute fine and are only reported as warnings, or errors in strict mode.
    """

    def validate(self, dataset: Sequence[Any]) -> ValidationResult:
        result = ValidationResult()

        if dataset is None:
            result.add_error("Dataset must not be None")
            return result

        seen_ids = set()
        duplicates = set()
        out_of_bounds = []

        for point in dataset:
            if point.id in seen_ids:
                duplicates.add(point.id)
            seen_ids.add(point.id)

            if not (math.isfinite(point.x) and math.isfinite(point.y)):
                result.add_error(f"Point {point.id} has non-finite coordinates ({point.x}, {point.y})")
                continue

            if not (CANVAS_MIN <= point.x <= CANVAS_MAX and CANVAS_MIN <= point.y <= CANVAS_MAX):
                out_of_bounds.append(point.id)

        if duplicates:
            result.add_error(f"Duplicate point ids: {sorted(duplicates)}")

        if out_of_bounds:
            self._report(result, f"{len(out_of_bounds)} points outside the [0, 100] canvas: {out_of_bounds}")

        if not result.is_valid:
            logger.warning(f"Dataset validation failed: {'; '.join(result.errors)}")

        return result

# ============================================
# Parameter Validation
# ============================================

class ParameterValidator(BaseValidator):
    """Validate k-NN run parameters"""

    def validate_knn_params(self, k: Any, p: Any = 3.0, max_k: Any = 15,
                            dataset_size: Optional[int] = None) -> ValidationResult:
        """
        Validate neighbor count, Minkowski exponent and elbow range

        Args:
            k: Number of neighbors (integer >= 0)
            p: Minkowski exponent (> 0)
            max_k: Largest k for the elbow curve (integer >= 1)
            dataset_size: When given, a k larger than this is reported

        Returns:
            ValidationResult with validation status
        """
        result = ValidationResult()

        if not _is_integer(k):
            result.add_error("k must be an integer")
        elif k < 0:
            result.add_error("k must be non-negative")
        elif dataset_size is not None and k > dataset_size:
            self._report(result, f"k={k} exceeds dataset size {dataset_size}; all points will be selected")

        if not _is_number(p):
            result.add_error("Minkowski p must be numeric")
        elif not math.isfinite(p) or p <= 0:
            result.add_error("Minkowski p must be a finite number > 0")

        if not _is_integer(max_k):
            result.add_error("max_k must be an integer")
        elif max_k < 1:
            result.add_error("max_k must be at least 1")

        return result

def validate_dataset(dataset: Sequence[Any], strict: bool = False) -> ValidationResult:
    """Validate a dataset and raise DataValidationError on errors"""
    result = DatasetValidator(strict_mode=strict).validate(dataset)
    result.raise_if_invalid()

    for warning in result.warnings:
        logger.warning(warning)

    return result

def create_validation_report(results: List[ValidationResult], title: str = "Validation Report") -> str:
    """Multi-line summary of several validation results, one numbered block each"""
    passed = sum(result.is_valid for result in results)
    lines = [
        title,
        "=" * len(title),
        f"Summary: {passed}/{len(results)} validations passed",
        f"Errors: {sum(len(r.errors) for r in results)}, warnings: {sum(len(r.warnings) for r in results)}",
    ]

    for number, result in enumerate(results, 1):
        lines.append(f"{number}. {'PASS' if result.is_valid else 'FAIL'}")
        lines.extend(f"   ERROR: {error}" for error in result.errors)
        lines.extend(f"   WARNING: {warning}" for warning in result.warnings)

    return "\n".join(lines)
