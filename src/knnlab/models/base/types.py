# ============================================
# KNNLab - src/knnlab/models/base/types.py
# Core value types shared by the neighbor, voting and evaluation layers
# ============================================

import math
import numbers
from enum import Enum
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Union

from ...utils.exceptions import InvalidParameterError

# ============================================
# Enums
# ============================================

class _NamedEnum(str, Enum):
    """String enum that can be looked up by case-insensitive name or value"""

    @classmethod
    def from_name(cls, name: Union[str, "_NamedEnum"]):
        if isinstance(name, cls):
            return name
        if isinstance(name, str):
            wanted = name.strip().lower()
            for member in cls:
                if member.value.lower() == wanted or member.name.lower() == wanted:
                    return member
        raise InvalidParameterError(
            f"Unknown {cls.__name__}: {name!r}. Expected one of {[m.value for m in cls]}",
            parameter_name=cls.__name__,
            provided_value=name
        )

    def __str__(self) -> str:
        return self.value

class ClassType(_NamedEnum):
    """Class labels, declared in canonical voting order"""
    A = "A"
    B = "B"
    C = "C"

class MetricKind(_NamedEnum):
    """Supported distance metrics"""
    EUCLIDEAN = "Euclidean"
    MANHATTAN = "Manhattan"
    CHEBYSHEV = "Chebyshev"
    MINKOWSKI = "Minkowski"
    HAMMING = "Hamming"
    COSINE = "Cosine"
    JACCARD = "Jaccard"

class VotingKind(_NamedEnum):
    """Vote aggregation strategies"""
    MAJORITY = "Majority"
    WEIGHTED = "Weighted"

class DatasetType(_NamedEnum):
    """Continuous coordinates or grid-snapped categorical coordinates"""
    CONTINUOUS = "Continuous"
    CATEGORICAL = "Categorical"

CLASS_ORDER = tuple(ClassType)

# Winner value reported when two or more classes share the top score
TIE = "Tie"

Winner = Union[ClassType, str, None]

# ============================================
# Points
# ============================================

@dataclass(frozen=True)
class QueryPoint:
    """Movable query point in the [0, 100] x [0, 100] canvas"""
    x: float
    y: float

@dataclass(frozen=True)
class LabeledPoint:
    """A dataset point. Ids must be unique within a dataset."""
    id: int
    x: float
    y: float
    label: ClassType

    def __post_init__(self):
        if not isinstance(self.label, ClassType):
            object.__setattr__(self, 'label', ClassType.from_name(self.label))

@dataclass(frozen=True)
class ScoredPoint(LabeledPoint):
    """A dataset point together with its distance to one query"""
    distance: float = 0.0

    @classmethod
    def from_point(cls, point: LabeledPoint, distance: float) -> "ScoredPoint":
        return cls(id=point.id, x=point.x, y=point.y, label=point.label, distance=float(distance))

Dataset = Sequence[LabeledPoint]

# ============================================
# Configuration
# ============================================

DEFAULT_MINKOWSKI_P = 3.0

@dataclass(frozen=True)
class MetricConfig:
    """
    Distance configuration for one neighbor search

    Attributes:
        metric: Distance metric
        p: Minkowski exponent, must be > 0 (ignored by the other metrics)
        use_scaling: Min-max scale dataset and query before measuring
        simulate_imbalance: Stretch the Y axis by 50x before measuring
    """
    metric: MetricKind = MetricKind.EUCLIDEAN
    p: float = DEFAULT_MINKOWSKI_P
    use_scaling: bool = False
    simulate_imbalance: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'metric', MetricKind.from_name(self.metric))
        if isinstance(self.p, bool) or not isinstance(self.p, numbers.Real):
            raise InvalidParameterError(
                "Minkowski p must be a number", parameter_name='p', provided_value=self.p
            )
        if not math.isfinite(self.p) or self.p <= 0:
            raise InvalidParameterError(
                f"Minkowski p must be a finite number > 0, got {self.p}",
                parameter_name='p', provided_value=self.p
            )
        object.__setattr__(self, 'p', float(self.p))

# ============================================
# Results
# ============================================

@dataclass(frozen=True)
class ClassificationResult:
    """
    Outcome of a vote over a neighbor list

    Attributes:
        class_scores: Score per class, every class present
        total_score: Sum of all class scores
        winner: Winning class, TIE, or None for an empty neighbor list
        leader: Class holding the top score when the tie was declared
    """
    class_scores: Dict[ClassType, float]
    total_score: float
    winner: Winner
    leader: Optional[ClassType] = None

    @property
    def is_tie(self) -> bool:
        return self.winner == TIE

    def score_share(self, label: Union[ClassType, str]) -> float:
        """Share of the total score held by one class, in percent"""
        if self.total_score == 0:
            return 0.0
        return self.class_scores[ClassType.from_name(label)] / self.total_score * 100

@dataclass(frozen=True)
class KErrorPoint:
    """Leave-one-out error rate for one value of k"""
    k: int
    error_rate: float

    @property
    def accuracy(self) -> float:
        return 1.0 - self.error_rate
