"""Configuration and data models for the fuzzy join engine."""

from dataclasses import dataclass
from typing import List, Tuple, Optional
from enum import Enum

import numpy as np
import pandas as pd

from fuzzyjoin.errors import ConfigurationError, StrategyError

STRING_METHODS = (
    'osa', 'lv', 'dl', 'hamming', 'lcs',
    'qgram', 'cosine', 'jaccard', 'jw', 'soundex'
)
DISTANCE_METHODS = ('euclidean', 'manhattan')
GEO_METHODS = ('haversine', 'cosine', 'vincentysphere')
GEO_UNITS = {'miles': 1609.344, 'km': 1000.0}


class JoinMode(str, Enum):
    """Relational semantics of a join."""
    INNER = "inner"
    LEFT = "left"
    RIGHT = "right"
    FULL = "full"
    SEMI = "semi"
    ANTI = "anti"

    @property
    def filters_left(self) -> bool:
        """Whether the output only reports presence of left rows."""
        return self in (JoinMode.SEMI, JoinMode.ANTI)


@dataclass(frozen=True)
class ColumnSpec:
    """Ordered (left column, right column) pairs to match on."""
    left: Tuple[str, ...]
    right: Tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(self, 'left', tuple(self.left))
        object.__setattr__(self, 'right', tuple(self.right))
        if len(self.left) != len(self.right):
            raise ConfigurationError(
                f"Column spec sides differ in length: "
                f"{len(self.left)} left vs {len(self.right)} right"
            )
        if not self.left:
            raise ConfigurationError("Column spec needs at least one column pair")

    def __len__(self) -> int:
        return len(self.left)

    def pairs(self) -> List[Tuple[str, str]]:
        return list(zip(self.left, self.right))


@dataclass
class MatchResult:
    """Outcome of one matcher call over a block of left and right values."""
    matches: np.ndarray
    distances: Optional[np.ndarray] = None


@dataclass
class CombinedMatch:
    """Match relation over all column pairs, with optional distances."""
    matches: np.ndarray
    distances: Optional[np.ndarray] = None


@dataclass
class PairSet:
    """Row index pairs making up a join result; <NA> marks a missing side."""
    left: pd.arrays.IntegerArray
    right: pd.arrays.IntegerArray

    def __len__(self) -> int:
        return len(self.left)

    def positions(self) -> Tuple[np.ndarray, np.ndarray]:
        """Row positions as int64 arrays, -1 standing for a missing side."""
        return (
            self.left.to_numpy(dtype='int64', na_value=-1),
            self.right.to_numpy(dtype='int64', na_value=-1)
        )


def _check_threshold(name: str, value: float) -> None:
    if value is None or pd.isna(value) or value < 0:
        raise StrategyError(f"{name} must be a non-negative number, got {value!r}")


@dataclass(frozen=True)
class StringDistConfig:
    """Configuration for string distance matching."""
    max_dist: float = 2
    method: str = 'osa'
    ignore_case: bool = False
    q: int = 1       # q-gram size for qgram, cosine and jaccard
    p: float = 0.0   # Winkler prefix weight for jw

    def __post_init__(self):
        if self.method not in STRING_METHODS:
            raise StrategyError(
                f"Unknown string distance method: {self.method!r}. "
                f"Choose one of {', '.join(STRING_METHODS)}"
            )
        _check_threshold('max_dist', self.max_dist)
        if self.q < 1:
            raise StrategyError(f"q must be at least 1, got {self.q}")
        if not 0 <= self.p <= 0.25:
            raise StrategyError(f"p must lie in [0, 0.25], got {self.p}")


@dataclass(frozen=True)
class RegexConfig:
    """Configuration for regular expression matching."""
    ignore_case: bool = False
    pattern_side: str = 'right'

    def __post_init__(self):
        if self.pattern_side not in ('left', 'right'):
            raise StrategyError(
                f"pattern_side must be 'left' or 'right', got {self.pattern_side!r}"
            )


@dataclass(frozen=True)
class DifferenceConfig:
    """Configuration for absolute numeric difference matching."""
    max_dist: float = 1.0

    def __post_init__(self):
        _check_threshold('max_dist', self.max_dist)


@dataclass(frozen=True)
class DistanceConfig:
    """Configuration for multi-column Euclidean/Manhattan matching."""
    max_dist: float = 1.0
    method: str = 'euclidean'

    def __post_init__(self):
        if self.method not in DISTANCE_METHODS:
            raise StrategyError(
                f"Unknown distance method: {self.method!r}. "
                f"Choose one of {', '.join(DISTANCE_METHODS)}"
            )
        _check_threshold('max_dist', self.max_dist)


@dataclass(frozen=True)
class GeoConfig:
    """Configuration for great-circle distance matching."""
    max_dist: float = 1.0
    method: str = 'haversine'
    unit: str = 'miles'
    radius: float = 6378137.0  # metres

    def __post_init__(self):
        if self.method not in GEO_METHODS:
            raise StrategyError(
                f"Unknown geographic distance method: {self.method!r}. "
                f"Choose one of {', '.join(GEO_METHODS)}"
            )
        if self.unit not in GEO_UNITS:
            raise StrategyError(
                f"Unknown distance unit: {self.unit!r}. "
                f"Choose one of {', '.join(GEO_UNITS)}"
            )
        _check_threshold('max_dist', self.max_dist)

    @property
    def unit_length(self) -> float:
        """Length of one output unit in metres."""
        return GEO_UNITS[self.unit]


@dataclass(frozen=True)
class IntervalConfig:
    """Configuration for closed interval overlap matching."""
    maxgap: float = 0.0
    minoverlap: float = 0.0

    def __post_init__(self):
        _check_threshold('maxgap', self.maxgap)
        _check_threshold('minoverlap', self.minoverlap)
        if self.maxgap > 0 and self.minoverlap > 0:
            raise StrategyError("Set at most one of maxgap and minoverlap")

    @property
    def required_overlap(self) -> float:
        """Smallest accepted min(ends) - max(starts); negative allows a gap."""
        return self.minoverlap if self.minoverlap > 0 else -self.maxgap
