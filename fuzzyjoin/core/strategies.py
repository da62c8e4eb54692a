"""Pluggable matcher strategies and their registry."""

import logging
from abc import ABC, abstractmethod
from functools import reduce
from typing import Any, Callable, Dict, List, Optional, Protocol, Type

import numpy as np
import pandas as pd
import regex as re
from scipy.spatial.distance import cdist

from fuzzyjoin.config.models import (
    MatchResult,
    StringDistConfig,
    RegexConfig,
    DifferenceConfig,
    DistanceConfig,
    GeoConfig,
    IntervalConfig
)
from fuzzyjoin.core import geo
from fuzzyjoin.core.analyzer import QGramAnalyzer, QGRAM_METHODS
from fuzzyjoin.core.metrics import pairwise_distances
from fuzzyjoin.errors import ConfigurationError, StrategyError


class Matcher(Protocol):
    """Protocol defining the interface for matchers."""
    def match(self, left_values: np.ndarray, right_values: np.ndarray) -> MatchResult:
        """Compare every left value with every right value."""
        ...


def _make_config(config_class: type, config: Any, params: Dict[str, Any]) -> Any:
    if config is not None:
        if params:
            raise StrategyError(
                "Pass either a config object or keyword parameters, not both"
            )
        if not isinstance(config, config_class):
            raise StrategyError(
                f"Expected {config_class.__name__}, got {type(config).__name__}"
            )
        return config
    try:
        return config_class(**params)
    except TypeError as e:
        raise StrategyError(f"Invalid parameters for {config_class.__name__}: {e}") from e


def _as_float(values: np.ndarray) -> np.ndarray:
    """Coerce a 1-D block of values to float, missing values to NaN."""
    try:
        numbers = pd.to_numeric(pd.Series(np.asarray(values, dtype=object)))
    except (ValueError, TypeError) as e:
        raise StrategyError(f"Numeric matching needs numeric columns: {e}") from e
    return numbers.to_numpy(dtype=float, na_value=np.nan)


def _as_float_matrix(values: np.ndarray) -> np.ndarray:
    values = np.asarray(values, dtype=object)
    columns = [_as_float(values[:, k]) for k in range(values.shape[1])]
    return np.column_stack(columns).reshape(values.shape[0], values.shape[1])


class BaseMatcher(ABC):
    """
    Base class for matchers.

    Single-column matchers receive the 1-D values of one column pair.
    Multi-column matchers receive 2-D blocks of shape (rows, pairs) holding
    every column pair of the join at once.
    """

    multi_column = False
    # Number of column pairs a multi-column matcher needs, None for any
    required_columns: Optional[int] = None
    # Name of the distance this matcher reports, None if it has none
    metric: Optional[str] = None

    @abstractmethod
    def match(self, left_values: np.ndarray, right_values: np.ndarray) -> MatchResult:
        """Compare every left value with every right value."""
        pass

    def check_columns(self, n_columns: int) -> None:
        """Reject a column pair count this matcher cannot handle."""
        if self.required_columns is not None and n_columns != self.required_columns:
            raise StrategyError(
                f"{type(self).__name__} needs exactly {self.required_columns} "
                f"column pairs, got {n_columns}"
            )

    def reduce_distances(self, distances: List[np.ndarray]) -> np.ndarray:
        """Combine per-column distances into one value per cell."""
        return reduce(np.maximum, distances)

    def _handle_null(self, values: np.ndarray) -> np.ndarray:
        """Mask of values that are not missing."""
        return ~np.asarray(pd.isna(np.asarray(values, dtype=object)), dtype=bool)


class StringDistMatcher(BaseMatcher):
    """Match strings within a maximum edit or q-gram distance."""

    def __init__(self, config: Optional[StringDistConfig] = None, **params: Any):
        self.config = _make_config(StringDistConfig, config, params)
        self.metric = f"stringdist:{self.config.method}"

    def _prepare(self, values: np.ndarray) -> List[str]:
        strings = [str(v) for v in values]
        if self.config.ignore_case:
            strings = [s.lower() for s in strings]
        return strings

    def match(self, left_values: np.ndarray, right_values: np.ndarray) -> MatchResult:
        left_valid = self._handle_null(left_values)
        right_valid = self._handle_null(right_values)
        left_strings = self._prepare(np.asarray(left_values, dtype=object)[left_valid])
        right_strings = self._prepare(np.asarray(right_values, dtype=object)[right_valid])

        if self.config.method in QGRAM_METHODS:
            block = QGramAnalyzer(self.config.q).distance_matrix(
                left_strings, right_strings, self.config.method
            )
        else:
            block = pairwise_distances(
                left_strings, right_strings, self.config.method, p=self.config.p
            )

        distances = np.full((len(left_values), len(right_values)), np.nan)
        distances[np.ix_(left_valid, right_valid)] = block
        return MatchResult(distances <= self.config.max_dist, distances)


class RegexMatcher(BaseMatcher):
    """Match when the subject value contains a match for the pattern value."""

    def __init__(self, config: Optional[RegexConfig] = None, **params: Any):
        self.config = _make_config(RegexConfig, config, params)
        self.flags = re.IGNORECASE if self.config.ignore_case else 0

    def _compile(self, pattern: Any):
        try:
            return re.compile(str(pattern), self.flags)
        except re.error as e:
            raise StrategyError(f"Invalid regular expression {pattern!r}: {e}") from e

    def match(self, left_values: np.ndarray, right_values: np.ndarray) -> MatchResult:
        if self.config.pattern_side == 'right':
            subjects, patterns = left_values, right_values
        else:
            subjects, patterns = right_values, left_values

        subject_valid = self._handle_null(subjects)
        pattern_valid = self._handle_null(patterns)
        found = np.zeros((len(subjects), len(patterns)), dtype=bool)

        for j, pattern in enumerate(patterns):
            if not pattern_valid[j]:
                continue
            compiled = self._compile(pattern)
            for i, subject in enumerate(subjects):
                if subject_valid[i]:
                    found[i, j] = compiled.search(str(subject)) is not None

        if self.config.pattern_side == 'left':
            found = found.T
        return MatchResult(found)


class DifferenceMatcher(BaseMatcher):
    """Match numbers whose absolute difference is within `max_dist`."""

    metric = 'difference'

    def __init__(self, config: Optional[DifferenceConfig] = None, **params: Any):
        self.config = _make_config(DifferenceConfig, config, params)

    def match(self, left_values: np.ndarray, right_values: np.ndarray) -> MatchResult:
        distances = np.abs(np.subtract.outer(_as_float(left_values), _as_float(right_values)))
        return MatchResult(distances <= self.config.max_dist, distances)


class DistanceMatcher(BaseMatcher):
    """Match rows within a Euclidean or Manhattan distance over all pairs."""

    multi_column = True

    def __init__(self, config: Optional[DistanceConfig] = None, **params: Any):
        self.config = _make_config(DistanceConfig, config, params)
        self.metric = f"distance:{self.config.method}"

    def match(self, left_values: np.ndarray, right_values: np.ndarray) -> MatchResult:
        left_points = _as_float_matrix(left_values)
        right_points = _as_float_matrix(right_values)
        if len(left_points) == 0 or len(right_points) == 0:
            distances = np.zeros((len(left_points), len(right_points)))
        else:
            scipy_metric = 'cityblock' if self.config.method == 'manhattan' else 'euclidean'
            distances = cdist(left_points, right_points, metric=scipy_metric)
        return MatchResult(distances <= self.config.max_dist, distances)


class GeoMatcher(BaseMatcher):
    """Match (longitude, latitude) points within a great-circle distance."""

    multi_column = True
    required_columns = 2

    def __init__(self, config: Optional[GeoConfig] = None, **params: Any):
        self.config = _make_config(GeoConfig, config, params)
        self.metric = f"geo:{self.config.unit}"

    def match(self, left_values: np.ndarray, right_values: np.ndarray) -> MatchResult:
        self.check_columns(np.shape(left_values)[1])
        left_points = _as_float_matrix(left_values)
        right_points = _as_float_matrix(right_values)

        metres = geo.distance_matrix(
            left_points, right_points, self.config.method, self.config.radius
        )
        distances = metres / self.config.unit_length
        return MatchResult(distances <= self.config.max_dist, distances)


class IntervalMatcher(BaseMatcher):
    """Match closed [start, end] intervals that overlap."""

    multi_column = True
    required_columns = 2

    def __init__(self, config: Optional[IntervalConfig] = None, **params: Any):
        self.config = _make_config(IntervalConfig, config, params)

    @staticmethod
    def _bounds(values: np.ndarray, side: str):
        bounds = _as_float_matrix(values)
        starts, ends = bounds[:, 0], bounds[:, 1]
        with np.errstate(invalid='ignore'):
            reversed_rows = np.flatnonzero(starts > ends)
        if len(reversed_rows):
            raise StrategyError(
                f"Interval start exceeds end in {side} rows: "
                f"{', '.join(map(str, reversed_rows[:10]))}"
            )
        return starts, ends

    def overlap_matches(self, left_values: np.ndarray, right_values: np.ndarray) -> np.ndarray:
        left_starts, left_ends = self._bounds(left_values, 'left')
        right_starts, right_ends = self._bounds(right_values, 'right')
        overlap = (
            np.minimum.outer(left_ends, right_ends)
            - np.maximum.outer(left_starts, right_starts)
        )
        return overlap >= self.config.required_overlap

    def match(self, left_values: np.ndarray, right_values: np.ndarray) -> MatchResult:
        self.check_columns(np.shape(left_values)[1])
        return MatchResult(self.overlap_matches(left_values, right_values))


class GenomeMatcher(IntervalMatcher):
    """Match (chromosome, start, end) intervals on the same chromosome."""

    required_columns = 3

    def match(self, left_values: np.ndarray, right_values: np.ndarray) -> MatchResult:
        self.check_columns(np.shape(left_values)[1])
        left_values = np.asarray(left_values, dtype=object)
        right_values = np.asarray(right_values, dtype=object)

        # Shared factor codes; missing keys get -1 and never match
        codes, _ = pd.factorize(pd.Series(
            np.concatenate([left_values[:, 0], right_values[:, 0]])
        ))
        left_codes, right_codes = codes[:len(left_values)], codes[len(left_values):]
        same_key = (left_codes[:, None] == right_codes[None, :]) & (left_codes[:, None] >= 0)

        overlaps = self.overlap_matches(left_values[:, 1:], right_values[:, 1:])
        return MatchResult(same_key & overlaps)


class CallableMatcher(BaseMatcher):
    """
    Adapt a plain function into a matcher.

    By default `func(left_values, right_values)` is called once and must
    return a boolean matrix, or a (matches, distances) tuple. With
    `elementwise=True` it is called per value pair and returns a bool or a
    (bool, distance) tuple.
    """

    def __init__(
        self,
        func: Callable[..., Any],
        multi_column: bool = False,
        elementwise: bool = False,
        metric: Optional[str] = None
    ):
        if not callable(func):
            raise ConfigurationError(f"Matcher function is not callable: {func!r}")
        self.func = func
        self.multi_column = multi_column
        self.elementwise = elementwise
        self.metric = metric or f"callable:{getattr(func, '__name__', repr(func))}"

    def _call_elementwise(self, left_values: np.ndarray, right_values: np.ndarray):
        n, m = len(left_values), len(right_values)
        matches = np.zeros((n, m), dtype=bool)
        distances = None
        for i in range(n):
            for j in range(m):
                outcome = self.func(left_values[i], right_values[j])
                if isinstance(outcome, tuple):
                    if distances is None:
                        distances = np.full((n, m), np.nan)
                    matches[i, j], distances[i, j] = bool(outcome[0]), outcome[1]
                else:
                    matches[i, j] = bool(outcome)
        return matches, distances

    def match(self, left_values: np.ndarray, right_values: np.ndarray) -> MatchResult:
        if self.elementwise:
            matches, distances = self._call_elementwise(left_values, right_values)
        else:
            outcome = self.func(left_values, right_values)
            matches, distances = outcome if isinstance(outcome, tuple) else (outcome, None)

        matches = np.asarray(matches, dtype=bool)
        if distances is not None:
            distances = np.asarray(distances, dtype=float)
        return MatchResult(matches, distances)


class MatcherRegistry:
    """Registry for matcher types."""

    def __init__(self):
        self._matchers: Dict[str, Type[BaseMatcher]] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        """Register the built-in matchers."""
        self.register('stringdist', StringDistMatcher)
        self.register('regex', RegexMatcher)
        self.register('difference', DifferenceMatcher)
        self.register('distance', DistanceMatcher)
        self.register('geo', GeoMatcher)
        self.register('interval', IntervalMatcher)
        self.register('genome', GenomeMatcher)

    def register(self, name: str, matcher_class: Type[BaseMatcher]) -> None:
        """
        Register a new matcher type.

        Args:
            name: Name to register the matcher under
            matcher_class: Matcher class to register
        """
        self._matchers[name] = matcher_class

    def names(self) -> List[str]:
        return sorted(self._matchers)

    def create(self, name: str, **kwargs: Any) -> BaseMatcher:
        """
        Create a matcher instance.

        Args:
            name: Name of the matcher type
            **kwargs: Parameters for the matcher

        Returns:
            BaseMatcher: Configured matcher instance

        Raises:
            ConfigurationError: If the matcher type is not registered
        """
        matcher_class = self._matchers.get(name)
        if not matcher_class:
            raise ConfigurationError(
                f"Unknown matcher type: {name}. "
                f"Registered types: {', '.join(self.names())}"
            )
        logging.debug(f"Creating {matcher_class.__name__} with {kwargs}")
        return matcher_class(**kwargs)


# Global registry instance
registry = MatcherRegistry()


def register_matcher(name: str, matcher_class: Type[BaseMatcher]) -> None:
    """
    Register a new matcher type globally.

    Args:
        name: Name to register the matcher under
        matcher_class: Matcher class to register
    """
    registry.register(name, matcher_class)
