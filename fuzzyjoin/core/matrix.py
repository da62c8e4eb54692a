"""Evaluation of matchers over every left/right row combination."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

import numpy as np
import pandas as pd

from fuzzyjoin.config.models import ColumnSpec, CombinedMatch, MatchResult
from fuzzyjoin.core.strategies import BaseMatcher
from fuzzyjoin.errors import ConfigurationError, StrategyError

# A matcher and the positions (within the ColumnSpec) of the pairs it handles
MatcherGroup = Tuple[BaseMatcher, List[int]]


class MatchMatrixBuilder:
    """Builds the combined match relation of a join by brute force."""

    def __init__(self, worker_threads: int = 1, logger: Optional[logging.Logger] = None):
        """
        Initialize the builder.

        Args:
            worker_threads: Threads evaluating slices of left rows (1 = no threads)
            logger: Logger for diagnostics
        """
        self.worker_threads = max(1, worker_threads)
        self.logger = logger or logging.getLogger(__name__)

    def build(
        self,
        left: pd.DataFrame,
        right: pd.DataFrame,
        spec: ColumnSpec,
        groups: List[MatcherGroup],
        with_distance: bool = False
    ) -> CombinedMatch:
        """
        Match every left row against every right row.

        Args:
            left: Left table
            right: Right table
            spec: Resolved column pairs
            groups: Matchers with the column pairs each one evaluates
            with_distance: Whether a combined distance is wanted

        Returns:
            CombinedMatch: AND of all groups, with distances when available
        """
        distance_groups = self._distance_groups(groups) if with_distance else []

        n_left = len(left)
        n_chunks = min(self.worker_threads, n_left)
        if n_chunks <= 1:
            return self._build_block(left, right, spec, groups, distance_groups)

        chunks = np.array_split(np.arange(n_left), n_chunks)
        with ThreadPoolExecutor(max_workers=n_chunks) as executor:
            futures = [
                executor.submit(
                    self._build_block,
                    left.iloc[chunk], right, spec, groups, distance_groups
                )
                for chunk in chunks
            ]
            blocks = [future.result() for future in futures]

        matches = np.vstack([block.matches for block in blocks])
        distances = None
        if distance_groups:
            distances = np.vstack([block.distances for block in blocks])
        return CombinedMatch(matches, distances)

    def _distance_groups(self, groups: List[MatcherGroup]) -> List[MatcherGroup]:
        """Groups that report a distance; all must share one metric."""
        distance_groups = [group for group in groups if group[0].metric is not None]
        metrics = sorted({matcher.metric for matcher, _ in distance_groups})
        if len(metrics) > 1:
            raise ConfigurationError(
                f"Cannot combine distances of different metrics: {', '.join(metrics)}"
            )
        return distance_groups

    def _build_block(
        self,
        left: pd.DataFrame,
        right: pd.DataFrame,
        spec: ColumnSpec,
        groups: List[MatcherGroup],
        distance_groups: List[MatcherGroup]
    ) -> CombinedMatch:
        shape = (len(left), len(right))
        matches = np.ones(shape, dtype=bool)
        parts = []

        for matcher, positions in groups:
            if not matches.any():
                # Nothing left to match; later groups cannot change that
                break
            result = self._evaluate(matcher, left, right, spec, positions)
            matches &= result.matches
            if any(matcher is group[0] for group in distance_groups):
                parts.append(
                    result.distances if result.distances is not None
                    else np.full(shape, np.nan)
                )

        if not distance_groups:
            return CombinedMatch(matches)

        if parts:
            distances = distance_groups[0][0].reduce_distances(parts).astype(float)
        else:
            distances = np.full(shape, np.nan)
        distances[~matches] = np.nan
        return CombinedMatch(matches, distances)

    def _evaluate(
        self,
        matcher: BaseMatcher,
        left: pd.DataFrame,
        right: pd.DataFrame,
        spec: ColumnSpec,
        positions: List[int]
    ) -> MatchResult:
        """Run one matcher over its column pairs."""
        left_columns = [spec.left[k] for k in positions]
        right_columns = [spec.right[k] for k in positions]

        if matcher.multi_column:
            matcher.check_columns(len(positions))
            result = matcher.match(
                left[left_columns].to_numpy(),
                right[right_columns].to_numpy()
            )
            self._check_shape(matcher, result, (len(left), len(right)))
            return result

        # Compare unique values only, then expand back to rows
        left_codes, left_uniques = pd.factorize(left[left_columns[0]])
        right_codes, right_uniques = pd.factorize(right[right_columns[0]])
        self.logger.debug(
            f"{type(matcher).__name__} on {left_columns[0]!r}/{right_columns[0]!r}: "
            f"{len(left_uniques)} x {len(right_uniques)} unique values"
        )

        result = matcher.match(np.asarray(left_uniques), np.asarray(right_uniques))
        self._check_shape(matcher, result, (len(left_uniques), len(right_uniques)))

        matches = self._expand(
            np.asarray(result.matches, dtype=bool), left_codes, right_codes, False
        )
        distances = None
        if result.distances is not None:
            distances = self._expand(
                np.asarray(result.distances, dtype=float), left_codes, right_codes, np.nan
            )
        return MatchResult(matches, distances)

    @staticmethod
    def _expand(block: np.ndarray, left_codes: np.ndarray, right_codes: np.ndarray, fill):
        """Index a unique-value matrix by factor codes; code -1 (missing) gets `fill`."""
        padded = np.full((block.shape[0] + 1, block.shape[1] + 1), fill, dtype=block.dtype)
        padded[:-1, :-1] = block
        return padded[np.ix_(left_codes, right_codes)]

    @staticmethod
    def _check_shape(matcher: BaseMatcher, result: MatchResult, expected: Tuple[int, int]) -> None:
        for name, matrix in (('match', result.matches), ('distance', result.distances)):
            if matrix is not None and np.shape(matrix) != expected:
                raise StrategyError(
                    f"{type(matcher).__name__} returned a {name} matrix of shape "
                    f"{np.shape(matrix)}, expected {expected}"
                )
