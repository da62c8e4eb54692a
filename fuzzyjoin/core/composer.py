"""Materialization of joined tables from row pairs."""

from typing import Optional

import numpy as np
import pandas as pd

from fuzzyjoin.config.models import JoinMode, PairSet
from fuzzyjoin.config.rules import OutputRules
from fuzzyjoin.errors import ConfigurationError


class OutputComposer:
    """Builds the output DataFrame of a join."""

    def __init__(self, rules: Optional[OutputRules] = None):
        self.rules = rules or OutputRules.from_suffixes()

    @staticmethod
    def _take(table: pd.DataFrame, positions: np.ndarray) -> pd.DataFrame:
        """Rows at `positions`; position -1 yields an all-missing row."""
        return table.reset_index(drop=True).reindex(positions).reset_index(drop=True)

    def compose(
        self,
        left: pd.DataFrame,
        right: pd.DataFrame,
        pairs: PairSet,
        mode: JoinMode,
        distances: Optional[np.ndarray] = None,
        distance_col: Optional[str] = None
    ) -> pd.DataFrame:
        """
        Combine left and right rows into the joined table.

        Args:
            left: Left table
            right: Right table
            pairs: Row pairs in output order
            mode: Join semantics
            distances: Combined distance matrix, None when unavailable
            distance_col: Name of the distance column, None for no column

        Returns:
            pd.DataFrame: Joined table with a fresh RangeIndex
        """
        mode = JoinMode(mode)
        left_positions, right_positions = pairs.positions()

        left_part = self._take(left, left_positions)
        if mode.filters_left:
            return left_part

        right_part = self._take(right, right_positions)
        left_part.columns, right_part.columns = self.rules.disambiguate(
            list(left.columns), list(right.columns)
        )
        result = pd.concat([left_part, right_part], axis=1)

        if distance_col is not None:
            if distance_col in result.columns:
                raise ConfigurationError(
                    f"Distance column {distance_col!r} clashes with an output column"
                )
            if distances is None:
                # No matcher measured a distance; the column stays, all missing
                result[distance_col] = np.full(len(result), np.nan)
            else:
                result[distance_col] = self._pair_distances(
                    distances, left_positions, right_positions
                )

        return result

    @staticmethod
    def _pair_distances(
        distances: np.ndarray,
        left_positions: np.ndarray,
        right_positions: np.ndarray
    ) -> np.ndarray:
        """Distance of each output row; NaN where either side is missing."""
        values = np.full(len(left_positions), np.nan)
        paired = (left_positions >= 0) & (right_positions >= 0)
        values[paired] = distances[left_positions[paired], right_positions[paired]]
        return values
