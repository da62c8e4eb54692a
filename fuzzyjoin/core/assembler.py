"""Translation of a match relation into the row pairs of a join."""

import numpy as np
import pandas as pd

from fuzzyjoin.config.models import JoinMode, PairSet


def _index_array(values) -> pd.arrays.IntegerArray:
    return pd.array(np.asarray(values, dtype='int64'), dtype='Int64')


def _missing(length: int) -> pd.arrays.IntegerArray:
    return pd.array([pd.NA] * length, dtype='Int64')


def _concat(*arrays: pd.arrays.IntegerArray) -> pd.arrays.IntegerArray:
    return pd.array(
        np.concatenate([np.asarray(a, dtype=object) for a in arrays]),
        dtype='Int64'
    )


class JoinAssembler:
    """Produces the PairSet of each join mode from a boolean match matrix."""

    def assemble(self, matches: np.ndarray, mode: JoinMode) -> PairSet:
        """
        Select and order row pairs for a join mode.

        Args:
            matches: Boolean matrix of shape (n_left, n_right)
            mode: Join semantics

        Returns:
            PairSet: Row pairs in output order, <NA> where a side is absent
        """
        mode = JoinMode(mode)
        handler = getattr(self, f'_{mode.value}')
        return handler(np.asarray(matches, dtype=bool))

    @staticmethod
    def _inner(matches: np.ndarray) -> PairSet:
        # np.nonzero walks the matrix in row-major order
        left_rows, right_rows = np.nonzero(matches)
        return PairSet(_index_array(left_rows), _index_array(right_rows))

    @staticmethod
    def _with_unmatched(matches: np.ndarray) -> PairSet:
        """Matched pairs of every row, plus (row, <NA>) for rows without any."""
        rows, partners = np.nonzero(matches)
        unmatched = np.flatnonzero(~matches.any(axis=1))

        all_rows = np.concatenate([rows, unmatched])
        # A stable sort keeps each row's partners in increasing order
        order = np.argsort(all_rows, kind='stable')
        partner_values = _concat(_index_array(partners), _missing(len(unmatched)))
        return PairSet(_index_array(all_rows[order]), partner_values[order])

    def _left(self, matches: np.ndarray) -> PairSet:
        return self._with_unmatched(matches)

    def _right(self, matches: np.ndarray) -> PairSet:
        flipped = self._with_unmatched(matches.T)
        return PairSet(flipped.right, flipped.left)

    def _full(self, matches: np.ndarray) -> PairSet:
        left_pairs = self._with_unmatched(matches)
        unmatched_right = np.flatnonzero(~matches.any(axis=0))
        return PairSet(
            _concat(left_pairs.left, _missing(len(unmatched_right))),
            _concat(left_pairs.right, _index_array(unmatched_right))
        )

    @staticmethod
    def _semi(matches: np.ndarray) -> PairSet:
        rows = np.flatnonzero(matches.any(axis=1))
        return PairSet(_index_array(rows), _missing(len(rows)))

    @staticmethod
    def _anti(matches: np.ndarray) -> PairSet:
        rows = np.flatnonzero(~matches.any(axis=1))
        return PairSet(_index_array(rows), _missing(len(rows)))
