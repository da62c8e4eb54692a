"""Join functions for each matcher family, and per-mode shortcuts.

Every function here builds a matcher and hands off to `fuzzy_join`; the
`<family>_<mode>_join` shortcuts only fix the `mode` argument.
"""

import functools
from typing import Any, Callable, Optional

import pandas as pd

from fuzzyjoin.config.models import JoinMode
from fuzzyjoin.core.matcher import fuzzy_join
from fuzzyjoin.core.strategies import (
    StringDistMatcher,
    RegexMatcher,
    DifferenceMatcher,
    DistanceMatcher,
    GeoMatcher,
    IntervalMatcher,
    GenomeMatcher
)


def stringdist_join(
    left: pd.DataFrame,
    right: pd.DataFrame,
    by: Any = None,
    max_dist: float = 2,
    method: str = 'osa',
    mode: str = 'inner',
    ignore_case: bool = False,
    distance_col: Optional[str] = None,
    q: int = 1,
    p: float = 0.0,
    **kwargs: Any
) -> pd.DataFrame:
    """
    Join on string distance.

    Args:
        left: Left table
        right: Right table
        by: Columns to match on
        max_dist: Largest distance counted as a match
        method: osa, lv, dl, hamming, lcs, qgram, cosine, jaccard, jw or soundex
        mode: Join mode
        ignore_case: Compare lowercased strings
        distance_col: Column receiving the distance
        q: Q-gram size for qgram, cosine and jaccard
        p: Winkler prefix weight for jw
        **kwargs: Passed on to `fuzzy_join` (quiet, logger, suffixes, worker_threads)

    Returns:
        pd.DataFrame: Joined table
    """
    matcher = StringDistMatcher(
        max_dist=max_dist, method=method, ignore_case=ignore_case, q=q, p=p
    )
    return fuzzy_join(
        left, right, by=by, matcher=matcher, mode=mode,
        distance_col=distance_col, **kwargs
    )


def regex_join(
    left: pd.DataFrame,
    right: pd.DataFrame,
    by: Any = None,
    mode: str = 'inner',
    ignore_case: bool = False,
    pattern_side: str = 'right',
    **kwargs: Any
) -> pd.DataFrame:
    """Join where values on `pattern_side` are regular expressions searched
    for in the values of the other side."""
    matcher = RegexMatcher(ignore_case=ignore_case, pattern_side=pattern_side)
    return fuzzy_join(left, right, by=by, matcher=matcher, mode=mode, **kwargs)


def difference_join(
    left: pd.DataFrame,
    right: pd.DataFrame,
    by: Any = None,
    max_dist: float = 1,
    mode: str = 'inner',
    distance_col: Optional[str] = None,
    **kwargs: Any
) -> pd.DataFrame:
    """Join numbers whose absolute difference is at most `max_dist`."""
    matcher = DifferenceMatcher(max_dist=max_dist)
    return fuzzy_join(
        left, right, by=by, matcher=matcher, mode=mode,
        distance_col=distance_col, **kwargs
    )


def distance_join(
    left: pd.DataFrame,
    right: pd.DataFrame,
    by: Any = None,
    max_dist: float = 1,
    method: str = 'euclidean',
    mode: str = 'inner',
    distance_col: Optional[str] = None,
    **kwargs: Any
) -> pd.DataFrame:
    """Join rows within a Euclidean or Manhattan distance across all `by` columns."""
    matcher = DistanceMatcher(max_dist=max_dist, method=method)
    return fuzzy_join(
        left, right, by=by, matcher=matcher, mode=mode,
        distance_col=distance_col, **kwargs
    )


def geo_join(
    left: pd.DataFrame,
    right: pd.DataFrame,
    by: Any = None,
    max_dist: float = 1,
    method: str = 'haversine',
    unit: str = 'miles',
    mode: str = 'inner',
    distance_col: Optional[str] = None,
    **kwargs: Any
) -> pd.DataFrame:
    """
    Join points within a great-circle distance.

    `by` names the longitude column pair first and the latitude pair second.
    Distances are in `unit` (miles or km).
    """
    matcher = GeoMatcher(max_dist=max_dist, method=method, unit=unit)
    return fuzzy_join(
        left, right, by=by, matcher=matcher, mode=mode,
        distance_col=distance_col, **kwargs
    )


def interval_join(
    left: pd.DataFrame,
    right: pd.DataFrame,
    by: Any = None,
    mode: str = 'inner',
    maxgap: float = 0,
    minoverlap: float = 0,
    **kwargs: Any
) -> pd.DataFrame:
    """Join overlapping closed intervals; `by` names start then end columns."""
    matcher = IntervalMatcher(maxgap=maxgap, minoverlap=minoverlap)
    return fuzzy_join(left, right, by=by, matcher=matcher, mode=mode, **kwargs)


def genome_join(
    left: pd.DataFrame,
    right: pd.DataFrame,
    by: Any = None,
    mode: str = 'inner',
    maxgap: float = 0,
    minoverlap: float = 0,
    **kwargs: Any
) -> pd.DataFrame:
    """Join overlapping intervals on the same chromosome; `by` names the
    chromosome, start and end columns in that order."""
    matcher = GenomeMatcher(maxgap=maxgap, minoverlap=minoverlap)
    return fuzzy_join(left, right, by=by, matcher=matcher, mode=mode, **kwargs)


def _mode_variant(family: Callable[..., pd.DataFrame], mode: JoinMode) -> Callable[..., pd.DataFrame]:
    """Fix the `mode` of a family join function."""
    @functools.wraps(family)
    def join(left: pd.DataFrame, right: pd.DataFrame, by: Any = None, **kwargs: Any) -> pd.DataFrame:
        return family(left, right, by=by, mode=mode.value, **kwargs)

    prefix = family.__name__[:-len('_join')]
    join.__name__ = join.__qualname__ = f"{prefix}_{mode.value}_join"
    join.__doc__ = f"{mode.value.capitalize()} join using `{family.__name__}`."
    return join


stringdist_inner_join = _mode_variant(stringdist_join, JoinMode.INNER)
stringdist_left_join = _mode_variant(stringdist_join, JoinMode.LEFT)
stringdist_right_join = _mode_variant(stringdist_join, JoinMode.RIGHT)
stringdist_full_join = _mode_variant(stringdist_join, JoinMode.FULL)
stringdist_semi_join = _mode_variant(stringdist_join, JoinMode.SEMI)
stringdist_anti_join = _mode_variant(stringdist_join, JoinMode.ANTI)

regex_inner_join = _mode_variant(regex_join, JoinMode.INNER)
regex_left_join = _mode_variant(regex_join, JoinMode.LEFT)
regex_right_join = _mode_variant(regex_join, JoinMode.RIGHT)
regex_full_join = _mode_variant(regex_join, JoinMode.FULL)
regex_semi_join = _mode_variant(regex_join, JoinMode.SEMI)
regex_anti_join = _mode_variant(regex_join, JoinMode.ANTI)

difference_inner_join = _mode_variant(difference_join, JoinMode.INNER)
difference_left_join = _mode_variant(difference_join, JoinMode.LEFT)
difference_right_join = _mode_variant(difference_join, JoinMode.RIGHT)
difference_full_join = _mode_variant(difference_join, JoinMode.FULL)
difference_semi_join = _mode_variant(difference_join, JoinMode.SEMI)
difference_anti_join = _mode_variant(difference_join, JoinMode.ANTI)

distance_inner_join = _mode_variant(distance_join, JoinMode.INNER)
distance_left_join = _mode_variant(distance_join, JoinMode.LEFT)
distance_right_join = _mode_variant(distance_join, JoinMode.RIGHT)
distance_full_join = _mode_variant(distance_join, JoinMode.FULL)
distance_semi_join = _mode_variant(distance_join, JoinMode.SEMI)
distance_anti_join = _mode_variant(distance_join, JoinMode.ANTI)

geo_inner_join = _mode_variant(geo_join, JoinMode.INNER)
geo_left_join = _mode_variant(geo_join, JoinMode.LEFT)
geo_right_join = _mode_variant(geo_join, JoinMode.RIGHT)
geo_full_join = _mode_variant(geo_join, JoinMode.FULL)
geo_semi_join = _mode_variant(geo_join, JoinMode.SEMI)
geo_anti_join = _mode_variant(geo_join, JoinMode.ANTI)

interval_inner_join = _mode_variant(interval_join, JoinMode.INNER)
interval_left_join = _mode_variant(interval_join, JoinMode.LEFT)
interval_right_join = _mode_variant(interval_join, JoinMode.RIGHT)
interval_full_join = _mode_variant(interval_join, JoinMode.FULL)
interval_semi_join = _mode_variant(interval_join, JoinMode.SEMI)
interval_anti_join = _mode_variant(interval_join, JoinMode.ANTI)

genome_inner_join = _mode_variant(genome_join, JoinMode.INNER)
genome_left_join = _mode_variant(genome_join, JoinMode.LEFT)
genome_right_join = _mode_variant(genome_join, JoinMode.RIGHT)
genome_full_join = _mode_variant(genome_join, JoinMode.FULL)
genome_semi_join = _mode_variant(genome_join, JoinMode.SEMI)
genome_anti_join = _mode_variant(genome_join, JoinMode.ANTI)

__all__ = sorted(
    name for name in list(globals())
    if name.endswith('_join') and not name.startswith('_') and name != 'fuzzy_join'
)
