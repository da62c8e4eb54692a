"""
Fuzzy Join
==========

Join pandas DataFrames on approximate rather than exact key matches:
string distance, regular expressions, numeric difference, multi-column
distance, geographic distance and interval overlap.

Key Features:
- Inner, left, right, full, semi and anti joins
- Pluggable matchers with a registry for custom strategies
- Optional distance column for distance-based matchers
- Automatic detection of shared columns when `by` is omitted
"""

from fuzzyjoin.core.matcher import FuzzyJoiner, fuzzy_join
from fuzzyjoin.core.columns import common_by
from fuzzyjoin.core.strategies import (
    BaseMatcher,
    CallableMatcher,
    StringDistMatcher,
    RegexMatcher,
    DifferenceMatcher,
    DistanceMatcher,
    GeoMatcher,
    IntervalMatcher,
    GenomeMatcher,
    register_matcher
)
from fuzzyjoin.config.models import (
    ColumnSpec,
    JoinMode,
    MatchResult,
    StringDistConfig,
    RegexConfig,
    DifferenceConfig,
    DistanceConfig,
    GeoConfig,
    IntervalConfig
)
from fuzzyjoin.config.rules import OutputRules, SuffixRule
from fuzzyjoin.errors import FuzzyJoinError, ConfigurationError, StrategyError
from fuzzyjoin.joins import *  # noqa: F401,F403

__version__ = "1.0.0"
