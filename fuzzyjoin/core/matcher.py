"""Generic fuzzy join engine."""

from typing import Any, List, Optional, Tuple, Union
import logging
import time

import pandas as pd

from fuzzyjoin.core.assembler import JoinAssembler
from fuzzyjoin.core.columns import common_by
from fuzzyjoin.core.composer import OutputComposer
from fuzzyjoin.core.matrix import MatchMatrixBuilder, MatcherGroup
from fuzzyjoin.core.strategies import BaseMatcher, CallableMatcher, registry
from fuzzyjoin.config.models import ColumnSpec, JoinMode
from fuzzyjoin.config.rules import OutputRules
from fuzzyjoin.errors import ConfigurationError

MatcherSpec = Union[str, BaseMatcher, Any]


class FuzzyJoiner:
    """
    Joins two DataFrames on approximate key matches.

    Every left row is compared with every right row through a pluggable
    matcher; the resulting match relation is turned into an inner, left,
    right, full, semi or anti join.
    """

    def __init__(
        self,
        suffixes: Tuple[str, str] = ('.x', '.y'),
        worker_threads: int = 1,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the joiner.

        Args:
            suffixes: Suffixes for left and right columns sharing a name
            worker_threads: Threads splitting the left rows (1 = no threads)
            logger: Logger for the join notice and diagnostics; a module logger
                with a stream handler is set up when omitted
        """
        self.rules = OutputRules.from_suffixes(suffixes)
        self.worker_threads = worker_threads
        if logger is None:
            self._initialize_logging()
        else:
            self.logger = logger

        self.assembler = JoinAssembler()
        self.composer = OutputComposer(self.rules)

    def _initialize_logging(self) -> None:
        """Setup logging configuration."""
        self.logger = logging.getLogger(__name__)
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(
                logging.Formatter(
                    '%(asctime)s - %(levelname)s - %(message)s'
                )
            )
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)

    @staticmethod
    def _parse_mode(mode: Union[str, JoinMode]) -> JoinMode:
        try:
            return JoinMode(mode)
        except ValueError:
            raise ConfigurationError(
                f"Unknown join mode: {mode!r}. "
                f"Choose one of {', '.join(m.value for m in JoinMode)}"
            ) from None

    @staticmethod
    def _create_matcher(matcher: MatcherSpec, params: dict) -> BaseMatcher:
        if isinstance(matcher, str):
            return registry.create(matcher, **params)
        if params:
            raise ConfigurationError(
                "Matcher parameters can only be given with a matcher name, "
                f"got {sorted(params)} alongside {matcher!r}"
            )
        if isinstance(matcher, BaseMatcher):
            return matcher
        if callable(matcher):
            return CallableMatcher(matcher)
        raise ConfigurationError(
            f"A matcher must be a registered name, a BaseMatcher or a callable, got {matcher!r}"
        )

    def _resolve_matchers(
        self,
        matcher: Union[MatcherSpec, List[MatcherSpec]],
        spec: ColumnSpec,
        params: dict
    ) -> List[MatcherGroup]:
        """Pair each matcher with the column pairs it evaluates."""
        if matcher is None:
            raise ConfigurationError("A matcher is required for a fuzzy join")

        if isinstance(matcher, (list, tuple)):
            if len(matcher) != len(spec):
                raise ConfigurationError(
                    f"Got {len(matcher)} matchers for {len(spec)} column pairs"
                )
            groups = []
            for position, item in enumerate(matcher):
                single = self._create_matcher(item, params)
                if single.multi_column:
                    raise ConfigurationError(
                        f"{type(single).__name__} spans several columns and cannot "
                        "be given per column pair"
                    )
                groups.append((single, [position]))
            return groups

        single = self._create_matcher(matcher, params)
        if single.multi_column:
            return [(single, list(range(len(spec))))]
        return [(single, [position]) for position in range(len(spec))]

    def join(
        self,
        left: pd.DataFrame,
        right: pd.DataFrame,
        by: Any = None,
        matcher: Union[MatcherSpec, List[MatcherSpec]] = None,
        mode: Union[str, JoinMode] = JoinMode.INNER,
        distance_col: Optional[str] = None,
        quiet: bool = False,
        **matcher_params: Any
    ) -> pd.DataFrame:
        """
        Join two DataFrames on approximate matches.

        Args:
            left: Left table
            right: Right table
            by: Columns to match on (see `common_by`)
            matcher: Registered matcher name, BaseMatcher, callable, or a list
                of those with one entry per column pair
            mode: One of inner, left, right, full, semi, anti
            distance_col: Name of a column receiving the match distance
            quiet: Suppress the notice naming auto-detected columns
            **matcher_params: Parameters for a matcher given by name

        Returns:
            pd.DataFrame: Joined table

        Raises:
            ConfigurationError: For invalid arguments
            StrategyError: Raised by the matcher
        """
        start_time = time.time()
        join_mode = self._parse_mode(mode)
        spec = common_by(by, left, right, quiet=quiet, logger=self.logger)
        groups = self._resolve_matchers(matcher, spec, matcher_params)

        # Semi and anti joins report row presence only
        with_distance = distance_col is not None and not join_mode.filters_left

        builder = MatchMatrixBuilder(self.worker_threads, self.logger)
        combined = builder.build(left, right, spec, groups, with_distance)
        pairs = self.assembler.assemble(combined.matches, join_mode)
        result = self.composer.compose(
            left, right, pairs, join_mode,
            distances=combined.distances,
            distance_col=distance_col if with_distance else None
        )

        self.logger.debug(
            f"{join_mode.value} join of {len(left)} x {len(right)} rows on "
            f"{spec.pairs()} produced {len(result)} rows "
            f"in {time.time() - start_time:.2f} seconds"
        )
        return result


def fuzzy_join(
    left: pd.DataFrame,
    right: pd.DataFrame,
    by: Any = None,
    matcher: Union[MatcherSpec, List[MatcherSpec]] = None,
    mode: Union[str, JoinMode] = JoinMode.INNER,
    distance_col: Optional[str] = None,
    quiet: bool = False,
    logger: Optional[logging.Logger] = None,
    suffixes: Tuple[str, str] = ('.x', '.y'),
    worker_threads: int = 1,
    **matcher_params: Any
) -> pd.DataFrame:
    """
    Join two DataFrames on approximate matches.

    Builds a FuzzyJoiner and runs one join; see `FuzzyJoiner.join`.

    Example:
        >>> fuzzy_join(left, right, by='name', matcher='stringdist',
        ...            max_dist=1, mode='left', distance_col='dist')
    """
    joiner = FuzzyJoiner(suffixes=suffixes, worker_threads=worker_threads, logger=logger)
    return joiner.join(
        left, right, by=by, matcher=matcher, mode=mode,
        distance_col=distance_col, quiet=quiet, **matcher_params
    )
