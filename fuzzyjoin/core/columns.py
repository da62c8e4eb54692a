"""Resolution of the `by` argument into explicit column pairs."""

import logging
import numbers
from collections.abc import Mapping
from typing import Any, List, Optional, Sequence, Tuple

import pandas as pd

from fuzzyjoin.config.models import ColumnSpec
from fuzzyjoin.errors import ConfigurationError

module_logger = logging.getLogger(__name__)

ACCEPTED_SHAPES = (
    "'by' must be None (use the common columns), a column label (string or "
    "integer) or sequence of labels where an entry may be a (left, right) "
    "tuple or the sequence a {left: right} mapping, or a resolved spec: a "
    "ColumnSpec or a mapping with keys 'left' and 'right'"
)


def _is_name(value: Any) -> bool:
    """Column labels are non-empty strings or integers (e.g. a RangeIndex)."""
    if isinstance(value, str):
        return value != ''
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _check_columns(
    left_names: Sequence[str],
    right_names: Sequence[str],
    left: pd.DataFrame,
    right: pd.DataFrame
) -> None:
    """Raise listing every name absent from its table."""
    missing_left = [name for name in dict.fromkeys(left_names) if name not in left.columns]
    missing_right = [name for name in dict.fromkeys(right_names) if name not in right.columns]

    problems = []
    if missing_left:
        problems.append(f"Column(s) not found in left: {', '.join(map(str, missing_left))}")
    if missing_right:
        problems.append(f"Column(s) not found in right: {', '.join(map(str, missing_right))}")
    if problems:
        raise ConfigurationError('; '.join(problems))


def _as_names(value: Any, side: str) -> List[str]:
    if _is_name(value):
        return [value]
    if isinstance(value, (list, tuple, pd.Index)) and all(_is_name(v) for v in value):
        return list(value)
    raise ConfigurationError(
        f"'{side}' of a resolved spec must be a column name or a sequence of names"
    )


def _resolve_flat(by: Any) -> Optional[Tuple[List[str], List[str]]]:
    """Split a flat (optionally labeled) sequence into left and right names."""
    if _is_name(by):
        return [by], [by]

    if isinstance(by, Mapping):
        left_names, right_names = [], []
        for left_name, right_name in by.items():
            if not _is_name(left_name):
                return None
            if right_name is None or right_name == '':
                right_name = left_name
            elif not _is_name(right_name):
                return None
            left_names.append(left_name)
            right_names.append(right_name)
        return left_names, right_names

    if isinstance(by, (list, tuple, pd.Index)):
        left_names, right_names = [], []
        for entry in by:
            if _is_name(entry):
                left_names.append(entry)
                right_names.append(entry)
            elif (isinstance(entry, tuple) and len(entry) == 2
                  and all(_is_name(e) for e in entry)):
                left_names.append(entry[0])
                right_names.append(entry[1])
            else:
                return None
        return left_names, right_names

    return None


def common_by(
    by: Any,
    left: pd.DataFrame,
    right: pd.DataFrame,
    quiet: bool = False,
    logger: Optional[logging.Logger] = None
) -> ColumnSpec:
    """
    Normalize the `by` argument of a join into a ColumnSpec.

    Args:
        by: None, a flat (optionally labeled) name sequence, or a resolved spec
        left: Left table
        right: Right table
        quiet: Suppress the notice naming auto-detected columns
        logger: Logger receiving the notice (module logger if omitted)

    Returns:
        ColumnSpec: Validated column pairs

    Raises:
        ConfigurationError: If `by` has an unsupported shape or names columns
            that do not exist
    """
    if not isinstance(left, pd.DataFrame) or not isinstance(right, pd.DataFrame):
        raise ConfigurationError("Both left and right must be pandas DataFrames")

    log = logger or module_logger

    # Resolved specs are re-validated, never trusted
    if isinstance(by, ColumnSpec):
        _check_columns(by.left, by.right, left, right)
        return ColumnSpec(by.left, by.right)

    if isinstance(by, Mapping) and set(by.keys()) == {'left', 'right'}:
        left_names = _as_names(by['left'], 'left')
        right_names = _as_names(by['right'], 'right')
        if len(left_names) != len(right_names):
            raise ConfigurationError(
                "Length of by['left'] must equal length of by['right']"
            )
        _check_columns(left_names, right_names, left, right)
        return ColumnSpec(left_names, right_names)

    if by is None:
        right_columns = set(right.columns)
        shared = [name for name in left.columns if name in right_columns]
        if not shared:
            raise ConfigurationError(
                "No common columns found. Please specify 'by' explicitly."
            )
        if not quiet:
            log.info(f"Joining by: {shared!r}")
        return ColumnSpec(shared, shared)

    resolved = _resolve_flat(by)
    if resolved is None or not resolved[0]:
        raise ConfigurationError(ACCEPTED_SHAPES)

    left_names, right_names = resolved
    _check_columns(left_names, right_names, left, right)
    return ColumnSpec(left_names, right_names)
