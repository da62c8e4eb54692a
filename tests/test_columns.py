import logging

import pandas as pd
import pytest

from fuzzyjoin.config.models import ColumnSpec
from fuzzyjoin.core.columns import common_by
from fuzzyjoin.errors import ConfigurationError


@pytest.fixture
def left():
    return pd.DataFrame({'b': [1], 'a': [2], 'c': [3]})


@pytest.fixture
def right():
    return pd.DataFrame({'a': [1], 'b': [2], 'd': [3]})


def test_none_uses_common_columns_in_left_order(left, right, caplog):
    """Auto-detected columns follow the left table's order and are announced"""
    with caplog.at_level(logging.INFO, logger='fuzzyjoin.core.columns'):
        spec = common_by(None, left, right)

    assert spec == ColumnSpec(('b', 'a'), ('b', 'a'))
    assert "Joining by: ['b', 'a']" in caplog.text


def test_quiet_suppresses_notice(left, right, caplog):
    with caplog.at_level(logging.INFO, logger='fuzzyjoin.core.columns'):
        common_by(None, left, right, quiet=True)
    assert caplog.records == []


def test_notice_goes_to_injected_logger(left, right, caplog):
    with caplog.at_level(logging.INFO, logger='tests.joins'):
        common_by(None, left, right, logger=logging.getLogger('tests.joins'))
    assert [r.name for r in caplog.records] == ['tests.joins']


def test_no_common_columns_raises(left):
    other = pd.DataFrame({'x': [1]})
    with pytest.raises(ConfigurationError, match="specify 'by'"):
        common_by(None, left, other)


def test_single_name(left, right):
    assert common_by('a', left, right) == ColumnSpec(('a',), ('a',))


def test_sequence_with_renamed_entries(left, right):
    """Plain names pair with themselves, tuples rename"""
    spec = common_by(['a', ('c', 'd')], left, right)
    assert spec.pairs() == [('a', 'a'), ('c', 'd')]


def test_mapping_with_partial_labels(left, right):
    spec = common_by({'c': 'd', 'b': None}, left, right)
    assert spec.left == ('c', 'b')
    assert spec.right == ('d', 'b')


def test_resolved_mapping(left, right):
    spec = common_by({'left': ['a', 'c'], 'right': ['b', 'd']}, left, right)
    assert spec.pairs() == [('a', 'b'), ('c', 'd')]


def test_resolved_mapping_length_mismatch(left, right):
    with pytest.raises(ConfigurationError, match='Length'):
        common_by({'left': ['a', 'c'], 'right': ['b']}, left, right)


def test_resolving_a_column_spec_is_idempotent(left, right):
    spec = common_by(['a', ('c', 'd')], left, right)
    again = common_by(spec, left, right)
    assert again == spec
    assert common_by(again, left, right) == spec


def test_column_spec_is_revalidated(left, right):
    with pytest.raises(ConfigurationError, match='zz'):
        common_by(ColumnSpec(('a',), ('zz',)), left, right)


def test_all_missing_names_are_listed(left, right):
    with pytest.raises(ConfigurationError) as excinfo:
        common_by(['a', 'zz', 'yy'], left, right)

    message = str(excinfo.value)
    assert 'not found in left: zz, yy' in message
    assert 'not found in right: zz, yy' in message


def test_missing_names_reported_per_side(left, right):
    with pytest.raises(ConfigurationError) as excinfo:
        common_by([('a', 'c')], left, right)

    assert str(excinfo.value) == 'Column(s) not found in right: c'


@pytest.mark.parametrize('by', [4.2, True, {'a', 'b'}, [1.5, 2.5], {'a': 3.5}, [None], [('a',)], []])
def test_unsupported_shapes_are_rejected(left, right, by):
    with pytest.raises(ConfigurationError, match="'by' must be"):
        common_by(by, left, right)


def test_non_dataframe_input(left):
    with pytest.raises(ConfigurationError, match='DataFrames'):
        common_by('a', left, {'a': [1]})


def test_column_spec_sides_must_match():
    with pytest.raises(ConfigurationError):
        ColumnSpec(('a', 'b'), ('a',))
    with pytest.raises(ConfigurationError):
        ColumnSpec((), ())


def test_integer_labels():
    """Tables with positional column labels can be joined by explicit labels"""
    left = pd.DataFrame([[1, 'a']])
    right = pd.DataFrame([[2, 'b', 'c']])

    assert common_by([1], left, right) == ColumnSpec((1,), (1,))
    assert common_by({0: 2}, left, right).pairs() == [(0, 2)]
    assert common_by(None, left, right, quiet=True) == ColumnSpec((0, 1), (0, 1))


def test_missing_integer_label():
    left = pd.DataFrame([[1, 'a']])
    with pytest.raises(ConfigurationError, match='not found in left: 5'):
        common_by([5], left, left)
