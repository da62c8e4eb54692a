import numpy as np
import pandas as pd
import pytest

from fuzzyjoin.config.models import JoinMode, PairSet
from fuzzyjoin.config.rules import OutputRules, SuffixRule
from fuzzyjoin.core.composer import OutputComposer
from fuzzyjoin.errors import ConfigurationError


def pair_set(left, right):
    return PairSet(pd.array(left, dtype='Int64'), pd.array(right, dtype='Int64'))


@pytest.fixture
def left():
    return pd.DataFrame({'name': ['Jon', 'Ann'], 'age': [30, 40]}, index=[10, 20])


@pytest.fixture
def right():
    return pd.DataFrame({'name': ['John', 'Anna'], 'city': ['Oslo', 'Rome']})


def test_shared_columns_get_suffixes(left, right):
    result = OutputComposer().compose(left, right, pair_set([0, 1], [0, 1]), JoinMode.INNER)

    assert list(result.columns) == ['name.x', 'age', 'name.y', 'city']
    assert result['name.y'].tolist() == ['John', 'Anna']
    assert list(result.index) == [0, 1]


def test_custom_suffixes(left, right):
    composer = OutputComposer(OutputRules.from_suffixes(('_l', '_r')))
    result = composer.compose(left, right, pair_set([1], [0]), JoinMode.INNER)
    assert list(result.columns) == ['name_l', 'age', 'name_r', 'city']


def test_suffix_repeats_until_name_is_free():
    left = pd.DataFrame({'k': [1], 'k.x': [2]})
    right = pd.DataFrame({'k': [3]})

    result = OutputComposer().compose(left, right, pair_set([0], [0]), JoinMode.INNER)

    assert list(result.columns) == ['k.x.x', 'k.x', 'k.y']


def test_empty_suffix_is_rejected():
    with pytest.raises(ConfigurationError):
        SuffixRule('')


def test_missing_side_is_filled_and_promoted(left, right):
    result = OutputComposer().compose(left, right, pair_set([0, None], [None, 1]), JoinMode.FULL)

    assert result['age'].dtype == float
    assert np.isnan(result.loc[1, 'age'])
    assert pd.isna(result.loc[0, 'city'])
    assert result.loc[1, 'city'] == 'Rome'


def test_semi_join_keeps_left_columns_only(left, right):
    result = OutputComposer().compose(left, right, pair_set([1], [None]), JoinMode.SEMI)

    assert list(result.columns) == ['name', 'age']
    assert result['name'].tolist() == ['Ann']
    assert result['age'].dtype == np.int64


def test_distance_column(left, right):
    distances = np.array([[1.0, 3.0], [4.0, 2.0]])
    result = OutputComposer().compose(
        left, right, pair_set([0, 1, None], [0, None, 1]), JoinMode.FULL,
        distances=distances, distance_col='dist'
    )

    assert result['dist'].tolist()[0] == 1.0
    assert np.isnan(result['dist'].tolist()[1])
    assert np.isnan(result['dist'].tolist()[2])


def test_distance_column_clash(left, right):
    with pytest.raises(ConfigurationError, match='clashes'):
        OutputComposer().compose(
            left, right, pair_set([0], [0]), JoinMode.INNER,
            distances=np.zeros((2, 2)), distance_col='city'
        )


def test_distance_column_without_distances_is_missing(left, right):
    result = OutputComposer().compose(
        left, right, pair_set([0], [0]), JoinMode.INNER, distance_col='dist'
    )
    assert result['dist'].dtype == float
    assert result['dist'].isna().all()


def test_distance_column_on_empty_result(left, right):
    result = OutputComposer().compose(
        left, right, pair_set([], []), JoinMode.INNER, distance_col='dist'
    )
    assert len(result) == 0
    assert result['dist'].dtype == float


def test_distance_column_clash_without_distances(left, right):
    with pytest.raises(ConfigurationError, match='clashes'):
        OutputComposer().compose(
            left, right, pair_set([0], [0]), JoinMode.INNER, distance_col='age'
        )


def test_semi_join_never_gets_distance_column(left, right):
    result = OutputComposer().compose(
        left, right, pair_set([0], [None]), JoinMode.SEMI,
        distances=np.zeros((2, 2)), distance_col='dist'
    )
    assert list(result.columns) == ['name', 'age']


def test_inputs_are_not_modified(left, right):
    before = left.copy()
    OutputComposer().compose(left, right, pair_set([0, 1], [1, 0]), JoinMode.INNER)
    pd.testing.assert_frame_equal(left, before)
    assert list(right.columns) == ['name', 'city']
