import logging

import numpy as np
import pandas as pd
import pytest

import fuzzyjoin
from fuzzyjoin import joins
from fuzzyjoin.joins import (
    stringdist_join,
    stringdist_inner_join,
    stringdist_left_join,
    regex_inner_join,
    regex_semi_join,
    difference_inner_join,
    difference_full_join,
    distance_inner_join,
    geo_inner_join,
    interval_inner_join,
    interval_left_join,
    genome_inner_join,
    genome_anti_join
)

FAMILIES = ['stringdist', 'regex', 'difference', 'distance', 'geo', 'interval', 'genome']
MODES = ['inner', 'left', 'right', 'full', 'semi', 'anti']
QUIET = logging.getLogger('tests.joins')


@pytest.mark.parametrize('family', FAMILIES)
@pytest.mark.parametrize('mode', MODES)
def test_every_mode_variant_exists(family, mode):
    name = f"{family}_{mode}_join"
    function = getattr(joins, name)
    assert function.__name__ == name
    assert name in joins.__all__
    assert getattr(fuzzyjoin, name) is function


def test_mode_variant_fixes_the_mode(short_words, long_words):
    direct = stringdist_join(short_words, long_words.iloc[[0]], by='k', max_dist=1, mode='left', logger=QUIET)
    variant = stringdist_left_join(short_words, long_words.iloc[[0]], by='k', max_dist=1, logger=QUIET)
    pd.testing.assert_frame_equal(direct, variant)


def test_stringdist_methods(short_words, long_words):
    result = stringdist_inner_join(
        short_words, long_words, by='k', method='jw', max_dist=0.2,
        distance_col='distance', logger=QUIET
    )
    assert list(zip(result['k.x'], result['k.y'])) == [('ab', 'abc'), ('xyz', 'xy')]
    assert result['distance'].between(0, 0.2).all()


def test_stringdist_ignore_case():
    left = pd.DataFrame({'city': ['PARIS', 'Lyon']})
    right = pd.DataFrame({'city': ['paris', 'lyons']})

    strict = stringdist_inner_join(left, right, by='city', max_dist=0, logger=QUIET)
    relaxed = stringdist_inner_join(left, right, by='city', max_dist=0, ignore_case=True, logger=QUIET)

    assert strict.empty
    assert relaxed['city.y'].tolist() == ['paris']


def test_regex_joins():
    lines = pd.DataFrame({'msg': ['disk full on sda1', 'login ok', 'OOM killer']})
    rules = pd.DataFrame({'msg': [r'disk\s+full', r'\boom\b'], 'severity': ['crit', 'warn']})

    tagged = regex_inner_join(lines, rules, by='msg', ignore_case=True, logger=QUIET)
    flagged = regex_semi_join(lines, rules, by='msg', logger=QUIET)

    assert tagged['severity'].tolist() == ['crit', 'warn']
    assert flagged['msg'].tolist() == ['disk full on sda1']


def test_difference_joins():
    left = pd.DataFrame({'value': [1.0, 2.0, 10.0]})
    right = pd.DataFrame({'value': [1.4, 3.0]})

    inner = difference_inner_join(left, right, by='value', max_dist=0.5, distance_col='diff', logger=QUIET)
    full = difference_full_join(left, right, by='value', max_dist=0.5, logger=QUIET)

    assert inner['value.x'].tolist() == [1.0]
    assert inner['diff'].tolist() == pytest.approx([0.4])
    assert len(full) == 4
    assert full['value.y'].tolist()[-1] == 3.0


def test_distance_join():
    left = pd.DataFrame({'x': [0, 3], 'y': [0, 4]})
    right = pd.DataFrame({'x': [0], 'y': [0]})

    euclidean = distance_inner_join(left, right, by=['x', 'y'], max_dist=6, distance_col='d', logger=QUIET)
    manhattan = distance_inner_join(
        left, right, by=['x', 'y'], max_dist=6, method='manhattan', distance_col='d', logger=QUIET
    )

    assert euclidean['d'].tolist() == pytest.approx([0, 5])
    assert manhattan['d'].tolist() == pytest.approx([0])


def test_geo_join():
    cities = pd.DataFrame({'city': ['Amsterdam', 'Maastricht'], 'lon': [4.90, 5.69], 'lat': [52.37, 50.85]})
    stations = pd.DataFrame({'station': ['De Bilt'], 'lon': [5.18], 'lat': [52.10]})

    result = geo_inner_join(
        cities, stations, by=['lon', 'lat'], max_dist=50, unit='km',
        distance_col='km', logger=QUIET
    )

    assert result['city'].tolist() == ['Amsterdam']
    assert 30 < result.loc[0, 'km'] < 40


def test_interval_joins():
    left = pd.DataFrame({'start': [1, 10], 'end': [5, 12]})
    right = pd.DataFrame({'start': [4, 13], 'end': [8, 20], 'label': ['a', 'b']})

    inner = interval_inner_join(left, right, by=['start', 'end'], logger=QUIET)
    gapped = interval_left_join(left, right, by=['start', 'end'], maxgap=1, logger=QUIET)

    assert inner['label'].tolist() == ['a']
    assert gapped['label'].tolist() == ['a', 'b']


def test_interval_join_distance_column_is_missing():
    left = pd.DataFrame({'start': [1], 'end': [5]})
    result = interval_inner_join(left, left, by=['start', 'end'], distance_col='d', logger=QUIET)

    assert len(result) == 1
    assert result['d'].dtype == float
    assert result['d'].isna().all()


@pytest.mark.parametrize('right_text', [[], ['full']])
def test_regex_join_distance_column(right_text):
    lines = pd.DataFrame({'text': ['disk full']})
    rules = pd.DataFrame({'text': pd.Series(right_text, dtype=object)})

    result = regex_inner_join(lines, rules, by='text', distance_col='d', quiet=True, logger=QUIET)

    assert list(result.columns) == ['text.x', 'text.y', 'd']
    assert len(result) == len(right_text)
    assert result['d'].isna().all()


def test_genome_joins():
    left = pd.DataFrame({'chr': ['chr1', 'chr2'], 'start': [100, 100], 'end': [200, 200]})
    right = pd.DataFrame({'chr': ['chr1', 'chr1'], 'start': [150, 300], 'end': [250, 400], 'gene': ['A', 'B']})
    by = ['chr', 'start', 'end']

    inner = genome_inner_join(left, right, by=by, logger=QUIET)
    anti = genome_anti_join(left, right, by=by, logger=QUIET)

    assert inner['gene'].tolist() == ['A']
    assert anti['chr'].tolist() == ['chr2']


def test_auto_detected_columns_by_family(short_words, long_words, caplog):
    with caplog.at_level(logging.INFO, logger='tests.joins'):
        result = stringdist_inner_join(short_words, long_words, max_dist=1, logger=QUIET)
    assert len(result) == 2
    assert "Joining by: ['k']" in caplog.text


def test_missing_values_are_never_matched():
    left = pd.DataFrame({'k': ['ab', np.nan]})
    right = pd.DataFrame({'k': [np.nan, 'ab']})
    result = stringdist_inner_join(left, right, by='k', max_dist=10, logger=QUIET)
    assert list(zip(result['k.x'], result['k.y'])) == [('ab', 'ab')]
