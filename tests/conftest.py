from collections import Counter

import pandas as pd
import pytest


@pytest.fixture
def short_words():
    return pd.DataFrame({'k': ['ab', 'xyz']})


@pytest.fixture
def long_words():
    return pd.DataFrame({'k': ['abc', 'xy']})


@pytest.fixture
def people():
    return pd.DataFrame({
        'id': [1, 2, 3, 4],
        'name': ['Jon', 'Ann', 'Bert', 'Zed'],
    })


@pytest.fixture
def accounts():
    return pd.DataFrame({
        'name': ['John', 'Jan', 'Anna', 'Bart', 'Quentin'],
        'account': ['a1', 'a2', 'a3', 'a4', 'a5'],
    })


def row_multiset(df: pd.DataFrame) -> Counter:
    """Rows as hashable tuples, missing values normalized to None."""
    return Counter(
        tuple(None if pd.isna(value) else value for value in row)
        for row in df.itertuples(index=False)
    )
