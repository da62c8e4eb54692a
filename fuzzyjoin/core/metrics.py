"""Edit-distance style string metrics."""

import math
from functools import lru_cache
from typing import Callable, Dict, Sequence

import numpy as np
import Levenshtein

_SOUNDEX_CODES = {
    letter: digit
    for letters, digit in (
        ('bfpv', '1'), ('cgjkqsxz', '2'), ('dt', '3'),
        ('l', '4'), ('mn', '5'), ('r', '6')
    )
    for letter in letters
}


@lru_cache(maxsize=10000)
def osa_distance(s1: str, s2: str) -> float:
    """Optimal string alignment: Levenshtein plus adjacent transpositions,
    each substring edited at most once."""
    n, m = len(s1), len(s2)
    d = [[0] * (m + 1) for _ in range(n + 1)]
    for i in range(n + 1):
        d[i][0] = i
    for j in range(m + 1):
        d[0][j] = j

    for i in range(1, n + 1):
        for j in range(1, m + 1):
            cost = 0 if s1[i - 1] == s2[j - 1] else 1
            d[i][j] = min(
                d[i - 1][j] + 1,
                d[i][j - 1] + 1,
                d[i - 1][j - 1] + cost
            )
            if (i > 1 and j > 1 and s1[i - 1] == s2[j - 2]
                    and s1[i - 2] == s2[j - 1]):
                d[i][j] = min(d[i][j], d[i - 2][j - 2] + 1)

    return float(d[n][m])


@lru_cache(maxsize=10000)
def damerau_levenshtein_distance(s1: str, s2: str) -> float:
    """Full Damerau-Levenshtein distance (unrestricted transpositions)."""
    n, m = len(s1), len(s2)
    max_dist = n + m
    last_row: Dict[str, int] = {}

    # Offset by one so row/column 0 hold the max_dist border
    d = [[0] * (m + 2) for _ in range(n + 2)]
    d[0][0] = max_dist
    for i in range(n + 1):
        d[i + 1][0] = max_dist
        d[i + 1][1] = i
    for j in range(m + 1):
        d[0][j + 1] = max_dist
        d[1][j + 1] = j

    for i in range(1, n + 1):
        last_match_col = 0
        for j in range(1, m + 1):
            k = last_row.get(s2[j - 1], 0)
            l = last_match_col
            if s1[i - 1] == s2[j - 1]:
                cost = 0
                last_match_col = j
            else:
                cost = 1
            d[i + 1][j + 1] = min(
                d[i][j] + cost,
                d[i + 1][j] + 1,
                d[i][j + 1] + 1,
                d[k][l] + (i - k - 1) + 1 + (j - l - 1)
            )
        last_row[s1[i - 1]] = i

    return float(d[n + 1][m + 1])


def levenshtein_distance(s1: str, s2: str) -> float:
    return float(Levenshtein.distance(s1, s2))


def lcs_distance(s1: str, s2: str) -> float:
    """Insertions and deletions only, i.e. len(s1) + len(s2) - 2 * LCS."""
    return float(Levenshtein.distance(s1, s2, weights=(1, 1, 2)))


def hamming_distance(s1: str, s2: str) -> float:
    if len(s1) != len(s2):
        return math.inf
    return float(Levenshtein.hamming(s1, s2))


def jaro_winkler_distance(s1: str, s2: str, p: float = 0.0) -> float:
    if p == 0:
        return 1.0 - Levenshtein.jaro(s1, s2)
    return 1.0 - Levenshtein.jaro_winkler(s1, s2, prefix_weight=p)


@lru_cache(maxsize=10000)
def soundex(text: str) -> str:
    """Four character American Soundex code; empty for text without letters."""
    letters = [c for c in text.lower() if c.isascii() and c.isalpha()]
    if not letters:
        return ''

    code = letters[0].upper()
    previous = _SOUNDEX_CODES.get(letters[0], '')
    for letter in letters[1:]:
        digit = _SOUNDEX_CODES.get(letter, '')
        if digit and digit != previous:
            code += digit
        # h and w do not separate letters with the same code
        if letter not in 'hw':
            previous = digit

    return (code + '000')[:4]


def soundex_distance(s1: str, s2: str) -> float:
    return 0.0 if soundex(s1) == soundex(s2) else 1.0


EDIT_METRICS: Dict[str, Callable[[str, str], float]] = {
    'osa': osa_distance,
    'lv': levenshtein_distance,
    'dl': damerau_levenshtein_distance,
    'hamming': hamming_distance,
    'lcs': lcs_distance,
    'soundex': soundex_distance,
}


def pairwise_distances(
    left: Sequence[str],
    right: Sequence[str],
    method: str,
    p: float = 0.0
) -> np.ndarray:
    """
    Distance between every left string and every right string.

    Args:
        left: Left strings
        right: Right strings
        method: Key of EDIT_METRICS, or 'jw'
        p: Winkler prefix weight, used by 'jw' only

    Returns:
        np.ndarray: Float matrix of shape (len(left), len(right))
    """
    if method == 'jw':
        def metric(a: str, b: str) -> float:
            return jaro_winkler_distance(a, b, p)
    else:
        metric = EDIT_METRICS[method]

    distances = np.empty((len(left), len(right)), dtype=float)
    for i, s1 in enumerate(left):
        for j, s2 in enumerate(right):
            distances[i, j] = metric(s1, s2)
    return distances
