"""Q-gram profile analysis for qgram, cosine and jaccard string distances."""

import logging
from typing import List, Tuple

import numpy as np
from scipy.sparse import csr_matrix
from sklearn.feature_extraction.text import CountVectorizer
from sklearn.metrics.pairwise import cosine_similarity, manhattan_distances

QGRAM_METHODS = ('qgram', 'cosine', 'jaccard')


class QGramAnalyzer:
    """Character q-gram count profiles shared by both sides of a join."""

    def __init__(self, q: int = 1):
        """
        Initialize the analyzer.

        Args:
            q: Length of the character q-grams
        """
        self.q = q
        self.vectorizer = CountVectorizer(
            analyzer='char',
            ngram_range=(q, q),
            lowercase=False,
            dtype=np.float64
        )

    def profiles(
        self,
        left: List[str],
        right: List[str]
    ) -> Tuple[csr_matrix, csr_matrix]:
        """
        Count q-grams of both sides over one shared vocabulary.

        Args:
            left: Left strings
            right: Right strings

        Returns:
            Tuple[csr_matrix, csr_matrix]: Profiles of shape (n, V) and (m, V)
        """
        if not any(len(text) >= self.q for text in list(left) + list(right)):
            # Nothing long enough to form a q-gram: every profile is empty
            return csr_matrix((len(left), 0)), csr_matrix((len(right), 0))

        self.vectorizer.fit(list(left) + list(right))
        logging.debug(
            f"Q-gram vocabulary of {len(self.vectorizer.vocabulary_)} terms (q={self.q})"
        )
        return (
            csr_matrix(self.vectorizer.transform(left)),
            csr_matrix(self.vectorizer.transform(right))
        )

    def distance_matrix(
        self,
        left: List[str],
        right: List[str],
        method: str
    ) -> np.ndarray:
        """
        Q-gram based distance between every left and right string.

        Args:
            left: Left strings
            right: Right strings
            method: One of 'qgram', 'cosine' or 'jaccard'

        Returns:
            np.ndarray: Float matrix of shape (len(left), len(right))
        """
        if method not in QGRAM_METHODS:
            raise ValueError(f"Not a q-gram method: {method}")

        left_profiles, right_profiles = self.profiles(left, right)
        n, m = left_profiles.shape[0], right_profiles.shape[0]
        if left_profiles.shape[1] == 0 or n == 0 or m == 0:
            return np.zeros((n, m))

        left_sizes = np.asarray(left_profiles.sum(axis=1)).ravel()
        right_sizes = np.asarray(right_profiles.sum(axis=1)).ravel()
        both_empty = (left_sizes[:, None] == 0) & (right_sizes[None, :] == 0)

        if method == 'qgram':
            return manhattan_distances(left_profiles, right_profiles)

        if method == 'cosine':
            distances = 1.0 - cosine_similarity(left_profiles, right_profiles)
            distances = np.clip(distances, 0.0, 1.0)
            distances[both_empty] = 0.0
            return distances

        return self._jaccard(left_profiles, right_profiles)

    def _jaccard(self, left_profiles: csr_matrix, right_profiles: csr_matrix) -> np.ndarray:
        """One minus |A & B| / |A | B| over the sets of q-grams."""
        left_sets = (left_profiles > 0).astype(np.float64)
        right_sets = (right_profiles > 0).astype(np.float64)

        shared = np.asarray((left_sets @ right_sets.T).todense())
        left_sizes = np.asarray(left_sets.sum(axis=1)).ravel()
        right_sizes = np.asarray(right_sets.sum(axis=1)).ravel()
        union = left_sizes[:, None] + right_sizes[None, :] - shared

        with np.errstate(divide='ignore', invalid='ignore'):
            distances = 1.0 - shared / union
        distances[union == 0] = 0.0
        return distances
