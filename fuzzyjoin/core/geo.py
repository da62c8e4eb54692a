"""Great-circle distances between longitude/latitude points, in metres."""

from typing import Callable, Dict

import numpy as np


def haversine(lon1, lat1, lon2, lat2, radius: float) -> np.ndarray:
    """Haversine formula; inputs in degrees, broadcast against each other."""
    lon1, lat1, lon2, lat2 = map(np.radians, (lon1, lat1, lon2, lat2))
    dlon = lon2 - lon1
    dlat = lat2 - lat1
    a = np.sin(dlat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2) ** 2
    a = np.minimum(a, 1.0)
    return 2 * radius * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


def spherical_cosine(lon1, lat1, lon2, lat2, radius: float) -> np.ndarray:
    """Spherical law of cosines."""
    lon1, lat1, lon2, lat2 = map(np.radians, (lon1, lat1, lon2, lat2))
    cos_angle = (
        np.sin(lat1) * np.sin(lat2)
        + np.cos(lat1) * np.cos(lat2) * np.cos(lon2 - lon1)
    )
    return radius * np.arccos(np.clip(cos_angle, -1.0, 1.0))


def vincenty_sphere(lon1, lat1, lon2, lat2, radius: float) -> np.ndarray:
    """Vincenty formula specialised to a sphere."""
    lon1, lat1, lon2, lat2 = map(np.radians, (lon1, lat1, lon2, lat2))
    dlon = lon2 - lon1
    x = np.sqrt(
        (np.cos(lat2) * np.sin(dlon)) ** 2
        + (np.cos(lat1) * np.sin(lat2) - np.sin(lat1) * np.cos(lat2) * np.cos(dlon)) ** 2
    )
    y = np.sin(lat1) * np.sin(lat2) + np.cos(lat1) * np.cos(lat2) * np.cos(dlon)
    return radius * np.arctan2(x, y)


GEO_DISTANCES: Dict[str, Callable[..., np.ndarray]] = {
    'haversine': haversine,
    'cosine': spherical_cosine,
    'vincentysphere': vincenty_sphere,
}


def distance_matrix(left: np.ndarray, right: np.ndarray, method: str, radius: float) -> np.ndarray:
    """Distances in metres between (lon, lat) rows of `left` and of `right`."""
    formula = GEO_DISTANCES[method]
    return formula(
        left[:, 0][:, None], left[:, 1][:, None],
        right[:, 0][None, :], right[:, 1][None, :],
        radius
    )
