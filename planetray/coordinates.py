"""
Epicentral distances from geographic coordinates, and cross-section
coordinates of ray paths.
"""

from typing import Tuple

import numpy as np
from obspy.geodetics import locations2degrees


def epicentral_distance(
    eq_lat: float,
    eq_lon: float,
    sta_lat: float,
    sta_lon: float,
) -> float:
    """
    Epicentral distance in radians between an event and a station.

    Parameters
    ----------
    eq_lat, eq_lon : float
        Earthquake latitude and longitude in degrees
    sta_lat, sta_lon : float
        Station latitude and longitude in degrees

    Returns
    -------
    float
        Great-circle distance in radians, in [0, pi]. Suitable as the
        ``target_delta`` of a catalog search.
    """
    for lat, lon in ((eq_lat, eq_lon), (sta_lat, sta_lon)):
        if not CoordinateConverter.validate_coordinates(lat, lon):
            raise ValueError(f"Invalid coordinates: lat={lat}, lon={lon}")
    return float(np.radians(locations2degrees(eq_lat, eq_lon, sta_lat, sta_lon)))


class CoordinateConverter:
    """Planar cross-section coordinates and coordinate validation."""

    @staticmethod
    def polar_to_cartesian(r: np.ndarray, theta: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Convert polar coordinates to Cartesian.

        Parameters
        ----------
        r, theta : np.ndarray
            Radius and angle in radians
        """
        x = r * np.cos(theta)
        y = r * np.sin(theta)
        return x, y

    @staticmethod
    def path_to_cartesian(
        points: np.ndarray,
        source_angle: float = 90.0,
        clockwise: bool = True,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Place a ray path in a planar cross section.

        Parameters
        ----------
        points : np.ndarray, shape (N, 2)
            (radius in km, angular distance in radians) pairs, as returned
            by :meth:`RayPath.path_points`.
        source_angle : float
            Polar angle of the source in degrees (90 puts it at the top).
        clockwise : bool
            Whether distance increases clockwise from the source.

        Returns
        -------
        x, y : np.ndarray
            Cartesian coordinates in km
        """
        points = np.asarray(points, dtype=float).reshape(-1, 2)
        sign = -1.0 if clockwise else 1.0
        theta = np.radians(source_angle) + sign * points[:, 1]
        return CoordinateConverter.polar_to_cartesian(points[:, 0], theta)

    @staticmethod
    def validate_coordinates(lat: float, lon: float) -> bool:
        """
        Validate latitude and longitude coordinates.

        Parameters
        ----------
        lat, lon : float
            Latitude and longitude in degrees

        Returns
        -------
        valid : bool
            True if coordinates are valid
        """
        return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0
