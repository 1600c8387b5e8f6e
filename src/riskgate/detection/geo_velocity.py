"""Geo-velocity scoring - flags physically implausible travel.

Pure functions, no state: the caller supplies both locations and the
elapsed time between them.
"""

from typing import Optional, Sequence

from riskgate.common.constants import DetectionConstants
from riskgate.data.schemas.location import Location
from riskgate.detection.geo import haversine_km, distances_km


class GeoVelocityScorer:
    """Maps implied travel speed between two logins to a 0-100 score.

    Missing history is not evidence of risk: without both locations and a
    positive elapsed time the score is 0.
    """

    VELOCITY_BANDS = DetectionConstants.VELOCITY_BANDS
    DEFAULT_HOURS_ELAPSED = DetectionConstants.DEFAULT_HOURS_ELAPSED

    @classmethod
    def score(
        cls,
        current: Optional[Location],
        previous: Optional[Location],
        hours_elapsed: Optional[float] = None,
    ) -> float:
        """Score the travel from previous to current.

        Args:
            current: Location of this attempt
            previous: Location of the last known login
            hours_elapsed: Hours between the two; 24 when unknown

        Returns:
            Score in [0, 100]
        """
        if hours_elapsed is None:
            hours_elapsed = cls.DEFAULT_HOURS_ELAPSED

        if current is None or previous is None or hours_elapsed <= 0:
            return 0.0

        velocity_kmh = haversine_km(previous, current) / hours_elapsed

        for threshold, band_score in cls.VELOCITY_BANDS:
            if velocity_kmh > threshold:
                return band_score
        return 0.0


def calculate_geo_velocity_score(
    current: Optional[Location],
    previous: Optional[Location],
    hours_elapsed: Optional[float] = None,
) -> float:
    """Module-level shorthand for GeoVelocityScorer.score."""
    return GeoVelocityScorer.score(current, previous, hours_elapsed)


def is_new_location(
    current: Optional[Location],
    previous: Sequence[Location],
    tolerance_km: float = DetectionConstants.LOCATION_TOLERANCE_KM,
) -> bool:
    """True unless current lies within tolerance_km of a previous location."""
    if current is None or not previous:
        return True
    return bool((distances_km(current, previous) >= tolerance_km).all())
