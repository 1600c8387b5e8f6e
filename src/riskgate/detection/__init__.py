"""Detection - independent risk detectors."""

from riskgate.detection.geo import haversine_km, distances_km
from riskgate.detection.geo_velocity import (
    GeoVelocityScorer,
    calculate_geo_velocity_score,
    is_new_location,
)
from riskgate.detection.brute_force import BruteForceDetector
from riskgate.detection.credential_stuffing import CredentialStuffingDetector
from riskgate.detection.anomaly import (
    AnomalyDetector,
    score_against,
    refresh_due,
    fold_attempt,
)

__all__ = [
    "haversine_km",
    "distances_km",
    "GeoVelocityScorer",
    "calculate_geo_velocity_score",
    "is_new_location",
    "BruteForceDetector",
    "CredentialStuffingDetector",
    "AnomalyDetector",
    "score_against",
    "refresh_due",
    "fold_attempt",
]
