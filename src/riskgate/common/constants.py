"""Centralized constants for RiskGate."""


# ===== SCORING =====
class RiskConstants:
    SCORE_MIN = 0.0
    SCORE_MAX = 100.0

    # Default composite weights (sum to 1.0)
    WEIGHT_BRUTE_FORCE = 0.30
    WEIGHT_CREDENTIAL_STUFFING = 0.25
    WEIGHT_GEO_VELOCITY = 0.20
    WEIGHT_ANOMALY = 0.15
    WEIGHT_DEVICE_REPUTATION = 0.10

    # Lower bound of each level
    LEVEL_MEDIUM = 30.0
    LEVEL_HIGH = 60.0
    LEVEL_CRITICAL = 85.0


# ===== DETECTORS =====
class DetectionConstants:
    # Brute force
    BRUTE_FORCE_WINDOW_SECONDS = 5 * 60
    BRUTE_FORCE_POINTS_PER_FAILURE = 20

    # Credential stuffing
    STUFFING_WINDOW_SECONDS = 15 * 60
    STUFFING_DISTINCT_USERS_THRESHOLD = 3
    STUFFING_ATTEMPTS_PER_USER_THRESHOLD = 2
    STUFFING_RAPID_WINDOW_SECONDS = 60
    STUFFING_RAPID_ATTEMPTS_THRESHOLD = 10
    STUFFING_DISTINCT_USERS_POINTS = 50
    STUFFING_FAILED_ATTEMPTS_POINTS = 30
    STUFFING_RAPID_FIRE_POINTS = 20

    # Geo velocity
    EARTH_RADIUS_KM = 6371.0
    DEFAULT_HOURS_ELAPSED = 24.0
    # (velocity km/h strictly above, score), checked in order
    VELOCITY_BANDS = (
        (800.0, 100.0),
        (500.0, 80.0),
        (300.0, 60.0),
        (200.0, 40.0),
        (100.0, 20.0),
    )

    # Behavioral anomaly
    LOCATION_TOLERANCE_KM = 50.0
    BASELINE_MAX_LOCATIONS = 10
    BASELINE_REFRESH_DAYS = 7
    ANOMALY_NEW_LOCATION_POINTS = 30
    ANOMALY_UNUSUAL_HOUR_POINTS = 20
    ANOMALY_NEW_DEVICE_POINTS = 25


# ===== DEVICE REPUTATION =====
class ReputationConstants:
    NEUTRAL_SCORE = 50.0
    SUCCESS_DELTA = 2.0
    FAILURE_DELTA = -10.0
    CHALLENGE_PASS_DELTA = 5.0
    CHALLENGE_FAIL_DELTA = -15.0


# ===== STORAGE =====
class StorageConstants:
    WINDOW_TTL_SLACK_SECONDS = 60
    METRICS_TTL_SECONDS = 30 * 24 * 60 * 60
    SESSION_TTL_SECONDS = 24 * 60 * 60
    LAST_LOGIN_TTL_SECONDS = 30 * 24 * 60 * 60

    BRUTE_FORCE_PREFIX = "bruteforce:"
    STUFFING_PREFIX = "stuffing:"
    METRICS_PREFIX = "metrics:"
    BASELINE_PREFIX = "baseline:"
    DEVICE_PREFIX = "device:"
    LAST_LOGIN_PREFIX = "lastlogin:"
    SESSION_PREFIX = "session:"


# ===== ANALYTICS =====
class AnalyticsConstants:
    TOP_RISK_IP_MIN_SCORE = 30.0
    TOP_RISK_IP_LIMIT = 10
