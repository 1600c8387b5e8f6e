"""Analytics - daily aggregate metrics."""

from riskgate.analytics.collector import AnalyticsCollector

__all__ = ["AnalyticsCollector"]
