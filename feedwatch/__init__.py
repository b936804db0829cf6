"""
feedwatch: data quality monitoring for market data feeds.

Streaming anomaly and outlier detection, freshness and completeness
tracking, lineage, correction, reliability scoring and periodic reports
over an in-memory store.
"""

__version__ = "0.1.0"
