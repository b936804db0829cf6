"""
Logging, metrics, lineage and alerting.
"""
