"""
Core models, validation and correction for the feed quality monitor.
"""
