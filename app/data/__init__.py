"""
Scheduled data maintenance for the app directory.

This package is responsible for:
* Running the daily metadata refresh against the configured data directory.
"""
