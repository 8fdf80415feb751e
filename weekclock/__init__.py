"""
weekclock - canonical week boundaries and date ranges for a weekly time tracker.
"""

__version__ = "1.0.0"
