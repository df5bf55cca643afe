"""
Availability calendars for bookable spaces with weekly opening hours.
"""

__version__ = "0.1.0"
