"""
Domain-specific exception hierarchy for the space availability application.
"""


class SpaceAvailabilityError(Exception):
    """Base class for all application-level errors."""


class SpaceNotFoundError(SpaceAvailabilityError):
    """Raised when a requested space is unknown to the space source."""


class SpaceConfigError(SpaceAvailabilityError):
    """Raised when a space record or config file cannot be parsed or validated."""
