"""
Application services for looking up a space's availability calendar.

The service resolves a space through a space source adapter and delegates
the calculation to the domain-level ``AvailabilityCalculator``. This keeps the
CLI thin and lets tests swap the source for a simple stub.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Protocol

from ..domain.availability_calculator import AvailabilityCalculator
from ..domain.models import AvailabilityCalendar, Space

logger = logging.getLogger(__name__)


class SpaceSourceProtocol(Protocol):
    """Protocol describing the space source behaviour needed by the service."""

    def get_space(self, name: str) -> Space:
        """Return the space with the given name."""

    def list_spaces(self) -> List[str]:
        """Return the names of all known spaces."""


class AvailabilityService:
    """
    Orchestrates space lookup and availability calculation.

    The reference instant is always supplied by the caller; the service
    never reads the clock.
    """

    def __init__(
        self,
        space_source: SpaceSourceProtocol,
        calculator: AvailabilityCalculator | None = None,
    ) -> None:
        self._space_source = space_source
        self._calculator = calculator or AvailabilityCalculator()

    def list_spaces(self) -> List[str]:
        return self._space_source.list_spaces()

    def get_space(self, name: str) -> Space:
        return self._space_source.get_space(name)

    def fetch_availability(
        self,
        *,
        space_name: str,
        number_of_days: int,
        now: datetime,
    ) -> AvailabilityCalendar:
        """Resolve a space by name and compute its availability calendar."""
        space = self._space_source.get_space(space_name)
        logger.debug(
            "Fetching %d day(s) of availability for %r (%s, %d min notice)",
            number_of_days,
            space_name,
            space.time_zone,
            space.minimum_notice,
        )
        return self.fetch_availability_for_space(
            space=space,
            number_of_days=number_of_days,
            now=now,
        )

    def fetch_availability_for_space(
        self,
        *,
        space: Space,
        number_of_days: int,
        now: datetime,
    ) -> AvailabilityCalendar:
        """Compute the availability calendar for an already loaded space."""
        return self._calculator.compute_availability(space, number_of_days, now)
