"""Passenger to driver matching"""

import logging
from typing import Iterable, Optional, Protocol

from waitretry.domain.models.matching import Driver, MatchResult, Passenger
from waitretry.infrastructure.geo import haversine_distance

logger = logging.getLogger(__name__)


class MatchingStrategy(Protocol):
    """Picks a driver for a passenger"""

    def match(
        self, passenger: Passenger, drivers: Iterable[Driver], max_distance: float
    ) -> Optional[MatchResult]:
        ...


class NearestDriverMatchingStrategy:
    """Nearest available driver within max_distance wins"""

    def match(
        self, passenger: Passenger, drivers: Iterable[Driver], max_distance: float
    ) -> Optional[MatchResult]:
        """Match passenger to the nearest available driver

        The matched driver is marked unavailable.

        Args:
            passenger: Passenger to match
            drivers: Candidate drivers
            max_distance: Maximum pickup distance in km

        Returns:
            MatchResult or None if no available driver is close enough
        """
        nearest: Optional[Driver] = None
        min_distance = float("inf")

        for driver in drivers:
            if not driver.is_available:
                continue

            distance = haversine_distance(
                passenger.latitude, passenger.longitude, driver.latitude, driver.longitude
            )
            if distance < min_distance and distance <= max_distance:
                min_distance = distance
                nearest = driver

        if nearest is None:
            logger.debug(f"No driver within {max_distance} km of passenger {passenger.id}")
            return None

        nearest.is_available = False
        logger.info(f"Matched passenger {passenger.id} with driver {nearest.id} ({min_distance} km)")
        return MatchResult(passenger=passenger, driver=nearest, distance=min_distance)


class MatchingService:
    """Matches passengers to drivers using a pluggable strategy"""

    def __init__(self, matching_strategy: MatchingStrategy):
        self.matching_strategy = matching_strategy

    def match_passenger_to_driver(
        self, passenger: Passenger, drivers: Iterable[Driver], max_distance: float
    ) -> Optional[MatchResult]:
        return self.matching_strategy.match(passenger, drivers, max_distance)
