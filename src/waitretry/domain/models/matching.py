"""Ride matching models"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Passenger:
    """Passenger requesting a ride"""

    id: int
    latitude: float
    longitude: float
    min_price: Optional[float] = None  # Lowest acceptable price
    max_price: Optional[float] = None  # Highest acceptable price

    def __post_init__(self):
        """Validate price range"""
        if self.min_price is not None and self.max_price is not None and self.max_price < self.min_price:
            raise ValueError("max_price must be >= min_price")


@dataclass
class Driver:
    """Driver that can be matched; is_available flips to False once matched"""

    id: int
    latitude: float
    longitude: float
    is_available: bool = True
    base_price: float = 0.0  # Price the driver expects for the current order
    rating: float = 0.0
    acceptance_rate: float = 0.0
    idle_minutes: float = 0.0


@dataclass(frozen=True)
class MatchResult:
    """Passenger paired with a driver, distance in km"""

    passenger: Passenger
    driver: Driver
    distance: float
