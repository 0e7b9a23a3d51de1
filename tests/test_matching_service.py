"""Tests for passenger to driver matching"""

import pytest

from waitretry.application.matching_service import MatchingService, NearestDriverMatchingStrategy
from waitretry.domain.errors import InvalidArgument
from waitretry.domain.models.matching import Driver, MatchResult, Passenger


@pytest.fixture
def service():
    return MatchingService(NearestDriverMatchingStrategy())


def test_returns_nearest_driver_within_max_distance(service):
    passenger = Passenger(1, 30.0, 120.0)
    drivers = [
        Driver(101, 30.001, 120.002),  # closer
        Driver(102, 29.995, 120.005),
    ]

    result = service.match_passenger_to_driver(passenger, drivers, max_distance=1.0)

    assert isinstance(result, MatchResult)
    assert result.driver.id == 101
    assert result.passenger.id == 1
    assert result.distance < 1.0
    assert drivers[0].is_available is False
    assert drivers[1].is_available is True


def test_returns_none_if_no_driver_within_max_distance(service):
    passenger = Passenger(2, 35.0, 120.0)
    drivers = [Driver(201, 30.0, 120.0)]

    assert service.match_passenger_to_driver(passenger, drivers, max_distance=1.0) is None
    assert drivers[0].is_available is True


def test_only_considers_available_drivers(service):
    passenger = Passenger(3, 30.0, 120.0)
    drivers = [
        Driver(301, 30.001, 120.001, is_available=False),
        Driver(302, 30.002, 120.002),
    ]

    result = service.match_passenger_to_driver(passenger, drivers, max_distance=1.0)

    assert result is not None
    assert result.driver.id == 302
    assert drivers[1].is_available is False


def test_matched_driver_not_reused(service):
    drivers = [Driver(401, 30.001, 120.001), Driver(402, 30.003, 120.003)]

    first = service.match_passenger_to_driver(Passenger(4, 30.0, 120.0), drivers, max_distance=1.0)
    second = service.match_passenger_to_driver(Passenger(5, 30.0, 120.0), drivers, max_distance=1.0)
    third = service.match_passenger_to_driver(Passenger(6, 30.0, 120.0), drivers, max_distance=1.0)

    assert first.driver.id == 401
    assert second.driver.id == 402
    assert third is None


def test_distance_equal_to_max_is_accepted(service):
    passenger = Passenger(7, 0.0, 0.0)
    driver = Driver(701, 0.0, 0.0)

    result = service.match_passenger_to_driver(passenger, [driver], max_distance=0.0)

    assert result is not None
    assert result.distance == 0.0


def test_first_driver_wins_on_tie(service):
    passenger = Passenger(8, 10.0, 10.0)
    drivers = [Driver(801, 10.001, 10.0), Driver(802, 10.001, 10.0)]

    result = service.match_passenger_to_driver(passenger, drivers, max_distance=5.0)

    assert result.driver.id == 801


def test_empty_driver_list(service):
    assert service.match_passenger_to_driver(Passenger(9, 0.0, 0.0), [], max_distance=10.0) is None


def test_accepts_any_iterable(service):
    drivers = (d for d in [Driver(901, 30.001, 120.001)])
    result = service.match_passenger_to_driver(Passenger(10, 30.0, 120.0), drivers, max_distance=1.0)
    assert result.driver.id == 901


def test_invalid_driver_coordinates(service):
    with pytest.raises(InvalidArgument, match="latitude2"):
        service.match_passenger_to_driver(Passenger(11, 0.0, 0.0), [Driver(1101, 91.0, 0.0)], max_distance=1.0)


def test_custom_strategy_is_used():
    class FirstAvailable:
        def match(self, passenger, drivers, max_distance):
            driver = next(d for d in drivers if d.is_available)
            return MatchResult(passenger, driver, 0.0)

    service = MatchingService(FirstAvailable())
    result = service.match_passenger_to_driver(Passenger(12, 0.0, 0.0), [Driver(1201, 50.0, 50.0)], max_distance=1.0)
    assert result.driver.id == 1201


def test_passenger_price_range_validation():
    with pytest.raises(ValueError, match="max_price"):
        Passenger(13, 0.0, 0.0, min_price=20.0, max_price=10.0)
    assert Passenger(14, 0.0, 0.0, min_price=10.0, max_price=20.0).max_price == 20.0
