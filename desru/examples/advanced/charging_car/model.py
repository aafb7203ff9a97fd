"""
Charging Car
============

An electric car that alternates between parking to charge its battery and
driving. Like the simple car, but the process is an object: each method
schedules the next one as the action of a new event, so the state of the car
(its battery level and the number of trips) lives on the instance.
"""

import logging

from desru import Event, EventScheduler

logger = logging.getLogger(__name__)

MAX_TIME = 15.0
CHARGE_DURATION = 5.0
TRIP_DURATION = 2.0


class Car:
    """An electric car driven by events.

    Attributes:
        scheduler (EventScheduler): the scheduler the car schedules its events on
        name (str): identifies the car in the event context
        battery (float): charge level between 0 and 1
        trips (int): number of trips started
    """

    charge_rate = 0.2
    consumption_rate = 0.25

    def __init__(self, scheduler: EventScheduler, name: str = "car", battery: float = 0.0):
        """Create a car and start its process at the current time.

        Args:
            scheduler: the scheduler to run the car on
            name: name of the car
            battery: initial charge level
        """
        self.scheduler = scheduler
        self.name = name
        self.battery = battery
        self.trips = 0
        self.start()

    def _context(self, state: str) -> dict[str, str]:
        return {"process": self.name, "state": state}

    def start(self) -> Event:
        """Schedule the first charge at the current time."""
        return self.scheduler.schedule(
            Event(self.scheduler.current_time, self.charge, self._context("charge"))
        )

    def charge(self, scheduler: EventScheduler) -> str:
        """Park and charge, then schedule the next trip."""
        logger.info("%s: start parking and charging at %s", self.name, scheduler.current_time)
        self.battery = min(1.0, self.battery + self.charge_rate * CHARGE_DURATION)
        scheduler.schedule(
            Event(
                scheduler.current_time + CHARGE_DURATION,
                self.drive,
                self._context("drive"),
            )
        )
        return "charge"

    def drive(self, scheduler: EventScheduler) -> str:
        """Drive, then schedule the next charge."""
        logger.info("%s: start driving at %s", self.name, scheduler.current_time)
        self.trips += 1
        self.battery = max(0.0, self.battery - self.consumption_rate * TRIP_DURATION)
        scheduler.schedule(
            Event(
                scheduler.current_time + TRIP_DURATION,
                self.charge,
                self._context("charge"),
            )
        )
        return "drive"


def simulate(max_time: float = MAX_TIME, n_cars: int = 1) -> tuple[EventScheduler, list[Car]]:
    """Run ``n_cars`` cars on one scheduler until max_time."""
    scheduler = EventScheduler()
    cars = [Car(scheduler, name=f"car-{i}") for i in range(n_cars)]
    scheduler.run_until_max_time(max_time)
    return scheduler, cars
