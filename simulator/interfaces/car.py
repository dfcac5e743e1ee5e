"""
Car Interface

Defines the surface the Building uses to drive one elevator car.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from ..core.request import Direction, Request


class ICar(ABC):
    """
    Interface for an elevator car driven by the Building

    The Building never looks inside a car: it reads the floor and direction
    to pick candidates for a batch, then issues commands. Keeping this surface
    small lets tests substitute a scripted car.

    Usage:
        car.start()
        car.accept_batch([Request(0, 3), Request(1, 4)])
        car.step()
        report = car.get_elevator_status()
    """

    @property
    @abstractmethod
    def car_id(self) -> int:
        """Unique car id"""

    @property
    @abstractmethod
    def current_floor(self) -> int:
        """Floor the car is at (0-based)"""

    @property
    @abstractmethod
    def direction(self) -> Direction:
        """Current travel direction"""

    @property
    @abstractmethod
    def is_parked(self) -> bool:
        """True when the car rests out of service at floor 0"""

    @abstractmethod
    def start(self) -> bool:
        """
        Put a parked car into service

        Returns:
            True if the car was started, False if it was not parked
        """

    @abstractmethod
    def take_out_of_service(self):
        """Finish the current door cycle, return to floor 0 and park (idempotent)"""

    @abstractmethod
    def step(self):
        """Advance one tick"""

    @abstractmethod
    def accept_batch(self, requests: Sequence[Request]):
        """
        Take a batch of same-direction requests

        Raises:
            InvalidArgumentError: Batch is empty, too large, mixed or out of range
            IllegalStateError: Car is not idle at the batch's terminal floor
        """

    @abstractmethod
    def get_elevator_status(self):
        """Read-only CarReport snapshot"""
