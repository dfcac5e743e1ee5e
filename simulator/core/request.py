"""
Request - Floor-to-floor travel request

A request is the only unit of work the dispatcher handles: a pickup floor and
a drop-off floor. Its travel direction is derived, never stored.
"""

from dataclasses import dataclass
from enum import Enum


class Direction(Enum):
    """Travel direction of a car, rendered with a one-character symbol"""
    UP = "^"
    DOWN = "v"
    STOPPED = "-"

    @property
    def symbol(self) -> str:
        return self.value

    def reversed(self) -> 'Direction':
        if self is Direction.UP:
            return Direction.DOWN
        if self is Direction.DOWN:
            return Direction.UP
        return Direction.STOPPED

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Request:
    """
    Immutable travel request.

    Attributes:
        start_floor: Floor where the rider is picked up
        end_floor: Floor where the rider is dropped off

    Floor bounds are checked by the Building when the request is added,
    not here.
    """
    start_floor: int
    end_floor: int

    @property
    def direction(self) -> Direction:
        """UP if the request travels upwards, DOWN otherwise"""
        if self.start_floor < self.end_floor:
            return Direction.UP
        return Direction.DOWN

    def floors(self):
        """Pickup and drop-off floors, in travel order"""
        return (self.start_floor, self.end_floor)

    def to_dict(self) -> dict:
        return {'start_floor': self.start_floor, 'end_floor': self.end_floor}

    def __str__(self) -> str:
        return f"[{self.start_floor}->{self.end_floor}]"
