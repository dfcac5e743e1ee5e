"""State enums for cars and the elevator system"""

from enum import Enum


class CarState(Enum):
    """
    Explicit car state. The countdown of the waiting states lives in
    Car.wait_timer.

    OUT_OF_SERVICE:      parked at floor 0, not taking requests
    WAITING_AT_GROUND:   dwelling at floor 0, direction UP
    WAITING_AT_TOP:      dwelling at the top floor, direction DOWN
    MOVING:              travelling, door closed
    DOOR_OPEN:           stopped at a floor, door open
    RETURNING_TO_GROUND: out of service, travelling down to park
    """
    OUT_OF_SERVICE = "OUT_OF_SERVICE"
    WAITING_AT_GROUND = "WAITING_AT_GROUND"
    WAITING_AT_TOP = "WAITING_AT_TOP"
    MOVING = "MOVING"
    DOOR_OPEN = "DOOR_OPEN"
    RETURNING_TO_GROUND = "RETURNING_TO_GROUND"

    @property
    def is_waiting(self) -> bool:
        return self in (CarState.WAITING_AT_GROUND, CarState.WAITING_AT_TOP)

    @property
    def in_service(self) -> bool:
        return self not in (CarState.OUT_OF_SERVICE, CarState.RETURNING_TO_GROUND)


class SystemStatus(Enum):
    """Lifecycle of the whole bank: OUT_OF_SERVICE -> RUNNING -> STOPPING -> OUT_OF_SERVICE"""
    OUT_OF_SERVICE = "outOfService"
    RUNNING = "running"
    STOPPING = "stopping"
