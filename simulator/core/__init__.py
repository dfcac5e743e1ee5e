"""Core simulation entities"""

from .request import Request, Direction
from .states import CarState, SystemStatus
from .exceptions import InvalidArgumentError, IllegalStateError
from .identity import CarIdAllocator, DEFAULT_ALLOCATOR
from .entity import Entity
from .car import Car, TERMINAL_WAIT_TICKS, DOOR_OPEN_TICKS
from .report import CarReport, BuildingReport
from .building import Building

__all__ = [
    'Request',
    'Direction',
    'CarState',
    'SystemStatus',
    'InvalidArgumentError',
    'IllegalStateError',
    'CarIdAllocator',
    'DEFAULT_ALLOCATOR',
    'Entity',
    'Car',
    'TERMINAL_WAIT_TICKS',
    'DOOR_OPEN_TICKS',
    'CarReport',
    'BuildingReport',
    'Building',
]
