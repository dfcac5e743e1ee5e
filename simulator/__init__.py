"""
Elevator Bank Simulator - Core simulation engine

This package provides the step-driven car state machine, the building
dispatcher and the simpy infrastructure used to drive and observe them.
"""

__version__ = "0.1.0"

from .core.request import Request, Direction
from .core.states import CarState, SystemStatus
from .core.exceptions import InvalidArgumentError, IllegalStateError
from .core.identity import CarIdAllocator
from .core.car import Car
from .core.building import Building
from .core.report import CarReport, BuildingReport

from .infrastructure.message_broker import MessageBroker
from .infrastructure.realtime_env import RealtimeEnvironment

__all__ = [
    'Request',
    'Direction',
    'CarState',
    'SystemStatus',
    'InvalidArgumentError',
    'IllegalStateError',
    'CarIdAllocator',
    'Car',
    'Building',
    'CarReport',
    'BuildingReport',
    'MessageBroker',
    'RealtimeEnvironment',
]
