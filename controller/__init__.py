"""
Elevator Bank Controller

Drives one Building from commands, scripted events and random traffic, and
publishes its status on the message broker.
"""

__version__ = "0.1.0"

from .building_controller import BuildingController

__all__ = ['BuildingController']
