"""
Configuration management package

Provides the simulation configuration classes and their YAML loader.
"""

from .simulation import (
    SimulationConfig,
    BuildingConfig,
    TimingConfig,
    TrafficConfig,
    EventConfig,
    EVENT_ACTIONS
)

from .config_loader import (
    ConfigLoader,
    load_simulation_config,
    save_simulation_config
)

__all__ = [
    # Simulation
    'SimulationConfig',
    'BuildingConfig',
    'TimingConfig',
    'TrafficConfig',
    'EventConfig',
    'EVENT_ACTIONS',

    # Loader
    'ConfigLoader',
    'load_simulation_config',
    'save_simulation_config',
]
