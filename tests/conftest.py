import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import matplotlib
matplotlib.use("Agg")

import pytest
import simpy

from simulator.core.building import Building
from simulator.core.identity import CarIdAllocator
from simulator.infrastructure.message_broker import MessageBroker

SCENARIO_DIR = project_root / "scenarios" / "simulation"


@pytest.fixture
def allocator():
    return CarIdAllocator()


@pytest.fixture
def building(allocator):
    """Eleven floors, eight cars, capacity three, ids starting at 0"""
    return Building(11, 8, 3, id_allocator=allocator)


@pytest.fixture
def env():
    return simpy.Environment()


@pytest.fixture
def broker(env):
    return MessageBroker(env)


@pytest.fixture
def scenario_dir():
    return SCENARIO_DIR
