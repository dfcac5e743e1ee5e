"""
Simulation Configuration

Building size, car timing, traffic and a scripted event list for one run of
the elevator bank.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


# Event actions understood by BuildingController.apply_event
EVENT_ACTIONS = (
    "start",
    "stop",
    "request",
    "out_of_service",
    "all_out_of_service",
    "clear_requests",
)


@dataclass
class BuildingConfig:
    """Building size"""
    num_floors: int = 11
    num_elevators: int = 8
    capacity: int = 3  # requests per batch

    def __post_init__(self):
        if self.num_floors < 2:
            raise ValueError("num_floors must be at least 2")
        if self.num_elevators < 1:
            raise ValueError("num_elevators must be at least 1")
        if self.capacity < 1:
            raise ValueError("capacity must be at least 1")


@dataclass
class TimingConfig:
    """Car dwell times, in ticks"""
    terminal_wait_ticks: int = 5
    door_open_ticks: int = 3

    def __post_init__(self):
        if self.terminal_wait_ticks < 0:
            raise ValueError("terminal_wait_ticks cannot be negative")
        if self.door_open_ticks < 1:
            raise ValueError("door_open_ticks must be at least 1")


@dataclass
class TrafficConfig:
    """Run length and random traffic"""
    duration_ticks: int = 100
    request_rate: float = 0.0  # mean new requests per tick (Poisson)
    stop_at_tick: Optional[int] = None  # stop the system at this tick

    def __post_init__(self):
        if self.duration_ticks <= 0:
            raise ValueError("duration_ticks must be positive")
        if self.request_rate < 0:
            raise ValueError("request_rate cannot be negative")
        if self.stop_at_tick is not None and self.stop_at_tick < 0:
            raise ValueError("stop_at_tick cannot be negative")


@dataclass
class EventConfig:
    """A command applied at the start of a given tick"""
    tick: int
    action: str
    start_floor: Optional[int] = None
    end_floor: Optional[int] = None
    elevator_id: Optional[int] = None

    def __post_init__(self):
        if self.tick < 0:
            raise ValueError("event tick cannot be negative")
        if self.action not in EVENT_ACTIONS:
            raise ValueError(f"Unknown event action '{self.action}', expected one of {EVENT_ACTIONS}")
        if self.action == "request" and (self.start_floor is None or self.end_floor is None):
            raise ValueError("request events need start_floor and end_floor")
        if self.action == "out_of_service" and self.elevator_id is None:
            raise ValueError("out_of_service events need elevator_id")

    @classmethod
    def from_dict(cls, data: dict) -> 'EventConfig':
        return cls(
            tick=data['tick'],
            action=data['action'],
            start_floor=data.get('start_floor'),
            end_floor=data.get('end_floor'),
            elevator_id=data.get('elevator_id'),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {'tick': self.tick, 'action': self.action}
        for key in ('start_floor', 'end_floor', 'elevator_id'):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        return result


@dataclass
class SimulationConfig:
    """
    Complete simulation configuration

    Combines building, timing, traffic and scripted events.
    """
    building: BuildingConfig
    timing: TimingConfig = field(default_factory=TimingConfig)
    traffic: TrafficConfig = field(default_factory=TrafficConfig)
    events: List[EventConfig] = field(default_factory=list)

    # Simulation control
    random_seed: Optional[int] = None
    seconds_per_tick: float = 0.0  # 0.0 = as fast as possible

    def __post_init__(self):
        if self.seconds_per_tick < 0:
            raise ValueError("seconds_per_tick cannot be negative")

    @classmethod
    def from_dict(cls, data: dict) -> 'SimulationConfig':
        """Create SimulationConfig from dictionary"""
        sim_data = data.get('simulation', data)

        building_data = sim_data.get('building', {})
        building = BuildingConfig(
            num_floors=building_data.get('num_floors', 11),
            num_elevators=building_data.get('num_elevators', 8),
            capacity=building_data.get('capacity', 3)
        )

        timing_data = sim_data.get('timing', {})
        timing = TimingConfig(
            terminal_wait_ticks=timing_data.get('terminal_wait_ticks', 5),
            door_open_ticks=timing_data.get('door_open_ticks', 3)
        )

        traffic_data = sim_data.get('traffic', {})
        traffic = TrafficConfig(
            duration_ticks=traffic_data.get('duration_ticks', 100),
            request_rate=traffic_data.get('request_rate', 0.0),
            stop_at_tick=traffic_data.get('stop_at_tick')
        )

        events = [EventConfig.from_dict(event) for event in sim_data.get('events') or []]

        return cls(
            building=building,
            timing=timing,
            traffic=traffic,
            events=events,
            random_seed=sim_data.get('random_seed'),
            seconds_per_tick=sim_data.get('seconds_per_tick', 0.0)
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        result = {
            'simulation': {
                'building': {
                    'num_floors': self.building.num_floors,
                    'num_elevators': self.building.num_elevators,
                    'capacity': self.building.capacity
                },
                'timing': {
                    'terminal_wait_ticks': self.timing.terminal_wait_ticks,
                    'door_open_ticks': self.timing.door_open_ticks
                },
                'traffic': {
                    'duration_ticks': self.traffic.duration_ticks,
                    'request_rate': self.traffic.request_rate,
                    'stop_at_tick': self.traffic.stop_at_tick
                },
                'events': [event.to_dict() for event in self.events],
                'seconds_per_tick': self.seconds_per_tick
            }
        }

        if self.random_seed is not None:
            result['simulation']['random_seed'] = self.random_seed

        return result

    def validate(self):
        """Validate configuration consistency"""
        top_floor = self.building.num_floors - 1
        for event in self.events:
            if event.action == "request":
                for floor in (event.start_floor, event.end_floor):
                    if not 0 <= floor <= top_floor:
                        raise ValueError(f"Event at tick {event.tick}: floor {floor} outside 0..{top_floor}")
            if event.tick > self.traffic.duration_ticks:
                raise ValueError(
                    f"Event at tick {event.tick} is after duration_ticks ({self.traffic.duration_ticks})")

        if self.traffic.stop_at_tick is not None and self.traffic.stop_at_tick > self.traffic.duration_ticks:
            raise ValueError(
                f"traffic.stop_at_tick ({self.traffic.stop_at_tick}) cannot exceed "
                f"duration_ticks ({self.traffic.duration_ticks})")
