"""
Report - Read-only status snapshots

CarReport and BuildingReport are frozen copies of engine state handed to the
controller, the broker and the statistics collector once per tick. Their
str() forms are the fixed-width status lines printed by the console
status printer, e.g.:

    Current Elevator Statuses:
    Elevator 0: [2|^|C  ]< -- --  2 -- -- -- -- -- -- -- -->
    Elevator 1: Waiting[Floor 0, Time 5]
    Up Requests: None
    Down Requests: [10->8] [9->1]
"""

from dataclasses import dataclass
from typing import Tuple

from .request import Direction, Request
from .states import CarState, SystemStatus


@dataclass(frozen=True)
class CarReport:
    """Snapshot of one car"""
    car_id: int
    current_floor: int
    max_floor: int
    direction: Direction
    door_closed: bool
    wait_timer: int
    floor_stops: Tuple[bool, ...]
    out_of_service: bool
    taking_requests: bool
    state: CarState

    @property
    def is_waiting(self) -> bool:
        """Dwelling at a terminal floor with time left on the clock"""
        return self.state.is_waiting and self.wait_timer > 0

    @property
    def requested_floors(self):
        return [floor for floor, flagged in enumerate(self.floor_stops) if flagged]

    def to_dict(self) -> dict:
        return {
            'car_id': self.car_id,
            'current_floor': self.current_floor,
            'max_floor': self.max_floor,
            'direction': self.direction.name,
            'door_closed': self.door_closed,
            'wait_timer': self.wait_timer,
            'floor_stops': self.requested_floors,
            'out_of_service': self.out_of_service,
            'taking_requests': self.taking_requests,
            'state': self.state.value,
        }

    def __str__(self) -> str:
        if self.out_of_service:
            return f"Out of Service[Floor {self.current_floor}]"
        if self.is_waiting:
            return f"Waiting[Floor {self.current_floor}, Time {self.wait_timer}]"

        door = "C  " if self.door_closed else f"O{self.wait_timer:2d}"
        stops = "".join(f" {floor:2d}" if flagged else " --"
                        for floor, flagged in enumerate(self.floor_stops))
        return f"[{self.current_floor}|{self.direction}|{door}]<{stops}>"


def _format_requests(requests) -> str:
    if not requests:
        return "None"
    return "".join(f"{request} " for request in requests)


@dataclass(frozen=True)
class BuildingReport:
    """Snapshot of the whole elevator bank"""
    num_floors: int
    num_elevators: int
    elevator_capacity: int
    elevator_reports: Tuple[CarReport, ...]
    up_requests: Tuple[Request, ...]
    down_requests: Tuple[Request, ...]
    system_status: SystemStatus

    def to_dict(self) -> dict:
        return {
            'num_floors': self.num_floors,
            'num_elevators': self.num_elevators,
            'elevator_capacity': self.elevator_capacity,
            'system_status': self.system_status.value,
            'elevators': [report.to_dict() for report in self.elevator_reports],
            'up_requests': [request.to_dict() for request in self.up_requests],
            'down_requests': [request.to_dict() for request in self.down_requests],
        }

    def __str__(self) -> str:
        lines = ["Current Elevator Statuses:"]
        for index, report in enumerate(self.elevator_reports):
            lines.append(f"Elevator {index}: {report}")
        lines.append(f"Up Requests: {_format_requests(self.up_requests)}")
        lines.append(f"Down Requests: {_format_requests(self.down_requests)}")
        return "\n".join(lines) + "\n"
