from collections import defaultdict
from typing import Iterable, Optional

import numpy as np

from simulator.infrastructure.message_broker import MessageBroker
from simulator.core.building import Building
from simulator.core.car import DOOR_OPEN_TICKS, TERMINAL_WAIT_TICKS
from simulator.core.exceptions import IllegalStateError, InvalidArgumentError
from simulator.core.identity import CarIdAllocator
from simulator.core.request import Request
from simulator.core.states import SystemStatus
from config.simulation import EventConfig


class BuildingController:
    """
    Controller between the outside world and one Building

    Every command is forwarded to the building, the fresh status report is
    published on the broker, and engine errors are logged and published
    instead of propagating. run() is the SimPy process that paces the
    building one tick per unit of simulation time.

    Topics:
        building/status   - BuildingReport.to_dict() plus 'tick', after every command
        building/request  - request accepted into a queue
        building/error    - rejected command (message and error type)
        building/command  - commands from outside, applied by listen_for_commands()
    """

    STATUS_TOPIC = "building/status"
    REQUEST_TOPIC = "building/request"
    ERROR_TOPIC = "building/error"
    COMMAND_TOPIC = "building/command"

    def __init__(self, name: str, broker: MessageBroker,
                 id_allocator: Optional[CarIdAllocator] = None):
        self.name = name
        self.broker = broker
        self.id_allocator = id_allocator
        self.building: Optional[Building] = None

    # --- Setup ---

    def try_initialize_building(self, floors: int, elevators: int, capacity: int,
                                terminal_wait_ticks: int = TERMINAL_WAIT_TICKS,
                                door_open_ticks: int = DOOR_OPEN_TICKS) -> bool:
        """
        Build the building and start its elevator system.

        Returns:
            True if the building was created, False if the sizes were rejected
        """
        try:
            self.building = Building(floors, elevators, capacity,
                                     id_allocator=self.id_allocator,
                                     terminal_wait_ticks=terminal_wait_ticks,
                                     door_open_ticks=door_open_ticks)
        except InvalidArgumentError as e:
            self._report_error(e)
            return False

        self.building.start_elevator_system()
        print(f"{self.broker.get_current_time():.2f} [{self.name}] {self.building!r} initialized and started.")
        self.publish_status()
        return True

    # --- Commands ---

    def step_building(self):
        self._require_building().trigger_elevator_step()
        self.publish_status()

    def request_elevator(self, from_floor: int, to_floor: int) -> bool:
        """Queue a request from one floor to another"""
        building = self._require_building()
        try:
            building.add_request(Request(from_floor, to_floor))
        except (InvalidArgumentError, IllegalStateError) as e:
            self._report_error(e)
            return False

        self.broker.put(self.REQUEST_TOPIC, {
            'tick': building.tick,
            'start_floor': from_floor,
            'end_floor': to_floor,
        })
        self.publish_status()
        return True

    def start_building(self) -> bool:
        try:
            started = self._require_building().start_elevator_system()
        except IllegalStateError as e:
            self._report_error(e)
            return False
        self.publish_status()
        return started

    def stop_building(self):
        self._require_building().stop_elevator_system()
        self.publish_status()

    def take_elevator_out_of_service(self, elevator_id: int):
        self._require_building().take_elevator_out_of_service(elevator_id)
        self.publish_status()

    def take_all_elevators_out_of_service(self):
        self._require_building().take_all_elevators_out_of_service()
        self.publish_status()

    def clear_requests(self):
        self._require_building().clear_requests()
        self.publish_status()

    # --- Queries ---

    def can_start_building(self) -> bool:
        return self._status() is SystemStatus.OUT_OF_SERVICE

    def can_step_building(self) -> bool:
        return self._status() in (SystemStatus.RUNNING, SystemStatus.STOPPING)

    def can_request_building(self) -> bool:
        return self._status() is SystemStatus.RUNNING

    def publish_status(self):
        building = self._require_building()
        message = building.get_elevator_system_status().to_dict()
        message['tick'] = building.tick
        self.broker.put(self.STATUS_TOPIC, message)

    # --- Scripted events ---

    def apply_event(self, event: EventConfig):
        """Apply one scripted event"""
        print(f"{self.broker.get_current_time():.2f} [{self.name}] Event at tick {event.tick}: {event.action}")
        if event.action == "start":
            self.start_building()
        elif event.action == "stop":
            self.stop_building()
        elif event.action == "request":
            self.request_elevator(event.start_floor, event.end_floor)
        elif event.action == "out_of_service":
            self.take_elevator_out_of_service(event.elevator_id)
        elif event.action == "all_out_of_service":
            self.take_all_elevators_out_of_service()
        elif event.action == "clear_requests":
            self.clear_requests()
        else:
            raise ValueError(f"Unknown event action: {event.action}")

    # --- SimPy process ---

    def run(self, duration_ticks: int, events: Iterable[EventConfig] = (),
            request_rate: float = 0.0, stop_at_tick: Optional[int] = None,
            rng: Optional[np.random.Generator] = None):
        """
        Main process: one building tick per unit of simulation time.

        Events scheduled for tick 0 are applied before the first step; events
        for tick t are applied right before the t-th step, followed by the
        scheduled stop and the random traffic for that tick.

        Args:
            duration_ticks: Number of ticks to run
            events: Scripted events
            request_rate: Mean number of random requests per tick
            stop_at_tick: Tick at which the system is stopped
            rng: numpy Generator for random traffic
        """
        building = self._require_building()
        rng = rng if rng is not None else np.random.default_rng()

        schedule = defaultdict(list)
        for event in events:
            schedule[event.tick].append(event)

        print(f"{self.broker.get_current_time():.2f} [{self.name}] Controller running for {duration_ticks} ticks.")
        for event in schedule.pop(0, []):
            self.apply_event(event)

        for tick in range(1, duration_ticks + 1):
            yield self.broker.env.timeout(1)

            for event in schedule.pop(tick, []):
                self.apply_event(event)
            if stop_at_tick == tick:
                self.stop_building()
            if request_rate > 0 and self.can_request_building():
                self._generate_requests(rng, request_rate, building.num_floors)

            self.step_building()

        print(f"{self.broker.get_current_time():.2f} [{self.name}] Controller finished "
              f"(system {building.system_status.value}).")

    def listen_for_commands(self):
        """
        Process applying commands published on building/command.

        A command is an event mapping without its tick, e.g.
        {'action': 'request', 'start_floor': 0, 'end_floor': 3}. It takes
        effect at the building's current tick, before that tick's step when
        published from a process scheduled ahead of run().
        """
        building = self._require_building()
        while True:
            command = yield self.broker.get(self.COMMAND_TOPIC)
            try:
                event = EventConfig.from_dict({**command, 'tick': building.tick})
            except (KeyError, TypeError, ValueError) as e:
                self._report_error(ValueError(f"Malformed command {command!r}: {e}"))
                continue
            self.apply_event(event)

    def _generate_requests(self, rng: np.random.Generator, rate: float, num_floors: int):
        for _ in range(int(rng.poisson(rate))):
            start_floor = int(rng.integers(0, num_floors))
            end_floor = int(rng.integers(0, num_floors - 1))
            if end_floor >= start_floor:
                end_floor += 1
            self.request_elevator(start_floor, end_floor)

    # --- Helpers ---

    def _require_building(self) -> Building:
        if self.building is None:
            raise IllegalStateError("Building has not been initialized")
        return self.building

    def _status(self) -> Optional[SystemStatus]:
        if self.building is None:
            return None
        return self.building.system_status

    def _report_error(self, error: Exception):
        print(f"{self.broker.get_current_time():.2f} [{self.name}] ERROR: {error}")
        self.broker.put(self.ERROR_TOPIC, {
            'time': self.broker.get_current_time(),
            'error': type(error).__name__,
            'message': str(error),
        })
