"""
Building - Dispatcher for a bank of elevator cars

This module provides the Building class which manages:
- The fleet of cars and their identities
- The up-bound and down-bound pending request queues
- The system lifecycle (out of service -> running -> stopping)
- Greedy first-fit distribution of queued requests to idle cars
"""

from typing import Callable, Dict, List, Optional, Sequence

from .car import Car, DOOR_OPEN_TICKS, TERMINAL_WAIT_TICKS
from .exceptions import IllegalStateError, InvalidArgumentError
from .identity import CarIdAllocator, DEFAULT_ALLOCATOR
from .report import BuildingReport
from .request import Direction, Request
from .states import SystemStatus
from ..interfaces.car import ICar

# car_factory(car_id, num_floors, capacity, clock) -> ICar
CarFactory = Callable[[int, int, int, Callable[[], int]], ICar]


class Building:
    """
    Represents a building with a bank of elevator cars.

    All operations run synchronously. Time only moves when the owner calls
    trigger_elevator_step(); within one tick, queued requests are handed out
    before any car moves, and cars move in fleet order.
    """

    def __init__(self, num_floors: int, num_elevators: int, elevator_capacity: int,
                 id_allocator: Optional[CarIdAllocator] = None,
                 terminal_wait_ticks: int = TERMINAL_WAIT_TICKS,
                 door_open_ticks: int = DOOR_OPEN_TICKS,
                 car_factory: Optional[CarFactory] = None):
        """
        Initialize the building and its (parked) cars.

        Args:
            num_floors: Number of floors, at least 2 (floors are 0..num_floors-1)
            num_elevators: Number of cars, at least 1
            elevator_capacity: Maximum number of requests in one batch, at least 1
            id_allocator: Source of car ids (defaults to the process-wide allocator)
            terminal_wait_ticks: Dwell at floor 0 and the top floor
            door_open_ticks: Dwell with the door open at a stop
            car_factory: Builds the cars; defaults to Car

        Raises:
            InvalidArgumentError: If any size is below its minimum
        """
        if num_floors < 2:
            raise InvalidArgumentError("The number of floors must be at least 2.")
        if num_elevators < 1:
            raise InvalidArgumentError("The number of elevators must be at least 1.")
        if elevator_capacity < 1:
            raise InvalidArgumentError("The elevator capacity must be at least 1.")

        self._num_floors = num_floors
        self._num_elevators = num_elevators
        self._elevator_capacity = elevator_capacity
        self._status = SystemStatus.OUT_OF_SERVICE
        self._tick = 0
        self._pending: Dict[Direction, List[Request]] = {
            Direction.UP: [],
            Direction.DOWN: [],
        }

        allocator = id_allocator if id_allocator is not None else DEFAULT_ALLOCATOR
        if car_factory is None:
            def car_factory(car_id, floors, capacity, clock):
                return Car(car_id, floors, capacity,
                           terminal_wait_ticks=terminal_wait_ticks,
                           door_open_ticks=door_open_ticks,
                           clock=clock)

        self._elevators: List[ICar] = [
            car_factory(allocator.next_id(), num_floors, elevator_capacity, self._get_tick)
            for _ in range(num_elevators)
        ]
        print(f"{self._tick:4d} [Building] {self!r} created.")

    # --- Read-only accessors ---

    @property
    def num_floors(self) -> int:
        return self._num_floors

    @property
    def num_elevators(self) -> int:
        return self._num_elevators

    @property
    def elevator_capacity(self) -> int:
        return self._elevator_capacity

    @property
    def system_status(self) -> SystemStatus:
        return self._status

    @property
    def elevators(self) -> Sequence[ICar]:
        return tuple(self._elevators)

    @property
    def tick(self) -> int:
        """Number of ticks advanced while running or stopping"""
        return self._tick

    @property
    def top_floor(self) -> int:
        return self._num_floors - 1

    def _get_tick(self) -> int:
        return self._tick

    # --- Commands ---

    def add_request(self, request: Request) -> bool:
        """
        Queue a request in the up-bound or down-bound queue.

        Args:
            request: Request with floors in 0..num_floors-1 and start != end

        Returns:
            True when the request was queued

        Raises:
            InvalidArgumentError: If the request is missing or malformed
            IllegalStateError: If the system is not running
        """
        if request is None:
            raise InvalidArgumentError("Request cannot be null")
        if not 0 <= request.start_floor < self._num_floors:
            raise InvalidArgumentError(f"Start floor must be between 0 and {self._num_floors - 1}")
        if not 0 <= request.end_floor < self._num_floors:
            raise InvalidArgumentError(f"End floor must be between 0 and {self._num_floors - 1}")
        if request.start_floor == request.end_floor:
            raise InvalidArgumentError("Start floor and end floor cannot be the same")

        if self._status is not SystemStatus.RUNNING:
            raise IllegalStateError("Elevator system is not accepting requests")

        self._pending[request.direction].append(request)
        print(f"{self._tick:4d} [Building] Request {request} queued ({request.direction.name}).")
        return True

    def start_elevator_system(self) -> bool:
        """
        Put every car into service.

        Returns:
            True if the system started, False if it was already running

        Raises:
            IllegalStateError: If the system is still stopping
        """
        if self._status is SystemStatus.RUNNING:
            return False
        if self._status is SystemStatus.STOPPING:
            raise IllegalStateError("Elevator system is stopping")

        for elevator in self._elevators:
            elevator.start()
        self._set_status(SystemStatus.RUNNING)
        return True

    def stop_elevator_system(self):
        """
        Send every car home and drop all queued requests.

        Stops already handed to cars are kept. No-op unless running.
        """
        if self._status is not SystemStatus.RUNNING:
            return

        self._set_status(SystemStatus.STOPPING)
        for elevator in self._elevators:
            elevator.take_out_of_service()
        self.clear_requests()

    def trigger_elevator_step(self):
        """Advance the whole bank by one tick"""
        if self._status is SystemStatus.OUT_OF_SERVICE:
            return

        self._tick += 1
        if self._status is SystemStatus.RUNNING:
            self._distribute_requests()
            for elevator in self._elevators:
                elevator.step()
        else:
            for elevator in self._elevators:
                elevator.step()
            self._check_and_stop_elevator_system()

    def take_elevator_out_of_service(self, elevator_id: int):
        """Take the car with the given id out of service (unknown ids are ignored)"""
        for elevator in self._elevators:
            if elevator.car_id == elevator_id:
                elevator.take_out_of_service()
                return
        print(f"{self._tick:4d} [Building] No elevator with id {elevator_id}, nothing taken out of service.")

    def take_all_elevators_out_of_service(self):
        for elevator in self._elevators:
            elevator.take_out_of_service()

    def clear_requests(self):
        """Drop every queued request"""
        for queue in self._pending.values():
            queue.clear()

    # --- Queries ---

    def get_elevator_system_status(self) -> BuildingReport:
        return BuildingReport(
            num_floors=self._num_floors,
            num_elevators=self._num_elevators,
            elevator_capacity=self._elevator_capacity,
            elevator_reports=tuple(elevator.get_elevator_status() for elevator in self._elevators),
            up_requests=tuple(self._pending[Direction.UP]),
            down_requests=tuple(self._pending[Direction.DOWN]),
            system_status=self._status,
        )

    def print_elevator_statuses(self):
        print(self.get_elevator_system_status(), end="")

    # --- Distribution ---

    def _distribute_requests(self):
        """
        Hand queued requests to cars idle at a terminal floor.

        Up requests go to cars at floor 0 heading UP, down requests to cars at
        the top floor heading DOWN. Each car takes at most `capacity` requests
        from the front of the queue, cars are scanned in fleet order.
        """
        if not self._pending[Direction.UP] and not self._pending[Direction.DOWN]:
            return

        for elevator in self._elevators:
            if elevator.current_floor == 0 and self._pending[Direction.UP]:
                self._dispatch_batch(elevator, Direction.UP)
            elif elevator.current_floor == self.top_floor and self._pending[Direction.DOWN]:
                self._dispatch_batch(elevator, Direction.DOWN)

    def _dispatch_batch(self, elevator: ICar, direction: Direction):
        if elevator.direction is not direction:
            return

        queue = self._pending[direction]
        batch = queue[:self._elevator_capacity]
        try:
            elevator.accept_batch(batch)
        except IllegalStateError as e:
            print(f"{self._tick:4d} [Building] Elevator {elevator.car_id} is not accepting requests. {e}")
            return

        self._pending[direction] = queue[len(batch):]
        print(f"{self._tick:4d} [Building] Elevator {elevator.car_id} accepted {len(batch)} "
              f"{direction.name} request(s): {' '.join(str(r) for r in batch)}")

    def _check_and_stop_elevator_system(self):
        if all(elevator.is_parked and elevator.current_floor == 0 for elevator in self._elevators):
            self._set_status(SystemStatus.OUT_OF_SERVICE)

    def _set_status(self, new_status: SystemStatus):
        if self._status is not new_status:
            print(f"{self._tick:4d} [Building] System status: {self._status.value} -> {new_status.value}")
            self._status = new_status

    def __repr__(self) -> str:
        return (f"Building(floors={self._num_floors}, elevators={self._num_elevators}, "
                f"capacity={self._elevator_capacity})")
