from typing import Callable, Optional, Sequence

from .entity import Entity
from .exceptions import IllegalStateError, InvalidArgumentError
from .report import CarReport
from .request import Direction, Request
from .states import CarState
from ..interfaces.car import ICar

# Ticks a car dwells at floor 0 or the top floor before departing
TERMINAL_WAIT_TICKS = 5
# Ticks the door stays open at a stop
DOOR_OPEN_TICKS = 3


class Car(Entity, ICar):
    """
    One elevator car, advanced one tick at a time by the Building.

    The car sweeps the whole shaft: it dwells at floor 0 heading UP, travels
    to the top floor, dwells there heading DOWN and travels back, opening its
    door at every flagged floor on the way. Stops are only handed over in
    batches while the car is idle at a terminal floor.
    """

    def __init__(self, car_id: int, num_floors: int, capacity: int,
                 terminal_wait_ticks: int = TERMINAL_WAIT_TICKS,
                 door_open_ticks: int = DOOR_OPEN_TICKS,
                 clock: Optional[Callable[[], int]] = None):
        if num_floors < 2:
            raise InvalidArgumentError("The number of floors must be at least 2.")
        if capacity < 1:
            raise InvalidArgumentError("The elevator capacity must be at least 1.")
        if terminal_wait_ticks < 0 or door_open_ticks < 1:
            raise InvalidArgumentError("Wait ticks must be non-negative and door ticks at least 1.")

        super().__init__(car_id, CarState.OUT_OF_SERVICE, name=f"Elevator_{car_id}", clock=clock)
        self.max_floor = num_floors - 1
        self.capacity = capacity
        self.terminal_wait_ticks = terminal_wait_ticks
        self.door_open_ticks = door_open_ticks

        self._current_floor = 0
        self._direction = Direction.STOPPED
        self._resume_direction = Direction.STOPPED  # direction to restore when the door closes
        self._resume_state = CarState.MOVING  # state the door was opened from
        self.door_closed = True
        self.floor_stops = [False] * num_floors
        self.wait_timer = 0
        self.out_of_service = True

    # --- Read-only properties ---

    @property
    def car_id(self) -> int:
        return self.entity_id

    @property
    def current_floor(self) -> int:
        return self._current_floor

    @property
    def direction(self) -> Direction:
        return self._direction

    @property
    def is_parked(self) -> bool:
        return self.state is CarState.OUT_OF_SERVICE

    @property
    def is_taking_requests(self) -> bool:
        return not self.out_of_service and self.state.in_service

    def can_accept(self, direction: Direction) -> bool:
        """
        True when the car is idle at the terminal floor a batch in `direction`
        starts from: floor 0 heading UP or the top floor heading DOWN, waiting
        or just arrived, with no stops left over.
        """
        if not self.is_taking_requests or direction is not self._direction:
            return False
        terminal = 0 if direction is Direction.UP else self.max_floor
        if self._current_floor != terminal:
            return False
        if not (self.state.is_waiting or self.state is CarState.MOVING):
            return False
        return not any(self.floor_stops)

    # --- Commands ---

    def start(self) -> bool:
        """Put a parked car into service at floor 0, heading UP after a full dwell"""
        if not self.is_parked:
            print(f"{self.now:4d} [{self.name}] Start ignored: car is not parked ({self.state.name}).")
            return False

        self.out_of_service = False
        self._direction = Direction.UP
        self.door_closed = True
        self.floor_stops = [False] * (self.max_floor + 1)
        self.wait_timer = self.terminal_wait_ticks
        self.set_state(CarState.WAITING_AT_GROUND)
        return True

    def take_out_of_service(self):
        """
        Stop taking requests and head for floor 0.

        Stops already assigned are still served. An open door or a terminal
        dwell runs to its end, a car sweeping up finishes the sweep, and the
        remaining stops below are served on the way down. A car idle at
        floor 0 parks at once.
        """
        if self.out_of_service:
            return

        self.out_of_service = True
        print(f"{self.now:4d} [{self.name}] Taken out of service at floor {self._current_floor}.")

        if self.state is CarState.WAITING_AT_GROUND and not any(self.floor_stops):
            self._park()
        elif self.state is CarState.MOVING and not self._sweeping_up():
            self._head_home()

    def accept_batch(self, requests: Sequence[Request]):
        """
        Flag the pickup and drop-off floors of a batch of requests.

        Args:
            requests: Same-direction requests, at most `capacity` of them

        Raises:
            InvalidArgumentError: Empty, oversized, mixed-direction or out-of-range batch
            IllegalStateError: Car is not idle at the batch's terminal floor
        """
        requests = list(requests)
        if not requests:
            raise InvalidArgumentError("Batch cannot be empty")
        if len(requests) > self.capacity:
            raise InvalidArgumentError(
                f"Batch of {len(requests)} exceeds capacity {self.capacity} of {self.name}")

        directions = {request.direction for request in requests}
        if len(directions) != 1:
            raise InvalidArgumentError("Batch mixes up and down requests")
        direction = directions.pop()

        for request in requests:
            for floor in request.floors():
                if floor < 0 or floor > self.max_floor:
                    raise InvalidArgumentError(
                        f"Floor {floor} is outside 0..{self.max_floor} for {self.name}")

        if not self.can_accept(direction):
            raise IllegalStateError("Elevator is not accepting requests")

        for request in requests:
            for floor in request.floors():
                self.floor_stops[floor] = True
        if self.state.is_waiting:
            # cut the terminal dwell short, the car leaves on this tick
            self.wait_timer = 0

        print(f"{self.now:4d} [{self.name}] Accepted {len(requests)} {direction.name} request(s): "
              f"stops at {[f for f, flagged in enumerate(self.floor_stops) if flagged]}")

    def step(self):
        """Advance one tick"""
        if self.state is CarState.OUT_OF_SERVICE:
            return
        if self.state is CarState.DOOR_OPEN:
            self._step_door_open()
        elif self.state is CarState.RETURNING_TO_GROUND:
            self._step_returning()
        elif self.state.is_waiting:
            self._step_waiting()
        else:
            self._step_moving()

    def get_elevator_status(self) -> CarReport:
        return CarReport(
            car_id=self.car_id,
            current_floor=self._current_floor,
            max_floor=self.max_floor,
            direction=self._direction,
            door_closed=self.door_closed,
            wait_timer=self.wait_timer,
            floor_stops=tuple(self.floor_stops),
            out_of_service=self.out_of_service,
            taking_requests=self.is_taking_requests,
            state=self.state,
        )

    # --- Per-state steps ---

    def _step_door_open(self):
        self.wait_timer -= 1
        if self.wait_timer > 0:
            return

        self.door_closed = True
        self._direction = self._resume_direction
        print(f"{self.now:4d} [{self.name}] Door closed at floor {self._current_floor}.")
        if self.out_of_service:
            if self._sweeping_up():
                self.set_state(CarState.MOVING)
            else:
                self._head_home()
        elif self._at_terminal() and self._resume_state.is_waiting:
            # dwell already served here, depart on the next tick
            self._enter_waiting(0)
        else:
            # a car that just arrived at a terminal floor still owes its dwell
            self.set_state(CarState.MOVING)

    def _step_waiting(self):
        if self.wait_timer > 0:
            self.wait_timer -= 1
            return
        self._depart()

    def _step_moving(self):
        if self.floor_stops[self._current_floor]:
            self._open_door()
        elif self._at_terminal() and not self.out_of_service:
            self._enter_waiting(self.terminal_wait_ticks)
        else:
            self._depart()

    def _step_returning(self):
        if self.floor_stops[self._current_floor]:
            self._open_door()
            return
        if self._current_floor == 0:
            self._park()
            return

        self._current_floor -= 1
        if self._current_floor == 0 and not self.floor_stops[0]:
            self._park()

    # --- Helpers ---

    def _at_terminal(self) -> bool:
        return self._current_floor in (0, self.max_floor)

    def _sweeping_up(self) -> bool:
        """Heading UP with stops left above the car"""
        return self._direction is Direction.UP and any(self.floor_stops[self._current_floor + 1:])

    def _depart(self):
        if self.floor_stops[self._current_floor]:
            self._open_door()
        elif self.out_of_service and not self._sweeping_up():
            self._head_home()
            if self.state is CarState.RETURNING_TO_GROUND:
                self._step_returning()
        else:
            self._move()

    def _move(self):
        if self._direction is Direction.UP:
            self._current_floor = min(self._current_floor + 1, self.max_floor)
        elif self._direction is Direction.DOWN:
            self._current_floor = max(self._current_floor - 1, 0)
        self.set_state(CarState.MOVING)

        # the next leg from a terminal floor always goes the other way
        if self._at_terminal():
            self._direction = self._direction.reversed()

    def _open_door(self):
        self.floor_stops[self._current_floor] = False
        self._resume_direction = self._direction
        self._resume_state = self.state
        self._direction = Direction.STOPPED
        self.door_closed = False
        self.wait_timer = self.door_open_ticks
        print(f"{self.now:4d} [{self.name}] Door opened at floor {self._current_floor}.")
        self.set_state(CarState.DOOR_OPEN)

    def _enter_waiting(self, ticks: int):
        self.wait_timer = ticks
        if self._current_floor == 0:
            self.set_state(CarState.WAITING_AT_GROUND)
        else:
            self.set_state(CarState.WAITING_AT_TOP)

    def _head_home(self):
        if self._current_floor == 0 and not self.floor_stops[0]:
            self._park()
            return
        self._direction = Direction.DOWN
        self.set_state(CarState.RETURNING_TO_GROUND)

    def _park(self):
        self._direction = Direction.STOPPED
        self.door_closed = True
        self.wait_timer = 0
        self.floor_stops = [False] * (self.max_floor + 1)
        print(f"{self.now:4d} [{self.name}] Parked at floor 0.")
        self.set_state(CarState.OUT_OF_SERVICE)
