from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Optional


class Entity(ABC):
    """
    Abstract base class for step-driven entities in the elevator bank.

    An entity carries an id, a display name and an explicit state. It never
    advances by itself: the owner calls step() once per tick.
    """

    def __init__(self, entity_id: int, initial_state: Enum, name: str = None,
                 clock: Optional[Callable[[], int]] = None):
        """
        Initialize the entity.

        Args:
            entity_id: Unique id, handed out by the owner's id allocator.
            initial_state: State the entity starts in (not logged as a transition).
            name: Entity name. Optional. If not specified, auto-generated from class name and ID.
            clock: Callable returning the current tick, used for log prefixes.
        """
        self.entity_id: int = entity_id
        self.name: str = name if name is not None else f"{self.__class__.__name__}_{self.entity_id}"
        self.state: Enum = initial_state
        self._clock = clock if clock is not None else (lambda: 0)

        print(f'{self.now:4d}: Entity "{self.name}" ({self.__class__.__name__}, ID:{self.entity_id}) created.')

    @property
    def now(self) -> int:
        """Current tick as reported by the owner's clock"""
        return self._clock()

    @abstractmethod
    def step(self):
        """
        Advance the entity by exactly one tick (abstract method).

        Must be implemented in subclasses. Typically dispatches on self.state:

        Example:
            if self.state is State.A:
                self._step_a()
            elif self.state is State.B:
                self._step_b()
        """

    # --- Common utility methods ---

    def set_state(self, new_state: Enum):
        """
        Transition the entity's state.

        Args:
            new_state: Target state.
        """
        if self.state is not new_state:
            old_state = self.state
            self.state = new_state
            self._log_state_change(old_state, new_state)

    def _log_state_change(self, old_state: Enum, new_state: Enum):
        print(f'{self.now:4d}: Entity "{self.name}" ({self.__class__.__name__}, ID:{self.entity_id}) '
              f'state transition: {old_state.name} -> {new_state.name}')
