"""
Car identity allocation

Car ids are unique and increase in creation order. The allocator is an
explicit object handed to whoever builds the fleet, so tests can start from a
fresh counter while normal runs share DEFAULT_ALLOCATOR and never reuse an id,
even when a building is rebuilt.
"""

import itertools


class CarIdAllocator:
    """Monotonic integer id source"""

    def __init__(self, start: int = 0):
        self._counter = itertools.count(start)

    def next_id(self) -> int:
        """Return the next unused id"""
        return next(self._counter)


# Process-wide allocator used when a Building is not given one
DEFAULT_ALLOCATOR = CarIdAllocator()
