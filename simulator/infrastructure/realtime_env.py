"""
realtime_env.py

A SimPy environment that paces simulation ticks against wall-clock time.
One unit of simulation time is one elevator tick.
"""

import time

import simpy


class RealtimeEnvironment(simpy.Environment):
    """
    SimPy environment that sleeps so that each tick lasts `seconds_per_tick`
    of real time.

    Args:
        seconds_per_tick (float): Wall-clock duration of one tick
            - 1.0 = one tick per second
            - 0.25 = four ticks per second
            - 0.0 = no delay (plain SimPy behavior)

    Example:
        >>> env = RealtimeEnvironment(seconds_per_tick=0.5)
        >>> env.process(controller.run(duration_ticks=60))
        >>> env.run()  # takes about 30 seconds
    """

    def __init__(self, seconds_per_tick=1.0, initial_time=0):
        if seconds_per_tick < 0:
            raise ValueError("seconds_per_tick cannot be negative")
        super().__init__(initial_time=initial_time)
        self.seconds_per_tick = seconds_per_tick
        self._reset_reference()

    def _reset_reference(self):
        self.real_start_time = time.monotonic()
        self.sim_start_time = self.now

    def step(self):
        """
        Process the next event, then sleep until wall-clock time catches up
        with simulation time.
        """
        result = super().step()

        if self.seconds_per_tick > 0:
            target = self.real_start_time + (self.now - self.sim_start_time) * self.seconds_per_tick
            sleep_time = target - time.monotonic()
            if sleep_time > 0:
                time.sleep(sleep_time)

        return result

    def set_pace(self, seconds_per_tick):
        """
        Change the pace while running (0.0 runs as fast as possible).
        """
        if seconds_per_tick < 0:
            raise ValueError("seconds_per_tick cannot be negative")
        self.seconds_per_tick = seconds_per_tick
        self._reset_reference()

    def get_pace(self):
        return self.seconds_per_tick
