"""Timers used to report where a run spends its time."""

import time
from dataclasses import dataclass

__all__ = ["Time", "Stopwatch", "StopwatchManager"]


@dataclass
class Time:
    """Simple dataclass to hold time information.

    Attributes
    ----------
    wall : float
         Wall time
    cpu : float
         CPU time
    """

    wall: float = 0.0
    cpu: float = 0.0

    def __add__(self, other):
        return Time(wall=self.wall + other.wall, cpu=self.cpu + other.cpu)

    def __sub__(self, other):
        return Time(wall=self.wall - other.wall, cpu=self.cpu - other.cpu)

    @classmethod
    def current(cls):
        """Simple function which returns the current time (wall and cpu).

        Returns
        -------
        Time
           Current time
        """
        return cls(time.time(), time.process_time())


class Stopwatch:
    """Accumulates the time spent between successive start/stop calls."""

    def __init__(self):
        self._start = None
        self.time = Time()
        self.time_sum = Time()
        self.count = 0

    @property
    def running(self):
        """Whether the stopwatch is currently running."""
        return self._start is not None

    def start(self):
        """Start the watch."""
        if self.running:
            raise ValueError("Cannot restart a watch that has not been stopped.")

        self._start = Time.current()

    def stop(self):
        """Stop the watch, record the time since the last start."""
        if not self.running:
            raise ValueError("Cannot stop a watch that has not been started.")

        self.time = Time.current() - self._start
        self.time_sum += self.time
        self.count += 1
        self._start = None


class StopwatchManager:
    """Simple class to organize various time measurements."""

    def __init__(self):
        """Initalize the basic private stopwatch attributes."""
        self._watch = {}

    def __contains__(self, key):
        return key in self._watch

    def items(self):
        """Get the list of all (key, stopwatch) pairs.

        Returns
        -------
        List[Tuple[str, Stopwatch]]
            List of (key, stopwatch) pairs
        """
        return self._watch.items()

    def initialize(self, key):
        """Initialize one or more stopwatches, resetting existing ones.

        Parameters
        ----------
        key : Union[str, List[str]]
            Key or list of keys to initialize a `Stopwatch` for
        """
        keys = [key] if isinstance(key, str) else key
        for k in keys:
            self._watch[k] = Stopwatch()

    def start(self, key):
        """Starts a stopwatch for a unique key.

        Parameters
        ----------
        key : str
            Key for which to start the clock
        """
        if key not in self._watch:
            raise KeyError(f"No stopwatch initialized under the name: {key}")

        self._watch[key].start()

    def stop(self, key):
        """Stops a stopwatch for a unique key.

        Parameters
        ----------
        key : str
            Key for which to stop the clock
        """
        if key not in self._watch:
            raise KeyError(f"No stopwatch started under the name: {key}")

        self._watch[key].stop()

    def time_sum(self, key):
        """Returns the sum of times recorded between each start/stop pairs.

        Parameters
        ----------
        key : str
            Key for which to return the time

        Returns
        -------
        Time
            Execution time of all iterations of a process so far
        """
        if key not in self._watch:
            raise KeyError(f"No stopwatch started under the name: {key}")

        return self._watch[key].time_sum
