"""Tests for the timing utilities."""

import pytest

from rgeana.utils.stopwatch import StopwatchManager, Time


class TestStopwatch:
    """Test the stopwatch manager."""

    def test_time_arithmetic(self):
        """Times add and subtract component-wise."""
        total = Time(2.0, 1.0) + Time(1.0, 0.5)
        assert total == Time(3.0, 1.5)
        assert total - Time(1.0, 1.0) == Time(2.0, 0.5)

    def test_accumulate(self):
        """Times accumulate over start/stop pairs."""
        watch = StopwatchManager()
        watch.initialize(["read", "write"])
        assert "read" in watch
        assert "process" not in watch

        for _ in range(3):
            watch.start("read")
            watch.stop("read")

        read = dict(watch.items())["read"]
        assert read.count == 3
        assert watch.time_sum("read").wall >= 0.0
        assert watch.time_sum("write") == Time()

    def test_misuse(self):
        """Watches must be initialized, started then stopped."""
        watch = StopwatchManager()
        with pytest.raises(KeyError):
            watch.start("read")

        watch.initialize("read")
        with pytest.raises(ValueError):
            watch.stop("read")

        watch.start("read")
        with pytest.raises(ValueError):
            watch.start("read")
