"""Personal time utilities: stopwatch, countdown timer, alarms and world clocks."""

__version__ = "0.1.0"
