"""
Time source package.
"""

from src.timesrc.timesrc import TimeSource, SystemClock

__all__ = ["TimeSource", "SystemClock"]
