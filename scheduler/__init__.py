"""
Scheduling helpers for timed playback
"""
from .timer import IntervalTimer

__all__ = ["IntervalTimer"]
