from .clock import Clock, SystemClock, FixedClock

__all__ = ["Clock", "SystemClock", "FixedClock"]
