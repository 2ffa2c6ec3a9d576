"""Kernel time – Clock port + implementations."""
from messenger_test.kernel.time.clock import Clock, MockClock, SystemClock

__all__ = ["Clock", "MockClock", "SystemClock"]
