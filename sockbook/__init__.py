"""Socket programming patterns: small TCP servers, clients and timer containers."""

__version__ = "0.1.0"

__all__ = [
    "basic_servers",
    "byteorder",
    "clients",
    "connect",
    "http_request",
    "multiplex",
    "signal_server",
    "sorted_timers",
    "timed_wait",
    "timer_heap",
    "timer_wheel",
]