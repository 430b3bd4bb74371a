"""
Orchestration of the watcher, the builder and the display loop.
"""

from .aggregator import DisplayState, EventSource, ResultAggregator
from .signal_handler import SignalHandler
from .supervisor import Supervisor, run_supervisor

__all__ = [
    "DisplayState",
    "EventSource",
    "ResultAggregator",
    "SignalHandler",
    "Supervisor",
    "run_supervisor",
]
