"""Core simulation components."""

from .event_queue import Event, EventType, EventQueue
from .scheduler import ScheduleEntry, Scheduler
from .snapshot import ComplexSnapshot, ProcessSnapshot, SimulationSnapshot
from .observer import SnapshotRecorder, StateObserver
from .simulator import IDLE_EXPERIENCE, SeeingBlueSimulator, SimulationStatus

__all__ = [
    "Event",
    "EventType",
    "EventQueue",
    "ScheduleEntry",
    "Scheduler",
    "ComplexSnapshot",
    "ProcessSnapshot",
    "SimulationSnapshot",
    "SnapshotRecorder",
    "StateObserver",
    "IDLE_EXPERIENCE",
    "SeeingBlueSimulator",
    "SimulationStatus",
]
