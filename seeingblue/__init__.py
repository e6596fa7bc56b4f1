"""SeeingBlue: a staged simulation of the IIT "seeing blue" thought experiment."""

from .core.simulator import SeeingBlueSimulator, SimulationStatus, IDLE_EXPERIENCE
from .core.scheduler import Scheduler, ScheduleEntry
from .core.event_queue import Event, EventType, EventQueue
from .core.snapshot import SimulationSnapshot
from .core.observer import SnapshotRecorder, StateObserver
from .models.main_complex import MainComplex, NOTHINGNESS_EXPERIENCE, experience_description, integration_score
from .models.neural_process import NeuralProcess, ProcessRole
from .utils.logger import setup_logger

__version__ = "0.1.0"
__all__ = [
    "SeeingBlueSimulator",
    "SimulationStatus",
    "IDLE_EXPERIENCE",
    "Scheduler",
    "ScheduleEntry",
    "Event",
    "EventType",
    "EventQueue",
    "SimulationSnapshot",
    "SnapshotRecorder",
    "StateObserver",
    "MainComplex",
    "NOTHINGNESS_EXPERIENCE",
    "experience_description",
    "integration_score",
    "NeuralProcess",
    "ProcessRole",
    "setup_logger",
]
