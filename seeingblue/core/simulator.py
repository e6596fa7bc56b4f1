"""Simulation controller for the "seeing blue" activation sequence."""

from collections import deque
from enum import Enum
from typing import Callable, Deque, Dict, List, Optional, Tuple

from .observer import ObserverLike, SnapshotCallback
from .scheduler import ScheduleEntry, Scheduler
from .snapshot import ComplexSnapshot, ProcessSnapshot, SimulationSnapshot
from ..models.repertoire import (
    AFFERENT_PATHWAYS,
    BLUE,
    MOTOR_PATHWAYS,
    RETINA,
    SUBCORTICAL_LOOPS,
    build_insulated_processes,
    build_main_complex,
)
from ..utils.logger import setup_logger

IDLE_EXPERIENCE = "System is idle."

# Delays (simulated seconds from start) of each stage of the sequence
DEFAULT_SCHEDULE = {
    'retina': 0.5,
    'afferent_pathways': 1.0,
    'main_complex': 1.5,
    'output': 2.0,
}


class SimulationStatus(Enum):
    """Controller states."""
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


class SeeingBlueSimulator:
    """Owns the simulation state and runs the blue light sequence.

    The only ways to change state are start(), reset() and the scheduled
    steps that start() arms. Every change is published to subscribers as a
    read-only snapshot, in the order the changes were applied.

    Sequence armed by start():
    - retina activates
    - afferent pathways activate
    - blue neurons in the main complex activate and the experience is
      specified from the complex state
    - motor pathways and subcortical loops activate
    """

    def __init__(self, config: Optional[Dict] = None):
        """Initialize simulator.

        Args:
            config: Simulation configuration dictionary; defaults are used
                for any missing section
        """
        self.config = config or {}
        log_level = (self.config.get('logging') or {}).get('level')
        self.logger = setup_logger(self.__class__.__name__, level=log_level)

        # Entities
        self._processes = build_insulated_processes(self.config.get('processes'))
        self._main_complex = build_main_complex(self.config.get('complex'))
        self.resulting_experience = IDLE_EXPERIENCE
        self.status = SimulationStatus.IDLE

        # Timeline
        self.schedule_delays = {**DEFAULT_SCHEDULE, **(self.config.get('schedule') or {})}
        sim_config = self.config.get('simulation') or {}
        self.realtime = sim_config.get('realtime', False)
        self.time_scale = sim_config.get('time_scale', 1.0)
        self.scheduler = Scheduler(on_complete=self._handle_schedule_complete)

        # Publication
        self._observers: List[Tuple[ObserverLike, SnapshotCallback]] = []
        self._outbox: Deque[SimulationSnapshot] = deque()
        self._delivering = False
        self._sequence = 0

        # Statistics
        self.runs_started = 0
        self.runs_completed = 0
        self.skipped_steps = 0

        self.logger.debug(
            f"Simulator initialized with {len(self._processes)} insulated processes "
            f"and {len(self._main_complex)} complex elements"
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Present a blue light: reset, then arm the activation sequence.

        Calling start() while a previous run is pending replaces that run.
        """
        self.reset()

        self.runs_started += 1
        self.status = SimulationStatus.RUNNING
        self.scheduler.arm(self._build_schedule())
        self.logger.info(f"Run {self.runs_started} started at t={self.current_time:.2f}s")
        self._publish()

    def reset(self) -> None:
        """Cancel any pending steps and return every entity to its default."""
        cancelled = self.scheduler.cancel_all()
        if cancelled:
            self.logger.info(f"Reset cancelled {cancelled} pending steps")

        for process in self._processes.values():
            process.restore_default()
        self._main_complex.deactivate_all()

        self.resulting_experience = IDLE_EXPERIENCE
        self.status = SimulationStatus.IDLE
        self._publish()

    # ------------------------------------------------------------------
    # Timeline
    # ------------------------------------------------------------------

    @property
    def current_time(self) -> float:
        return self.scheduler.current_time

    @property
    def is_running(self) -> bool:
        """Whether scheduled steps are still pending."""
        return self.scheduler.is_pending

    def advance(self, dt: float) -> int:
        """Advance virtual time by dt, firing any steps that fall due."""
        return self.scheduler.advance(dt)

    def run_until_idle(self) -> int:
        """Fire every pending step on virtual time."""
        return self.scheduler.run_until_idle()

    def run(self, realtime: Optional[bool] = None, time_scale: Optional[float] = None) -> int:
        """Drive the timeline until nothing is pending.

        Args:
            realtime: Wait out delays on the wall clock; defaults to config
            time_scale: Wall-clock seconds per simulated second; defaults to config

        Returns:
            Number of steps fired
        """
        realtime = self.realtime if realtime is None else realtime
        time_scale = self.time_scale if time_scale is None else time_scale
        return self.scheduler.run(realtime=realtime, time_scale=time_scale)

    def _build_schedule(self) -> List[ScheduleEntry]:
        """Build the blue light sequence."""
        delays = self.schedule_delays
        return [
            ScheduleEntry(
                delays['retina'],
                lambda: self._activate_processes(RETINA),
                "activate retina",
            ),
            ScheduleEntry(
                delays['afferent_pathways'],
                lambda: self._activate_processes(AFFERENT_PATHWAYS),
                "activate afferent pathways",
            ),
            ScheduleEntry(
                delays['main_complex'],
                lambda: self._activate_complex_element(BLUE),
                "activate blue neurons",
            ),
            ScheduleEntry(
                delays['output'],
                lambda: self._activate_processes(MOTOR_PATHWAYS, SUBCORTICAL_LOOPS),
                "activate motor pathways and subcortical loops",
            ),
        ]

    def _activate_processes(self, *process_ids: str) -> None:
        """Activate insulated processes, skipping ids that do not exist."""
        changed = False
        for process_id in process_ids:
            process = self._processes.get(process_id)
            if process is None:
                self.skipped_steps += 1
                self.logger.warning(f"Process '{process_id}' not found, skipping activation")
                continue
            process.activate()
            changed = True

        if changed:
            self._publish()

    def _activate_complex_element(self, element_id: str) -> None:
        """Activate an element of the main complex and specify the experience.

        The experience is generated here, from the state of the whole
        complex, and not again when later insulated processes activate.
        """
        element = self._main_complex.get_element(element_id)
        if element is None:
            self.skipped_steps += 1
            self.logger.warning(f"Complex element '{element_id}' not found, skipping activation")
            return

        element.activate()
        self.resulting_experience = self._main_complex.specify_experience()
        self.logger.info(f"Experience specified: {self.resulting_experience}")
        self._publish()

    def _handle_schedule_complete(self) -> None:
        self.status = SimulationStatus.COMPLETED
        self.runs_completed += 1
        self.logger.info(f"Run {self.runs_started} completed at t={self.current_time:.2f}s")
        self._publish()

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def subscribe(self, observer: ObserverLike) -> Callable[[], None]:
        """Register an observer for published snapshots.

        Args:
            observer: Object with an on_snapshot method, or a callable
                taking a snapshot

        Returns:
            Function that unsubscribes the observer
        """
        if hasattr(observer, 'on_snapshot'):
            callback = observer.on_snapshot
        elif callable(observer):
            callback = observer
        else:
            raise TypeError(f"Observer must be callable or define on_snapshot: {observer!r}")

        self._observers.append((observer, callback))
        return lambda: self.unsubscribe(observer)

    def unsubscribe(self, observer: ObserverLike) -> bool:
        """Remove an observer.

        Returns:
            True if the observer was registered
        """
        for i, (registered, _) in enumerate(self._observers):
            if registered is observer:
                del self._observers[i]
                return True
        return False

    def snapshot(self) -> SimulationSnapshot:
        """Read-only snapshot of the current state."""
        return self._build_snapshot(self._sequence)

    def _build_snapshot(self, sequence: int) -> SimulationSnapshot:
        return SimulationSnapshot(
            sequence=sequence,
            time=self.current_time,
            status=self.status.value,
            processes=tuple(ProcessSnapshot.from_process(p) for p in self._processes.values()),
            main_complex=ComplexSnapshot.from_complex(self._main_complex),
            resulting_experience=self.resulting_experience,
        )

    def _publish(self) -> None:
        """Publish the current state to every observer.

        A snapshot published while observers are being notified (an
        observer calling start() or reset()) is queued behind the one being
        delivered, so every observer sees the same order.

        An observer that raises does not stop delivery: every queued
        snapshot still reaches every observer, then the first error is
        re-raised.
        """
        self._sequence += 1
        self._outbox.append(self._build_snapshot(self._sequence))

        if self._delivering:
            return

        first_error = None
        self._delivering = True
        try:
            while self._outbox:
                snapshot = self._outbox.popleft()
                for _, callback in list(self._observers):
                    try:
                        callback(snapshot)
                    except Exception as e:
                        self.logger.error(
                            f"Observer {callback!r} failed on snapshot {snapshot.sequence}: {e}"
                        )
                        if first_error is None:
                            first_error = e
        finally:
            self._delivering = False

        if first_error is not None:
            raise first_error

    @property
    def publish_count(self) -> int:
        return self._sequence

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def summary(self) -> Dict:
        """Summarize the current state.

        Returns:
            Dictionary of the current state and run statistics
        """
        return {
            'status': self.status.value,
            'time': self.current_time,
            'active_processes': [p.id for p in self._processes.values() if p.is_active],
            'active_elements': [e.id for e in self._main_complex.active_elements()],
            'integration_score': self._main_complex.phi,
            'resulting_experience': self.resulting_experience,
            'runs_started': self.runs_started,
            'runs_completed': self.runs_completed,
            'skipped_steps': self.skipped_steps,
            'snapshots_published': self.publish_count,
        }

    def __repr__(self) -> str:
        return (f"SeeingBlueSimulator(status={self.status.value}, "
                f"t={self.current_time:.2f}, {self._main_complex!r})")
