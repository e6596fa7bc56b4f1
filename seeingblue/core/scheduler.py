"""Timed schedule of state mutations on a single logical timeline."""

import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from .event_queue import Event, EventType, EventQueue
from ..utils.logger import setup_logger


@dataclass(frozen=True)
class ScheduleEntry:
    """One step of a schedule.

    Attributes:
        delay: Delay from arming time, in simulated seconds
        effect: State mutation to run when the step fires
        label: Short description for logging
    """
    delay: float
    effect: Callable[[], None]
    label: str = ""

    def __post_init__(self):
        if self.delay < 0:
            raise ValueError(f"Schedule delay cannot be negative: {self.delay}")


class Scheduler:
    """Runs an ordered schedule of effects against one timeline.

    The scheduler holds at most one armed schedule. Arming a new schedule
    cancels whatever is still pending from the previous one, and every
    pending event is tagged with the generation it was armed in, so nothing
    from a cancelled run can fire afterwards.

    Effects fire one at a time on the thread that drives the timeline,
    either on virtual time (advance, run_until, run_until_idle) or on the
    wall clock (run with realtime=True).
    """

    SCHEDULE_END_PRIORITY = 999

    # Slack when comparing due times, so stepping in 0.1s ticks fires on the tick
    TIME_EPSILON = 1e-9

    def __init__(self, on_complete: Optional[Callable[[], None]] = None):
        """Initialize scheduler.

        Args:
            on_complete: Called when every step of an armed schedule has fired
        """
        self.logger = setup_logger(self.__class__.__name__)
        self.on_complete = on_complete

        self.current_time = 0.0
        self.event_queue = EventQueue()
        self.generation = 0

        # Statistics
        self.fired_count = 0
        self.cancelled_count = 0

    @property
    def is_pending(self) -> bool:
        """Whether an armed schedule still has events to fire."""
        return not self.event_queue.is_empty()

    @property
    def pending_count(self) -> int:
        """Number of effects still waiting to fire."""
        return self.event_queue.count(EventType.EFFECT)

    def arm(self, entries: Iterable[ScheduleEntry]) -> int:
        """Arm a schedule, replacing any pending one.

        Args:
            entries: Steps to run, delays measured from now

        Returns:
            Generation number of the armed schedule
        """
        self.cancel_all()

        end_time = self.current_time
        count = 0
        for entry in entries:
            fire_time = self.current_time + entry.delay
            self.event_queue.push(Event(
                time=fire_time,
                event_type=EventType.EFFECT,
                generation=self.generation,
                effect=entry.effect,
                label=entry.label,
            ))
            end_time = max(end_time, fire_time)
            count += 1

        self.event_queue.push(Event(
            time=end_time,
            event_type=EventType.SCHEDULE_END,
            generation=self.generation,
            priority=self.SCHEDULE_END_PRIORITY,
            label="schedule end",
        ))

        self.logger.debug(
            f"Armed schedule #{self.generation} with {count} steps at t={self.current_time:.2f}s"
        )
        return self.generation

    def cancel_all(self) -> int:
        """Cancel every pending effect.

        Effects that already fired are not undone.

        Returns:
            Number of effects cancelled
        """
        cancelled = self.pending_count
        self.event_queue.clear()
        self.generation += 1

        if cancelled:
            self.cancelled_count += cancelled
            self.logger.debug(f"Cancelled {cancelled} pending steps")

        return cancelled

    def advance(self, dt: float) -> int:
        """Advance virtual time, firing everything that falls due.

        Args:
            dt: Time step in simulated seconds

        Returns:
            Number of effects fired
        """
        if dt < 0:
            raise ValueError(f"Cannot advance time backwards: {dt}")
        return self.run_until(self.current_time + dt)

    def run_until(self, until: float) -> int:
        """Fire every event due at or before a point in virtual time.

        Args:
            until: Target simulated time

        Returns:
            Number of effects fired
        """
        fired = 0
        while True:
            event = self.event_queue.peek()
            if event is None or event.time > until + self.TIME_EPSILON:
                break
            self.event_queue.pop()
            self.current_time = max(self.current_time, event.time)
            fired += self._process_event(event)

        self.current_time = max(self.current_time, until)
        return fired

    def run_until_idle(self) -> int:
        """Fire everything pending on virtual time.

        Returns:
            Number of effects fired
        """
        fired = 0
        while not self.event_queue.is_empty():
            event = self.event_queue.pop()
            self.current_time = max(self.current_time, event.time)
            fired += self._process_event(event)
        return fired

    def run(self, realtime: bool = False, time_scale: float = 1.0,
            sleep: Callable[[float], None] = time.sleep,
            clock: Callable[[], float] = time.monotonic) -> int:
        """Drive the timeline until nothing is pending.

        Args:
            realtime: Wait out each delay on the wall clock
            time_scale: Wall-clock seconds per simulated second
            sleep: Function used to wait
            clock: Monotonic wall clock

        Returns:
            Number of effects fired
        """
        if not realtime:
            return self.run_until_idle()

        if time_scale <= 0:
            raise ValueError(f"time_scale must be positive: {time_scale}")

        wall_origin = clock()
        sim_origin = self.current_time
        fired = 0

        while not self.event_queue.is_empty():
            event = self.event_queue.peek()
            wait = wall_origin + (event.time - sim_origin) * time_scale - clock()
            if wait > 0:
                sleep(wait)

            self.event_queue.pop()
            self.current_time = max(self.current_time, event.time)
            fired += self._process_event(event)

        return fired

    def _process_event(self, event: Event) -> int:
        """Process a single event.

        Args:
            event: Event to process

        Returns:
            1 if an effect fired, else 0
        """
        if event.generation != self.generation:
            self.logger.debug(f"Skipping stale event '{event.label}' from schedule #{event.generation}")
            return 0

        handler = {
            EventType.EFFECT: self._handle_effect,
            EventType.SCHEDULE_END: self._handle_schedule_end,
        }.get(event.event_type)

        if handler:
            return handler(event)
        return 0

    def _handle_effect(self, event: Event) -> int:
        self.logger.debug(f"t={self.current_time:.2f}s firing '{event.label}'")
        event.fire()
        self.fired_count += 1
        return 1

    def _handle_schedule_end(self, event: Event) -> int:
        self.logger.debug(f"Schedule #{event.generation} complete at t={self.current_time:.2f}s")
        if self.on_complete:
            self.on_complete()
        return 0

    def __repr__(self) -> str:
        return (f"Scheduler(t={self.current_time:.2f}, generation={self.generation}, "
                f"pending={self.pending_count})")
