"""Observer contract for presentation layers and a recording observer."""

from typing import Callable, Dict, List, Optional, Protocol, Union, runtime_checkable

import pandas as pd

from .snapshot import SimulationSnapshot


@runtime_checkable
class StateObserver(Protocol):
    """Anything that wants to be told about published snapshots.

    Snapshots arrive synchronously, in the order the state changed, with
    none dropped. Observers must treat them as read-only.
    """

    def on_snapshot(self, snapshot: SimulationSnapshot) -> None:
        ...


SnapshotCallback = Callable[[SimulationSnapshot], None]
ObserverLike = Union[StateObserver, SnapshotCallback]


class SnapshotRecorder:
    """Observer that keeps the full timeline of published snapshots."""

    def __init__(self):
        self.snapshots: List[SimulationSnapshot] = []

    def on_snapshot(self, snapshot: SimulationSnapshot) -> None:
        self.snapshots.append(snapshot)

    @property
    def latest(self) -> Optional[SimulationSnapshot]:
        return self.snapshots[-1] if self.snapshots else None

    def clear(self) -> None:
        self.snapshots.clear()

    def timeline(self) -> List[Dict]:
        """Recorded snapshots as plain dictionaries."""
        return [s.to_dict() for s in self.snapshots]

    def to_dataframe(self) -> pd.DataFrame:
        """Recorded snapshots as a table.

        One row per snapshot with its sequence, time, status, integration
        score and resulting experience, plus one boolean column per process
        and element id.
        """
        rows = []
        for snapshot in self.snapshots:
            row = {
                'sequence': snapshot.sequence,
                'time': snapshot.time,
                'status': snapshot.status,
                'integration_score': snapshot.main_complex.integration_score,
                'resulting_experience': snapshot.resulting_experience,
            }
            row.update(snapshot.activation_map())
            rows.append(row)
        return pd.DataFrame(rows)

    def __len__(self) -> int:
        return len(self.snapshots)
