"""Read-only snapshots of the simulation state.

Snapshots are what observers receive. They are frozen and hold tuples,
never references to the controller's own records.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from dataclasses_json import dataclass_json

from ..models.main_complex import MainComplex
from ..models.neural_process import NeuralProcess


@dataclass_json
@dataclass(frozen=True)
class ProcessSnapshot:
    """State of one neural process at publication time."""
    id: str
    name: str
    description: str
    role: str
    is_active: bool

    @classmethod
    def from_process(cls, process: NeuralProcess) -> "ProcessSnapshot":
        return cls(
            id=process.id,
            name=process.name,
            description=process.description,
            role=process.role.value,
            is_active=process.is_active,
        )


@dataclass_json
@dataclass(frozen=True)
class ComplexSnapshot:
    """State of the main complex, with its derived values."""
    name: str
    description: str
    is_active: bool
    integration_score: float
    experience_description: str
    elements: Tuple[ProcessSnapshot, ...]

    @classmethod
    def from_complex(cls, main_complex: MainComplex) -> "ComplexSnapshot":
        return cls(
            name=main_complex.name,
            description=main_complex.description,
            is_active=main_complex.is_active,
            integration_score=main_complex.phi,
            experience_description=main_complex.specify_experience(),
            elements=tuple(ProcessSnapshot.from_process(e) for e in main_complex.elements),
        )

    def active_element_ids(self) -> Tuple[str, ...]:
        return tuple(e.id for e in self.elements if e.is_active)


@dataclass_json
@dataclass(frozen=True)
class SimulationSnapshot:
    """Complete published state of a simulation.

    Attributes:
        sequence: Publication counter, strictly increasing
        time: Simulated time of publication
        status: Controller status value
        processes: Insulated processes, in configuration order
        main_complex: The main complex
        resulting_experience: Latest described experience
    """
    sequence: int
    time: float
    status: str
    processes: Tuple[ProcessSnapshot, ...]
    main_complex: ComplexSnapshot
    resulting_experience: str

    def get_process(self, process_id: str) -> Optional[ProcessSnapshot]:
        """Look up an insulated process or complex element by id."""
        for process in self.processes + self.main_complex.elements:
            if process.id == process_id:
                return process
        return None

    def is_active(self, process_id: str) -> bool:
        process = self.get_process(process_id)
        return process is not None and process.is_active

    def active_process_ids(self) -> Tuple[str, ...]:
        return tuple(p.id for p in self.processes if p.is_active)

    def active_element_ids(self) -> Tuple[str, ...]:
        return self.main_complex.active_element_ids()

    def activation_map(self) -> dict:
        """Activation flag of every process and element, keyed by id."""
        return {p.id: p.is_active for p in self.processes + self.main_complex.elements}

    def state_key(self) -> tuple:
        """Comparable view of the state, ignoring sequence and time."""
        return (self.status, tuple(sorted(self.activation_map().items())), self.resulting_experience)
