"""The main complex and the measures derived from its elements.

The integration score here is a conceptual stand-in for integrated
information (Phi), not the quantity defined by Tononi and Sporns (2003).
It grows with the number of elements (differentiation) scaled by an
interconnection factor (integration).
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

from .neural_process import NeuralProcess, ProcessRole

NOTHINGNESS_EXPERIENCE = (
    "An experience of 'nothingness' or pure awareness, "
    "defined by the potential for all other states."
)

NEURONS_SUFFIX = " Neurons"


def integration_score(elements: Sequence[NeuralProcess],
                      interconnection_factor: float = 1.0) -> float:
    """Compute the simplified integration score of a set of elements.

    Args:
        elements: Elements of the complex
        interconnection_factor: Degree of integration, 1.0 meaning maximal

    Returns:
        Score in bits; 0.0 when there are fewer than two elements
    """
    differentiation = float(len(elements))
    if differentiation <= 1:
        return 0.0

    # Information in bits carried by the 2^n possible states
    information_capacity = np.log2(np.power(2.0, differentiation))

    return float(interconnection_factor * information_capacity)


def _quality_name(element: NeuralProcess) -> str:
    name = element.name
    if name.endswith(NEURONS_SUFFIX):
        name = name[:-len(NEURONS_SUFFIX)]
    return name


def experience_description(elements: Sequence[NeuralProcess]) -> str:
    """Describe the experience specified by the state of all elements.

    The experience is the state of the whole complex: the active elements
    give its quality and the inactive ones are the alternatives it rules out.

    Args:
        elements: Elements of the complex, in their fixed order

    Returns:
        Human-readable description of the current experience
    """
    active = [e for e in elements if e.is_active]

    if not active:
        return NOTHINGNESS_EXPERIENCE

    active_names = ", ".join(f"'{_quality_name(e)}'" for e in active)
    inactive_count = len(elements) - len(active)

    return (
        f"A unified experience of {active_names}. This specific quality is "
        f"defined by its differentiation from the {inactive_count} other "
        f"potential states within the complex (e.g., 'red', 'sound', etc.), "
        f"creating a unique point in qualia space."
    )


@dataclass
class MainComplex:
    """The integrated thalamocortical network that forms one experience.

    Element order is fixed at construction; only activation flags change
    afterwards.
    """
    elements: List[NeuralProcess]
    name: str = "🌟 Main Complex"
    description: str = (
        "The integrated thalamocortical network where information is "
        "unified to form a single conscious experience."
    )
    is_active: bool = True
    interconnection_factor: float = 1.0
    _index: dict = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        """Validate elements and index them by id."""
        self.elements = list(self.elements)
        self._index = {}
        for element in self.elements:
            if element.id in self._index:
                raise ValueError(f"Duplicate complex element id: {element.id}")
            if element.role != ProcessRole.COMPLEX_ELEMENT:
                raise ValueError(f"Process {element.id} is not a complex element")
            self._index[element.id] = element

    @property
    def phi(self) -> float:
        """Integration score of the complex."""
        return integration_score(self.elements, self.interconnection_factor)

    def specify_experience(self) -> str:
        """Experience defined by the current state of all elements."""
        return experience_description(self.elements)

    def get_element(self, element_id: str) -> Optional[NeuralProcess]:
        return self._index.get(element_id)

    def active_elements(self) -> List[NeuralProcess]:
        return [e for e in self.elements if e.is_active]

    def deactivate_all(self) -> None:
        for element in self.elements:
            element.deactivate()

    def __len__(self) -> int:
        return len(self.elements)

    def __repr__(self) -> str:
        return (f"MainComplex(elements={len(self.elements)}, "
                f"active={len(self.active_elements())}, phi={self.phi:.2f})")
