"""Neural process records shared by insulated systems and complex elements."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict


class ProcessRole(Enum):
    """Role a neural process plays relative to the main complex."""
    INSULATED = "insulated"
    COMPLEX_ELEMENT = "complex_element"


@dataclass
class NeuralProcess:
    """A neural subsystem, conscious or not.

    Insulated processes (retina, pathways, cerebellum) and the neuronal
    groups inside the main complex share this one schema; they differ only
    in their data and role.

    Attributes:
        id: Unique, stable identifier
        name: Display name
        description: Short description of the subsystem
        role: Whether the process is insulated or part of the complex
        is_active: Current activation state
        default_active: Activation state restored on reset
    """
    id: str
    name: str
    description: str = ""
    role: ProcessRole = ProcessRole.INSULATED
    is_active: bool = field(init=False, default=False)
    default_active: bool = False

    def __post_init__(self):
        """Start in the default state."""
        if not self.id:
            raise ValueError("Neural process id cannot be empty")
        self.is_active = self.default_active

    @classmethod
    def from_config(cls, config: Dict, role: ProcessRole) -> "NeuralProcess":
        """Build a process from a configuration entry.

        Args:
            config: Entry with 'id', 'name' and optional 'description'
                and 'active' keys
            role: Role of the process

        Returns:
            New process in its default state
        """
        return cls(
            id=config['id'],
            name=config.get('name', config['id']),
            description=config.get('description', ''),
            role=role,
            default_active=bool(config.get('active', False)),
        )

    def activate(self) -> None:
        self.is_active = True

    def deactivate(self) -> None:
        self.is_active = False

    def restore_default(self) -> None:
        """Return to the initial activation state."""
        self.is_active = self.default_active

    def __repr__(self) -> str:
        state = "active" if self.is_active else "inactive"
        return f"NeuralProcess(id={self.id}, role={self.role.value}, {state})"
