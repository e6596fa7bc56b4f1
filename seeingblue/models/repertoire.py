"""Construction of the insulated processes and the main complex.

The default repertoire models Tononi's (2004) "seeing blue" example: the
retina, pathways, subcortical loops and cerebellum are causally linked to
the experience but informationally insulated from it, while the neuronal
groups of the main complex jointly specify it.
"""

from typing import Dict, List, Optional

from .main_complex import MainComplex
from .neural_process import NeuralProcess, ProcessRole

RETINA = "retina"
AFFERENT_PATHWAYS = "afferent_pathways"
MOTOR_PATHWAYS = "motor_pathways"
SUBCORTICAL_LOOPS = "subcortical_loops"
CEREBELLUM = "cerebellum"
BLUE = "blue"

DEFAULT_INSULATED_PROCESSES = [
    {
        'id': RETINA,
        'name': "👁️ Retina",
        'description': "Transduces photons into neural signals. Acts as a 'port-in' to the main complex.",
    },
    {
        'id': AFFERENT_PATHWAYS,
        'name': "→🧠 Afferent Pathways",
        'description': "Relays sensory information from the retina to the thalamocortical system.",
    },
    {
        'id': MOTOR_PATHWAYS,
        'name': "🦾 Motor Pathways",
        'description': "Executes motor commands (e.g., button press). A 'port-out' from the main complex.",
    },
    {
        'id': SUBCORTICAL_LOOPS,
        'name': "🔄 Subcortical Loops",
        'description': "Handles automated tasks like subvocalization. Informationally insulated.",
    },
    {
        # Always active in the background
        'id': CEREBELLUM,
        'name': "🧠 Cerebellum",
        'description': "Manages automated functions like posture and gaze. Highly modular, low Φ.",
        'active': True,
    },
]

DEFAULT_COMPLEX_ELEMENTS = [
    {'id': BLUE, 'name': "Blue Neurons", 'description': "Selective for the color blue."},
    {'id': "red", 'name': "Red Neurons", 'description': "Selective for the color red."},
    {'id': "shape", 'name': "Shape Neurons", 'description': "Selective for geometric shapes."},
    {'id': "sound", 'name': "Sound Neurons", 'description': "Selective for auditory tones."},
    {'id': "thought", 'name': "Thought Neurons", 'description': "Represents an abstract thought."},
]


def build_insulated_processes(config: Optional[List[Dict]] = None) -> Dict[str, NeuralProcess]:
    """Create the insulated processes.

    Args:
        config: List of process entries; defaults to the five standard ones

    Returns:
        Processes keyed by id, in configuration order

    Raises:
        ValueError: If two processes share an id
    """
    entries = DEFAULT_INSULATED_PROCESSES if config is None else config

    processes: Dict[str, NeuralProcess] = {}
    for entry in entries:
        process = NeuralProcess.from_config(entry, ProcessRole.INSULATED)
        if process.id in processes:
            raise ValueError(f"Duplicate process id: {process.id}")
        processes[process.id] = process

    return processes


def build_main_complex(config: Optional[Dict] = None) -> MainComplex:
    """Create the main complex with its repertoire of elements.

    Args:
        config: Complex configuration with optional 'name', 'description',
            'interconnection_factor' and 'elements' keys

    Returns:
        Main complex with every element inactive
    """
    config = config or {}
    entries = config.get('elements')
    if entries is None:
        entries = DEFAULT_COMPLEX_ELEMENTS

    elements = [NeuralProcess.from_config(entry, ProcessRole.COMPLEX_ELEMENT) for entry in entries]
    for element in elements:
        # Elements are only switched on by the schedule
        element.default_active = False
        element.restore_default()

    kwargs = {}
    if 'name' in config:
        kwargs['name'] = config['name']
    if 'description' in config:
        kwargs['description'] = config['description']

    return MainComplex(
        elements=elements,
        interconnection_factor=float(config.get('interconnection_factor', 1.0)),
        **kwargs,
    )
