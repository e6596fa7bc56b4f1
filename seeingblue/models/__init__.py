"""Entity model: neural processes and the main complex."""

from .neural_process import NeuralProcess, ProcessRole
from .main_complex import (
    MainComplex,
    NOTHINGNESS_EXPERIENCE,
    experience_description,
    integration_score,
)
from .repertoire import build_insulated_processes, build_main_complex

__all__ = [
    "NeuralProcess",
    "ProcessRole",
    "MainComplex",
    "NOTHINGNESS_EXPERIENCE",
    "experience_description",
    "integration_score",
    "build_insulated_processes",
    "build_main_complex",
]
