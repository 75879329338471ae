"""
Ring Farm - generational search over polyomino ring layouts

Seeds a population of circle-arranged layouts and evolves it through
elite carry-over, rank-biased hill-climbing mutation and fresh immigrants.

Modules:
- data_models: FarmConfig, Score, GenerationReport
- mutation: Elementary layout edits and the best-of-N mutation
- orchestration: Farm (the generation loop)
- cli: Configuration wiring and output writing
"""

__version__ = "0.1.0"
__author__ = "Polyomino Rings Team"

from .data_models import FarmConfig, GenerationReport, Score
from .orchestration import Farm

__all__ = [
    "FarmConfig",
    "GenerationReport",
    "Score",
    "Farm",
]
