"""
Data models for the ring farm.

Optimizer configuration, per-layout scores and per-generation reports.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from polyring.layout import Layout


@dataclass
class FarmConfig:
    """
    Parameters of one optimizer run.

    Attributes:
        population_size: Number of layouts per generation
        max_generations: Number of generations to score before stopping
        elite_count: Top layouts copied unchanged into the next generation
        mutation_fraction: Share of each generation produced by mutation (0..1)
        mutation_attempts: Trial clones evaluated per mutation
        seed: Random seed (None draws fresh entropy)
    """
    population_size: int = 200
    max_generations: int = 50
    elite_count: int = 10
    mutation_fraction: float = 0.7
    mutation_attempts: int = 10
    seed: Optional[int] = None

    def __post_init__(self):
        """Validate configuration."""
        if self.population_size <= 0:
            raise ValueError(f"population_size must be positive, got {self.population_size}")

        if self.max_generations <= 0:
            raise ValueError(f"max_generations must be positive, got {self.max_generations}")

        if not 0 <= self.elite_count <= self.population_size:
            raise ValueError(
                f"elite_count must be between 0 and population_size ({self.population_size}), "
                f"got {self.elite_count}"
            )

        if not 0.0 <= self.mutation_fraction <= 1.0:
            raise ValueError(f"mutation_fraction must be between 0 and 1, got {self.mutation_fraction}")

        if self.mutation_attempts <= 0:
            raise ValueError(f"mutation_attempts must be positive, got {self.mutation_attempts}")

    @classmethod
    def from_percentage(cls, mutation_percentage: float, **kwargs) -> "FarmConfig":
        """Create a config with the mutation share given as 0..100"""
        return cls(mutation_fraction=mutation_percentage / 100.0, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "population_size": self.population_size,
            "max_generations": self.max_generations,
            "elite_count": self.elite_count,
            "mutation_percentage": round(self.mutation_fraction * 100.0, 6),
            "mutation_attempts": self.mutation_attempts,
            "seed": self.seed,
        }


@dataclass
class Score:
    """Fitness of the layout at `layout` index of a generation."""
    score: float
    layout: int


@dataclass
class GenerationReport:
    """
    Summary of one scored generation.

    Attributes:
        iteration: Generation number, starting at 0
        scores: Scores sorted best first
        top_layouts: Best unique layouts, best first
        elapsed_ms: Time spent since the previous report
    """
    iteration: int
    scores: list[Score]
    top_layouts: list[Layout] = field(default_factory=list)
    elapsed_ms: float = 0.0

    @property
    def best_score(self) -> float:
        return self.scores[0].score

    @property
    def best_layout(self) -> Layout:
        return self.top_layouts[0]

    def summary(self) -> str:
        return (f"Iteration: {self.iteration}, max score: {self.best_score:g}, "
                f"time: {self.elapsed_ms:.0f}ms")
