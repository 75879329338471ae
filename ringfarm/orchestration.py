"""
Orchestration module for the ring farm.

Runs the generational search: seeds a population of circle-arranged
layouts, then repeatedly scores, ranks and rebuilds it from elites,
rank-biased mutations and fresh immigrants.
"""

import logging
import math
import time
from typing import Callable, Optional

import numpy as np

from polyring.bundle import Bundle
from polyring.layout import Layout

from .data_models import FarmConfig, GenerationReport, Score
from .mutation import mutate, mutation_statistics


logger = logging.getLogger(__name__)

# Maximum number of unique layouts exposed per generation report
DISPLAY_ENTRIES = 100


def estimate_radius(bundle: Bundle) -> float:
    """Approximate radius of a circle the shapes can be laid out along."""
    length = sum(shape_variants[0].approx_extent() for shape_variants in bundle)
    return length / (2.0 * math.pi)


def rank_scores(generation: list[Layout]) -> list[Score]:
    """Score every layout of a generation, best first (stable for ties)."""
    scores = [Score(score=layout.score(), layout=k) for k, layout in enumerate(generation)]
    scores.sort(key=lambda s: s.score, reverse=True)
    return scores


def top_unique(scores: list[Score], generation: list[Layout], limit: int = DISPLAY_ENTRIES) -> list[Layout]:
    """
    Best ranked layouts with duplicates removed.

    Args:
        scores: Ranked scores of the generation
        generation: Layouts indexed by Score.layout
        limit: Maximum number of layouts to return

    Returns:
        Up to `limit` distinct layouts, best first
    """
    result: list[Layout] = []
    for s in scores:
        if len(result) >= limit:
            break
        layout = generation[s.layout]
        if any(layout == other for other in result):
            continue
        result.append(layout)
    return result


class Farm:
    """
    Generational optimizer over ring layouts.

    Two preallocated generation buffers are used alternately: the active
    one is scored and read from, the other is rebuilt for the next
    iteration.
    """

    def __init__(self,
                 bundle: Bundle,
                 config: FarmConfig,
                 rng: Optional[np.random.Generator] = None):
        self.bundle = bundle
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)
        self.radius = estimate_radius(bundle)

    def fresh_layout(self) -> Layout:
        """New layout with a shuffled placement order, arranged and centered."""
        layout = Layout.new(self.bundle)
        layout.shuffle(self.rng)
        layout.arrange_on_circle(self.radius)
        layout.center()
        return layout

    def pick_rank(self) -> int:
        """
        Rank-biased index into the sorted scores.

        Draws uniformly from [0, n^2) and maps the draw's integer square
        root to a rank, so rank r is picked with probability
        (2(n-1-r)+1)/n^2: top ranks are strongly favored, every rank
        stays possible.
        """
        n = self.config.population_size
        draw = int(self.rng.integers(0, n * n))
        return n - 1 - math.isqrt(draw)

    def next_generation(self, scores: list[Score], prev_gen: list[Layout], cur_gen: list[Layout]):
        """
        Rebuild `cur_gen` in place from the ranked previous generation.

        Args:
            scores: Ranked scores of `prev_gen`
            prev_gen: Active (scored) generation
            cur_gen: Buffer receiving the next generation
        """
        size = self.config.population_size
        ii = 0

        # Transfer the elite ones, skipping duplicates
        if self.config.elite_count > 0:
            for s in scores:
                layout = prev_gen[s.layout]
                if any(layout == other for other in cur_gen[:ii]):
                    continue
                cur_gen[ii] = layout.copy()
                ii += 1
                if ii == self.config.elite_count:
                    break

        # Mutations of rank-biased sources
        num_mut = min(size - ii, int(size * self.config.mutation_fraction))
        for _ in range(num_mut):
            source = prev_gen[scores[self.pick_rank()].layout]
            child, ops = mutate(source, self.config.mutation_attempts, self.rng)
            if logger.isEnabledFor(logging.DEBUG):
                stats = mutation_statistics(source, child)
                logger.debug("mutated slot %d (moved %d, reshaped %d): %s", ii,
                             stats['positions_moved'], stats['positions_reshaped'], "; ".join(ops))
            child.center()
            cur_gen[ii] = child
            ii += 1

        # Pad the rest with fresh ones
        while ii < size:
            cur_gen[ii] = self.fresh_layout()
            ii += 1

    def run(self, on_generation: Optional[Callable[[GenerationReport], None]] = None) -> GenerationReport:
        """
        Run the search.

        Args:
            on_generation: Optional callback receiving each GenerationReport

        Returns:
            Report of the last scored generation
        """
        size = self.config.population_size
        logger.info("Estimated radius: %.3f, settings: %s", self.radius, self.config.to_dict())

        generations = [
            [self.fresh_layout() for _ in range(size)],
            [None] * size,
        ]
        active = 0

        start_time = time.perf_counter()
        it = 0
        while True:
            prev_gen = generations[active]
            cur_gen = generations[1 - active]

            scores = rank_scores(prev_gen)

            now = time.perf_counter()
            report = GenerationReport(
                iteration=it,
                scores=scores,
                top_layouts=top_unique(scores, prev_gen),
                elapsed_ms=(now - start_time) * 1000.0,
            )
            start_time = now

            logger.info(report.summary())
            if on_generation is not None:
                on_generation(report)

            if it + 1 >= self.config.max_generations:
                break

            self.next_generation(scores, prev_gen, cur_gen)
            active = 1 - active
            it += 1

        logger.info("Done.")
        return report
