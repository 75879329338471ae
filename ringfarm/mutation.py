"""
Mutation operators for the ring farm.

Implements the elementary layout edits (variant re-roll, section shift,
shape swap) and the hill-climbing mutation that keeps the best of several
randomly edited clones.
"""

import math

import numpy as np

from polyring.layout import COMPASS_OFFSETS, Layout


MIN_EDITS = 2
MAX_EDITS = 4


def reroll_variants(layout: Layout, rng: np.random.Generator) -> str:
    """
    Pick a new random variant for two random slots.

    Each slot draws within the variant count of the shape it holds.

    Args:
        layout: Layout to edit in place
        rng: Random number generator

    Returns:
        Operation log entry
    """
    count = len(layout.positions)
    idx1 = int(rng.integers(0, count))
    idx2 = int(rng.integers(0, count))

    for idx in (idx1, idx2):
        pos = layout.positions[idx]
        pos.variant = int(rng.integers(0, layout.bundle.variant_count(pos.shape_id)))

    return f"reroll_variants: slots {idx1}, {idx2}"


def shift_section(layout: Layout, rng: np.random.Generator) -> str:
    """
    Move every position in a slot range by one unit step.

    The range spans the two randomly picked slots inclusively; the step is
    one of the 8 horizontal, vertical or diagonal unit offsets.

    Args:
        layout: Layout to edit in place
        rng: Random number generator

    Returns:
        Operation log entry
    """
    count = len(layout.positions)
    idx1 = int(rng.integers(0, count))
    idx2 = int(rng.integers(0, count))
    dx, dy = COMPASS_OFFSETS[int(rng.integers(0, len(COMPASS_OFFSETS)))]

    lo, hi = min(idx1, idx2), max(idx1, idx2)
    for pos in layout.positions[lo:hi + 1]:
        pos.x += dx
        pos.y += dy

    return f"shift_section: slots {lo}..{hi} by ({dx}, {dy})"


def swap_shapes(layout: Layout, rng: np.random.Generator) -> str:
    """
    Exchange the (shape id, variant) pair of two random slots.

    Args:
        layout: Layout to edit in place
        rng: Random number generator

    Returns:
        Operation log entry
    """
    count = len(layout.positions)
    idx1 = int(rng.integers(0, count))
    idx2 = int(rng.integers(0, count))

    a, b = layout.positions[idx1], layout.positions[idx2]
    a.shape_id, b.shape_id = b.shape_id, a.shape_id
    a.variant, b.variant = b.variant, a.variant
    layout.order = [pos.shape_id for pos in layout.positions]

    return f"swap_shapes: slots {idx1} <-> {idx2}"


OPERATORS = (reroll_variants, shift_section, swap_shapes)


def mutate(layout: Layout, attempts: int, rng: np.random.Generator) -> tuple[Layout, list[str]]:
    """
    Mutate a layout by keeping the best of several edited clones.

    Each attempt clones the source and applies MIN_EDITS..MAX_EDITS
    elementary edits chosen uniformly from OPERATORS, then scores the clone.
    The source itself is never modified.

    Args:
        layout: Source layout
        attempts: Number of trial clones
        rng: Random number generator

    Returns:
        Tuple of (best_clone, operation_log of the best clone)
    """
    best = layout.copy()
    best_ops: list[str] = []
    best_score = -math.inf

    for _ in range(attempts):
        clone = layout.copy()
        ops = []
        num_edits = int(rng.integers(MIN_EDITS, MAX_EDITS + 1))
        for _ in range(num_edits):
            operator = OPERATORS[int(rng.integers(0, len(OPERATORS)))]
            ops.append(operator(clone, rng))

        score = clone.score()
        if score > best_score:
            best_score = score
            best = clone
            best_ops = ops

    return best, best_ops


def mutation_statistics(original: Layout, mutated: Layout) -> dict:
    """
    Calculate statistics about a mutation.

    Args:
        original: Layout before mutation
        mutated: Layout after mutation

    Returns:
        Dictionary with changed slot counts
    """
    moved = sum(
        1 for a, b in zip(original.positions, mutated.positions)
        if (a.x, a.y) != (b.x, b.y)
    )
    reshaped = sum(
        1 for a, b in zip(original.positions, mutated.positions)
        if (a.shape_id, a.variant) != (b.shape_id, b.variant)
    )
    total = len(original.positions)

    return {
        'total_positions': total,
        'positions_moved': moved,
        'positions_reshaped': reshaped,
        'change_rate': max(moved, reshaped) / max(total, 1),
    }
