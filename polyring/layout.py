"""
Layout Engine

Places one instance of every bundle shape in the plane, tests geometric
relationships between placed shapes, walks the shapes around a circle and
scores the resulting ring.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from .bundle import Bundle
from .shape import Cell, NEIGHBOR_OFFSETS, Shape, angle_greater


# Neighbor offsets including diagonals, used by the flood fill and mutations
COMPASS_OFFSETS: Tuple[Cell, ...] = (
    (1, 0), (0, 1), (-1, 0), (0, -1), (1, -1), (1, 1), (-1, 1), (-1, -1)
)

# Fit cost given to candidates that violate a placement constraint
REJECTED_FIT = math.inf

# Lower bound for the angular span used to normalize circle deviation
MIN_ANGULAR_SPAN = 1e-3


class Relationship(Enum):
    """Geometric relationship between two placed shapes"""
    OVERLAP = "overlap"    # have a common square
    BORDER = "border"      # have a common edge
    DISJOINT = "disjoint"  # neither a common square nor edge


@dataclass
class Position:
    """Placement of one shape instance: top-left anchor, shape id and variant"""
    x: int
    y: int
    shape_id: int
    variant: int = 0

    @property
    def anchor(self) -> Cell:
        return self.x, self.y

    def copy(self) -> "Position":
        return Position(self.x, self.y, self.shape_id, self.variant)


def relationship(shape_a: Shape, pos_a: Cell, shape_b: Shape, pos_b: Cell) -> Relationship:
    """
    Classify how two placed shapes relate to each other

    Bounding boxes that cannot even touch are rejected first, then the
    cells are tested for a shared square and finally for a shared edge.

    Args:
        shape_a: First shape
        pos_a: Anchor of the first shape
        shape_b: Second shape
        pos_b: Anchor of the second shape

    Returns:
        Relationship.OVERLAP, Relationship.BORDER or Relationship.DISJOINT
    """
    ax, ay = pos_a
    bx, by = pos_b
    if (bx > ax + shape_a.width or ax > bx + shape_b.width or
            by > ay + shape_a.height or ay > by + shape_b.height):
        return Relationship.DISJOINT

    # Offset from shape_a local coordinates to shape_b local coordinates
    dx, dy = ax - bx, ay - by

    for x, y in shape_a.cells:
        if shape_b.contains(x + dx, y + dy):
            return Relationship.OVERLAP

    for x, y in shape_a.cells:
        for ox, oy in NEIGHBOR_OFFSETS:
            if shape_b.contains(x + dx + ox, y + dy + oy):
                return Relationship.BORDER

    return Relationship.DISJOINT


def gap(shape_a: Shape, pos_a: Cell, shape_b: Shape, pos_b: Cell) -> int:
    """
    Number of empty cells separating two placed shapes

    Returns:
        -1 if the shapes overlap, 0 if they share an edge, otherwise the
        minimum Manhattan distance between their filled cells minus one
    """
    status = relationship(shape_a, pos_a, shape_b, pos_b)
    if status is Relationship.OVERLAP:
        return -1
    if status is Relationship.BORDER:
        return 0

    cells_a = shape_a.cell_array(pos_a)
    cells_b = shape_b.cell_array(pos_b)
    dist = np.abs(cells_a[:, None, :] - cells_b[None, :, :]).sum(axis=2)
    return int(dist.min()) - 1


FitFunction = Callable[[Cell, Shape], float]


def best_fit(anchor_shape: Shape,
             anchor_pos: Cell,
             candidates: Sequence[Shape],
             fit_fn: FitFunction) -> Tuple[int, Cell]:
    """
    Find the candidate variant and position with the lowest fit cost

    Every boundary cell of the anchor is paired with every filled cell of
    every candidate variant; the candidate is positioned so that the two
    cells coincide. Iteration goes boundary cell, then variant index, then
    candidate cell, and the first candidate seen wins ties.

    Args:
        anchor_shape: Already placed shape
        anchor_pos: Anchor of the placed shape
        candidates: Variants of the shape being placed
        fit_fn: Cost of a (position, variant shape) pair, lower is better

    Returns:
        Tuple of (variant_index, position); (0, anchor_pos) when every
        candidate costs REJECTED_FIT
    """
    ax, ay = anchor_pos
    best_cost = math.inf
    best = (0, anchor_pos)

    for bx, by in anchor_shape.boundary:
        for variant_index, shape in enumerate(candidates):
            for cx, cy in shape.cells:
                pos = (ax + bx - cx, ay + by - cy)
                cost = fit_fn(pos, shape)
                if cost < best_cost:
                    best_cost = cost
                    best = (variant_index, pos)

    return best


def _angular_width(span: Tuple[float, float]) -> float:
    lo, hi = span
    width = hi - lo
    if width > math.pi:
        # the shape straddles the zero angle
        width = 2.0 * math.pi - width
    return max(width, MIN_ANGULAR_SPAN)


def circle_fit(radius: float,
               prev_shape: Shape,
               prev_pos: Cell,
               first: Optional[Tuple[Shape, Cell]] = None,
               advance: bool = True) -> FitFunction:
    """
    Build the fit function used while walking shapes around a circle

    A candidate must border the previously placed shape and, with
    `advance`, move the leading angle past it. When `first` is given (the
    last shape of the walk) the candidate must also border the first shape,
    closing the ring. Remaining candidates cost their squared deviation
    from the circle divided by the angle they cover.
    """
    _, prev_lead = prev_shape.angular_span(prev_pos)

    def fit(pos: Cell, shape: Shape) -> float:
        if relationship(prev_shape, prev_pos, shape, pos) is not Relationship.BORDER:
            return REJECTED_FIT
        span = shape.angular_span(pos)
        if advance and not angle_greater(span[1], prev_lead):
            return REJECTED_FIT
        if first is not None and relationship(first[0], first[1], shape, pos) is not Relationship.BORDER:
            return REJECTED_FIT
        return shape.squared_deviation_from_circle(radius, pos) / _angular_width(span)

    return fit


class Layout:
    """One candidate arrangement: a placement for every shape id of a bundle"""

    def __init__(self,
                 bundle: Bundle,
                 positions: Optional[List[Position]] = None,
                 order: Optional[List[int]] = None):
        self.bundle = bundle
        if positions is None:
            positions = [Position(0, 0, shape_id, 0) for shape_id in range(len(bundle))]
        self.positions = positions
        self.order = list(order) if order is not None else [p.shape_id for p in positions]

    @classmethod
    def new(cls, bundle: Bundle) -> "Layout":
        """Every shape at the origin with variant 0, identity placement order"""
        return cls(bundle)

    def copy(self) -> "Layout":
        return Layout(self.bundle, [p.copy() for p in self.positions], self.order)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Layout):
            return NotImplemented
        return self.positions == other.positions

    def __len__(self) -> int:
        return len(self.positions)

    def __repr__(self) -> str:
        return f"Layout(positions={self.positions})"

    def shape_of(self, position: Position) -> Shape:
        return self.bundle.shape(position.shape_id, position.variant)

    def shape_at(self, index: int) -> Shape:
        return self.shape_of(self.positions[index])

    def shuffle(self, rng: np.random.Generator):
        """Fisher-Yates shuffle of the order in which shapes are placed"""
        order = self.order
        for i in range(len(order) - 1, 0, -1):
            j = int(rng.integers(0, i + 1))
            order[i], order[j] = order[j], order[i]

    def arrange_on_circle(self, radius: float):
        """
        Lay the shapes out in placement order along a circle

        The first shape is anchored at the rightmost point of the circle,
        every following one is fitted against its predecessor with
        `circle_fit`. The last shape of a walk of more than two shapes must
        also border the first one. When no candidate meets every constraint,
        ring closure is dropped first and the angle advance next, so each
        shape always borders its predecessor. Positions are stored in
        placement order afterwards.
        """
        count = len(self.order)
        first_id = self.order[0]
        placed = [Position(int(round(radius)), 0, first_id, 0)]
        first = (self.shape_of(placed[0]), placed[0].anchor)

        for k in range(1, count):
            shape_id = self.order[k]
            prev = placed[-1]
            prev_shape = self.shape_of(prev)

            fit_fns = [
                circle_fit(radius, prev_shape, prev.anchor),
                circle_fit(radius, prev_shape, prev.anchor, advance=False),
            ]
            if count > 2 and k == count - 1:
                fit_fns.insert(0, circle_fit(radius, prev_shape, prev.anchor, first))

            variants = self.bundle[shape_id]
            for fit_fn in fit_fns:
                variant, (x, y) = best_fit(prev_shape, prev.anchor, variants, fit_fn)
                if fit_fn((x, y), variants[variant]) < REJECTED_FIT:
                    break
            placed.append(Position(x, y, shape_id, variant))

        self.positions = placed

    def bounds(self) -> Tuple[Cell, Cell]:
        """Inclusive ((left, top), (right, bottom)) box covering every placed shape"""
        min_x = min_y = math.inf
        max_x = max_y = -math.inf
        for pos in self.positions:
            shape = self.shape_of(pos)
            min_x = min(min_x, pos.x)
            min_y = min(min_y, pos.y)
            max_x = max(max_x, pos.x + shape.width - 1)
            max_y = max(max_y, pos.y + shape.height - 1)
        return (int(min_x), int(min_y)), (int(max_x), int(max_y))

    def center(self):
        """Translate all positions so the bounding box is centered at the origin"""
        (lx, ly), (rx, ry) = self.bounds()
        cx = int((lx + rx) / 2)
        cy = int((ly + ry) / 2)
        for pos in self.positions:
            pos.x -= cx
            pos.y -= cy

    def occupancy(self) -> Tuple[np.ndarray, Cell]:
        """Boolean occupancy mask over the bounding box and the box's top-left corner"""
        (lx, ly), (rx, ry) = self.bounds()
        occupied = np.zeros((ry - ly + 1, rx - lx + 1), dtype=bool)
        for pos in self.positions:
            shape = self.shape_of(pos)
            x0, y0 = pos.x - lx, pos.y - ly
            occupied[y0:y0 + shape.height, x0:x0 + shape.width] |= shape.mask
        return occupied, (lx, ly)

    def flood_fill(self, visit: Optional[Callable[[int, int], None]] = None) -> Optional[int]:
        """
        Flood fill the empty cells around the middle of the layout

        The fill starts at the center of the bounding box (or an empty
        neighbor of it) and spreads in all 8 directions over empty cells.

        Args:
            visit: Optional callback receiving (x, y) of each visited cell

        Returns:
            Number of visited cells if the fill is fully enclosed by shapes,
            None if it reaches the bounding box edge (the ring is open)
        """
        occupied, (lx, ly) = self.occupancy()
        height, width = occupied.shape

        seed = (width // 2, height // 2)
        if occupied[seed[1], seed[0]]:
            for dx, dy in COMPASS_OFFSETS:
                nx, ny = seed[0] + dx, seed[1] + dy
                if 0 <= nx < width and 0 <= ny < height and not occupied[ny, nx]:
                    seed = (nx, ny)
                    break
            else:
                return None

        visited = np.zeros_like(occupied)
        visited[seed[1], seed[0]] = True
        stack = [seed]
        count = 0

        while stack:
            x, y = stack.pop()
            if x == 0 or y == 0 or x == width - 1 or y == height - 1:
                return None
            count += 1
            if visit is not None:
                visit(x + lx, y + ly)
            for dx, dy in COMPASS_OFFSETS:
                nx, ny = x + dx, y + dy
                if (0 <= nx < width and 0 <= ny < height and
                        not occupied[ny, nx] and not visited[ny, nx]):
                    visited[ny, nx] = True
                    stack.append((nx, ny))

        return count

    def total_gap(self) -> int:
        """Sum of |gap| between cyclically adjacent placed shapes"""
        count = len(self.positions)
        if count < 2:
            return 0
        total = 0
        for k in range(count):
            a = self.positions[k]
            b = self.positions[(k + 1) % count]
            total += abs(gap(self.shape_of(a), a.anchor, self.shape_of(b), b.anchor))
        return total

    def score(self) -> float:
        """
        Fitness of the layout, higher is better

        A closed ring scores the size of its enclosed hole (>= 1); an open
        chain scores the negated total gap between neighbors (<= 0).
        """
        hole = self.flood_fill()
        if hole is not None:
            return float(hole)
        return -float(self.total_gap())

    def extract_core(self) -> Optional[Tuple[Shape, Cell]]:
        """
        The enclosed void of a closed ring as a shape

        Returns:
            (core shape, (x, y) offset of the core in layout coordinates),
            or None when the layout is open
        """
        cells: List[Cell] = []
        if self.flood_fill(lambda x, y: cells.append((x, y))) is None:
            return None
        offset = (min(x for x, _ in cells), min(y for _, y in cells))
        return Shape(cells), offset
