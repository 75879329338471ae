"""
Polyomino Shape Geometry

Canonical representation of a single polyomino (a set of edge-joined unit
squares) together with its mirror/rotation variants and the geometric
measurements used when laying shapes out along a circle.
"""

import math
from typing import Iterable, List, Optional, Tuple

import numpy as np


Cell = Tuple[int, int]

# Neighbor offsets, horizontal/vertical
NEIGHBOR_OFFSETS: Tuple[Cell, ...] = ((1, 0), (0, 1), (-1, 0), (0, -1))

ROTATIONS = (0, 90, 180, 270)


def angle_greater(a: float, b: float) -> bool:
    """True if angle a lies ahead of b (counter-clockwise, less than half a turn)"""
    if a < b and b - a > math.pi:
        return True
    return a > b and a - b < math.pi


class Shape:
    """Immutable polyomino with a canonical cell list, bitmap and boundary"""

    def __init__(self, cells: Iterable[Cell]):
        """
        Build a canonical shape from a collection of (x, y) cells

        The cells are shifted so that the bounding box starts at (0, 0)
        and stored sorted by (x, y).

        Args:
            cells: Filled unit cells, in any order

        Raises:
            ValueError: If no cells are given
        """
        cells = list(cells)
        if not cells:
            raise ValueError("Shape must contain at least one filled cell")

        min_x = min(x for x, _ in cells)
        min_y = min(y for _, y in cells)
        cells = sorted({(x - min_x, y - min_y) for x, y in cells})

        width = max(x for x, _ in cells) + 1
        height = max(y for _, y in cells) + 1

        mask = np.zeros((height, width), dtype=bool)
        for x, y in cells:
            mask[y, x] = True
        mask.setflags(write=False)

        self.cells: Tuple[Cell, ...] = tuple(cells)
        self.width = width
        self.height = height
        self.mask = mask
        self.boundary = self._build_boundary()

    def _build_boundary(self) -> Tuple[Cell, ...]:
        """Empty cells 4-adjacent to a filled cell (may lie outside the box)"""
        boundary = set()
        for x, y in self.cells:
            for dx, dy in NEIGHBOR_OFFSETS:
                nx, ny = x + dx, y + dy
                if not self.contains(nx, ny):
                    boundary.add((nx, ny))
        return tuple(sorted(boundary))

    @classmethod
    def parse(cls, text: str) -> "Shape":
        """
        Parse a shape from its character grid representation

        Any non-whitespace character marks a filled cell at (column, row).

        Args:
            text: Newline separated rows, e.g. "*\\n***\\n*"

        Returns:
            Canonical Shape

        Raises:
            ValueError: If the text contains no filled cells
        """
        cells = [
            (i, j)
            for j, line in enumerate(text.splitlines())
            for i, ch in enumerate(line)
            if not ch.isspace()
        ]
        if not cells:
            raise ValueError(f"No filled cells in shape definition: {text!r}")
        return cls(cells)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Shape):
            return NotImplemented
        return self.width == other.width and np.array_equal(self.mask, other.mask)

    def __hash__(self) -> int:
        return hash((self.width, self.height, self.mask.tobytes()))

    def __len__(self) -> int:
        return len(self.cells)

    def __repr__(self) -> str:
        return f"Shape(width={self.width}, height={self.height}, cells={list(self.cells)})"

    def to_text(self, fill: str = "*") -> str:
        """Render the shape back to its character grid form"""
        rows = []
        for y in range(self.height):
            rows.append("".join(fill if self.mask[y, x] else " " for x in range(self.width)).rstrip())
        return "\n".join(rows)

    def mirror(self) -> "Shape":
        """Return the shape reflected across its vertical mid-line"""
        return Shape((self.width - x - 1, y) for x, y in self.cells)

    def rotate(self, degrees: int) -> "Shape":
        """
        Return the shape rotated clockwise

        Args:
            degrees: One of 0, 90, 180, 270

        Returns:
            New canonical Shape
        """
        w, h = self.width, self.height
        if degrees == 0:
            return Shape(self.cells)
        if degrees == 90:
            return Shape((h - y - 1, x) for x, y in self.cells)
        if degrees == 180:
            return Shape((w - x - 1, h - y - 1) for x, y in self.cells)
        if degrees == 270:
            return Shape((y, w - x - 1) for x, y in self.cells)
        raise ValueError(f"Unsupported rotation: {degrees}. Must be one of {ROTATIONS}")

    def variants(self, mirror: bool, rotate: bool) -> List["Shape"]:
        """
        Distinct transformed variants of this shape

        Order is identity, its rotations, then the mirror image and its
        rotations. Duplicates are dropped keeping the first occurrence.

        Args:
            mirror: Include mirrored variants
            rotate: Include 90/180/270 degree rotations

        Returns:
            Between 1 and 8 distinct shapes
        """
        result: List[Shape] = []

        def add(shape: "Shape"):
            if shape not in result:
                result.append(shape)

        bases = [self.rotate(0)]
        if mirror:
            bases.append(self.mirror())

        for base in bases:
            add(base)
            if rotate:
                for degrees in ROTATIONS[1:]:
                    add(base.rotate(degrees))

        return result

    def contains(self, x: int, y: int) -> bool:
        """True if the cell at (x, y) is filled"""
        return 0 <= x < self.width and 0 <= y < self.height and bool(self.mask[y, x])

    def approx_extent(self) -> float:
        """Very approximate "length" of the shape"""
        return float(max(self.width, self.height))

    def squared_deviation_from_circle(self, radius: float, anchor: Cell) -> float:
        """
        Sum of squared radial distances from the cells to a circle

        The circle is centered at (0, 0) and the shape is placed with its
        top-left corner at the anchor.
        """
        ax, ay = anchor
        total = 0.0
        for x, y in self.cells:
            dr = math.hypot(ax + x, ay + y) - radius
            total += dr * dr
        return total

    def angular_span(self, anchor: Cell) -> Tuple[float, float]:
        """Range of polar angles (in [0, 2*pi)) covered by the cells when anchored"""
        ax, ay = anchor
        amin, amax = math.inf, -math.inf
        for x, y in self.cells:
            angle = math.atan2(ay + y, ax + x)
            if angle < 0.0:
                angle += 2.0 * math.pi
            amin = min(amin, angle)
            amax = max(amax, angle)
        return amin, amax

    def cell_array(self, anchor: Optional[Cell] = None) -> np.ndarray:
        """Filled cells as an (n, 2) integer array, optionally translated"""
        cells = np.array(self.cells, dtype=np.int64)
        if anchor is not None:
            cells = cells + np.array(anchor, dtype=np.int64)
        return cells
