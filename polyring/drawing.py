"""
Drawable layout data

Pure conversion of a Layout into what a renderer needs: the bounding box,
the tinted shapes to draw and the optional enclosed core.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .layout import Layout
from .shape import Cell, Shape


PALETTE: Tuple[str, ...] = (
    "8dd3c7", "ffffb3", "bebada", "fb8072", "80b1d3", "fdb462",
    "b3de69", "fccde5", "d9d9d9", "bc80bd", "ccebc5", "ffed6f",
)


def shape_color(shape_id: int) -> str:
    """Hex color (without '#') for a shape id"""
    return PALETTE[shape_id % len(PALETTE)]


@dataclass
class DrawableShape:
    """Shape placed relative to the layout's top-left corner"""
    shape: Shape
    x: int
    y: int
    shape_id: int
    color: str


@dataclass
class DrawableCore:
    """Enclosed void of a closed ring, labeled with its cell count"""
    shape: Shape
    x: int
    y: int

    @property
    def label(self) -> str:
        return str(len(self.shape))


@dataclass
class LayoutDrawing:
    """Everything needed to draw one layout"""
    width: int
    height: int
    origin: Cell
    shapes: List[DrawableShape] = field(default_factory=list)
    core: Optional[DrawableCore] = None


def layout_drawing(layout: Layout) -> LayoutDrawing:
    """
    Convert a layout into drawable data

    Coordinates are shifted so that the layout's bounding box starts at
    (0, 0); `origin` keeps the original top-left corner.

    Args:
        layout: Layout to draw

    Returns:
        LayoutDrawing with one DrawableShape per position and the core
        (if the layout encloses one)
    """
    (lx, ly), (rx, ry) = layout.bounds()
    drawing = LayoutDrawing(width=rx - lx + 1, height=ry - ly + 1, origin=(lx, ly))

    core = layout.extract_core()
    if core is not None:
        core_shape, (cx, cy) = core
        drawing.core = DrawableCore(core_shape, cx - lx, cy - ly)

    for pos in layout.positions:
        drawing.shapes.append(DrawableShape(
            shape=layout.shape_of(pos),
            x=pos.x - lx,
            y=pos.y - ly,
            shape_id=pos.shape_id,
            color=shape_color(pos.shape_id)
        ))

    return drawing
