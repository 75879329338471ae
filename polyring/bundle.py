"""
Shape Bundle

A bundle is the shape-id -> variant-list table for one run. It is built
once from the shape definition text and shared read-only by every layout.
"""

import re
from pathlib import Path
from typing import List, Union

from .shape import Shape


# Shape definitions are separated by one or more blank lines
_SEPARATOR = re.compile(r"\n[ \t]*\n")


class Bundle:
    """Ordered list of variant sets, indexed by shape id"""

    def __init__(self, variants: List[List[Shape]]):
        if not variants:
            raise ValueError("Bundle must contain at least one shape")
        if any(not shape_variants for shape_variants in variants):
            raise ValueError("Every shape in a bundle needs at least one variant")
        self.variants = [tuple(shape_variants) for shape_variants in variants]

    @classmethod
    def parse(cls, text: str, mirror: bool = True, rotate: bool = True) -> "Bundle":
        """
        Parse shape definitions separated by blank lines

        Args:
            text: Shape definitions, each a rectangular character grid
            mirror: Generate mirrored variants
            rotate: Generate rotated variants

        Returns:
            Bundle with one variant set per definition, in file order
        """
        chunks = [chunk for chunk in _SEPARATOR.split(text.replace("\r\n", "\n")) if chunk.strip()]
        return cls([Shape.parse(chunk).variants(mirror, rotate) for chunk in chunks])

    def __len__(self) -> int:
        return len(self.variants)

    def __getitem__(self, shape_id: int):
        return self.variants[shape_id]

    def __iter__(self):
        return iter(self.variants)

    def shape(self, shape_id: int, variant: int) -> Shape:
        """Variant `variant` of shape `shape_id`"""
        return self.variants[shape_id][variant]

    def variant_count(self, shape_id: int) -> int:
        return len(self.variants[shape_id])

    def total_cells(self) -> int:
        """Number of unit cells across all shapes"""
        return sum(len(shape_variants[0]) for shape_variants in self.variants)


def load_bundle(shapes_path: Union[str, Path], mirror: bool = True, rotate: bool = True) -> Bundle:
    """
    Load a bundle from a shape definition file

    Args:
        shapes_path: Path to the shapes text file
        mirror: Generate mirrored variants
        rotate: Generate rotated variants

    Returns:
        Parsed Bundle

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file holds no shape definitions
    """
    shapes_path = Path(shapes_path)

    if not shapes_path.exists():
        raise FileNotFoundError(f"Shapes file not found: {shapes_path}")

    with open(shapes_path, 'r') as f:
        text = f.read()

    return Bundle.parse(text, mirror=mirror, rotate=rotate)
