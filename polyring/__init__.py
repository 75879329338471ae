"""
Polyomino Rings - Shape Geometry and Layout Engine

Polyomino shapes with their symmetry variants, ring layouts built along a
circle, their scoring, and drawing/export of the results.
"""

__version__ = "1.0.0"
__author__ = "Polyomino Rings Team"

# Export main classes for easy importing
from .shape import Shape, angle_greater
from .bundle import Bundle, load_bundle
from .layout import (
    Layout,
    Position,
    Relationship,
    relationship,
    gap,
    best_fit
)
from .drawing import LayoutDrawing, layout_drawing
from .svg_exporter import SvgExporter, create_layouts_file
from .config_loader import ConfigurationError, load_config, validate_config

__all__ = [
    'Shape',
    'angle_greater',
    'Bundle',
    'load_bundle',
    'Layout',
    'Position',
    'Relationship',
    'relationship',
    'gap',
    'best_fit',
    'LayoutDrawing',
    'layout_drawing',
    'SvgExporter',
    'create_layouts_file',
    'ConfigurationError',
    'load_config',
    'validate_config'
]
