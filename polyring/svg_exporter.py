"""
SVG Export System

Serializes drawable layouts into SVG documents and writes a generation's
top layouts into a single HTML fragment for viewing in a browser.
"""

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterable, List, Union

from .drawing import LayoutDrawing, layout_drawing
from .layout import Layout
from .shape import Shape


SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

SVG_STYLES = """
    .core { fill: url(#squares) #fff; }
    .caption { fill: #aae; font-family:Arial; font-size:25px; font-weight:bold;
      dominant-baseline:central; text-anchor:middle; }
    .shape { stroke:#8888aa; stroke-width:1; opacity:1; }
"""


def _fmt(value: float) -> str:
    """Compact number formatting for SVG attributes"""
    return f"{value:g}"


class SvgExporter:
    """Renders layouts as SVG with square cells of a fixed pixel size"""

    def __init__(self, cell_side: int = 20):
        if cell_side <= 0:
            raise ValueError(f"cell_side must be positive, got {cell_side}")
        self.cell_side = cell_side

    def shape_path(self, shape: Shape) -> str:
        """SVG path data with one closed square per filled cell"""
        cs = self.cell_side
        parts = []
        for x, y in shape.cells:
            x0, y0 = x * cs, y * cs
            x1, y1 = x0 + cs, y0 + cs
            parts.append(
                f"M{_fmt(x0)},{_fmt(y0)} L{_fmt(x1)},{_fmt(y0)} "
                f"L{_fmt(x1)},{_fmt(y1)} L{_fmt(x0)},{_fmt(y1)} Z"
            )
        return " ".join(parts)

    def build_svg(self, drawing: LayoutDrawing) -> ET.Element:
        """
        Build the SVG element tree for one drawing

        Args:
            drawing: Drawable layout data

        Returns:
            Root <svg> element
        """
        cs = self.cell_side
        svg = ET.Element("svg", {
            "xmlns": SVG_NS,
            "xmlns:xlink": XLINK_NS,
            "shape-rendering": "crispEdges",
            "width": _fmt(drawing.width * cs),
            "height": _fmt(drawing.height * cs),
        })

        # Grid pattern used to fill the core
        defs = ET.SubElement(svg, "defs")
        pattern = ET.SubElement(defs, "pattern", {
            "id": "squares",
            "patternUnits": "userSpaceOnUse",
            "x": "0",
            "y": "0",
            "width": _fmt(cs),
            "height": _fmt(cs),
        })
        group = ET.SubElement(pattern, "g", {"style": "fill:none; stroke:#dde; stroke-width:1"})
        ET.SubElement(group, "path", {"d": f"M0,0 l{_fmt(cs)},0 L{_fmt(cs)},{_fmt(cs)} L0,{_fmt(cs)} Z"})

        style = ET.SubElement(svg, "style")
        style.text = SVG_STYLES

        if drawing.core is not None:
            core = drawing.core
            dx, dy = core.x * cs, core.y * cs
            ET.SubElement(svg, "path", {
                "class": "core",
                "transform": f"translate({_fmt(dx)},{_fmt(dy)})",
                "d": self.shape_path(core.shape),
            })
            caption = ET.SubElement(svg, "text", {
                "class": "caption",
                "x": _fmt(dx + core.shape.width * cs * 0.5),
                "y": _fmt(dy + core.shape.height * cs * 0.5),
            })
            caption.text = core.label

        for item in drawing.shapes:
            ET.SubElement(svg, "path", {
                "fill": f"#{item.color}",
                "class": "shape",
                "transform": f"translate({_fmt(item.x * cs)},{_fmt(item.y * cs)})",
                "d": self.shape_path(item.shape),
            })

        return svg

    def layout_to_svg(self, layout: Layout) -> str:
        """Serialize one layout to an SVG string"""
        return ET.tostring(self.build_svg(layout_drawing(layout)), encoding="unicode")

    def export_html(self, layouts: Iterable[Layout], output_path: Union[str, Path]) -> str:
        """
        Write layouts as inline SVGs wrapped in a <div>

        The file is overwritten on every call.

        Args:
            layouts: Layouts to render, in display order
            output_path: Target HTML file

        Returns:
            Path of the written file
        """
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        container = ET.Element("div")
        for layout in layouts:
            container.append(self.build_svg(layout_drawing(layout)))

        with open(output_file, 'w') as f:
            f.write(ET.tostring(container, encoding="unicode", method="html"))
            f.write("\n")

        return str(output_file)


def create_layouts_file(layouts: List[Layout],
                        output_path: Union[str, Path],
                        cell_side: int = 20) -> str:
    """
    Convenience function to write a generation's layouts to HTML

    Args:
        layouts: Layouts to render
        output_path: Target HTML file
        cell_side: Cell size in pixels

    Returns:
        Path to the generated file
    """
    exporter = SvgExporter(cell_side)
    return exporter.export_html(layouts, output_path)
