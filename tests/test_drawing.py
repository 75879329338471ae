"""
Tests for drawable layout data, SVG export and matplotlib previews
"""

import tempfile
import unittest
from pathlib import Path

import matplotlib
matplotlib.use('Agg')

from polyring.bundle import Bundle
from polyring.drawing import PALETTE, layout_drawing, shape_color
from polyring.layout import Layout, Position
from polyring.shape import Shape
from polyring.svg_exporter import SvgExporter, create_layouts_file
from polyring.visualization import plot_layout


def frame_layout() -> Layout:
    """4x4 closed frame around a 2x2 hole"""
    bundle = Bundle.parse("****\n\n****\n\n*\n*\n\n*\n*", mirror=False, rotate=False)
    return Layout(bundle, [
        Position(0, 0, 0, 0),
        Position(3, 1, 2, 0),
        Position(0, 3, 1, 0),
        Position(0, 1, 3, 0),
    ])


def open_layout() -> Layout:
    """Two parallel bars with a gap row between them"""
    bundle = Bundle.parse("***\n\n***", mirror=False, rotate=False)
    return Layout(bundle, [Position(0, 0, 0, 0), Position(0, 2, 1, 0)])


class TestLayoutDrawing(unittest.TestCase):
    """Test conversion of layouts into drawable data"""

    def test_closed_frame(self):
        """Test bounding box, core and tinted shapes of a closed ring"""
        drawing = layout_drawing(frame_layout())

        self.assertEqual((drawing.width, drawing.height), (4, 4))
        self.assertEqual(drawing.origin, (0, 0))
        self.assertEqual(len(drawing.shapes), 4)

        self.assertIsNotNone(drawing.core)
        self.assertEqual(drawing.core.label, "4")
        self.assertEqual((drawing.core.x, drawing.core.y), (1, 1))

        for item in drawing.shapes:
            self.assertEqual(item.color, shape_color(item.shape_id))

    def test_shifted_to_origin(self):
        """Test that drawn coordinates start at the bounding box corner"""
        layout = frame_layout()
        for pos in layout.positions:
            pos.x -= 5
            pos.y += 7

        drawing = layout_drawing(layout)
        self.assertEqual(drawing.origin, (-5, 7))
        self.assertEqual(min(item.x for item in drawing.shapes), 0)
        self.assertEqual(min(item.y for item in drawing.shapes), 0)
        self.assertEqual((drawing.core.x, drawing.core.y), (1, 1))

    def test_open_layout_has_no_core(self):
        """Test that an open layout draws without a core"""
        drawing = layout_drawing(open_layout())
        self.assertIsNone(drawing.core)
        self.assertEqual((drawing.width, drawing.height), (3, 3))

    def test_palette_wraps(self):
        """Test that colors cycle through the palette"""
        self.assertEqual(len(PALETTE), 12)
        self.assertEqual(shape_color(12), shape_color(0))
        self.assertEqual(shape_color(13), PALETTE[1])


class TestSvgExporter(unittest.TestCase):
    """Test SVG and HTML output"""

    def setUp(self):
        self.exporter = SvgExporter(cell_side=10)

    def test_invalid_cell_side(self):
        """Test that a non-positive cell side is rejected"""
        with self.assertRaises(ValueError):
            SvgExporter(cell_side=0)

    def test_shape_path(self):
        """Test one closed square per filled cell"""
        self.assertEqual(self.exporter.shape_path(Shape.parse("*")), "M0,0 L10,0 L10,10 L0,10 Z")

        path = self.exporter.shape_path(Shape.parse("**"))
        self.assertEqual(path.count("Z"), 2)
        self.assertIn("M10,0 L20,0 L20,10 L10,10 Z", path)

    def test_closed_layout_svg(self):
        """Test that a closed ring renders its core and caption"""
        svg = self.exporter.layout_to_svg(frame_layout())

        self.assertTrue(svg.startswith("<svg"))
        self.assertIn('width="40"', svg)
        self.assertIn('class="core"', svg)
        self.assertIn('>4</text>', svg)
        self.assertEqual(svg.count('class="shape"'), 4)
        self.assertIn(f'fill="#{shape_color(0)}"', svg)

    def test_open_layout_svg(self):
        """Test that an open layout renders only its shapes"""
        svg = self.exporter.layout_to_svg(open_layout())

        self.assertNotIn('class="core"', svg)
        self.assertNotIn('</text>', svg)
        self.assertEqual(svg.count('class="shape"'), 2)

    def test_export_html(self):
        """Test one <svg> per layout inside a single <div>"""
        layouts = [frame_layout(), open_layout(), frame_layout()]

        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "nested" / "layouts.html"
            written = create_layouts_file(layouts, path, cell_side=10)

            self.assertEqual(written, str(path))
            content = path.read_text()

        self.assertTrue(content.startswith("<div>"))
        self.assertEqual(content.count("<svg"), 3)
        self.assertEqual(content.count('class="core"'), 2)

    def test_export_html_overwrites(self):
        """Test that each export replaces the previous file"""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "layouts.html"
            self.exporter.export_html([frame_layout(), frame_layout()], path)
            self.exporter.export_html([open_layout()], path)
            content = path.read_text()

        self.assertEqual(content.count("<svg"), 1)


class TestVisualization(unittest.TestCase):
    """Test matplotlib previews"""

    def test_plot_layout_writes_png(self):
        """Test saving a preview image"""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "plots" / "best.png"
            plot_layout(frame_layout(), str(path), figsize=(3, 3))
            self.assertTrue(path.exists())
            self.assertGreater(path.stat().st_size, 0)


if __name__ == '__main__':
    unittest.main()
