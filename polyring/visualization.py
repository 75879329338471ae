"""
Layout Visualization

Matplotlib rendering of a layout: tinted unit squares per shape, the
enclosed core hatched and labeled with its size.
"""

from pathlib import Path
from typing import Optional, Tuple

import matplotlib.pyplot as plt
import matplotlib.patches as patches

from .drawing import LayoutDrawing, layout_drawing
from .layout import Layout


class LayoutVisualizer:
    """Draws layouts onto matplotlib axes"""

    def __init__(self, edge_color: str = "#8888aa", core_color: str = "#aaaaee"):
        self.edge_color = edge_color
        self.core_color = core_color

    def plot_drawing(self, drawing: LayoutDrawing, ax: plt.Axes = None, title: Optional[str] = None):
        """Plot drawable layout data, y axis pointing down like the SVG output"""
        if ax is None:
            fig, ax = plt.subplots(figsize=(8, 8))

        if drawing.core is not None:
            core = drawing.core
            for x, y in core.shape.cells:
                ax.add_patch(patches.Rectangle(
                    (core.x + x, core.y + y), 1, 1,
                    facecolor="white", edgecolor="#ddddee", hatch="..", linewidth=0.5
                ))
            ax.text(core.x + core.shape.width / 2, core.y + core.shape.height / 2, core.label,
                    color=self.core_color, fontsize=14, fontweight="bold",
                    ha="center", va="center")

        for item in drawing.shapes:
            for x, y in item.shape.cells:
                ax.add_patch(patches.Rectangle(
                    (item.x + x, item.y + y), 1, 1,
                    facecolor=f"#{item.color}", edgecolor=self.edge_color, linewidth=1
                ))

        ax.set_xlim(0, drawing.width)
        ax.set_ylim(drawing.height, 0)
        ax.set_aspect("equal")
        ax.set_xticks([])
        ax.set_yticks([])
        if title:
            ax.set_title(title)

        return ax

    def plot_layout(self,
                    layout: Layout,
                    figsize: Tuple[int, int] = (8, 8),
                    save_path: Optional[str] = None,
                    show: bool = False):
        """
        Plot a single layout

        Args:
            layout: Layout to draw
            figsize: Figure size (width, height)
            save_path: Optional path to save the figure
            show: Display the figure interactively
        """
        fig, ax = plt.subplots(figsize=figsize)
        self.plot_drawing(layout_drawing(layout), ax, title=f"score: {layout.score():g}")
        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')

        if show:
            plt.show()

        plt.close(fig)


def plot_layout(layout: Layout, save_path: str, figsize: Tuple[int, int] = (8, 8)) -> str:
    """Convenience function to save a PNG preview of a layout"""
    Path(save_path).parent.mkdir(parents=True, exist_ok=True)
    LayoutVisualizer().plot_layout(layout, figsize=figsize, save_path=save_path)
    return save_path
