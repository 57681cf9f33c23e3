"""Visualization and export for the beam simulation."""

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
from matplotlib.colors import to_rgb
from pathlib import Path
from typing import Iterable, List, TYPE_CHECKING
from PIL import Image
import io

from ..model.tiles import TILE_CODES, TileKind

if TYPE_CHECKING:
    from ..model.grid import TileGrid
    from ..model.state import RayState


class Visualizer:
    """
    Generates visual outputs using matplotlib.

    Supports:
    - Single PNG snapshots of the energized grid
    - Animated GIF compilation of the propagation rounds
    """

    # Color scheme
    COLORS = {
        'floor': '#ECF0F1',     # Light gray
        'mirror': '#2C3E50',    # Dark blue-gray
        'splitter': '#8E44AD',  # Purple
        'energized': '#F39C12', # Orange
        'ray': '#E74C3C',       # Red
    }

    # Tile labels are drawn only while they stay legible
    MAX_LABELED_CELLS = 2500

    def __init__(self, grid: "TileGrid"):
        self.grid = grid
        self.width = grid.width
        self.height = grid.height
        self.frames: List[Image.Image] = []

    def _base_image(self) -> np.ndarray:
        """RGB layer with floor, mirror and splitter cells."""
        base = np.ones((self.height, self.width, 3))
        base[:, :] = to_rgb(self.COLORS['floor'])

        tiles = self.grid.tiles
        mirrors = ((tiles == TILE_CODES[TileKind.FORWARD_MIRROR]) |
                   (tiles == TILE_CODES[TileKind.BACKWARD_MIRROR]))
        splitters = ((tiles == TILE_CODES[TileKind.HORIZONTAL_SPLITTER]) |
                     (tiles == TILE_CODES[TileKind.VERTICAL_SPLITTER]))
        base[mirrors] = to_rgb(self.COLORS['mirror'])
        base[splitters] = to_rgb(self.COLORS['splitter'])
        return base

    def _create_figure(self, mask: np.ndarray,
                       live_rays: Iterable["RayState"],
                       title: str) -> plt.Figure:
        """Create matplotlib figure for one view of the grid."""
        # Determine figure size based on grid aspect ratio
        aspect = self.width / self.height
        fig_height = 6
        fig_width = max(6, fig_height * aspect)
        fig, ax = plt.subplots(figsize=(fig_width, fig_height))

        base = self._base_image()

        # Blend energized cells toward the highlight color
        energized_rgb = np.array(to_rgb(self.COLORS['energized']))
        base[mask] = np.clip(0.4 * base[mask] + 0.6 * energized_rgb, 0, 1)

        ax.imshow(base, origin='upper', aspect='equal',
                  extent=[-0.5, self.width - 0.5, self.height - 0.5, -0.5])

        if self.width * self.height <= self.MAX_LABELED_CELLS:
            for y in range(self.height):
                for x in range(self.width):
                    tile = self.grid.tile_at((x, y))
                    if tile is not TileKind.EMPTY:
                        ax.text(x, y, tile.char, ha='center', va='center',
                                color='white', fontsize=8)

        for ray in live_rays:
            x, y = ray.position
            dx, dy = ray.heading.vector
            ax.arrow(x - 0.3 * dx, y - 0.3 * dy, 0.4 * dx, 0.4 * dy,
                     head_width=0.25, color=self.COLORS['ray'])

        ax.set_title(title)
        ax.set_xlabel('X')
        ax.set_ylabel('Y')
        ax.set_xlim(-0.5, self.width - 0.5)
        ax.set_ylim(self.height - 0.5, -0.5)

        plt.tight_layout()
        return fig

    def buffer_frame(self, mask: np.ndarray,
                     live_rays: Iterable["RayState"],
                     round_index: int) -> None:
        """Store frame for GIF generation."""
        live_rays = list(live_rays)
        title = (f'Round {round_index} | Live Rays: {len(live_rays)} | '
                 f'Energized: {int(mask.sum())}')
        fig = self._create_figure(mask, live_rays, title)

        # Convert to PIL Image
        buf = io.BytesIO()
        fig.savefig(buf, format='png', dpi=80)
        buf.seek(0)
        img = Image.open(buf).copy()
        self.frames.append(img)
        buf.close()
        plt.close(fig)

    def save_snapshot(self, mask: np.ndarray, output_path: Path) -> None:
        """Save single PNG image of the energized grid."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        title = f'Energized Cells: {int(mask.sum())} of {self.width * self.height}'
        fig = self._create_figure(mask, [], title)
        fig.savefig(output_path, dpi=150, bbox_inches='tight')
        plt.close(fig)

    def generate_gif(self, output_path: Path, fps: int = 10) -> None:
        """Compile buffered frames into animated GIF."""
        if not self.frames:
            return

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        duration = int(1000 / fps)  # milliseconds per frame

        self.frames[0].save(
            output_path,
            save_all=True,
            append_images=self.frames[1:],
            duration=duration,
            loop=0
        )

    def clear_frames(self) -> None:
        """Clear buffered frames."""
        self.frames.clear()
