"""Drawable matrices, operator glyphs, and label overlays.

``DrawMatrix`` renders every cell as a square whose lightness encodes the
entry's magnitude: zero is white, the largest magnitude is dark.  The hue comes
from the cell's column color, so a column coloring shows up directly in the
picture.
"""

from dataclasses import dataclass, field

import numpy as np
from colour import Color
from matplotlib.patches import FancyBboxPatch, Rectangle

from ._common import (
    COLORS,
    ZORDER,
    hsl_to_rgb_array,
    is_background_bright,
    with_lightness,
)
from .layout import CELLSIZE, PADDING, Drawable, scale

CELL_SATURATION = 0.8
LIGHTNESS_ZERO = 1.0
LIGHTNESS_MAX = 0.25
DASH_PATTERN = (7.0, 4.0)


def default_cell_text(x):
    return str(round(float(x), 2))


def cell_texts(mat):
    """Default text for every entry of ``mat`` as an object array."""
    mat = np.asarray(mat, dtype=np.float64)
    texts = np.empty(mat.shape, dtype=object)
    for index, value in np.ndenumerate(mat):
        texts[index] = default_cell_text(value)
    return texts


def _as_matrix(values, dtype):
    arr = np.asarray(values, dtype=dtype)
    if arr.ndim == 1:
        arr = arr.reshape(-1, 1)
    if arr.ndim != 2:
        raise ValueError(f"expected a matrix, got an array of shape {arr.shape}")
    return arr


# ---------------------------------------------------------------------------
# Matrix
# ---------------------------------------------------------------------------


@dataclass
class DrawMatrix(Drawable):
    mat: np.ndarray
    color: Color = field(default_factory=lambda: COLORS["black"])
    cellsize: float = CELLSIZE
    padding_inner: float = PADDING
    padding_outer: float = 1.75 * PADDING
    border_inner: float = 0.75
    border_outer: float = 2.0
    dashed: bool = False
    show_text: bool = False
    mat_text: np.ndarray = None
    absmax: float = None
    height: float = None
    width: float = None
    column_colors: list = None

    def __post_init__(self):
        self.mat = _as_matrix(self.mat, np.float64)
        rows, cols = self.mat.shape

        if self.mat_text is None:
            self.mat_text = cell_texts(self.mat)
        else:
            self.mat_text = _as_matrix(self.mat_text, object)
            if self.mat_text.shape != self.mat.shape:
                raise ValueError(
                    f"mat_text has shape {self.mat_text.shape}, "
                    f"matrix has shape {self.mat.shape}"
                )

        if self.absmax is None:
            self.absmax = float(np.max(np.abs(self.mat))) if self.mat.size else 0.0

        step = self.cellsize + self.padding_inner
        if self.height is None:
            self.height = rows * step - self.padding_inner + 2 * self.padding_outer
        if self.width is None:
            self.width = cols * step - self.padding_inner + 2 * self.padding_outer

        if self.column_colors is None:
            self.column_colors = [self.color] * cols
        else:
            self.column_colors = list(self.column_colors)
            if len(self.column_colors) != cols:
                raise ValueError(
                    f"{len(self.column_colors)} column colors for {cols} columns"
                )

    @property
    def shape(self):
        return self.mat.shape

    def origin(self, center):
        """Upper-left corner of the outer border for a matrix centered on ``center``."""
        rows, cols = self.mat.shape
        step = self.cellsize + self.padding_inner
        x0 = center[0] - (cols / 2) * step + self.padding_inner / 2 - self.padding_outer
        y0 = center[1] - (rows / 2) * step + self.padding_inner / 2 - self.padding_outer
        return x0, y0

    def cell_corner(self, center, i, j):
        """Upper-left corner of cell (i, j)."""
        x0, y0 = self.origin(center)
        step = self.cellsize + self.padding_inner
        return (
            x0 + j * step + self.padding_outer,
            y0 + i * step + self.padding_outer,
        )

    def cell_lightness(self):
        return scale(np.abs(self.mat), 0.0, self.absmax, LIGHTNESS_ZERO, LIGHTNESS_MAX)

    def cell_colors(self):
        """RGB fill of every cell, shape (rows, cols, 3)."""
        hues = np.array([c.hue for c in self.column_colors], dtype=np.float64)
        return hsl_to_rgb_array(hues[np.newaxis, :], CELL_SATURATION, self.cell_lightness())

    def is_raster(self):
        """Borderless, gapless, textless matrices are drawn as a single image."""
        return self.padding_inner == 0 and self.border_inner == 0 and not self.show_text

    def draw(self, ax, center):
        fills = self.cell_colors()
        if self.is_raster():
            self._draw_image(ax, center, fills)
        else:
            self._draw_cells(ax, center, fills)
        self._draw_border(ax, center)

    def _draw_image(self, ax, center, fills):
        rows, cols = self.mat.shape
        left, top = self.cell_corner(center, 0, 0)
        ax.imshow(
            fills,
            extent=(left, left + cols * self.cellsize, top + rows * self.cellsize, top),
            origin="upper",
            interpolation="nearest",
            aspect="auto",
            zorder=ZORDER,
        )

    def _draw_cells(self, ax, center, fills):
        rows, cols = self.mat.shape
        fontsize = min(self.cellsize // 3, 14)
        for i in range(rows):
            for j in range(cols):
                x, y = self.cell_corner(center, i, j)
                fill = tuple(fills[i, j])
                if self.mat[i, j] == 0:
                    edge = COLORS["zero_border"].rgb
                else:
                    edge = self.column_colors[j].rgb
                ax.add_patch(
                    Rectangle(
                        (x, y),
                        self.cellsize,
                        self.cellsize,
                        facecolor=fill,
                        edgecolor=edge,
                        linewidth=self.border_inner,
                        zorder=ZORDER,
                    )
                )

                if self.show_text:
                    text_color = edge if is_background_bright(fill) else COLORS["white"].rgb
                    ax.text(
                        x + self.cellsize / 2,
                        y + self.cellsize / 2,
                        self.mat_text[i, j],
                        color=text_color,
                        fontsize=fontsize,
                        ha="center",
                        va="center",
                        zorder=ZORDER,
                    )

    def _draw_border(self, ax, center):
        if self.border_outer <= 0:
            return
        # matplotlib scales dash lengths by the line width
        if self.dashed:
            linestyle = (0, tuple(d / self.border_outer for d in DASH_PATTERN))
        else:
            linestyle = "solid"
        ax.add_patch(
            Rectangle(
                self.origin(center),
                self.width,
                self.height,
                fill=False,
                edgecolor=self.color.rgb,
                linewidth=self.border_outer,
                linestyle=linestyle,
                joinstyle="miter",
                zorder=ZORDER,
            )
        )


# ---------------------------------------------------------------------------
# Operator
# ---------------------------------------------------------------------------


@dataclass
class DrawOperator(Drawable):
    text: str
    color: Color = field(default_factory=lambda: COLORS["operator"])
    cellsize: float = 12
    fontsize: float = 20

    @property
    def width(self):
        return self.cellsize

    @property
    def height(self):
        return self.cellsize

    def draw(self, ax, center):
        ax.text(
            center[0] - 0.15 * self.cellsize,
            center[1],
            self.text,
            color=self.color.rgb,
            fontsize=self.fontsize,
            ha="center",
            va="center",
            zorder=ZORDER,
        )


# ---------------------------------------------------------------------------
# Overlay
# ---------------------------------------------------------------------------


@dataclass
class DrawOverlay(Drawable):
    """Rounded label box, usually centered on the matrix it names."""

    text: str
    color: Color = field(default_factory=lambda: COLORS["operator"])
    background: Color = None
    width: float = 50
    height: float = 33
    radius: float = 12
    fontsize: float = 20

    def __post_init__(self):
        if self.background is None:
            self.background = with_lightness(self.color, 0.9)

    def draw(self, ax, center):
        x, y = center
        ax.add_patch(
            FancyBboxPatch(
                (x - self.width / 2, y - self.height / 2),
                self.width,
                self.height,
                boxstyle=f"round,pad=0,rounding_size={self.radius}",
                facecolor=self.background.rgb,
                edgecolor=self.color.rgb,
                linewidth=0.75,
                zorder=ZORDER,
            )
        )
        ax.text(
            x,
            y + 2,
            self.text,
            color=self.color.rgb,
            fontsize=self.fontsize,
            ha="center",
            va="center",
            zorder=ZORDER,
        )
