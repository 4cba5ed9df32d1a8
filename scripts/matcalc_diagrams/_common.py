"""Shared palette, canvas helpers, and constants for matcalc diagram generation."""

import os

import matplotlib

matplotlib.use("Agg")

import matplotlib.colors as mcolors  # noqa: E402
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
from colour import Color  # noqa: E402

# ---------------------------------------------------------------------------
# Paths and settings
# ---------------------------------------------------------------------------

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
POST_ASSETS = os.path.join("assets", "img", "2025-04-28-sparse-autodiff")


def repo_root():
    """Checkout root when running from ``scripts/``, else the working directory."""
    scripts_dir = os.path.dirname(PACKAGE_DIR)
    if os.path.basename(scripts_dir) == "scripts":
        return os.path.dirname(scripts_dir)
    return os.getcwd()


def default_output_dir():
    return os.path.join(repo_root(), POST_ASSETS)


# Canvas sizes are given in points; saving at 72 DPI makes a PNG's pixel size
# equal to the canvas size.
POINTS_PER_INCH = 72
DPI = POINTS_PER_INCH

# Every artist shares one zorder, so paint order is insertion order.
ZORDER = 2

plt.rcParams.update(
    {
        "font.family": "monospace",
        "mathtext.fontset": "dejavusans",
    }
)

# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------


def hsl_to_rgb_array(h, s, l):  # noqa: E741
    """Vectorized HSL -> RGB for whole matrices of cells.

    Hue, saturation and lightness are in [0, 1] as in ``colour.Color.hsl``.
    Inputs broadcast; the output has a trailing RGB axis.  matplotlib only
    converts HSV, so HSL is mapped to HSV first.
    """
    h = np.asarray(h, dtype=np.float64)
    s = np.asarray(s, dtype=np.float64)
    l = np.clip(np.asarray(l, dtype=np.float64), 0.0, 1.0)  # noqa: E741
    h, s, l = np.broadcast_arrays(h, s, l)  # noqa: E741

    v = l + s * np.minimum(l, 1.0 - l)
    with np.errstate(divide="ignore", invalid="ignore"):
        s_v = np.where(v > 0.0, 2.0 * (1.0 - l / v), 0.0)
    hsv = np.stack([np.mod(h, 1.0), s_v, v], axis=-1)
    return mcolors.hsv_to_rgb(hsv)


def with_lightness(color, lightness, saturation=None):
    """Same hue as ``color`` at another lightness (and optionally saturation)."""
    if saturation is None:
        saturation = color.saturation
    return Color(hsl=(color.hue, saturation, lightness))


def luma(rgb):
    """Relative luma using BT.709 coefficients."""
    r, g, b = rgb[:3]
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def is_background_bright(color):
    """True if dark text is readable on ``color`` (a Color or an RGB tuple)."""
    rgb = color.rgb if isinstance(color, Color) else color
    return luma(rgb) > 0.5


# ---------------------------------------------------------------------------
# Palette (hues of the Julia logo)
# ---------------------------------------------------------------------------

JULIA_RGB = {
    "purple": (0.584, 0.345, 0.698),
    "red": (0.796, 0.235, 0.2),
    "green": (0.22, 0.596, 0.149),
    "blue": (0.251, 0.388, 0.847),
}

SATURATION = 0.8


def _julia(name, lightness):
    return with_lightness(Color(rgb=JULIA_RGB[name]), lightness, SATURATION)


COLORS = {
    "purple": _julia("purple", 0.4),
    "red": _julia("red", 0.45),
    "green": _julia("green", 0.25),
    "blue": _julia("blue", 0.4),
    "black": Color("black"),
    "white": Color("white"),
    "operator": Color(hsl=(0.0, 0.0, 0.3)),
    "zero_border": Color("#d3d3d3"),  # lightgray
}

# Roles in f = h o g
COLOR_F = COLORS["green"]
COLOR_H = COLORS["red"]
COLOR_G = COLORS["purple"]
COLOR_VECTOR = COLORS["blue"]

# One entry per color group; the second is X11 lightslateblue
COLORING_PALETTE = [Color("orchid"), Color("#8470ff")]

# ---------------------------------------------------------------------------
# Canvas and output
# ---------------------------------------------------------------------------


def new_canvas(width, height):
    """Create a transparent ``width`` x ``height`` point canvas.

    Data coordinates are points with the origin at the canvas center and y
    growing downward.
    """
    fig = plt.figure(figsize=(width / POINTS_PER_INCH, height / POINTS_PER_INCH))
    fig.patch.set_alpha(0.0)
    ax = fig.add_axes((0.0, 0.0, 1.0, 1.0))
    ax.set_xlim(-width / 2, width / 2)
    ax.set_ylim(height / 2, -height / 2)
    ax.axis("off")
    return fig, ax


def save(fig, output_dir, name, fmt="svg"):
    """Write ``fig`` to ``output_dir/name.fmt`` and close it."""
    os.makedirs(output_dir, exist_ok=True)
    out = os.path.join(output_dir, f"{name}.{fmt}")
    fig.savefig(out, format=fmt, dpi=DPI, transparent=True)
    plt.close(fig)
    try:
        rel = os.path.relpath(out, repo_root())
    except ValueError:
        rel = out
    print(f"  {rel}")
    return out
