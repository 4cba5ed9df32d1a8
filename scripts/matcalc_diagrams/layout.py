"""Positioned drawables and left-to-right layout.

A scene is a list of ``Position`` values: a drawable plus the point its center
sits on.  New positions are derived from existing ones, either immediately to
the right with a fixed gap, or centered on top.

Coordinates are canvas points with y growing downward (see
``_common.new_canvas``).
"""

from dataclasses import dataclass

CELLSIZE = 20
PADDING = 2
FONTSIZE = 18
SPACE = 11


def normalize(x, lo, hi):
    """Map ``x`` from [lo, hi] to [0, 1].  A zero-width range maps to 0."""
    if hi == lo:
        return x * 0.0
    return (x - lo) / (hi - lo)


def scale(x, lo, hi, out_lo, out_hi):
    """Linearly map ``x`` from [lo, hi] to [out_lo, out_hi]."""
    return normalize(x, lo, hi) * (out_hi - out_lo) + out_lo


class Drawable:
    """Something with a ``width``, a ``height`` and a way to draw itself."""

    def draw(self, ax, center):
        raise NotImplementedError


@dataclass(frozen=True, eq=False)
class Position:
    """A drawable pinned to a center point.  Positions compare by identity."""

    drawable: Drawable
    center: tuple

    @property
    def width(self):
        return self.drawable.width

    @property
    def height(self):
        return self.drawable.height

    @property
    def xcenter(self):
        return self.center[0]

    @property
    def ycenter(self):
        return self.center[1]

    @property
    def top(self):
        return (self.xcenter, self.ycenter + self.height / 2)

    @property
    def bottom(self):
        return (self.xcenter, self.ycenter - self.height / 2)

    @property
    def right(self):
        return (self.xcenter + self.width / 2, self.ycenter)

    @property
    def left(self):
        return (self.xcenter - self.width / 2, self.ycenter)

    def shifted(self, dx=0.0, dy=0.0):
        """Same drawable, center moved by (dx, dy)."""
        return Position(self.drawable, (self.xcenter + dx, self.ycenter + dy))

    def draw(self, ax, offset=(0.0, 0.0)):
        center = (self.xcenter + offset[0], self.ycenter + offset[1])
        self.drawable.draw(ax, center)


def position_right_of(position, space=SPACE):
    """Return a function placing a drawable ``space`` points right of ``position``."""
    x, y = position.right

    def position_drawable(drawable):
        return Position(drawable, (x + space + drawable.width / 2, y))

    return position_drawable


def position_on(position):
    """Return a function centering a drawable on ``position``."""

    def position_drawable(drawable):
        return Position(drawable, position.center)

    return position_drawable


def row_width(drawables, space=SPACE, extra=0.0):
    return sum(d.width for d in drawables) + (len(drawables) - 1) * space + extra


def row_start(drawables, space=SPACE, extra=0.0):
    """x of the first drawable's center such that the row is centered on x = 0."""
    return (drawables[0].width - row_width(drawables, space, extra)) / 2


def layout_row(drawables, start, space=SPACE):
    """Chain ``drawables`` left-to-right, the first one centered on ``start``."""
    first, *rest = drawables
    positions = [Position(first, tuple(start))]
    for drawable in rest:
        positions.append(position_right_of(positions[-1], space=space)(drawable))
    return positions


def draw_all(ax, positions):
    for position in positions:
        position.draw(ax)
