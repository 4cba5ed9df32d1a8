"""Figure functions for the sparse automatic differentiation post.

Each function builds one scene on a fixed-size canvas and returns the
matplotlib figure; saving happens in __main__.py.  Register new figures there
after adding them here.

Requires: pip install numpy matplotlib jax
"""

import numpy as np

from . import data
from ._common import COLOR_F, COLOR_G, COLOR_H, COLOR_VECTOR, COLORING_PALETTE, new_canvas
from .drawables import DrawMatrix, DrawOperator, DrawOverlay, cell_texts
from .layout import (
    Position,
    draw_all,
    layout_row,
    position_on,
    position_right_of,
    row_start,
)

EQ = DrawOperator("=")
TIMES = DrawOperator("⋅")
CIRC = DrawOperator("∘")
DEFINE = DrawOperator("≔")
DOTS = DrawOperator("...", fontsize=40)

LABEL_JF = DrawOverlay("$J_{f}(x)$", color=COLOR_F)
LABEL_JG = DrawOverlay("$J_{g}(x)$", color=COLOR_G)
LABEL_JH = DrawOverlay("$J_{h}(g(x))$", color=COLOR_H, fontsize=18, width=65)

LABEL_DF = DrawOverlay("Df(x)", color=COLOR_F, fontsize=18)
LABEL_DG = DrawOverlay("Dg(x)", color=COLOR_G, fontsize=18)
LABEL_DH = DrawOverlay("Dh(g(x))", color=COLOR_H, fontsize=15, width=65)


def _coloring_colors():
    return [COLORING_PALETTE[c] for c in data.COLORING]


# ---------------------------------------------------------------------------
# Chain rule and matrix-free products
# ---------------------------------------------------------------------------


def chainrule(show_text=False):
    """J_f = J_h J_g with the three Jacobians as heatmaps."""
    fig, ax = new_canvas(380, 100)

    mat_f = DrawMatrix(data.F, color=COLOR_F, show_text=show_text)
    mat_g = DrawMatrix(data.G, color=COLOR_G, show_text=show_text)
    mat_h = DrawMatrix(data.H, color=COLOR_H, show_text=show_text)

    row = [mat_f, EQ, mat_h, TIMES, mat_g]
    pos_f, pos_eq, pos_h, pos_times, pos_g = layout_row(row, (row_start(row), 0.0))

    labels = [
        position_on(pos_f)(LABEL_JF),
        position_on(pos_g)(LABEL_JG),
        position_on(pos_h)(LABEL_JH),
    ]

    draw_all(ax, [pos_f, pos_g, pos_h, pos_eq, pos_times, *labels])
    return fig


def matrixfree():
    """Df = Dh o Dg as dashed (never materialized) linear maps."""
    fig, ax = new_canvas(380, 100)

    row = [
        DrawMatrix(data.F, color=COLOR_F, dashed=True),
        EQ,
        DrawMatrix(data.H, color=COLOR_H, dashed=True),
        CIRC,
        DrawMatrix(data.G, color=COLOR_G, dashed=True),
    ]
    pos_f, pos_eq, pos_h, pos_circ, pos_g = layout_row(row, (row_start(row), 0.0))

    labels = [
        position_on(pos_f)(LABEL_DF),
        position_on(pos_g)(LABEL_DG),
        position_on(pos_h)(LABEL_DH),
    ]

    draw_all(ax, [pos_f, pos_g, pos_h, pos_eq, pos_circ, *labels])
    return fig


def matrixfree2():
    """Df(x) v evaluated right to left, one linear map at a time."""
    fig, ax = new_canvas(450, 340)

    mat_f = DrawMatrix(data.F, color=COLOR_F, dashed=True)
    mat_g = DrawMatrix(data.G, color=COLOR_G, dashed=True)
    mat_h = DrawMatrix(data.H, color=COLOR_H, dashed=True)
    vec_f = DrawMatrix(data.V_F, color=COLOR_VECTOR)
    vec_h = DrawMatrix(data.V_H, color=COLOR_VECTOR)
    vec_result = DrawMatrix(data.V_RESULT, color=COLOR_VECTOR)

    row = [mat_f, vec_f, EQ, mat_h, mat_g, vec_f]
    pos_f, pos_vf, pos_eq, pos_h, pos_g, pos_vf2 = layout_row(
        row, (row_start(row), -105.0)
    )

    pos_eq2 = pos_eq.shifted(dy=110.0)
    pos_h2 = position_right_of(pos_eq2)(mat_h)
    pos_vh = position_right_of(pos_h2)(vec_h)

    pos_eq3 = pos_eq2.shifted(dy=110.0)
    pos_result = position_right_of(pos_eq3)(vec_result)

    labels = [
        position_on(pos_f)(LABEL_DF),
        position_on(pos_g)(LABEL_DG),
        position_on(pos_h)(LABEL_DH),
        position_on(pos_h2)(LABEL_DH),
    ]

    draw_all(
        ax,
        [
            pos_f,
            pos_vf,
            pos_eq,
            pos_h,
            pos_g,
            pos_vf2,
            pos_eq2,
            pos_h2,
            pos_vh,
            pos_eq3,
            pos_result,
            *labels,
        ],
    )
    return fig


# ---------------------------------------------------------------------------
# Forward and reverse mode
# ---------------------------------------------------------------------------


def forward_mode():
    """Each JVP with a basis vector recovers one column of the Jacobian."""
    fig, ax = new_canvas(510, 120)

    e1 = data.basis_vector(data.M, 0)
    e2 = data.basis_vector(data.M, data.M - 1)
    absmax = float(np.max(np.abs(data.F)))

    # Only the column each product reads gets numbers
    text_first = cell_texts(data.F)
    text_first[:, 1:] = ""
    text_last = cell_texts(data.F)
    text_last[:, :-1] = ""

    mat_first = DrawMatrix(
        data.F, mat_text=text_first, color=COLOR_F, dashed=True, show_text=True
    )
    mat_last = DrawMatrix(
        data.F, mat_text=text_last, color=COLOR_F, dashed=True, show_text=True
    )
    vec_e1 = DrawMatrix(e1, color=COLOR_VECTOR, show_text=True)
    vec_e2 = DrawMatrix(e2, color=COLOR_VECTOR, show_text=True)
    col_1 = DrawMatrix(data.F @ e1, color=COLOR_F, absmax=absmax, show_text=True)
    col_2 = DrawMatrix(data.F @ e2, color=COLOR_F, absmax=absmax, show_text=True)

    row = [mat_first, vec_e1, EQ, col_1, DOTS, mat_first, vec_e2, EQ, col_2]
    xstart = row_start(row, extra=40.0)

    left = layout_row([mat_first, vec_e1, EQ, col_1], (xstart, 0.0))
    pos_dots = position_right_of(left[-1], space=30.0)(DOTS)
    pos_last = position_right_of(pos_dots, space=30.0)(mat_last)
    right = layout_row([mat_last, vec_e2, EQ, col_2], pos_last.center)

    labels = [position_on(left[0])(LABEL_DF), position_on(right[0])(LABEL_DF)]

    draw_all(ax, [*left, *right, *labels, pos_dots])
    return fig


def reverse_mode():
    """Each VJP with a basis vector recovers one row of the Jacobian."""
    fig, ax = new_canvas(380, 250)

    e1 = data.basis_vector(data.N, 0, row=True)
    e2 = data.basis_vector(data.N, data.N - 1, row=True)
    absmax = float(np.max(np.abs(data.F)))

    text_first = cell_texts(data.F)
    text_first[1:, :] = ""
    text_last = cell_texts(data.F)
    text_last[:-1, :] = ""

    mat_first = DrawMatrix(
        data.F, mat_text=text_first, color=COLOR_F, dashed=True, show_text=True
    )
    mat_last = DrawMatrix(
        data.F, mat_text=text_last, color=COLOR_F, dashed=True, show_text=True
    )
    vec_e1 = DrawMatrix(e1, color=COLOR_VECTOR, show_text=True)
    vec_e2 = DrawMatrix(e2, color=COLOR_VECTOR, show_text=True)
    row_1 = DrawMatrix(e1 @ data.F, color=COLOR_F, absmax=absmax, show_text=True)
    row_2 = DrawMatrix(e2 @ data.F, color=COLOR_F, absmax=absmax, show_text=True)

    top_row = [vec_e1, mat_first, EQ, row_1]
    xstart = row_start(top_row)
    ystart = -65.0

    top = layout_row(top_row, (xstart, ystart))
    pos_dots = Position(DOTS, (0.0, ystart + 71.0))
    bottom = layout_row([vec_e2, mat_last, EQ, row_2], (xstart, ystart + 140.0))

    labels = [position_on(top[1])(LABEL_DF), position_on(bottom[1])(LABEL_DF)]

    draw_all(ax, [*top, *bottom, *labels, pos_dots])
    return fig


# ---------------------------------------------------------------------------
# Sparsity
# ---------------------------------------------------------------------------


def big_conv_jacobian():
    """Jacobian of the first convolution layer of LeNet-5: large and sparse."""
    fig, ax = new_canvas(1600, 1200)

    jac = data.conv_jacobian()
    rows, cols = jac.shape
    print(f"    conv Jacobian {rows}x{cols}, {data.relative_sparsity(jac):.1%} zeros")

    mat = DrawMatrix(
        jac,
        color=COLOR_G,
        cellsize=2,
        padding_inner=0,
        padding_outer=0,
        border_inner=0,
        border_outer=10,
    )
    label = DrawOverlay(
        "$J_{g}(x)$", color=COLOR_G, fontsize=150, width=350, height=180
    )

    center = (0.0, 0.0)
    draw_all(ax, [Position(mat, center), Position(label, center)])
    return fig


def sparsity(ismap=False):
    """The sparse example Jacobian, as numbers or as a dashed linear map."""
    fig, ax = new_canvas(120, 100)
    mat = DrawMatrix(data.S, color=COLOR_F, dashed=ismap, show_text=not ismap)
    Position(mat, (0.0, 0.0)).draw(ax)
    return fig


def sparse_map_colored():
    """The sparse linear map with its columns tinted by color group."""
    fig, ax = new_canvas(120, 100)
    mat = DrawMatrix(
        data.S,
        color=COLOR_F,
        dashed=True,
        show_text=True,
        column_colors=_coloring_colors(),
    )
    Position(mat, (0.0, 0.0)).draw(ax)
    return fig


def sparsity_pattern():
    """Boolean sparsity pattern of the example Jacobian."""
    fig, ax = new_canvas(120, 100)
    mat = DrawMatrix(
        data.PATTERN,
        mat_text=data.pattern_texts(data.PATTERN),
        color=COLOR_F,
        show_text=True,
    )
    Position(mat, (0.0, 0.0)).draw(ax)
    return fig


def sparsity_coloring():
    """Sparsity pattern with structurally orthogonal columns sharing a color."""
    fig, ax = new_canvas(120, 100)
    mat = DrawMatrix(
        data.PATTERN,
        mat_text=data.pattern_texts(data.PATTERN),
        color=COLOR_F,
        show_text=True,
        column_colors=_coloring_colors(),
    )
    Position(mat, (0.0, 0.0)).draw(ax)
    return fig


def sparse_ad():
    """One JVP with a color's seed vector fills a whole compressed column."""
    fig, ax = new_canvas(220, 120)

    seed = data.seed_vectors(data.COLORING)[0]
    absmax = float(np.max(np.abs(data.S)))
    colors = _coloring_colors()

    mat = DrawMatrix(
        data.S, color=COLOR_F, dashed=True, show_text=True, column_colors=colors
    )
    vec = DrawMatrix(seed, color=COLOR_VECTOR, show_text=True)
    product = DrawMatrix(
        data.S @ seed,
        color=COLOR_F,
        absmax=absmax,
        show_text=True,
        column_colors=[COLORING_PALETTE[0]],
    )

    row = [mat, vec, EQ, product]
    draw_all(ax, layout_row(row, (row_start(row), 0.0)))
    return fig


def sparsity_pattern_compressed():
    """Compressed pattern: per row, the columns whose nonzeros it carries."""
    fig, ax = new_canvas(40, 100)
    mat = DrawMatrix(
        np.ones((data.N, 1)),
        mat_text=data.row_index_sets(data.PATTERN),
        color=COLOR_F,
        show_text=True,
    )
    Position(mat, (0.0, 0.0)).draw(ax)
    return fig


def _forward_mode_naive_row():
    mat = DrawMatrix(data.S, color=COLOR_F, dashed=True, show_text=False)
    identity = DrawMatrix(np.eye(data.M), color=COLOR_VECTOR, show_text=True)
    jac = DrawMatrix(data.S @ np.eye(data.M), color=COLOR_F, show_text=True)
    row = [mat, identity, EQ, jac]
    return layout_row(row, (row_start(row), 0.0))


def forward_mode_naive():
    """Dense forward mode: one JVP per basis vector, i.e. times the identity."""
    fig, ax = new_canvas(400, 120)

    positions = _forward_mode_naive_row()
    pos_mat, pos_jac = positions[0], positions[-1]
    labels = [position_on(pos_mat)(LABEL_DF), position_on(pos_jac)(LABEL_JF)]

    draw_all(ax, [*positions, *labels])
    return fig


def forward_mode_sparse():
    """Forward propagation of index sets detects the sparsity pattern."""
    fig, ax = new_canvas(400, 120)

    mat = DrawMatrix(data.S, color=COLOR_F, dashed=True, show_text=False)
    inputs = DrawMatrix(
        np.ones((data.M, 1)),
        mat_text=data.input_index_sets(data.M),
        color=COLOR_VECTOR,
        show_text=True,
    )
    outputs = DrawMatrix(
        np.ones((data.N, 1)),
        mat_text=data.row_index_sets(data.PATTERN),
        color=COLOR_F,
        show_text=True,
    )
    pattern = DrawMatrix(
        data.PATTERN,
        mat_text=data.pattern_texts(data.PATTERN),
        color=COLOR_F,
        show_text=True,
    )

    # Line the map up with forward_mode_naive so the two figures can be swapped
    start = _forward_mode_naive_row()[0].center
    positions = layout_row([mat, inputs, EQ, outputs, DEFINE, pattern], start)
    label = position_on(positions[0])(LABEL_DF)

    draw_all(ax, [*positions, label])
    return fig
