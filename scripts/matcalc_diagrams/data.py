"""Numeric data shown in the figures.

Everything is either a literal or drawn from a seeded generator, so repeated
runs produce the same pictures.

The running example is f = h o g with g: R^m -> R^p and h: R^p -> R^n, whose
Jacobians are G (p x m) and H (n x p), so J_f = F = H G.
"""

import numpy as np

N, M, P = 4, 5, 3

SEED_H = 121
SEED_G = 123
SEED_VECTOR = 3
SEED_CONV = 0

H = np.random.default_rng(SEED_H).standard_normal((N, P))
G = np.random.default_rng(SEED_G).standard_normal((P, M))
F = H @ G

# Matrix-free evaluation of F v, right to left
V_F = np.random.default_rng(SEED_VECTOR).standard_normal((M, 1))
V_H = G @ V_F
V_RESULT = H @ V_H

# A sparse Jacobian and its sparsity pattern
S = np.array(
    [
        [0.0, -2.295, 0.0, 0.207, 0.0],
        [0.0, 0.0, 0.0, 0.170, 2.11],
        [0.0, 1.852, 1.472, 0.0, 0.0],
        [-0.479, 0.0, -0.264, 0.0, 0.0],
    ]
)
PATTERN = S != 0


def basis_vector(size, index, row=False):
    """One-hot column (or row) vector with a 1 at 0-based ``index``."""
    if not 0 <= index < size:
        raise IndexError(f"index {index} out of range for size {size}")
    e = np.zeros((1, size) if row else (size, 1))
    e.flat[index] = 1.0
    return e


def pattern_texts(pattern):
    """'≠ 0' for structural nonzeros, '0' elsewhere."""
    pattern = np.asarray(pattern, dtype=bool)
    texts = np.empty(pattern.shape, dtype=object)
    texts[pattern] = "≠ 0"
    texts[~pattern] = "0"
    return texts


def index_set_text(indices):
    return "{" + ",".join(str(i) for i in indices) + "}"


def row_index_sets(pattern):
    """Per row, the 1-based set of columns holding a nonzero, as a text column."""
    pattern = np.asarray(pattern, dtype=bool)
    texts = np.empty((pattern.shape[0], 1), dtype=object)
    for i, row in enumerate(pattern):
        texts[i, 0] = index_set_text(np.flatnonzero(row) + 1)
    return texts


def input_index_sets(size):
    """Index sets {1}, {2}, ... carried by the seed vectors of a dense pass."""
    texts = np.empty((size, 1), dtype=object)
    for i in range(size):
        texts[i, 0] = index_set_text([i + 1])
    return texts


# ---------------------------------------------------------------------------
# Column coloring
# ---------------------------------------------------------------------------


def greedy_column_coloring(pattern):
    """Color columns so that no two columns sharing a nonzero row match.

    Columns are visited left to right and each gets the smallest color not
    used by an already-colored neighbor.  Returns one 0-based color per column.
    """
    pattern = np.asarray(pattern, dtype=bool)
    colors = []
    for j in range(pattern.shape[1]):
        column = pattern[:, j]
        taken = {colors[k] for k in range(j) if np.any(column & pattern[:, k])}
        color = 0
        while color in taken:
            color += 1
        colors.append(color)
    return colors


def seed_vectors(colors):
    """One 0/1 column vector per color, selecting the columns of that color."""
    colors = np.asarray(colors)
    n_colors = int(colors.max()) + 1 if colors.size else 0
    return [(colors == c).astype(np.float64).reshape(-1, 1) for c in range(n_colors)]


def compress(matrix, colors):
    """Compressed Jacobian: same-colored columns summed, one column per color."""
    vectors = seed_vectors(colors)
    if not vectors:
        return np.zeros((np.shape(matrix)[0], 0))
    return np.hstack([np.asarray(matrix) @ v for v in vectors])


def decompress(compressed, pattern, colors):
    """Recover the full matrix from its compression under a valid coloring."""
    pattern = np.asarray(pattern, dtype=bool)
    out = np.zeros(pattern.shape)
    for j, color in enumerate(colors):
        out[pattern[:, j], j] = compressed[pattern[:, j], color]
    return out


COLORING = greedy_column_coloring(PATTERN)

# ---------------------------------------------------------------------------
# Convolution Jacobian
# ---------------------------------------------------------------------------


def conv_kernel(size=5, seed=SEED_CONV):
    """Glorot-uniform kernel of a single-channel convolution layer."""
    fan = size * size
    limit = np.sqrt(6.0 / (fan + fan))
    rng = np.random.default_rng(seed)
    return rng.uniform(-limit, limit, (size, size)).astype(np.float32)


def conv_layer(kernel):
    """'valid' 2-D convolution with identity activation and zero bias."""
    import jax.numpy as jnp
    from jax.scipy.signal import convolve2d

    kernel = jnp.asarray(kernel)

    def layer(x):
        return convolve2d(x, kernel, mode="valid")

    return layer


def conv_jacobian(input_size=28, kernel_size=5, seed=SEED_CONV):
    """Jacobian of the first LeNet-5 convolution, via forward-mode AD.

    Returns a ((input_size - kernel_size + 1)^2, input_size^2) matrix.
    """
    import jax

    layer = conv_layer(conv_kernel(kernel_size, seed))
    rng = np.random.default_rng(seed)
    x = rng.standard_normal((input_size, input_size)).astype(np.float32)
    jac = np.asarray(jax.jacfwd(layer)(x))
    out_size = input_size - kernel_size + 1
    return jac.reshape(out_size * out_size, input_size * input_size)


def relative_sparsity(matrix):
    """Fraction of entries that are exactly zero."""
    matrix = np.asarray(matrix)
    if matrix.size == 0:
        return 0.0
    return float(np.count_nonzero(matrix == 0)) / matrix.size
