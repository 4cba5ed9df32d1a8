import numpy as np
import pytest

from matcalc_diagrams import data


def test_chain_rule_shapes():
    assert data.H.shape == (data.N, data.P)
    assert data.G.shape == (data.P, data.M)
    np.testing.assert_allclose(data.F, data.H @ data.G)


def test_seeded_matrices_are_reproducible():
    again = np.random.default_rng(data.SEED_H).standard_normal((data.N, data.P))
    np.testing.assert_array_equal(again, data.H)


def test_matrix_free_product_matches_dense():
    np.testing.assert_allclose(data.V_RESULT, data.F @ data.V_F)


def test_pattern():
    assert data.PATTERN.shape == (4, 5)
    assert data.PATTERN.sum() == 8
    texts = data.pattern_texts(data.PATTERN)
    assert texts[0, 1] == "≠ 0"
    assert texts[0, 0] == "0"


class TestBasisVector:
    def test_column(self):
        e = data.basis_vector(5, 4)
        assert e.shape == (5, 1)
        assert e[4, 0] == 1.0 and e.sum() == 1.0

    def test_row(self):
        e = data.basis_vector(4, 0, row=True)
        assert e.shape == (1, 4)
        np.testing.assert_allclose(e @ data.F, data.F[:1, :])

    def test_out_of_range(self):
        with pytest.raises(IndexError):
            data.basis_vector(3, 3)


class TestIndexSets:
    def test_row_index_sets(self):
        sets = data.row_index_sets(data.PATTERN)
        assert sets.shape == (4, 1)
        assert list(sets[:, 0]) == ["{2,4}", "{4,5}", "{2,3}", "{1,3}"]

    def test_input_index_sets(self):
        sets = data.input_index_sets(3)
        assert list(sets[:, 0]) == ["{1}", "{2}", "{3}"]


class TestColoring:
    def test_example_coloring(self):
        assert data.COLORING == [0, 0, 1, 1, 0]

    def test_coloring_is_structurally_orthogonal(self):
        colors = np.array(data.COLORING)
        for c in set(data.COLORING):
            block = data.PATTERN[:, colors == c]
            assert (block.sum(axis=1) <= 1).all()

    def test_dense_column_forces_distinct_colors(self):
        assert data.greedy_column_coloring(np.ones((2, 3), dtype=bool)) == [0, 1, 2]

    def test_diagonal_needs_one_color(self):
        assert data.greedy_column_coloring(np.eye(4, dtype=bool)) == [0, 0, 0, 0]

    def test_seed_vectors(self):
        first, second = data.seed_vectors(data.COLORING)
        np.testing.assert_array_equal(first[:, 0], [1, 1, 0, 0, 1])
        np.testing.assert_array_equal(second[:, 0], [0, 0, 1, 1, 0])

    def test_compress_and_recover(self):
        compressed = data.compress(data.S, data.COLORING)
        assert compressed.shape == (4, 2)
        np.testing.assert_allclose(compressed[:, 0], [-2.295, 2.11, 1.852, -0.479])
        recovered = data.decompress(compressed, data.PATTERN, data.COLORING)
        np.testing.assert_allclose(recovered, data.S)


def test_relative_sparsity():
    assert data.relative_sparsity(data.S) == pytest.approx(12 / 20)
    assert data.relative_sparsity(np.zeros((0, 3))) == 0.0


def test_conv_kernel_range():
    kernel = data.conv_kernel()
    assert kernel.shape == (5, 5)
    assert np.abs(kernel).max() <= np.sqrt(6.0 / 50.0)


@pytest.fixture(scope="module")
def jac():
    return data.conv_jacobian()


class TestConvJacobian:
    def test_shape(self, jac):
        assert jac.shape == (24 * 24, 28 * 28)

    def test_each_output_sees_one_kernel_window(self, jac):
        assert (np.count_nonzero(jac, axis=1) == 25).all()

    def test_entries_are_kernel_weights(self, jac):
        kernel = data.conv_kernel()
        np.testing.assert_allclose(
            np.sort(jac[0][jac[0] != 0]), np.sort(kernel.ravel()), rtol=1e-6
        )

    def test_mostly_zero(self, jac):
        assert data.relative_sparsity(jac) == pytest.approx(1 - 25 / 784)
