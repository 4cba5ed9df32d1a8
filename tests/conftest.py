"""Shared fixtures: headless backend, figure cleanup, small matrices."""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pytest  # noqa: E402


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


@pytest.fixture()
def canvas():
    from matcalc_diagrams._common import new_canvas

    return new_canvas(200, 100)


@pytest.fixture()
def small_matrix():
    return np.array([[0.0, 1.0, -2.0], [0.5, 0.0, 0.25]])
