import matplotlib.colors as mcolors
import numpy as np
import pytest
from colour import Color

from matcalc_diagrams._common import (
    COLOR_F,
    COLORING_PALETTE,
    COLORS,
    hsl_to_rgb_array,
    is_background_bright,
    luma,
    with_lightness,
)


class TestHslArray:
    def test_gray(self):
        np.testing.assert_allclose(hsl_to_rgb_array(0.0, 0.0, 0.3), [0.3, 0.3, 0.3])

    @pytest.mark.parametrize(
        "hue, rgb",
        [(0.0, (1.0, 0.0, 0.0)), (1 / 3, (0.0, 1.0, 0.0)), (2 / 3, (0.0, 0.0, 1.0))],
    )
    def test_primaries(self, hue, rgb):
        np.testing.assert_allclose(hsl_to_rgb_array(hue, 1.0, 0.5), rgb, atol=1e-12)

    def test_full_lightness_is_white(self):
        np.testing.assert_allclose(hsl_to_rgb_array(0.55, 0.8, 1.0), [1.0, 1.0, 1.0])

    def test_agrees_with_colour(self):
        color = Color(hsl=(0.8, 0.6, 0.7))
        np.testing.assert_allclose(
            hsl_to_rgb_array(*color.hsl), color.rgb, atol=1e-9
        )

    def test_broadcasts(self):
        out = hsl_to_rgb_array(np.array([[0.0, 1 / 3]]), 1.0, np.full((3, 2), 0.5))
        assert out.shape == (3, 2, 3)
        np.testing.assert_allclose(out[:, 0], [[1.0, 0.0, 0.0]] * 3, atol=1e-12)


def test_with_lightness_keeps_hue():
    lighter = with_lightness(COLOR_F, 0.9)
    assert lighter.hue == pytest.approx(COLOR_F.hue)
    assert lighter.saturation == pytest.approx(COLOR_F.saturation)
    assert lighter.luminance == pytest.approx(0.9)


def test_named_colors():
    orchid, slate = COLORING_PALETTE
    assert orchid.rgb == pytest.approx(mcolors.to_rgb("orchid"), abs=1e-6)
    assert slate.rgb == pytest.approx((132 / 255, 112 / 255, 1.0), abs=1e-6)
    assert COLORS["zero_border"].rgb == pytest.approx(
        mcolors.to_rgb("lightgray"), abs=1e-6
    )


def test_named_color_unknown():
    with pytest.raises(ValueError):
        Color("not-a-color")


def test_luma_and_brightness():
    assert luma((1.0, 1.0, 1.0)) == pytest.approx(1.0)
    assert is_background_bright(COLORS["white"])
    assert not is_background_bright(COLORS["black"])
    assert not is_background_bright((0.0, 0.0, 1.0))


def test_palette():
    assert COLOR_F.saturation == pytest.approx(0.8)
    assert COLOR_F.luminance == pytest.approx(0.25)
    assert 90.0 < COLOR_F.hue * 360.0 < 130.0
    assert COLORS["operator"].rgb == pytest.approx((0.3, 0.3, 0.3))
