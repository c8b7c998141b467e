"""Tests for mixing, adjustments, compositing and contrast."""
import numpy as np
import pytest

from colorgraph import (
    BLEND_MODES,
    HSL,
    LAB,
    LCH,
    RGB,
    blend,
    clamp,
    composite,
    composite_over,
    contrast_ratio,
    darken,
    desaturate,
    is_enhanced_contrast,
    is_enhanced_contrast_large,
    is_min_contrast,
    is_min_contrast_large,
    is_within_bounds,
    lighten,
    mix,
    premultiply,
    relative_luminance,
    saturate,
    shift_hue,
    unpremultiply,
)
from colorgraph.exceptions import ColorTypeMismatchError, OperandShapeMismatchError, OperationNotFoundError


class TestMix:
    """Test linear interpolation between colors."""

    def test_midpoint(self):
        assert mix(RGB(0.0, 0.0, 0.0), RGB(1.0, 1.0, 1.0), 0.5).isclose(RGB(0.5, 0.5, 0.5))

    def test_exact_endpoints(self):
        start = RGB(0.1, 0.2, 0.3)
        end = RGB(0.7, 0.9, 0.4)
        assert mix(start, end, 0.0) == start
        assert mix(start, end, 1.0) == end

    def test_hue_takes_shorter_arc(self):
        """Mixing hues 350 and 10 passes through 0, not 180."""
        mixed = mix(HSL(350.0, 1.0, 0.5), HSL(10.0, 1.0, 0.5), 0.5)
        assert float(mixed.H) == pytest.approx(0.0, abs=1e-9)

    def test_hue_stays_in_range(self):
        mixed = mix(HSL(350.0, 1.0, 0.5), HSL(10.0, 1.0, 0.5), 0.25)
        assert float(mixed.H) == pytest.approx(355.0)

    def test_alpha_is_interpolated(self):
        mixed = mix(RGB(1.0, 0.0, 0.0, alpha=0.0), RGB(1.0, 0.0, 0.0), 0.5)
        assert float(mixed.alpha) == pytest.approx(0.5)

    def test_opaque_colors_stay_opaque(self):
        assert mix(RGB(1.0, 0.0, 0.0), RGB(0.0, 0.0, 1.0), 0.5).alpha is None

    def test_factor_array(self):
        mixed = mix(RGB(0.0, 0.0, 0.0), RGB(1.0, 1.0, 1.0), np.array([0.0, 0.25, 1.0]))
        assert mixed.color_shape == (3,)
        np.testing.assert_allclose(mixed.R, [0.0, 0.25, 1.0])

    def test_bulk_colors(self):
        start = RGB(np.zeros((4, 3)))
        end = RGB(np.ones((4, 3)))
        assert mix(start, end, 0.5).isclose(RGB(np.full((4, 3), 0.5)))

    def test_different_types(self):
        with pytest.raises(ColorTypeMismatchError):
            mix(RGB(1.0, 0.0, 0.0), HSL(0.0, 1.0, 0.5), 0.5)

    def test_shape_mismatch(self):
        with pytest.raises(OperandShapeMismatchError):
            mix(RGB(np.zeros((3, 3))), RGB(np.zeros((4, 3))), 0.5)

    def test_keeps_component_type(self):
        start = RGB(0.0, 0.0, 0.0, dtype=np.float32)
        end = RGB(1.0, 1.0, 1.0, dtype=np.float32)
        assert mix(start, end, 0.5).dtype == np.float32


class TestAdjustments:
    """Test lighten, darken, saturate, desaturate and shift_hue."""

    def test_lighten(self):
        assert lighten(HSL(0.0, 1.0, 0.5), 0.1).isclose(HSL(0.0, 1.0, 0.6))

    def test_lighten_clamps(self):
        assert lighten(HSL(0.0, 1.0, 0.9), 0.5).isclose(HSL(0.0, 1.0, 1.0))

    def test_lighten_relative(self):
        assert lighten(HSL(0.0, 1.0, 0.5), 0.5, relative=True).isclose(HSL(0.0, 1.0, 0.75))

    def test_darken_uses_channel_span(self):
        assert darken(LAB(50.0, 0.0, 0.0), 0.1).isclose(LAB(40.0, 0.0, 0.0))

    def test_darken_relative(self):
        assert darken(LAB(50.0, 0.0, 0.0), 0.5, relative=True).isclose(LAB(25.0, 0.0, 0.0))

    def test_saturate_unbounded_chroma(self):
        """Chroma is not clamped above its nominal range."""
        assert saturate(LCH(50.0, 200.0, 0.0), 0.1).isclose(LCH(50.0, 212.8, 0.0))

    def test_desaturate_relative(self):
        assert desaturate(HSL(0.0, 0.5, 0.5), 1.0, relative=True).isclose(HSL(0.0, 0.0, 0.5))

    def test_zero_amount_is_identity(self):
        color = HSL(120.0, 0.4, 0.3)
        assert lighten(color, 0.0).isclose(color, tolerance=0.0)

    def test_adjusting_missing_channel(self):
        with pytest.raises(OperationNotFoundError):
            lighten(RGB(1.0, 0.0, 0.0), 0.1)
        with pytest.raises(OperationNotFoundError):
            saturate(LAB(50.0, 0.0, 0.0), 0.1)

    def test_shift_hue_wraps(self):
        assert shift_hue(HSL(350.0, 1.0, 0.5), 20.0).isclose(HSL(10.0, 1.0, 0.5))
        assert shift_hue(HSL(10.0, 1.0, 0.5), -20.0).isclose(HSL(350.0, 1.0, 0.5))

    def test_shift_hue_without_hue(self):
        with pytest.raises(OperationNotFoundError):
            shift_hue(RGB(1.0, 0.0, 0.0), 10.0)

    def test_adjustments_keep_alpha(self):
        assert float(lighten(HSL(0.0, 1.0, 0.5, alpha=0.3), 0.1).alpha) == pytest.approx(0.3)


class TestClamp:
    """Test gamut clamping and bounds checks."""

    def test_clamp(self):
        assert clamp(RGB(1.5, -0.2, 0.5)) == RGB(1.0, 0.0, 0.5)

    def test_hue_wraps(self):
        assert clamp(HSL(-30.0, 0.5, 0.5)).isclose(HSL(330.0, 0.5, 0.5))

    def test_alpha_is_clamped(self):
        assert float(clamp(RGB(0.5, 0.5, 0.5, alpha=1.5)).alpha) == 1.0

    def test_idempotent(self):
        color = HSL(np.array([[-725.0, 1.5, -0.5], [400.0, 0.5, 2.0]]))
        once = clamp(color)
        assert clamp(once) == once

    def test_is_within_bounds(self):
        assert is_within_bounds(RGB(0.5, 0.5, 0.5))
        assert not is_within_bounds(RGB(1.5, 0.5, 0.5))
        assert not is_within_bounds(RGB(0.5, 0.5, 0.5, alpha=-0.1))

    def test_is_within_bounds_bulk(self):
        result = is_within_bounds(RGB(np.array([[0.5, 0.5, 0.5], [0.5, 1.1, 0.5]])))
        np.testing.assert_array_equal(result, [True, False])

    def test_clamped_colors_are_within_bounds(self):
        assert is_within_bounds(clamp(LAB(120.0, -300.0, 300.0)))


class TestCompositing:
    """Test the "over" operator and alpha premultiplication."""

    def test_half_transparent_over_opaque(self):
        result = composite_over(RGB(1.0, 0.0, 0.0, alpha=0.5), RGB(0.0, 0.0, 1.0))
        assert result.isclose(RGB(0.5, 0.0, 0.5, alpha=1.0))

    def test_opaque_top_wins(self):
        top = RGB(1.0, 0.0, 0.0)
        assert composite_over(top, RGB(0.0, 1.0, 0.0)) == top

    def test_result_alpha(self):
        result = composite_over(RGB(1.0, 1.0, 1.0, alpha=0.5), RGB(0.0, 0.0, 0.0, alpha=0.5))
        assert float(result.alpha) == pytest.approx(0.75)
        np.testing.assert_allclose(result.values, [2 / 3] * 3)

    def test_fully_transparent_is_zero(self):
        result = composite_over(RGB(1.0, 0.0, 0.0, alpha=0.0), RGB(0.0, 1.0, 0.0, alpha=0.0))
        assert float(result.alpha) == 0.0
        np.testing.assert_array_equal(result.values, [0.0, 0.0, 0.0])

    def test_hue_spaces_cannot_be_composited(self):
        with pytest.raises(OperationNotFoundError):
            composite_over(HSL(0.0, 1.0, 0.5), HSL(120.0, 1.0, 0.5))

    def test_different_types(self):
        with pytest.raises(ColorTypeMismatchError):
            composite_over(RGB(1.0, 0.0, 0.0), LAB(50.0, 0.0, 0.0))

    def test_premultiply(self):
        np.testing.assert_allclose(premultiply(RGB(1.0, 0.5, 0.0, alpha=0.5)), [0.5, 0.25, 0.0])

    def test_unpremultiply(self):
        color = unpremultiply(RGB, [0.5, 0.25, 0.0], 0.5)
        assert color.isclose(RGB(1.0, 0.5, 0.0, alpha=0.5))

    def test_unpremultiply_transparent(self):
        color = unpremultiply(RGB, [0.0, 0.0, 0.0], 0.0)
        np.testing.assert_array_equal(color.values, [0.0, 0.0, 0.0])


class TestContrast:
    """Test WCAG contrast ratios."""

    def test_black_on_white(self):
        assert contrast_ratio(RGB(0.0, 0.0, 0.0), RGB(1.0, 1.0, 1.0)) == pytest.approx(21.0, rel=1e-6)

    def test_symmetric(self):
        first = RGB(0.2, 0.4, 0.6)
        second = RGB(0.9, 0.8, 0.1)
        assert contrast_ratio(first, second) == pytest.approx(contrast_ratio(second, first))

    def test_same_color(self):
        assert contrast_ratio(RGB(0.3, 0.3, 0.3), RGB(0.3, 0.3, 0.3)) == pytest.approx(1.0)

    def test_relative_luminance_of_white(self):
        assert relative_luminance(RGB(1.0, 1.0, 1.0)) == pytest.approx(1.0)

    def test_other_spaces(self):
        """Contrast converts through luminance, whatever the space."""
        assert contrast_ratio(LAB(0.0, 0.0, 0.0), HSL(0.0, 0.0, 1.0)) == pytest.approx(21.0, rel=1e-6)

    def test_thresholds(self):
        """#777777 on white is just under 4.5:1."""
        gray = RGB.from_hex("#777777")
        white = RGB(1.0, 1.0, 1.0)
        assert contrast_ratio(gray, white) == pytest.approx(4.48, abs=0.01)
        assert not is_min_contrast(gray, white)
        assert is_min_contrast_large(gray, white)
        assert not is_enhanced_contrast(gray, white)
        assert not is_enhanced_contrast_large(gray, white)

    def test_black_on_white_passes_everything(self):
        black = RGB(0.0, 0.0, 0.0)
        white = RGB(1.0, 1.0, 1.0)
        assert is_min_contrast(black, white)
        assert is_min_contrast_large(black, white)
        assert is_enhanced_contrast(black, white)
        assert is_enhanced_contrast_large(black, white)

    def test_bulk(self):
        ratios = contrast_ratio(RGB(np.zeros((2, 3))), RGB(np.ones((2, 3))))
        np.testing.assert_allclose(ratios, [21.0, 21.0], rtol=1e-6)


class TestCompositingOperators:
    """Test the Porter-Duff operators other than "over"."""

    RED = RGB(1.0, 0.0, 0.0)
    BLUE = RGB(0.0, 0.0, 1.0)

    def test_inside(self):
        result = composite(self.RED, RGB(0.0, 0.0, 1.0, alpha=0.5), "inside")
        assert result.isclose(RGB(1.0, 0.0, 0.0, alpha=0.5))

    def test_outside(self):
        result = composite(RGB(1.0, 0.0, 0.0, alpha=0.8), RGB(0.0, 0.0, 1.0, alpha=0.5), "outside")
        assert result.isclose(RGB(1.0, 0.0, 0.0, alpha=0.4))

    def test_outside_opaque_is_transparent(self):
        result = composite(self.RED, self.BLUE, "outside")
        assert float(result.alpha) == 0.0
        np.testing.assert_array_equal(result.values, [0.0, 0.0, 0.0])

    def test_atop(self):
        result = composite(RGB(1.0, 0.0, 0.0, alpha=0.5), self.BLUE, "atop")
        assert result.isclose(RGB(0.5, 0.0, 0.5, alpha=1.0))

    def test_atop_keeps_bottom_alpha(self):
        result = composite(self.RED, RGB(0.0, 0.0, 1.0, alpha=0.25), "atop")
        assert result.isclose(RGB(1.0, 0.0, 0.0, alpha=0.25))

    def test_xor(self):
        result = composite(RGB(1.0, 0.0, 0.0, alpha=0.5), self.BLUE, "xor")
        assert result.isclose(RGB(0.0, 0.0, 1.0, alpha=0.5))
        assert float(composite(self.RED, self.BLUE, "xor").alpha) == 0.0

    def test_plus(self):
        result = composite(RGB(1.0, 0.0, 0.0, alpha=0.5), RGB(0.0, 0.0, 1.0, alpha=0.5), "plus")
        assert result.isclose(RGB(0.5, 0.0, 0.5, alpha=1.0))

    def test_plus_saturates(self):
        result = composite(RGB(0.8, 0.8, 0.8), RGB(0.5, 0.5, 0.5), "plus")
        assert result.isclose(RGB(1.0, 1.0, 1.0))
        assert result.alpha is None

    @pytest.mark.parametrize("operator", ["over", "inside", "outside", "atop", "xor", "plus"])
    def test_transparent_operands(self, operator):
        """A fully transparent top leaves what the operator keeps of the bottom, and the other way round."""
        transparent = RGB(0.3, 0.6, 0.9, alpha=0.0)
        bottom = RGB(0.2, 0.4, 0.6, alpha=0.5)
        result = composite(transparent, bottom, operator)
        keeps_bottom = operator in ("over", "atop", "xor", "plus")
        assert float(result.alpha) == pytest.approx(0.5 if keeps_bottom else 0.0)
        if keeps_bottom:
            np.testing.assert_allclose(result.values, bottom.values)

        result = composite(bottom, transparent, operator)
        keeps_top = operator in ("over", "outside", "xor", "plus")
        assert float(result.alpha) == pytest.approx(0.5 if keeps_top else 0.0)
        if keeps_top:
            np.testing.assert_allclose(result.values, bottom.values)

    def test_unknown_operator(self):
        with pytest.raises(OperationNotFoundError):
            composite(self.RED, self.BLUE, "under")


class TestBlend:
    """Test separable blend modes."""

    @pytest.mark.parametrize("mode, top, bottom, expected", [
        ("multiply", 0.5, 0.5, 0.25),
        ("screen", 0.5, 0.5, 0.75),
        ("overlay", 0.2, 0.8, 0.68),
        ("darken", 0.2, 0.7, 0.2),
        ("lighten", 0.2, 0.7, 0.7),
        ("color_dodge", 0.5, 0.25, 0.5),
        ("color_dodge", 0.3, 0.0, 0.0),
        ("color_dodge", 1.0, 0.3, 1.0),
        ("color_burn", 0.5, 0.75, 0.5),
        ("color_burn", 0.3, 1.0, 1.0),
        ("color_burn", 0.0, 0.5, 0.0),
        ("hard_light", 0.25, 0.5, 0.25),
        ("hard_light", 0.75, 0.5, 0.75),
        ("soft_light", 0.5, 0.3, 0.3),
        ("soft_light", 1.0, 0.25, 0.5),
        ("soft_light", 0.0, 0.5, 0.25),
        ("difference", 0.2, 0.7, 0.5),
        ("exclusion", 0.5, 0.5, 0.5),
    ])
    def test_opaque(self, mode, top, bottom, expected):
        result = blend(RGB(top, top, top), RGB(bottom, bottom, bottom), mode)
        assert result.isclose(RGB(expected, expected, expected), tolerance=1e-12)
        assert result.alpha is None

    @pytest.mark.parametrize("mode", BLEND_MODES)
    def test_transparent_top_shows_bottom(self, mode):
        bottom = RGB(0.2, 0.4, 0.6, alpha=0.5)
        result = blend(RGB(0.9, 0.1, 0.5, alpha=0.0), bottom, mode)
        assert result.isclose(bottom)

    @pytest.mark.parametrize("mode", BLEND_MODES)
    def test_transparent_bottom_shows_top(self, mode):
        top = RGB(0.9, 0.1, 0.5, alpha=0.5)
        result = blend(top, RGB(0.2, 0.4, 0.6, alpha=0.0), mode)
        assert result.isclose(top)

    def test_half_transparent_top(self):
        """Half of the top layer is blended, the other half lets the bottom through."""
        result = blend(RGB(0.5, 0.5, 0.5, alpha=0.5), RGB(0.5, 0.5, 0.5), "multiply")
        assert result.isclose(RGB(0.375, 0.375, 0.375, alpha=1.0))

    def test_bulk(self):
        result = blend(RGB(np.full((4, 3), 0.5)), RGB(0.5, 0.5, 0.5), "screen")
        assert result.isclose(RGB(np.full((4, 3), 0.75)))

    def test_unknown_mode(self):
        with pytest.raises(OperationNotFoundError):
            blend(RGB(0.5, 0.5, 0.5), RGB(0.5, 0.5, 0.5), "hue")

    def test_hue_spaces_cannot_be_blended(self):
        with pytest.raises(OperationNotFoundError):
            blend(HSL(0.0, 1.0, 0.5), HSL(120.0, 1.0, 0.5), "multiply")

    def test_different_types(self):
        with pytest.raises(ColorTypeMismatchError):
            blend(RGB(1.0, 0.0, 0.0), LAB(50.0, 0.0, 0.0), "screen")


class TestArithmetic:
    """Test component-wise arithmetic operators."""

    def test_add_colors(self):
        assert (RGB(0.1, 0.2, 0.3) + RGB(0.2, 0.2, 0.2)).isclose(RGB(0.3, 0.4, 0.5))

    def test_subtract_colors(self):
        assert (LAB(50.0, 10.0, -10.0) - LAB(20.0, 5.0, 5.0)).isclose(LAB(30.0, 5.0, -15.0))

    def test_scalars(self):
        color = RGB(0.2, 0.4, 0.6)
        assert (color * 0.5).isclose(RGB(0.1, 0.2, 0.3))
        assert (0.5 * color).isclose(RGB(0.1, 0.2, 0.3))
        assert (color / 2).isclose(RGB(0.1, 0.2, 0.3))
        assert (color + 0.1).isclose(RGB(0.3, 0.5, 0.7))
        assert (1 - color).isclose(RGB(0.8, 0.6, 0.4))
        assert (1.2 / color).isclose(RGB(6.0, 3.0, 2.0))

    def test_per_channel_array(self):
        color = RGB(0.2, 0.4, 0.6)
        assert (color * np.array([1.0, 0.5, 0.0])).isclose(RGB(0.2, 0.2, 0.0))
        assert (np.array([0.1, 0.0, 0.0]) + color).isclose(RGB(0.3, 0.4, 0.6))

    def test_numpy_scalar_on_the_left(self):
        result = np.float64(2.0) * RGB(0.1, 0.2, 0.3)
        assert isinstance(result, RGB)
        assert result.isclose(RGB(0.2, 0.4, 0.6))

    def test_results_are_not_clamped(self):
        assert (RGB(0.8, 0.8, 0.8) + RGB(0.8, 0.8, 0.8)).isclose(RGB(1.6, 1.6, 1.6))

    def test_hue_wraps(self):
        assert (HSL(350.0, 0.5, 0.5) + HSL(20.0, 0.0, 0.0)).isclose(HSL(10.0, 0.5, 0.5))
        assert (HSL(10.0, 0.5, 0.5) - np.array([20.0, 0.0, 0.0])).isclose(HSL(350.0, 0.5, 0.5))

    def test_alpha_is_kept(self):
        result = RGB(0.2, 0.4, 0.6, alpha=0.3) * 2
        assert float(result.alpha) == pytest.approx(0.3)
        assert float((RGB(0.2, 0.4, 0.6) + RGB(0.1, 0.1, 0.1, alpha=0.7)).alpha) == pytest.approx(0.7)
        assert (RGB(0.2, 0.4, 0.6) + RGB(0.1, 0.1, 0.1)).alpha is None

    def test_bulk_broadcasting(self):
        colors = RGB(np.zeros((4, 3))) + RGB(0.1, 0.2, 0.3)
        assert colors.color_shape == (4,)
        np.testing.assert_allclose(colors.values[2], [0.1, 0.2, 0.3])

    def test_keeps_component_type(self):
        assert (RGB(0.2, 0.4, 0.6, dtype=np.float32) * 2).dtype == np.float32

    def test_different_types(self):
        with pytest.raises(ColorTypeMismatchError):
            RGB(1.0, 0.0, 0.0) + LAB(50.0, 0.0, 0.0)

    def test_shape_mismatch(self):
        with pytest.raises(OperandShapeMismatchError):
            RGB(np.zeros((3, 3))) + RGB(np.zeros((4, 3)))
        with pytest.raises(OperandShapeMismatchError):
            RGB(0.1, 0.2, 0.3) * np.array([1.0, 2.0])

    def test_unsupported_operand(self):
        with pytest.raises(TypeError):
            RGB(0.1, 0.2, 0.3) + "red"
