"""Tests for the conversion graph and user-defined color types."""
import sys
import threading

import numpy as np
import pytest

from colorgraph import (
    CMYK,
    D50,
    HSL,
    HSV,
    HWB,
    LAB,
    LCH,
    LMS,
    LUV,
    RGB,
    XYZ,
    Channel,
    ColorType,
    ConversionGraph,
    LinearRGB,
    Yxy,
    convert,
    convert_through_hub,
    define_space,
    mix,
)
from colorgraph.parameters import ADOBE_TRANSFER, D65, SRGB, RgbStandard
from colorgraph.exceptions import GraphConfigurationError, MissingPivotError, PivotCycleError


class TestGraphStructure:
    """Test the built-in graph."""

    def test_graph_is_connected(self):
        assert ConversionGraph.is_connected()

    def test_builtin_spaces_are_registered(self):
        spaces = ConversionGraph.spaces()
        for space in (XYZ, RGB, LinearRGB, HSL, HSV, HWB, CMYK, LAB, LCH, LUV, Yxy, LMS):
            assert space in spaces

    def test_path_goes_through_pivots(self):
        assert ConversionGraph.path(RGB, LAB) == [RGB, LinearRGB, XYZ, LAB]

    def test_direct_edge_is_used(self):
        assert ConversionGraph.path(HSL, HSV) == [HSL, HSV]
        assert ConversionGraph.edge_kind(HSL, HSV) == ConversionGraph.DIRECT_EDGE

    def test_hubs_are_connected_by_adaptation(self):
        XYZ[D50]
        assert ConversionGraph.edge_kind(XYZ, XYZ[D50]) == ConversionGraph.ADAPTATION_EDGE

    def test_lookup(self):
        assert ConversionGraph.lookup("LAB") is LAB
        assert ConversionGraph.lookup("NotASpace") is None


class TestCompositionEquivalence:
    """Converting directly agrees with converting through the hub."""

    SPACES = [RGB, LinearRGB, HSL, HSV, HWB, CMYK, LAB, LAB[D50], LCH, LUV, Yxy, LMS, XYZ[D50]]

    @pytest.mark.parametrize("origin", SPACES, ids=lambda space: space.__name__)
    def test_equivalence(self, origin):
        colors = origin(RGB(np.array([[0.2, 0.4, 0.6], [0.9, 0.1, 0.3]])))
        for destination in self.SPACES:
            direct = convert(colors, destination)
            through_hub = convert_through_hub(colors, destination)
            assert direct.isclose(through_hub, tolerance=1e-6), destination.__name__


class TestUserDefinedSpaces:
    """Test registering new color types."""

    def test_subclass(self):
        class HalfXYZ(ColorType):
            channels = (Channel("P", 0.0, 0.5), Channel("Q", 0.0, 0.5), Channel("R", 0.0, 0.5))
            pivot = XYZ

            @classmethod
            def to_pivot(cls, values):
                return values * 2

            @classmethod
            def from_pivot(cls, values):
                return values / 2

        half = HalfXYZ(RGB(1.0, 1.0, 1.0))
        np.testing.assert_allclose(half.values, XYZ(RGB(1.0, 1.0, 1.0)).values / 2)
        assert float(half.P) == pytest.approx(float(XYZ(RGB(1.0, 1.0, 1.0)).X) / 2)
        assert LAB(half).isclose(LAB(RGB(1.0, 1.0, 1.0)))

    def test_define_space(self):
        Doubled = define_space(
            "DoubledLinearRGB",
            [Channel("R", 0.0, 2.0), Channel("G", 0.0, 2.0), Channel("B", 0.0, 2.0)],
            LinearRGB,
            to_pivot=lambda values: values / 2,
            from_pivot=lambda values: values * 2,
        )
        assert Doubled(RGB(1.0, 0.0, 0.0)).isclose(Doubled(2.0, 0.0, 0.0))
        assert ConversionGraph.is_connected()

    def test_string_pivot(self):
        Shifted = define_space(
            "ShiftedLab",
            [Channel("L", 10.0, 110.0), Channel("A", -128.0, 127.0), Channel("B", -128.0, 127.0)],
            "LAB",
            to_pivot=lambda values: values - [10.0, 0.0, 0.0],
            from_pivot=lambda values: values + [10.0, 0.0, 0.0],
        )
        assert Shifted(LAB(50.0, 1.0, 2.0)).isclose(Shifted(60.0, 1.0, 2.0))

    def test_user_space_pivoting_on_user_space(self):
        Base = define_space(
            "ScaledRGB",
            [Channel("R", 0.0, 255.0), Channel("G", 0.0, 255.0), Channel("B", 0.0, 255.0)],
            RGB,
            to_pivot=lambda values: values / 255,
            from_pivot=lambda values: values * 255,
        )
        Inverted = define_space(
            "InvertedScaledRGB",
            [Channel("R", 0.0, 255.0), Channel("G", 0.0, 255.0), Channel("B", 0.0, 255.0)],
            Base,
            to_pivot=lambda values: 255 - values,
            from_pivot=lambda values: 255 - values,
        )
        assert Inverted(RGB(1.0, 0.0, 0.0)).isclose(Inverted(0.0, 255.0, 255.0), tolerance=1e-9)
        assert ConversionGraph.path(Inverted, XYZ)[:3] == [Inverted, Base, RGB]


class TestInvalidDeclarations:
    """Test that broken declarations are rejected at class definition."""

    def test_missing_pivot_functions(self):
        with pytest.raises(MissingPivotError):
            class NoFunctions(ColorType):
                channels = (Channel("P", 0.0, 1.0),)
                pivot = XYZ

    def test_missing_pivot(self):
        with pytest.raises(MissingPivotError):
            define_space("NoPivot", [Channel("P", 0.0, 1.0)], None, lambda v: v, lambda v: v)

    def test_unknown_pivot_name(self):
        with pytest.raises(MissingPivotError):
            define_space("UnknownPivot", [Channel("P", 0.0, 1.0)], "NotASpace", lambda v: v, lambda v: v)

    def test_self_pivot(self):
        with pytest.raises(PivotCycleError):
            class SelfPivot(ColorType):
                channels = (Channel("P", 0.0, 1.0),)

                @classmethod
                def declared_pivot(cls):
                    return cls

                @classmethod
                def to_pivot(cls, values):
                    return values

                @classmethod
                def from_pivot(cls, values):
                    return values

    def test_no_channels(self):
        with pytest.raises(GraphConfigurationError):
            define_space("NoChannels", [], XYZ, lambda v: v, lambda v: v)

    def test_reserved_channel_name(self):
        with pytest.raises(GraphConfigurationError):
            define_space("Reserved", [Channel("values", 0.0, 1.0)], XYZ, lambda v: v, lambda v: v)

    def test_errors_share_a_base(self):
        assert issubclass(MissingPivotError, GraphConfigurationError)
        assert issubclass(PivotCycleError, GraphConfigurationError)

    def test_rejected_spaces_are_not_registered(self):
        with pytest.raises(MissingPivotError):
            define_space("Rejected", [Channel("P", 0.0, 1.0)], "NotASpace", lambda v: v, lambda v: v)
        assert ConversionGraph.lookup("Rejected") is None
        assert ConversionGraph.is_connected()

    def test_taken_name(self):
        with pytest.raises(GraphConfigurationError):
            define_space("LAB", [Channel("P", 0.0, 1.0)], XYZ, lambda v: v, lambda v: v)
        assert ConversionGraph.lookup("LAB") is LAB
        assert ConversionGraph.is_connected()


@pytest.fixture
def frequent_thread_switches():
    interval = sys.getswitchinterval()
    sys.setswitchinterval(1e-6)
    yield
    sys.setswitchinterval(interval)


class TestConcurrentFirstUse:
    """Test variants and conversions first used from many threads at once."""

    THREADS = 8

    @pytest.mark.parametrize("trial", range(10))
    def test_one_variant_per_parameter(self, trial, frequent_thread_switches):
        standard = RgbStandard(
            "concurrent {}".format(trial), SRGB.red, SRGB.green, SRGB.blue, D65, ADOBE_TRANSFER
        )
        barrier = threading.Barrier(self.THREADS)
        variants = []
        errors = []

        def first_use():
            barrier.wait()
            try:
                variant = HSL[standard]
                variants.append(variant)
                variant(RGB(0.2, 0.4, 0.6))
            except Exception as error:
                errors.append(error)

        threads = [threading.Thread(target=first_use) for _ in range(self.THREADS)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert len(variants) == self.THREADS
        assert len(set(variants)) == 1
        assert mix(variants[0](0.0, 0.5, 0.5), variants[-1](90.0, 0.5, 0.5), 0.5).isclose(
            variants[0](45.0, 0.5, 0.5)
        )
