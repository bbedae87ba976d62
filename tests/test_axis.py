"""
Tests for projarray.axis module.

Tests CrsAxis construction, the native/display CRS invariant, rebuild via
overrides, and anchor shifting.
"""

import numpy as np
import pytest

from projarray.axis import CrsAxis, display_crs, native_crs, reverse_axis, shift_anchor
from projarray.errors import ConfigurationError
from projarray.types import Anchor, AxisOrder, Intervals, Irregular, Points, Regular, Unknown


class TestCrsAxis:
    """Test the CrsAxis value object."""

    def test_defaults(self):
        axis = CrsAxis()

        assert axis.order is AxisOrder.ASCENDING
        assert axis.span == Unknown()
        assert axis.sampling == Points()
        assert axis.native_crs is None
        assert axis.display_crs is None
        assert axis.step is None
        assert not axis.reprojects

    def test_accessors(self):
        axis = CrsAxis(native_crs="EPSG:3857", display_crs="EPSG:4326")

        assert native_crs(axis) == "EPSG:3857"
        assert display_crs(axis) == "EPSG:4326"
        assert axis.reprojects

    def test_display_crs_requires_native_crs(self):
        with pytest.raises(ConfigurationError, match="native_crs is unknown"):
            CrsAxis(display_crs="EPSG:4326")

    def test_native_crs_alone_is_valid(self):
        axis = CrsAxis(native_crs="EPSG:27700")

        assert axis.native_crs == "EPSG:27700"
        assert axis.display_crs is None

    def test_with_overrides_returns_new_axis(self):
        axis = CrsAxis(span=Regular(step=0.5), sampling=Intervals(), native_crs="EPSG:4326")
        updated = axis.with_overrides(
            display_crs="EPSG:3857", order=AxisOrder.DESCENDING, span=Regular(step=-0.5)
        )

        assert updated is not axis
        assert updated.display_crs == "EPSG:3857"
        assert updated.order is AxisOrder.DESCENDING
        assert updated.span == Regular(step=-0.5)
        assert updated.sampling == Intervals()
        # the original is untouched
        assert axis.display_crs is None
        assert axis.order is AxisOrder.ASCENDING

    def test_with_overrides_revalidates(self):
        axis = CrsAxis(native_crs="EPSG:4326", display_crs="EPSG:3857")

        with pytest.raises(ConfigurationError):
            axis.with_overrides(native_crs=None)

    def test_order_must_follow_step_sign(self):
        with pytest.raises(ConfigurationError, match="disagrees"):
            CrsAxis(span=Regular(step=-0.5), sampling=Intervals())
        with pytest.raises(ConfigurationError, match="disagrees"):
            CrsAxis(order=AxisOrder.DESCENDING, span=Regular(step=0.5))

    def test_with_overrides_checks_step_direction(self):
        axis = CrsAxis(span=Regular(step=0.5), native_crs="EPSG:4326")

        with pytest.raises(ConfigurationError):
            axis.with_overrides(order=AxisOrder.DESCENDING)

    def test_order_is_free_without_regular_step(self):
        assert CrsAxis(order=AxisOrder.DESCENDING, span=Irregular()).order is AxisOrder.DESCENDING

    def test_with_overrides_rejects_unknown_fields(self):
        with pytest.raises(TypeError, match="usercrs"):
            CrsAxis().with_overrides(usercrs="EPSG:4326")

    def test_axis_is_hashable_and_compares_by_value(self):
        first = CrsAxis(span=Regular(step=1.0), native_crs="EPSG:4326")
        second = CrsAxis(span=Regular(step=1.0), native_crs="EPSG:4326")

        assert first == second
        assert hash(first) == hash(second)

    def test_properties(self):
        axis = CrsAxis(
            order=AxisOrder.DESCENDING, span=Regular(step=-0.5), sampling=Intervals(anchor=Anchor.CENTER)
        )

        assert axis.step == -0.5
        assert axis.is_intervals
        assert axis.anchor is Anchor.CENTER


class TestShiftAnchor:
    """Test moving interval coordinates between anchors."""

    def test_start_to_center(self):
        axis = CrsAxis(span=Regular(step=0.5), sampling=Intervals(anchor=Anchor.START))
        values, shifted = shift_anchor([10.0, 10.5], axis, Anchor.CENTER)

        np.testing.assert_allclose(values, [10.25, 10.75])
        assert shifted.anchor is Anchor.CENTER

    def test_center_to_start_descending(self):
        axis = CrsAxis(
            order=AxisOrder.DESCENDING,
            span=Regular(step=-0.5),
            sampling=Intervals(anchor=Anchor.CENTER),
        )
        values, shifted = shift_anchor([49.75, 49.25], axis, Anchor.START)

        np.testing.assert_allclose(values, [50.0, 49.5])
        assert shifted.anchor is Anchor.START

    def test_round_trip(self):
        axis = CrsAxis(span=Regular(step=2.0), sampling=Intervals(anchor=Anchor.END))
        original = np.array([2.0, 4.0, 6.0])

        centred, centre_axis = shift_anchor(original, axis, Anchor.CENTER)
        restored, restored_axis = shift_anchor(centred, centre_axis, Anchor.END)

        np.testing.assert_allclose(restored, original)
        assert restored_axis == axis

    def test_points_are_unchanged(self):
        axis = CrsAxis(span=Regular(step=1.0), sampling=Points())
        values, same = shift_anchor([1.0, 2.0], axis, Anchor.CENTER)

        np.testing.assert_array_equal(values, [1.0, 2.0])
        assert same is axis

    def test_irregular_intervals_cannot_shift(self):
        axis = CrsAxis(span=Irregular(), sampling=Intervals())

        with pytest.raises(ConfigurationError, match="irregular"):
            shift_anchor([1.0, 2.0, 4.0], axis, Anchor.CENTER)


class TestReverseAxis:
    """Test reversing an axis and its coordinates."""

    def test_reverse_flips_order_step_and_anchor(self):
        axis = CrsAxis(span=Regular(step=0.5), sampling=Intervals(anchor=Anchor.START))
        values, reversed_axis = reverse_axis([48.5, 49.0, 49.5], axis)

        np.testing.assert_array_equal(values, [49.5, 49.0, 48.5])
        assert reversed_axis.order is AxisOrder.DESCENDING
        assert reversed_axis.step == -0.5
        assert reversed_axis.anchor is Anchor.END

    def test_reversed_cells_match_original_cells(self):
        axis = CrsAxis(span=Regular(step=0.5), sampling=Intervals(anchor=Anchor.START))
        values, reversed_axis = reverse_axis([48.5, 49.0], axis)

        starts, _ = shift_anchor(values, reversed_axis, Anchor.START)
        # the last ascending cell [49.0, 49.5) now comes first, starting at its top edge
        np.testing.assert_allclose(starts, [49.5, 49.0])

    def test_center_anchor_is_kept(self):
        axis = CrsAxis(span=Regular(step=1.0), sampling=Intervals(anchor=Anchor.CENTER))
        _, reversed_axis = reverse_axis([0.5, 1.5], axis)

        assert reversed_axis.anchor is Anchor.CENTER
