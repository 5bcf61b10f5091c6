"""Tests for the thermal tab generator."""

import math

import pytest

from padgen.geometry import area
from padgen.pads import ThermalTab, ViaLayout

# Pad where dense packing cannot keep the grid margin: 5 x 5 vias, dense tiles
DENSE_PROPS = {"padLength": 4.5, "padWidth": 4.5}

# Dense tab whose pad edge cuts into the outer via keep-outs
DENSE_CUT_PROPS = {"padLength": 4.5, "padWidth": 4.5, "pasteShrink": 0.3}


class TestViaLayout:
    """Tests for the ViaLayout enum."""

    def test_from_string(self):
        """Layout names parse case-insensitively."""
        assert ViaLayout.from_string("dense") == ViaLayout.DENSE
        assert ViaLayout.from_string(" GRID ") == ViaLayout.GRID

    def test_from_string_invalid(self):
        """Unknown names and non-strings give None."""
        assert ViaLayout.from_string("none") is None
        assert ViaLayout.from_string(2) is None


class TestThermalTabProps:
    """Tests for property validation."""

    def test_defaults(self):
        """A new tab carries the default properties."""
        props = ThermalTab().get_props()
        assert props["padLength"] == pytest.approx(3.15)
        assert props["padWidth"] == pytest.approx(3.15)
        assert props["viaPitchH"] == pytest.approx(1.0)
        assert props["viaPitchV"] == pytest.approx(1.0)
        assert props["viaRingWidth"] == pytest.approx(0.08)
        assert props["viaDiameter"] == pytest.approx(0.3)
        assert props["maskSwell"] == pytest.approx(0.08)
        assert props["pasteShrink"] == pytest.approx(0.08)
        assert props["pasteSpacing"] == pytest.approx(0.25)
        assert props["viaTenting"] is False
        assert props["viaLayout"] == "dense"

    def test_via_diameter_clamped(self):
        """An oversized via diameter is clamped to the maximum."""
        tab = ThermalTab()
        tab.set_props({"viaDiameter": 999})
        assert tab.get_props()["viaDiameter"] == pytest.approx(0.5)

    def test_pad_size_clamped(self):
        """Pad sizes stay within [1, 100]."""
        props = ThermalTab({"padLength": 0.2, "padWidth": 500}).get_props()
        assert props["padLength"] == pytest.approx(1.0)
        assert props["padWidth"] == pytest.approx(100.0)

    def test_absent_keys_keep_values(self):
        """Keys missing from the bag keep their stored value."""
        tab = ThermalTab({"padLength": 4.1})
        tab.set_props({"maskSwell": 0.05})
        assert tab.get_props()["padLength"] == pytest.approx(4.1)
        assert tab.get_props()["maskSwell"] == pytest.approx(0.05)

    def test_non_numeric_ignored(self):
        """Unparsable values keep the previous value."""
        props = ThermalTab({"padLength": "wide", "viaDiameter": [1]}).get_props()
        assert props["padLength"] == pytest.approx(3.15)
        assert props["viaDiameter"] == pytest.approx(0.3)

    def test_paste_spacing_clamped_to_runtime_max(self):
        """Paste spacing is limited by the via keep-out."""
        tab = ThermalTab({"pasteSpacing": 5})
        assert tab.get_props()["pasteSpacing"] == pytest.approx(tab.layout.max_paste_spacing)
        assert tab.layout.max_paste_spacing == pytest.approx(0.31)

    def test_paste_spacing_snapped(self):
        """Paste spacing is snapped to 0.01mm."""
        assert ThermalTab({"pasteSpacing": 0.123}).get_props()["pasteSpacing"] == pytest.approx(
            0.12
        )

    @pytest.mark.parametrize("pitch", [0.1, 0.33, 0.77, 1.26, 1.5])
    def test_pitch_rules(self, pitch):
        """Pitch is a multiple of 0.1 and never below the minimum pitch."""
        tab = ThermalTab({"viaPitchH": pitch, "viaPitchV": pitch})
        for key in ("viaPitchH", "viaPitchV"):
            value = tab.get_props()[key]
            assert value >= tab.layout.min_via_pitch
            assert value * 10 == pytest.approx(round(value * 10))

    def test_pitch_raised_to_minimum(self):
        """A pitch below the minimum is raised to it."""
        tab = ThermalTab({"viaPitchH": 0.3})
        assert tab.layout.min_via_pitch == pytest.approx(0.5)
        assert tab.get_props()["viaPitchH"] == pytest.approx(0.5)

    @pytest.mark.parametrize("value,expected", [("grid", "grid"), ("GRID", "grid"), ("dense", "dense")])
    def test_via_layout(self, value, expected):
        """viaLayout accepts dense or grid."""
        assert ThermalTab({"viaLayout": value}).get_props()["viaLayout"] == expected

    @pytest.mark.parametrize("value", ["none", "", 3, None])
    def test_via_layout_unknown_ignored(self, value):
        """Unknown layout values keep the previous layout."""
        tab = ThermalTab({"viaLayout": "grid"})
        tab.set_props({"viaLayout": value})
        assert tab.get_props()["viaLayout"] == "grid"

    @pytest.mark.parametrize("value", [True, 1, "true", "yes", "1", "on"])
    def test_tenting_truthy(self, value):
        """viaTenting accepts booleans, numbers and strings."""
        assert ThermalTab({"viaTenting": value}).get_props()["viaTenting"] is True

    def test_tenting_unrecognised(self):
        """An unrecognised tenting value is ignored."""
        tab = ThermalTab({"viaTenting": True})
        tab.set_props({"viaTenting": "maybe"})
        assert tab.get_props()["viaTenting"] is True

    def test_set_props_returns_props(self):
        """set_props returns the validated properties."""
        tab = ThermalTab()
        assert tab.set_props({"padWidth": 4}) == tab.get_props()

    def test_pad_raised_to_paste_margin(self):
        """A pad smaller than the paste margin is enlarged to fit one via."""
        tab = ThermalTab(
            {
                "padLength": 1,
                "padWidth": 1,
                "viaDiameter": 0.5,
                "viaRingWidth": 1,
                "viaTenting": True,
                "pasteShrink": 0.5,
            }
        )
        props = tab.get_props()
        assert props["padLength"] == pytest.approx(4.77)
        assert props["padLength"] >= tab.layout.paste_margin
        assert tab.layout.via_count == 1


class TestThermalTabLayout:
    """Tests for the derived via grid."""

    def test_default_layout(self):
        """The default tab downgrades to a 3 x 3 grid."""
        layout = ThermalTab().layout
        assert layout.effective_layout == ViaLayout.GRID
        assert (layout.col_count, layout.row_count) == (3, 3)
        assert layout.via_pos_x == pytest.approx(1.0)
        assert layout.via_pos_y == pytest.approx(1.0)
        assert layout.min_via_pitch == pytest.approx(0.5)

    def test_default_derived_values(self):
        """Margin follows from the keep-out geometry."""
        adj = math.sqrt(0.29**2 - 0.185**2)
        layout = ThermalTab().layout
        assert layout.paste_margin == pytest.approx(2 * (0.08 + 0.06 + 0.02 + adj))

    def test_grid_layout(self):
        """Grid counts keep the paste margin at the pad edge."""
        tab = ThermalTab({"padLength": 5, "padWidth": 3.15, "viaLayout": "grid"})
        layout = tab.layout
        assert layout.effective_layout == ViaLayout.GRID
        # 1 + floor((5 - 0.767) / 1) = 5
        assert layout.col_count == 5
        assert layout.row_count == 3
        assert layout.via_pos_x == pytest.approx(2.0)

    def test_dense_layout(self):
        """Dense packing is kept when it cannot leave the grid margin."""
        layout = ThermalTab(DENSE_PROPS).layout
        assert layout.effective_layout == ViaLayout.DENSE
        assert (layout.col_count, layout.row_count) == (5, 5)
        assert layout.via_pos_x == pytest.approx(2.0)

    def test_dense_falls_back_for_small_pads(self):
        """Fewer than three dense vias per axis falls back to grid."""
        tab = ThermalTab({"padLength": 1.5, "padWidth": 1.5})
        assert tab.get_props()["viaLayout"] == "dense"
        assert tab.layout.effective_layout == ViaLayout.GRID
        assert tab.layout.via_count == 1

    def test_counts_at_least_one(self):
        """Every pad holds at least one via."""
        tab = ThermalTab({"padLength": 1, "padWidth": 1, "viaLayout": "grid"})
        assert tab.layout.col_count >= 1
        assert tab.layout.row_count >= 1


class TestViaPositions:
    """Tests for get_via_positions()."""

    def test_default_positions(self):
        """Nine positions, column by column from the top-right via."""
        positions = ThermalTab().get_via_positions()
        assert len(positions) == 9
        assert positions[0] == pytest.approx((1.0, 1.0))
        assert positions[1] == pytest.approx((1.0, 0.0))
        assert positions[3] == pytest.approx((0.0, 1.0))
        assert positions[-1] == pytest.approx((-1.0, -1.0))

    @pytest.mark.parametrize("props", [{}, DENSE_PROPS, {"padLength": 6, "viaPitchH": 1.3}])
    def test_positions_centred(self, props):
        """Positions are cols x rows points symmetric about the origin."""
        tab = ThermalTab(props)
        positions = tab.get_via_positions()
        assert len(positions) == tab.layout.col_count * tab.layout.row_count
        assert sum(x for x, _ in positions) == pytest.approx(0.0, abs=1e-9)
        assert sum(y for _, y in positions) == pytest.approx(0.0, abs=1e-9)


class TestSolderMasks:
    """Tests for solder mask generation."""

    def test_untented_rectangle(self):
        """Without tenting the mask is the pad grown by the swell."""
        masks = ThermalTab().solder_masks
        assert len(masks) == 1
        assert masks[0] == pytest.approx(
            (1.655, 1.655, 1.655, -1.655, -1.655, -1.655, -1.655, 1.655)
        )

    def test_tented_contours(self):
        """Tenting splits the opening into one contour per gap between via rows."""
        tab = ThermalTab({"viaTenting": True})
        assert tab.layout.row_count == 3
        assert len(tab.solder_masks) == 4

    def test_tented_single_row(self):
        """A single via row gives a top and a bottom contour."""
        tab = ThermalTab({"viaTenting": True, "padWidth": 1.5, "viaLayout": "grid"})
        assert tab.layout.row_count == 1
        assert len(tab.solder_masks) == 2

    def test_tented_area_excludes_vias(self):
        """Tented openings leave mask over the vias."""
        tab = ThermalTab({"viaTenting": True})
        untented = ThermalTab({"viaTenting": False})
        tented_area = sum(area(m) for m in tab.solder_masks)
        assert tented_area < area(untented.solder_masks[0])

    def test_update_solder_masks_returns_list(self):
        """update_solder_masks returns the stored masks."""
        tab = ThermalTab()
        assert tab.update_solder_masks() is tab.solder_masks


class TestPasteMasks:
    """Tests for the paste mosaic."""

    def test_four_templates(self):
        """There are always four tile templates."""
        for props in ({}, DENSE_PROPS, {"viaLayout": "grid"}):
            assert len(ThermalTab(props).paste_mask_templates) == 4

    def test_default_tile_count(self):
        """A 3 x 3 grid has one tile per cell around the vias."""
        assert len(ThermalTab().paste_masks) == 16

    def test_dense_tile_count(self):
        """A 5 x 5 dense layout has one tile per cell between vias."""
        assert len(ThermalTab(DENSE_PROPS).paste_masks) == 16

    def test_single_via_tiles(self):
        """One via gives the four corner tiles."""
        assert len(ThermalTab({"padLength": 1.5, "padWidth": 1.5}).paste_masks) == 4

    @pytest.mark.parametrize("props", [{}, DENSE_PROPS, {"padLength": 6.2, "viaTenting": True}])
    def test_paste_area_matches_tiles(self, props):
        """The weighted template sum equals the sum over placed tiles."""
        tab = ThermalTab(props)
        tile_sum = sum(area(m) for m in tab.paste_masks)
        assert tab.get_paste_area() == pytest.approx(tile_sum, rel=1e-6)

    @pytest.mark.parametrize("props", [{}, DENSE_PROPS])
    def test_paste_inside_pad(self, props, polygon_bounds):
        """Paste stays inside the pad shrunk by paste_shrink."""
        tab = ThermalTab(props)
        p = tab.props
        min_x, min_y, max_x, max_y = polygon_bounds(tab.paste_masks)
        limit_x = p.pad_length / 2 - p.paste_shrink + 1e-6
        limit_y = p.pad_width / 2 - p.paste_shrink + 1e-6
        assert max_x <= limit_x and -min_x <= limit_x
        assert max_y <= limit_y and -min_y <= limit_y

    def test_update_idempotent(self):
        """update() regenerates identical outlines."""
        tab = ThermalTab(DENSE_PROPS)
        before = (list(tab.solder_masks), list(tab.paste_masks))
        tab.update()
        assert (tab.solder_masks, tab.paste_masks) == before


class TestCoverage:
    """Tests for coverage metrics."""

    def test_default_coverage(self):
        """Pad and SMD areas follow from the pad and via sizes."""
        cov = ThermalTab().get_coverage()
        assert cov.pad_area == pytest.approx(3.15 * 3.15)
        assert cov.smd_area == pytest.approx(3.15 * 3.15 - math.pi * 0.15**2 * 9)
        assert cov.paste_area == pytest.approx(ThermalTab().get_paste_area())

    def test_tented_smd_area_includes_ring(self):
        """Tented vias remove the ring from the solderable area."""
        cov = ThermalTab({"viaTenting": True}).get_coverage()
        assert cov.smd_area == pytest.approx(3.15 * 3.15 - math.pi * 0.23**2 * 9)

    @pytest.mark.parametrize("props", [{}, DENSE_PROPS, {"viaLayout": "grid", "padLength": 7}])
    def test_ratios_in_range(self, props):
        """Paste never exceeds the pad."""
        cov = ThermalTab(props).get_coverage()
        assert 0 < cov.paste_area <= cov.pad_area
        assert 0 < cov.paste_pad_ratio <= 1
        assert cov.paste_smd_ratio >= cov.paste_pad_ratio

    def test_to_dict(self):
        """to_dict uses camelCase keys."""
        data = ThermalTab().get_coverage().to_dict()
        assert set(data) == {"padArea", "smdArea", "pasteArea", "pastePadRatio", "pasteSmdRatio"}


class TestExtremes:
    """Outlines stay finite across the property ranges."""

    @pytest.mark.parametrize(
        "props",
        [
            DENSE_CUT_PROPS,
            {"pasteSpacing": 0},
            {"pasteSpacing": 1},
            {"pasteShrink": 0, "maskSwell": 0},
            {"viaDiameter": 0.1, "pasteShrink": 0, "viaPitchH": 0.1, "viaPitchV": 0.1},
            {"viaDiameter": 0.5, "viaRingWidth": 1, "viaTenting": True, "pasteShrink": 0.5},
            {"padLength": 1, "padWidth": 10, "viaTenting": True, "viaLayout": "dense"},
        ],
    )
    def test_no_nan(self, props):
        """No NaN or infinity in any output."""
        tab = ThermalTab(props)
        for seg in tab.solder_masks + tab.paste_masks + tab.paste_mask_templates:
            assert all(math.isfinite(v) for v in seg)
        cov = tab.get_coverage()
        assert all(math.isfinite(v) for v in cov.to_dict().values())

    def test_dense_cut_edge(self):
        """A pad edge inside the via keep-out still gives a dense mosaic."""
        tab = ThermalTab(DENSE_CUT_PROPS)
        assert tab.layout.effective_layout == ViaLayout.DENSE
        assert len(tab.paste_masks) == 16
