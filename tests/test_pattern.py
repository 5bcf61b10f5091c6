"""Tests for the land pattern data model."""

import json

import pytest

from padgen.pads import DShapePad, ThermalTab
from padgen.pattern import (
    MaskStateOption,
    PackageType,
    Pad,
    PadProperties,
    PadStack,
    PatternGeometry,
    PatternGeometryType,
    PinModification,
    TerminalShape,
    new_qfn_pattern,
    pad_stack_from_dshape,
    pad_stack_from_thermal_tab,
    renumber_pins,
)


class TestEnums:
    """Tests for enum values."""

    def test_geometry_type_values(self):
        """Geometry kinds keep their numeric codes."""
        assert PatternGeometryType.LINE.value == 1
        assert PatternGeometryType.POLYGON.value == 9

    def test_terminal_shape_values(self):
        """Terminal shapes use single-letter codes."""
        assert TerminalShape.DSHAPE.value == "d"
        assert TerminalShape.OBLONG.value == "b"


class TestNewQfnPattern:
    """Tests for new_qfn_pattern()."""

    def test_defaults(self):
        """The default QFN pattern is a 5 x 5 mm, 28 pin package."""
        pattern = new_qfn_pattern()
        assert pattern.name == "Untitled"
        assert pattern.ref_des == "U"
        assert pattern.package_type == PackageType.QFN
        assert pattern.props.body_length == 5
        assert pattern.props.body_width == 5
        assert pattern.props.term_length == pytest.approx(0.55)
        assert pattern.props.term_width == pytest.approx(0.24)
        assert pattern.props.term_shape == TerminalShape.DSHAPE
        assert pattern.props.pitch == pytest.approx(0.5)
        assert pattern.props.pin_count == 28
        assert pattern.props.jt == pytest.approx(0.4)
        assert pattern.props.jh == pytest.approx(0.05)
        assert pattern.props.js == 0
        assert pattern.pads == []
        assert pattern.pad_templates == []

    def test_named(self):
        """A string name is used as given."""
        assert new_qfn_pattern("QFN-28_5x5").name == "QFN-28_5x5"

    @pytest.mark.parametrize("name", [None, 42, ["x"]])
    def test_non_string_name(self, name):
        """Anything that is not a string gives 'Untitled'."""
        assert new_qfn_pattern(name).name == "Untitled"

    def test_patterns_independent(self):
        """Each call returns fresh lists."""
        a = new_qfn_pattern()
        b = new_qfn_pattern()
        a.pads.append(Pad(pin_number=1))
        assert b.pads == []

    def test_to_dict_json_serialisable(self):
        """to_dict output survives a JSON round trip."""
        data = new_qfn_pattern("P").to_dict()
        assert json.loads(json.dumps(data)) == data
        assert data["refDes"] == "U"
        assert data["props"]["termShape"] == "d"
        assert data["props"]["JT"] == pytest.approx(0.4)


class TestRenumberPins:
    """Tests for renumber_pins()."""

    def test_consecutive(self):
        """Pads are numbered in list order."""
        pattern = new_qfn_pattern()
        pattern.pads = [Pad(pin_number=n) for n in (7, 3, 9)]
        renumber_pins(pattern)
        assert [p.pin_number for p in pattern.pads] == [1, 2, 3]

    def test_start(self):
        """Numbering starts at the given value."""
        pattern = new_qfn_pattern()
        pattern.pads = [Pad(pin_number=0), Pad(pin_number=0)]
        renumber_pins(pattern, start=10)
        assert [p.pin_number for p in pattern.pads] == [10, 11]

    def test_skips_deleted(self):
        """Deleted pads keep their number and are skipped."""
        pattern = new_qfn_pattern()
        pattern.pads = [
            Pad(pin_number=5),
            Pad(pin_number=99, pin_mod=PinModification.DELETED),
            Pad(pin_number=6, pin_mod=PinModification.HIDDEN),
        ]
        result = renumber_pins(pattern)
        assert result is pattern
        assert [p.pin_number for p in pattern.pads] == [1, 99, 2]


class TestPadTemplates:
    """Tests for pad template management."""

    def test_uids_increment(self):
        """Templates get consecutive uids."""
        pattern = new_qfn_pattern()
        first = pattern.add_pad_template("Terminal")
        second = pattern.add_pad_template("Thermal", TerminalShape.RECT)
        assert (first.uid, second.uid) == (1, 2)
        assert pattern.get_pad_template(2) is second
        assert pattern.get_pad_template(3) is None

    def test_default_properties(self):
        """Templates default to common mask and paste states."""
        template = new_qfn_pattern().add_pad_template("T")
        assert template.props.top_mask_state == MaskStateOption.COMMON
        assert template.props.mask_swell == "auto"
        assert template.pad_stack.is_empty()

    def test_pad_properties_to_dict(self):
        """Pad properties use camelCase keys."""
        data = PadProperties(pad_width=0.3, mask_swell=0.05).to_dict()
        assert data["padWidth"] == pytest.approx(0.3)
        assert data["maskSwell"] == pytest.approx(0.05)
        assert data["topPasteState"] == "common"


class TestPadStacks:
    """Tests for pad stacks built from generators."""

    def test_empty_stack(self):
        """A new stack has all twelve layers, empty."""
        data = PadStack().to_dict()
        assert len(data) == 12
        assert all(layer == [] for layer in data.values())

    def test_from_dshape(self):
        """A D-shape pad fills copper, mask and paste with one polygon each."""
        pad = DShapePad()
        stack = pad_stack_from_dshape(pad)
        assert len(stack.top) == len(stack.top_mask) == len(stack.top_paste) == 1
        assert stack.top[0].type == PatternGeometryType.POLYGON
        assert stack.top[0].data["points"] == list(pad.pad)
        assert stack.bottom == []

    def test_from_thermal_tab(self):
        """A thermal tab contributes every mask and paste contour."""
        tab = ThermalTab({"viaTenting": True})
        stack = pad_stack_from_thermal_tab(tab)
        assert len(stack.top) == 1
        assert len(stack.top_mask) == len(tab.solder_masks)
        assert len(stack.top_paste) == len(tab.paste_masks)
        assert stack.top[0].data["points"] == pytest.approx(
            [1.575, 1.575, 1.575, -1.575, -1.575, -1.575, -1.575, 1.575]
        )

    def test_geometry_to_dict(self):
        """Geometry serialises with a lower-case type name."""
        geom = PatternGeometry(PatternGeometryType.RECT, {"width": 1})
        assert geom.to_dict() == {"type": "rect", "data": {"width": 1}}

    def test_template_with_generated_stack(self):
        """A generated stack can back a pad template."""
        pattern = new_qfn_pattern()
        stack = pad_stack_from_dshape(DShapePad())
        template = pattern.add_pad_template("D", pad_stack=stack)
        pattern.pads.append(Pad(pin_number=1, use_template=template.uid))
        data = pattern.to_dict()
        assert data["pads"][0]["useTemplate"] == 1
        assert len(data["padTemplates"][0]["padStack"]["top"]) == 1
