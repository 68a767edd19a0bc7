"""Tests for geda/pcb_writer.py - gEDA pcb record generation."""
import pytest

from eagle2geda.config import load_config
from eagle2geda.eagle.reader import read_board
from eagle2geda.geda._format import escape_string, fmt_angle, quote
from eagle2geda.geda.pcb_writer import PcbWriter, wire_to_arc, write_pcb
from eagle2geda.geda.version import file_version_line, flags_line, groups_line, thermal_line

from conftest import eagle_document


def _pcb(doc: bytes, unit="mil", **overrides) -> str:
    config = load_config()
    config.update(overrides)
    return write_pcb(read_board(doc, unit=unit), config)


def _records(output: str, prefix: str):
    return [line.strip() for line in output.splitlines() if line.strip().startswith(prefix)]


class TestFormat:
    def test_fmt_angle(self):
        assert fmt_angle(90.0) == "90"
        assert fmt_angle(-45.5) == "-45.5"
        assert fmt_angle(12.3456789) == "12.345679"

    def test_escape(self):
        assert escape_string('a "b" \\c') == 'a \\"b\\" \\\\c'
        assert quote("x\ny") == '"x y"'


class TestHeader:
    def test_header_order(self, single_wire_brd):
        lines = _pcb(single_wire_brd).splitlines()
        assert lines[0] == "# Output generated from Eagle .brd file automatically by eagle2geda."
        body = [line for line in lines if line and not line.startswith("#")]
        assert body[:5] == [
            "FileVersion[20070407]",
            'PCB["eagle2geda" 100000 100000]',
            "Thermal[0.500000]",
            'Flags("nameonpcb,uniquename,clearnew,snappin")',
            'Groups("1,c:2:3:4:5:6,s:7:8")',
        ]

    def test_version_helpers(self):
        assert file_version_line() == "FileVersion[20070407]"
        assert thermal_line() == "Thermal[0.500000]"
        assert flags_line() == 'Flags("nameonpcb,uniquename,clearnew,snappin")'
        assert groups_line() == 'Groups("1,c:2:3:4:5:6,s:7:8")'

    def test_board_name(self, single_wire_brd):
        assert 'PCB["My \\"Board\\"" ' in _pcb(single_wire_brd, board_name='My "Board"')

    def test_size_grows_with_geometry(self):
        doc = eagle_document('<board><wire x1="0" y1="0" x2="2000" y2="1500" width="10" layer="20"/></board>')
        # 200000 + 5mm margin, 150000 + 5mm margin
        assert 'PCB["eagle2geda" 219685 169685]' in _pcb(doc)

    def test_ends_with_newline(self, single_wire_brd):
        assert _pcb(single_wire_brd).endswith(")\n")


class TestBoardRecords:
    def test_single_wire_line(self, single_wire_brd):
        output = _pcb(single_wire_brd)
        assert _records(output, "Line[") == ['Line[0 0 1000 0 1000 2000 "clearline"]']
        assert 'Layer(1 "layer1")' in output

    def test_unknown_attribute_does_not_change_record(self, single_wire_brd):
        with_cap = eagle_document('<board>\n<wire x1="0" y1="0" x2="10" y2="0" width="10" layer="1" cap="flat"/>\n</board>')
        assert _pcb(with_cap) == _pcb(single_wire_brd)

    def test_layers_ascending_with_names(self, full_board_brd):
        output = _pcb(full_board_brd)
        layers = _records(output, "Layer(")
        assert layers == ['Layer(1 "Top")', 'Layer(16 "Bottom")', 'Layer(20 "Dimension")', 'Layer(21 "tPlace")']

    def test_curved_wire_becomes_arc(self, full_board_brd):
        output = _pcb(full_board_brd)
        assert 'Arc[500 500 707 707 1000 2000 315 -90 "clearline"]' in output

    def test_circle_arc(self, full_board_brd):
        assert 'Arc[50000 50000 10000 10000 800 2000 0 360 "clearline"]' in _pcb(full_board_brd)

    def test_text(self, full_board_brd):
        assert 'Text[10000 20000 0 83 "HELLO" "clearline"]' in _pcb(full_board_brd)

    def test_rectangle_polygon(self, full_board_brd):
        output = _pcb(full_board_brd)
        assert 'Polygon("clearpoly")' in output
        assert "[1000 2000] [3000 2000] [3000 4000] [1000 4000]" in output

    def test_hole_and_via(self, full_board_brd):
        vias = _records(_pcb(full_board_brd), "Via[")
        assert vias == [
            'Via[5000 6000 12500 2000 13100 12500 "" "hole"]',
            'Via[20000 10000 4000 2000 4600 2000 "" ""]',
        ]

    def test_via_settings(self, full_board_brd):
        vias = _records(_pcb(full_board_brd, clearance_centimils=1000, mask_centimils=0, via_annulus_centimils=500), "Via[")
        assert vias[1] == 'Via[20000 10000 3000 1000 3000 2000 "" ""]'

    def test_signal_wire_on_bottom(self, full_board_brd):
        assert 'Line[0 10000 20000 10000 1200 2000 "clearline"]' in _pcb(full_board_brd)

    def test_deterministic(self, full_board_brd):
        assert _pcb(full_board_brd) == _pcb(full_board_brd)


class TestElements:
    def test_two_packages_in_order(self, two_packages_brd):
        output = _pcb(two_packages_brd)
        assert _records(output, "Element[") == [
            'Element["" "FIRST" "" "" 0 0 0 0 0 83 ""]',
            'Element["" "SECOND" "" "" 0 0 0 0 0 83 ""]',
        ]
        texts = _records(output, 'Attribute("text"')
        assert texts == ['Attribute("text" "alpha")', 'Attribute("text" "beta")']
        assert output.index('"alpha"') < output.index('"beta"')

    def test_smd_package(self, full_board_brd):
        output = _pcb(full_board_brd)
        assert 'Element["" "R0805" "" "" 0 0 0 5000 0 83 ""]' in output
        assert 'Attribute("description" "Chip resistor")' in output
        assert "Chipwiderstand" not in output
        assert _records(output, "Pad[") == [
            'Pad[-5000 0 -3000 0 2000 2000 2600 "1" "1" "square"]',
            'Pad[3000 0 5000 0 2000 2000 2600 "2" "2" ""]',
        ]
        assert "ElementLine [-1000 0 1000 0 500]" in output

    def test_rectangle_outline(self, full_board_brd):
        lines = _records(_pcb(full_board_brd), "ElementLine [")
        assert "ElementLine [-500 -500 500 -500 1000]" in lines
        assert "ElementLine [-500 500 -500 -500 1000]" in lines

    def test_through_hole_package(self, full_board_brd):
        pins = _records(_pcb(full_board_brd), "Pin[")
        assert pins == [
            'Pin[5000 5000 2000 2000 2600 2000 "" "" "hole"]',
            'Pin[0 0 6000 2000 6600 3000 "1" "1" "square"]',
            'Pin[10000 0 5000 2000 5600 3000 "2" "2" "octagon"]',
        ]

    def test_element_arc(self, full_board_brd):
        assert "ElementArc [5000 0 2000 2000 0 360 500]" in _pcb(full_board_brd)

    def test_packages_do_not_reach_layers(self, two_packages_brd):
        assert "Layer(" not in _pcb(two_packages_brd)


class TestWireToArc:
    def test_quarter_turn(self):
        cx, cy, radius, start, delta = wire_to_arc(0, 0, 1000, 0, 90)
        assert cx == pytest.approx(500)
        assert cy == pytest.approx(500)
        assert radius == pytest.approx(707.10678, rel=1e-6)
        assert start == pytest.approx(315)
        assert delta == -90

    def test_negative_curve_bends_other_way(self):
        cx, cy, radius, start, delta = wire_to_arc(0, 0, 1000, 0, -90)
        assert cy == pytest.approx(-500)
        assert start == pytest.approx(45)
        assert delta == 90

    def test_half_circle(self):
        cx, cy, radius, start, delta = wire_to_arc(0, 0, 1000, 0, 180)
        assert (cx, radius) == (pytest.approx(500), pytest.approx(500))
        assert cy == pytest.approx(0, abs=1e-6)
        assert start % 360 == pytest.approx(0, abs=1e-6)

    def test_writer_defaults(self):
        writer = PcbWriter()
        assert writer.clearance == 2000
        assert writer.min_size == 100000
