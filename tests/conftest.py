"""Shared test fixtures for eagle2geda tests."""
import os
import sys

import pytest

# Import the package from the source tree without installing it
_root_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, os.path.join(_root_dir, "src"))


def eagle_document(body: str) -> bytes:
    """Wrap element content in a minimal Eagle document."""
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<!DOCTYPE eagle SYSTEM "eagle.dtd">\n'
        '<eagle version="9.6.2">\n'
        "<drawing>\n"
        f"{body}\n"
        "</drawing>\n"
        "</eagle>\n"
    ).encode("utf-8")


@pytest.fixture
def single_wire_brd() -> bytes:
    """One board wire in mil: 0,0 to 10,0, width 10, layer 1."""
    return eagle_document('<board>\n<wire x1="0" y1="0" x2="10" y2="0" width="10" layer="1"/>\n</board>')


@pytest.fixture
def two_packages_brd() -> bytes:
    return eagle_document(
        "<packages>\n"
        '<package name="FIRST">\n<text x="0" y="0" size="50" layer="25">alpha</text>\n</package>\n'
        '<package name="SECOND">\n<text x="0" y="0" size="50" layer="25">beta</text>\n</package>\n'
        "</packages>"
    )


@pytest.fixture
def full_board_brd() -> bytes:
    """A small but complete board in mil exercising every supported element."""
    return eagle_document(
        """<settings>
<setting alwaysvectorfont="no"/>
</settings>
<grid distance="0.1" unitdist="inch" unit="inch"/>
<layers>
<layer number="1" name="Top" color="4" fill="1" visible="yes" active="yes"/>
<layer number="16" name="Bottom" color="1" fill="1" visible="yes" active="yes"/>
<layer number="20" name="Dimension" color="15" fill="1" visible="yes" active="yes"/>
<layer number="21" name="tPlace" color="7" fill="1" visible="yes" active="yes"/>
</layers>
<board>
<description>A test board</description>
<plain>
<wire x1="0" y1="0" x2="1000" y2="0" width="10" layer="20"/>
<wire x1="0" y1="0" x2="10" y2="0" width="10" layer="21" curve="90"/>
<text x="100" y="200" size="50" layer="21">HELLO</text>
<circle x="500" y="500" radius="100" width="8" layer="21"/>
<rectangle x1="10" y1="20" x2="30" y2="40" layer="1"/>
<hole x="50" y="60" drill="125"/>
</plain>
<libraries>
<library name="rcl">
<description>Resistors, capacitors</description>
<packages>
<package name="R0805">
<description language="en">Chip resistor</description>
<description language="de">Chipwiderstand</description>
<wire x1="-10" y1="0" x2="10" y2="0" width="5" layer="21"/>
<smd name="1" x="-40" y="0" dx="40" dy="20" layer="1"/>
<smd name="2" x="40" y="0" dx="40" dy="20" layer="1" roundness="100"/>
<text x="0" y="50" size="50" layer="25">&gt;NAME</text>
<rectangle x1="-5" y1="-5" x2="5" y2="5" layer="51"/>
</package>
<package name="DIL2">
<pad name="1" x="0" y="0" drill="30" diameter="60" shape="square"/>
<pad name="2" x="100" y="0" drill="30" shape="octagon"/>
<circle x="50" y="0" radius="20" width="5" layer="21"/>
<hole x="50" y="50" drill="20"/>
</package>
</packages>
<packages3d>
<package3d name="R0805" urn="urn:adsk.eagle:package:1">
<packageinstances><packageinstance name="R0805"/></packageinstances>
</package3d>
</packages3d>
</library>
</libraries>
<elements>
<element name="R1" library="rcl" package="R0805" value="10k" x="200" y="200"/>
</elements>
<signals>
<signal name="GND">
<wire x1="0" y1="100" x2="200" y2="100" width="12" layer="16"/>
<via x="200" y="100" extent="1-16" drill="20"/>
</signal>
</signals>
</board>"""
    )
