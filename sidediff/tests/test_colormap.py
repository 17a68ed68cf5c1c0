# sidediff/tests/test_colormap.py
"""Tests for the named color map."""

import pytest

from ..colormap import DEFAULT_COLOR_MAP, FIELDS, ColorMap
from ..errors import ConfigValidationError


class TestColorMap:
    """Tests for ColorMap."""

    def test_eighteen_fields(self):
        assert len(FIELDS) == 18
        assert set(DEFAULT_COLOR_MAP) == set(FIELDS)

    def test_colorize_wraps_in_sgr(self):
        cm = ColorMap({"OTEXT": "red"}, color_system="standard")
        colored = cm.colorize("OTEXT", "removed")
        assert colored.startswith("\x1b[")
        assert "removed" in colored
        assert colored.endswith("\x1b[0m")

    def test_disabled_map_is_plain(self):
        cm = ColorMap(enabled=False)
        assert cm.colorize("OTEXT", "removed") == "removed"
        assert ColorMap.plain().colorize("NMARK", "+") == "+"

    def test_empty_style_is_plain(self):
        cm = ColorMap()
        assert cm.colorize("UTEXT", "same") == "same"

    def test_update_multiple_fields(self):
        cm = ColorMap()
        cm.update(["OTEXT,NTEXT=bold", "MTEXT=blue"])
        assert cm.get("OTEXT") == "bold"
        assert cm.get("NTEXT") == "bold"
        assert cm.get("MTEXT") == "blue"

    def test_update_rejects_unknown_field(self):
        cm = ColorMap()
        with pytest.raises(ConfigValidationError) as exc_info:
            cm.update(["XTEXT=red"])
        assert "XTEXT" in str(exc_info.value)

    def test_update_rejects_missing_equals(self):
        with pytest.raises(ConfigValidationError):
            ColorMap().update(["OTEXT"])

    def test_invalid_style_rejected(self):
        with pytest.raises(ConfigValidationError):
            ColorMap().set("OTEXT", "bold notacolor")

    def test_unknown_color_system(self):
        with pytest.raises(ConfigValidationError):
            ColorMap(color_system="cga")

    def test_field_for_changed(self):
        assert ColorMap().field_for("N", "TEXT", changed=True) == "NTEXT"

    def test_field_for_unchanged_uses_u_field(self):
        assert ColorMap().field_for("O", "LINE", changed=False) == "ULINE"

    def test_field_for_falls_back_to_side(self):
        cm = ColorMap()
        cm.unset("UMARK")
        assert "UMARK" not in cm
        assert cm.field_for("M", "MARK", changed=False) == "MMARK"

    def test_to_dict(self):
        cm = ColorMap({"OTEXT": "red"})
        assert cm.to_dict() == {"OTEXT": "red"}
