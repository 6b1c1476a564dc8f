"""Tests for the MCP tool implementations and file output."""

import pytest

from termanim import timings
from termanim.config import config_from_dict
from termanim.server import _compile_animation, _describe_timeline, write_outputs

OVERLAPPING = {
    "steps": [
        {
            "terminalLines": ["a"],
            "command": "whois",
            "timing": {"start": 2, "perChar": 0.3, "hold": 4},
        },
        {
            "terminalLines": ["b"],
            "command": "clear",
            "timing": {"start": 6, "perChar": 0.2, "hold": 3},
        },
    ],
}


# ─────────────────────────────────────────────────────────────────────────────
# Tool implementations
# ─────────────────────────────────────────────────────────────────────────────


class TestCompileAnimation:
    """Tests for the compile_animation tool body."""

    def test_returns_markup(self):
        result = _compile_animation(OVERLAPPING, "demo")
        assert result["svg"].startswith("<?xml")
        assert '<img src="demo.svg"' in result["html"]
        assert result["total_duration"] == pytest.approx(12.5)

    def test_force_loop(self):
        result = _compile_animation(OVERLAPPING, force_loop=True)
        assert "infinite" in result["svg"]
        assert result["total_duration"] == pytest.approx(14.0)

    def test_empty_steps_is_error(self):
        result = _compile_animation({"steps": []})
        assert "error" in result
        assert "svg" not in result

    def test_bad_config_is_error(self):
        result = _compile_animation({"steps": [{"timing": {"perChar": "x"}}]})
        assert "steps[0].timing.perChar" in result["error"]


class TestDescribeTimeline:
    """Tests for the describe_timeline tool body."""

    def test_overlap_resolved(self):
        result = _describe_timeline(OVERLAPPING)
        first, second = result["steps"]
        assert first["start"] == 2
        assert first["end"] == pytest.approx(7.5)
        assert second["requested_start"] == 6
        assert second["start"] == pytest.approx(8.0)
        assert result["loop"] is False

    def test_error(self):
        assert "error" in _describe_timeline({"steps": [{"timing": {"hold": -1}}]})


def test_timings_table():
    table = timings.as_dict()
    assert table["step_transition"] == 0.5
    assert table["loop_extra_time"] > table["non_loop_extra_time"]


# ─────────────────────────────────────────────────────────────────────────────
# File output
# ─────────────────────────────────────────────────────────────────────────────


class TestWriteOutputs:
    """Tests for writing SVG / HTML files."""

    def test_default_types(self, tmp_path):
        config = config_from_dict({**OVERLAPPING, "name": "demo"})
        written = write_outputs(config, tmp_path)
        assert sorted(p.name for p in written) == ["demo.html", "demo.svg"]
        assert (tmp_path / "demo.svg").read_text().startswith("<?xml")

    def test_linked_html_brings_svg(self, tmp_path):
        config = config_from_dict({**OVERLAPPING, "name": "demo", "outputTypes": ["html"]})
        write_outputs(config, tmp_path)
        assert (tmp_path / "demo.html").exists()
        assert (tmp_path / "demo.svg").exists()

    def test_embedded_html_only(self, tmp_path):
        config = config_from_dict(
            {**OVERLAPPING, "name": "demo", "outputTypes": ["html"], "embed": True}
        )
        written = write_outputs(config, tmp_path / "out")
        assert [p.name for p in written] == ["demo.html"]
        assert not (tmp_path / "out" / "demo.svg").exists()
        assert "<svg" in (tmp_path / "out" / "demo.html").read_text()

    def test_svg_only(self, tmp_path):
        config = config_from_dict({**OVERLAPPING, "name": "demo", "outputTypes": ["svg"]})
        written = write_outputs(config, tmp_path)
        assert [p.name for p in written] == ["demo.svg"]
