"""Tests for SVG / HTML assembly."""

import copy
from dataclasses import replace

import pytest

from termanim.document import (
    build_document,
    build_export_variant,
    escape,
    fmt,
    render_keyframes,
    render_rule,
)
from termanim.models import (
    AnimationRule,
    Config,
    Keyframe,
    KeyframeSpec,
    ShellPrompt,
    Step,
    Timing,
)


@pytest.fixture
def config():
    return Config(
        name="demo",
        steps=(
            Step(
                terminal_lines=("/PROJECTS", "deno-kit"),
                shell_prompt=ShellPrompt(user="zack", host="machine", symbol=":~$"),
                command="whois",
                timing=Timing(start=2, per_char=0.2, hold=2),
            ),
            Step(
                terminal_lines=("/LANGUAGES", "Go & <Rust>"),
                shell_prompt=ShellPrompt(user="zack", host="machine", symbol="$", path="~/src"),
                command="a<b",
                timing=Timing(start=6, per_char=0.2, hold=3),
            ),
        ),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Formatting helpers
# ─────────────────────────────────────────────────────────────────────────────


class TestFormatting:
    """Tests for number formatting and escaping."""

    def test_fmt_trims_zeros(self):
        assert fmt(100.0) == "100"
        assert fmt(12.5) == "12.5"
        assert fmt(12.34567) == "12.3457"
        assert fmt(0.0) == "0"
        assert fmt(-0.0) == "0"
        assert fmt(5400.000000000001) == "5400"

    def test_escape(self):
        assert escape('<a href="x">&') == "&lt;a href=&quot;x&quot;&gt;&amp;"

    def test_render_keyframes(self):
        spec = KeyframeSpec("k", (Keyframe(0.0, 0), Keyframe(12.5, 1), Keyframe(100.0, 1)))
        assert render_keyframes(spec) == (
            "@keyframes k {\n"
            "  0% { opacity: 0; }\n"
            "  12.5% { opacity: 1; }\n"
            "  100% { opacity: 1; }\n"
            "}"
        )

    def test_render_rule_looping(self):
        rule = AnimationRule(".line-0", "fade-0", 5400.000000000001)
        assert render_rule(rule) == ".line-0 { animation: fade-0 5400ms linear 0ms infinite; }"

    def test_render_rule_once(self):
        rule = AnimationRule(".cmd-0-1", "type-0-1", 9000, "steps(1, end)", "1",
                             fill_mode="forwards")
        assert render_rule(rule) == (
            ".cmd-0-1 { animation: type-0-1 9000ms steps(1, end) 0ms 1 forwards; }"
        )


# ─────────────────────────────────────────────────────────────────────────────
# SVG
# ─────────────────────────────────────────────────────────────────────────────


class TestSvg:
    """Tests for the SVG document."""

    def test_header_and_duration(self, config):
        document = build_document(config, "demo")
        assert document.svg.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<svg ')
        assert f'data-duration="{document.total_duration!r}s"' in document.svg
        assert 'viewBox="0 0 800 200"' in document.svg
        assert document.svg.rstrip().endswith("</svg>")

    def test_duration_attribute_is_exact(self):
        config = Config(steps=(Step(command="abc", timing=Timing(start=0, per_char=0.00001, hold=1)),))
        document = build_document(config)
        value = document.svg.split('data-duration="')[1].split('s"')[0]
        assert float(value) == document.total_duration
        assert value != fmt(document.total_duration)

    def test_one_keyframe_block_per_element(self, config):
        document = build_document(config, "demo", force_loop=True)
        assert document.svg.count("@keyframes ") == len(document.timeline.elements)
        assert document.svg.count("{ animation: ") == len(document.timeline.elements)

    def test_user_text_escaped(self, config):
        svg = build_document(config, "demo", force_loop=True).svg
        assert "Go &amp; &lt;Rust&gt;" in svg
        assert ">&lt;</text>" in svg
        assert "<Rust>" not in svg

    def test_prompt_path_uses_host_color(self, config):
        svg = build_document(config, "demo", force_loop=True).svg
        assert '<tspan style="fill: #ffaa00;">:~/src</tspan>' in svg

    def test_non_loop_omits_last_prompt(self, config):
        svg = build_document(config, "demo").svg
        assert 'class="prompt-0"' in svg
        assert 'class="prompt-1"' not in svg
        assert 'class="cmd-group-1"' not in svg
        assert 'class="line-1"' in svg
        assert "forwards" in svg

    def test_loop_renders_last_prompt(self, config):
        svg = build_document(config, "demo", force_loop=True).svg
        assert 'class="prompt-1"' in svg
        assert 'class="cmd-1-2"' in svg
        assert "infinite" in svg

    def test_characters_in_command_group(self, config):
        svg = build_document(config, "demo").svg
        group = svg.split('<g class="cmd-group-0">')[1].split("</g>")[0]
        assert 'class="prompt-0"' in group
        assert group.count('class="cmd-0-') == len("whois")

    def test_byte_identical_recompile(self, config):
        assert build_document(config, "demo").svg == build_document(config, "demo").svg


# ─────────────────────────────────────────────────────────────────────────────
# HTML
# ─────────────────────────────────────────────────────────────────────────────


class TestHtml:
    """Tests for the HTML wrapper."""

    def test_linked(self, config):
        html = build_document(config, "demo").html
        assert '<img src="demo.svg"' in html
        assert "<svg" not in html

    def test_embedded(self, config):
        html = build_document(replace(config, embed=True), "demo").html
        assert "<svg" in html
        assert "<?xml" not in html
        assert "@keyframes fade-0" in html

    def test_export_variant_forces_loop_and_embed(self, config):
        before = copy.deepcopy(config)
        document = build_export_variant(config, "demo")
        assert document.timeline.loop is True
        assert "<svg" in document.html
        assert "infinite" in document.svg
        assert config == before
        assert config.embed is False
        assert config.loop is False
