"""
Document assembly: Timeline -> SVG with embedded CSS animations, plus HTML.

CSS keyframes and rules always live inside the SVG. The ``embed`` setting
only decides whether the HTML page inlines that SVG or links to it.
"""

from __future__ import annotations

import html
from dataclasses import dataclass, replace

from termanim.layout import LINE_X, baseline_y, char_x, line_y
from termanim.models import (
    AnimationRule,
    Config,
    KeyframeSpec,
    ShellPrompt,
    StepTimeline,
    Timeline,
)
from termanim.timeline import compile_timeline


@dataclass(frozen=True)
class Document:
    svg: str
    html: str
    timeline: Timeline

    @property
    def total_duration(self) -> float:
        return self.timeline.total_duration


def escape(value: object) -> str:
    """Escape text or attribute values for XML markup."""
    return html.escape(str(value), quote=True)


def fmt(value: float) -> str:
    """Compact number: at most 4 decimals, no trailing zeros."""
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


# ─────────────────────────────────────────────────────────────────────────────
# CSS
# ─────────────────────────────────────────────────────────────────────────────


def render_keyframes(spec: KeyframeSpec) -> str:
    entries = "\n".join(f"  {fmt(frame.pct)}% {{ {frame.props} }}" for frame in spec.frames)
    return f"@keyframes {spec.name} {{\n{entries}\n}}"


def render_rule(rule: AnimationRule) -> str:
    parts = [
        rule.animation_name,
        f"{fmt(rule.duration_ms)}ms",
        rule.timing_function,
        f"{fmt(rule.delay_ms)}ms",
        rule.iteration_count,
    ]
    if rule.fill_mode:
        parts.append(rule.fill_mode)
    return f"{rule.selector} {{ animation: {' '.join(parts)}; }}"


def render_css(timeline: Timeline) -> str:
    elements = timeline.elements
    keyframes = "\n".join(render_keyframes(e.keyframes) for e in elements)
    rules = "\n".join(render_rule(e.rule) for e in elements)
    return (
        "/* Vector effect inheritance */\n"
        "svg * { vector-effect: inherit; }\n\n"
        f"/* Keyframes */\n{keyframes}\n\n"
        f"/* Rules */\n{rules}\n"
    )


# ─────────────────────────────────────────────────────────────────────────────
# Markup
# ─────────────────────────────────────────────────────────────────────────────


def _font_style(config: Config) -> str:
    return f"font-family: {escape(config.font_family)}; font-size: {fmt(config.font_size)}px;"


def _render_lines(step: StepTimeline, config: Config) -> list[str]:
    if step.lines is None:
        return []
    fill = escape(config.colors.terminal_lines)
    parts = [f'  <g class="{step.lines.ref.css_class}">']
    for i, line in enumerate(step.resolved.step.terminal_lines):
        parts.append(
            f'    <text x="{LINE_X}" y="{line_y(i)}" '
            f'style="{_font_style(config)} fill: {fill};">{escape(line)}</text>'
        )
    parts.append("  </g>")
    return parts


def _tspan(color: str, text: str) -> str:
    return f'<tspan style="fill: {escape(color)};">{escape(text)}</tspan>'


def _render_prompt(prompt: ShellPrompt, css_class: str, x: float, config: Config) -> str:
    colors = config.colors
    spans = [
        _tspan(colors.user, prompt.user),
        _tspan(colors.symbol, "@"),
        _tspan(colors.host, prompt.host),
    ]
    if prompt.path:
        spans.append(_tspan(colors.path or colors.host, f":{prompt.path}"))
    spans.append(_tspan(colors.symbol, prompt.symbol))
    return (
        f'    <text x="{fmt(x)}" y="{fmt(baseline_y(config.height))}" class="{css_class}" '
        f'style="{_font_style(config)}">{"".join(spans)}</text>'
    )


def _render_command(step: StepTimeline, config: Config) -> list[str]:
    if step.command is None or step.prompt is None:
        return []
    y = fmt(baseline_y(config.height))
    fill = escape(config.colors.command)
    parts = [
        f'  <g class="{step.command.ref.css_class}">',
        _render_prompt(step.resolved.step.shell_prompt, step.prompt.ref.css_class,
                       step.layout.prompt_x, config),
    ]
    for i, character in enumerate(step.characters):
        x = char_x(step.layout, i, config.char_width)
        parts.append(
            f'    <text x="{fmt(x)}" y="{y}" class="{character.element.ref.css_class}" '
            f'style="{_font_style(config)} fill: {fill};">{escape(character.char)}</text>'
        )
    parts.append("  </g>")
    return parts


def render_svg_markup(timeline: Timeline, config: Config) -> str:
    """The <svg> element with its <style>, without an XML declaration."""
    parts = [
        f'<svg width="100%" height="100%" viewBox="0 0 {config.width} {config.height}" '
        f'xmlns="http://www.w3.org/2000/svg" data-duration="{timeline.total_duration!r}s" '
        f'preserveAspectRatio="xMidYMid meet">',
        "  <style>",
        render_css(timeline),
        "  </style>",
        f'  <rect width="{config.width}" height="{config.height}" '
        f'fill="{escape(config.colors.bg)}" />',
    ]
    for step in timeline.steps:
        parts.extend(_render_lines(step, config))
        parts.extend(_render_command(step, config))
    parts.append("</svg>")
    return "\n".join(parts)


def render_svg(timeline: Timeline, config: Config) -> str:
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + render_svg_markup(timeline, config)


def render_html(timeline: Timeline, config: Config, basename: str) -> str:
    if not config.embed:
        return "\n".join([
            "<!DOCTYPE html>",
            '<html style="width: 100%; height: 100%;">',
            '  <body width="100%" height="100%">',
            f'    <img src="{escape(basename)}.svg" width="100%" alt="Terminal Animation">',
            "  </body>",
            "</html>",
        ])

    return "\n".join([
        "<!DOCTYPE html>",
        '<html style="width: 100%; height: 100%;">',
        "  <head>",
        "    <style>",
        "      body { margin: 0; padding: 0; overflow: hidden; background: #000; }",
        "      svg { display: block; max-width: 100%; height: auto; }",
        render_css(timeline),
        "    </style>",
        "  </head>",
        '  <body width="100%" height="100%">',
        render_svg_markup(timeline, config),
        "  </body>",
        "</html>",
    ])


# ─────────────────────────────────────────────────────────────────────────────
# Entry points
# ─────────────────────────────────────────────────────────────────────────────


def build_document(config: Config, basename: str = "animation",
                   force_loop: bool = False) -> Document:
    """Compile ``config`` and render both the SVG and the HTML page."""
    timeline = compile_timeline(config, force_loop=force_loop)
    return Document(
        svg=render_svg(timeline, config),
        html=render_html(timeline, config, basename),
        timeline=timeline,
    )


def build_export_variant(config: Config, basename: str) -> Document:
    """Looping, self-contained copy for frame capture.

    Compiled from a copy of ``config`` with ``embed`` switched on; the
    caller's configuration is left as it was.
    """
    return build_document(replace(config, embed=True), f"{basename}-temp", force_loop=True)
