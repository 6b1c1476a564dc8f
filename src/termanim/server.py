"""
termanim - terminal session animations

An MCP server and command line tool that compiles scripted terminal
sessions into loop-safe, CSS-animated SVG (and an HTML page to show it).
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from fastmcp import FastMCP

from termanim import __version__, timings
from termanim.config import (
    DEFAULT_CONFIG,
    DEFAULT_STEP,
    coerce_config,
    default_output_directory,
    load_config,
)
from termanim.document import build_document
from termanim.errors import TermanimError
from termanim.models import Config
from termanim.timeline import compile_timeline

load_dotenv()

# ─────────────────────────────────────────────────────────────────────────────
# Server & State
# ─────────────────────────────────────────────────────────────────────────────

mcp = FastMCP("termanim")

# Logger
logger = logging.getLogger("termanim")

# ─────────────────────────────────────────────────────────────────────────────
# Core Implementation
# ─────────────────────────────────────────────────────────────────────────────


def _compile_animation(
    config: dict[str, Any] | Config,
    basename: str = "animation",
    force_loop: bool = False,
) -> dict[str, Any]:
    """Compile a configuration and return rendered markup, or an error payload."""
    try:
        document = build_document(coerce_config(config), basename, force_loop=force_loop)
    except TermanimError as e:
        logger.error(f"Compile failed: {e}")
        return {"error": str(e)}
    return {
        "svg": document.svg,
        "html": document.html,
        "total_duration": document.total_duration,
    }


def _describe_timeline(
    config: dict[str, Any] | Config,
    force_loop: bool = False,
) -> dict[str, Any]:
    """Resolved schedule of every step without rendering markup."""
    try:
        timeline = compile_timeline(coerce_config(config), force_loop=force_loop)
    except TermanimError as e:
        return {"error": str(e)}
    return {
        "total_duration": timeline.total_duration,
        "loop": timeline.loop,
        "steps": [
            {
                "index": step.resolved.index,
                "requested_start": step.resolved.requested_start,
                "start": step.resolved.start,
                "end": step.resolved.end,
                "appear_at": step.appear_at,
                "fade_out_at": step.fade_out_at,
                "keyframes": len(step.elements),
            }
            for step in timeline.steps
        ],
    }


def write_outputs(config: Config, output_directory: Path) -> list[Path]:
    """Write the SVG and/or HTML files requested by ``config.output_types``.

    The SVG is always written when a linking (non-embedded) HTML page is,
    since the page would otherwise point at nothing.
    """
    output_directory.mkdir(parents=True, exist_ok=True)
    document = build_document(config, config.name)

    write_html = "html" in config.output_types
    write_svg = "svg" in config.output_types or (write_html and not config.embed)

    written: list[Path] = []
    if write_html:
        html_path = output_directory / f"{config.name}.html"
        html_path.write_text(document.html, encoding="utf-8")
        logger.info(f"HTML saved to {html_path}")
        written.append(html_path)
    if write_svg:
        svg_path = output_directory / f"{config.name}.svg"
        svg_path.write_text(document.svg, encoding="utf-8")
        logger.info(f"SVG saved to {svg_path}")
        written.append(svg_path)
    return written


# ─────────────────────────────────────────────────────────────────────────────
# MCP Tools
# ─────────────────────────────────────────────────────────────────────────────


@mcp.tool()
def compile_animation(
    config: dict[str, Any],
    basename: str = "animation",
    force_loop: bool = False,
) -> dict[str, Any]:
    """
    Compile a terminal animation into SVG and HTML.

    Args:
        config: Animation configuration in the JSON file format
                (width, height, colors, steps with terminalLines,
                shellPrompt, command and timing).
        basename: File stem the HTML page links to when not embedded.
        force_loop: Compile as a looping animation whatever config.loop says.

    Returns:
        Dict with svg, html and total_duration (seconds), or error.
    """
    logger.debug(f"compile_animation: basename={basename}, force_loop={force_loop}")
    return _compile_animation(config, basename, force_loop)


@mcp.tool()
def describe_timeline(config: dict[str, Any], force_loop: bool = False) -> dict[str, Any]:
    """
    Show when each step starts, ends and fades, after overlap resolution.

    Args:
        config: Animation configuration in the JSON file format.
        force_loop: Schedule as a looping animation.

    Returns:
        Dict with total_duration, loop and a per-step schedule, or error.
    """
    return _describe_timeline(config, force_loop)


# ─────────────────────────────────────────────────────────────────────────────
# MCP Resources
# ─────────────────────────────────────────────────────────────────────────────


@mcp.resource("resource://server/info")
def server_info() -> dict[str, Any]:
    """Server name, version and output formats."""
    return {
        "name": "termanim",
        "version": __version__,
        "output_types": ["html", "svg"],
    }


@mcp.resource("resource://timings")
def timings_resource() -> dict[str, Any]:
    """Engine timing constants (not configurable)."""
    return timings.as_dict()


@mcp.resource("resource://config/defaults")
def config_defaults() -> dict[str, Any]:
    """Defaults applied to missing configuration and step fields."""
    return {"config": DEFAULT_CONFIG, "step": DEFAULT_STEP}


# ─────────────────────────────────────────────────────────────────────────────
# Entry Point
# ─────────────────────────────────────────────────────────────────────────────


def main() -> None:
    # Configure logging
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(
        description="termanim - compile terminal session animations"
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        help="Animation config (.json, .jsonc or .py). Without it, serve MCP over stdio",
    )
    parser.add_argument(
        "-o", "--output-directory",
        help="Where to write output files (default: config, $TERMANIM_OUTPUT_DIRECTORY, cwd)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    if args.debug:
        logging.getLogger("termanim").setLevel(logging.DEBUG)

    if args.config is None:
        logger.info("Starting termanim MCP server")
        mcp.run()
        return

    try:
        config = load_config(args.config)
        logger.info(
            f"Config loaded: name={config.name}, embed={config.embed}, "
            f"outputTypes={list(config.output_types)}"
        )
        write_outputs(config, default_output_directory(config, args.output_directory))
    except (TermanimError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
