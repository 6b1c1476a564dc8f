"""
Configuration loading.

Config files are JSON (or JSONC, with comments) objects with camelCase keys:

    {
      "width": 800, "height": 200, "fontFamily": "Courier New", "fontSize": 18,
      "colors": { "bg": "black", "terminalLines": "#00FF00", "user": "#00ffff",
                  "host": "#ffaa00", "symbol": "#fff", "command": "#fff" },
      "charWidth": 11,
      "steps": [{
        "terminalLines": ["file1.txt", "file2.txt"],
        "shellPrompt": { "user": "user", "host": "machine", "symbol": ":~$" },
        "command": "ls",
        "timing": { "start": 1, "perChar": 0.2, "hold": 1 }
      }]
    }

Missing fields fall back to the defaults below. Shape problems raise
ConfigurationError; timing values are range-checked later by the compiler.
"""

from __future__ import annotations

import importlib.util
import json
import logging
import os
from pathlib import Path
from typing import Any

import json5

from termanim.errors import ConfigurationError
from termanim.models import (
    OUTPUT_TYPES,
    Colors,
    Config,
    Position,
    ShellPrompt,
    Step,
    Timing,
)

logger = logging.getLogger("termanim.config")

OUTPUT_DIRECTORY_ENV = "TERMANIM_OUTPUT_DIRECTORY"

CONFIG_SUFFIXES = (".json", ".jsonc", ".py")

# Accepted in outputTypes for compatibility, but never produced
SKIPPED_OUTPUT_TYPES = ("gif",)

DEFAULT_CONFIG: dict[str, Any] = {
    "width": 800,
    "height": 200,
    "fontFamily": "Courier New",
    "fontSize": 18,
    "charWidth": 11,
    "loop": False,
    "embed": False,
    "name": "animation",
    "outputTypes": list(OUTPUT_TYPES),
    "colors": {
        "bg": "black",
        "terminalLines": "#00FF00",
        "user": "#00ffff",
        "host": "#ffaa00",
        "symbol": "#fff",
        "command": "#fff",
    },
}

DEFAULT_STEP: dict[str, Any] = {
    "terminalLines": [],
    "command": "",
    "shellPrompt": {"user": "user", "host": "host", "symbol": ":~$"},
    "timing": {"start": 0, "perChar": 0.2, "hold": 5},
}

# ─────────────────────────────────────────────────────────────────────────────
# Field readers
# ─────────────────────────────────────────────────────────────────────────────


def _mapping(value: Any, path: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigurationError(f"expected an object, got {type(value).__name__}", path)
    return value


def _get(data: dict[str, Any], key: str, defaults: dict[str, Any]) -> Any:
    value = data.get(key)
    return defaults.get(key) if value is None else value


def _number(value: Any, path: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"expected a number, got {value!r}", path)
    return value


def _string(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"expected a string, got {value!r}", path)
    return value


def _optional_string(value: Any, path: str) -> str | None:
    return None if value is None else _string(value, path)


def _boolean(value: Any, path: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"expected true or false, got {value!r}", path)
    return value


def _string_list(value: Any, path: str) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        raise ConfigurationError(f"expected an array, got {type(value).__name__}", path)
    return tuple(_string(item, f"{path}[{i}]") for i, item in enumerate(value))


# ─────────────────────────────────────────────────────────────────────────────
# Parsing
# ─────────────────────────────────────────────────────────────────────────────


def parse_step(data: Any, path: str) -> Step:
    data = _mapping(data, path)

    prompt_data = _mapping(_get(data, "shellPrompt", DEFAULT_STEP), f"{path}.shellPrompt")
    prompt_defaults = DEFAULT_STEP["shellPrompt"]
    prompt = ShellPrompt(
        user=_string(_get(prompt_data, "user", prompt_defaults), f"{path}.shellPrompt.user"),
        host=_string(_get(prompt_data, "host", prompt_defaults), f"{path}.shellPrompt.host"),
        symbol=_string(_get(prompt_data, "symbol", prompt_defaults),
                       f"{path}.shellPrompt.symbol"),
        path=_optional_string(prompt_data.get("path"), f"{path}.shellPrompt.path"),
    )

    timing_data = _mapping(data.get("timing") or {}, f"{path}.timing")
    timing_defaults = DEFAULT_STEP["timing"]
    timing = Timing(
        start=_number(_get(timing_data, "start", timing_defaults), f"{path}.timing.start"),
        per_char=_number(_get(timing_data, "perChar", timing_defaults), f"{path}.timing.perChar"),
        hold=_number(_get(timing_data, "hold", timing_defaults), f"{path}.timing.hold"),
    )

    position = None
    if data.get("position") is not None:
        position_data = _mapping(data["position"], f"{path}.position")
        prompt_x = position_data.get("promptX")
        command_x = position_data.get("commandX")
        position = Position(
            prompt_x=None if prompt_x is None else _number(prompt_x, f"{path}.position.promptX"),
            command_x=None if command_x is None else _number(command_x, f"{path}.position.commandX"),
        )

    return Step(
        terminal_lines=_string_list(_get(data, "terminalLines", DEFAULT_STEP),
                                    f"{path}.terminalLines"),
        shell_prompt=prompt,
        command=_string(_get(data, "command", DEFAULT_STEP), f"{path}.command"),
        timing=timing,
        position=position,
    )


def parse_colors(data: Any) -> Colors:
    data = _mapping(data or {}, "colors")
    defaults = DEFAULT_CONFIG["colors"]
    return Colors(
        bg=_string(_get(data, "bg", defaults), "colors.bg"),
        terminal_lines=_string(_get(data, "terminalLines", defaults), "colors.terminalLines"),
        user=_string(_get(data, "user", defaults), "colors.user"),
        host=_string(_get(data, "host", defaults), "colors.host"),
        symbol=_string(_get(data, "symbol", defaults), "colors.symbol"),
        command=_string(_get(data, "command", defaults), "colors.command"),
        path=_optional_string(data.get("path"), "colors.path"),
    )


def config_from_dict(data: Any) -> Config:
    """Apply defaults to a raw mapping and build a Config."""
    data = _mapping(data, "config")

    steps = data.get("steps")
    if not isinstance(steps, (list, tuple)):
        raise ConfigurationError('missing or invalid "steps" array', "steps")

    requested_types = _string_list(_get(data, "outputTypes", DEFAULT_CONFIG), "outputTypes")
    output_types = []
    for i, kind in enumerate(requested_types):
        if kind in SKIPPED_OUTPUT_TYPES:
            logger.warning(f"Output type {kind!r} is not produced by termanim; skipping it")
            continue
        if kind not in OUTPUT_TYPES:
            raise ConfigurationError(
                f"unsupported output type {kind!r} (expected one of {', '.join(OUTPUT_TYPES)})",
                f"outputTypes[{i}]",
            )
        output_types.append(kind)

    name = _string(_get(data, "name", DEFAULT_CONFIG), "name")
    if not name or any(sep in name for sep in ("/", "\\", os.sep)):
        raise ConfigurationError(
            f"must be a plain file stem without path separators, got {name!r}", "name"
        )

    width = _number(_get(data, "width", DEFAULT_CONFIG), "width")
    height = _number(_get(data, "height", DEFAULT_CONFIG), "height")
    char_width = _number(_get(data, "charWidth", DEFAULT_CONFIG), "charWidth")
    for key, value in (("width", width), ("height", height), ("charWidth", char_width)):
        if value <= 0:
            raise ConfigurationError(f"must be positive, got {value}", key)

    return Config(
        width=width,
        height=height,
        font_family=_string(_get(data, "fontFamily", DEFAULT_CONFIG), "fontFamily"),
        font_size=_number(_get(data, "fontSize", DEFAULT_CONFIG), "fontSize"),
        char_width=char_width,
        loop=_boolean(_get(data, "loop", DEFAULT_CONFIG), "loop"),
        embed=_boolean(_get(data, "embed", DEFAULT_CONFIG), "embed"),
        name=name,
        output_directory=_optional_string(data.get("outputDirectory"), "outputDirectory"),
        output_types=tuple(output_types),
        colors=parse_colors(data.get("colors")),
        steps=tuple(parse_step(step, f"steps[{i}]") for i, step in enumerate(steps)),
    )


def config_to_dict(config: Config) -> dict[str, Any]:
    """Inverse of config_from_dict, in the camelCase file format."""
    colors: dict[str, Any] = {
        "bg": config.colors.bg,
        "terminalLines": config.colors.terminal_lines,
        "user": config.colors.user,
        "host": config.colors.host,
        "symbol": config.colors.symbol,
        "command": config.colors.command,
    }
    if config.colors.path is not None:
        colors["path"] = config.colors.path

    steps = []
    for step in config.steps:
        prompt: dict[str, Any] = {
            "user": step.shell_prompt.user,
            "host": step.shell_prompt.host,
            "symbol": step.shell_prompt.symbol,
        }
        if step.shell_prompt.path is not None:
            prompt["path"] = step.shell_prompt.path
        entry: dict[str, Any] = {
            "terminalLines": list(step.terminal_lines),
            "shellPrompt": prompt,
            "command": step.command,
            "timing": {
                "start": step.timing.start,
                "perChar": step.timing.per_char,
                "hold": step.timing.hold,
            },
        }
        if step.position is not None:
            entry["position"] = {
                key: value
                for key, value in (("promptX", step.position.prompt_x),
                                   ("commandX", step.position.command_x))
                if value is not None
            }
        steps.append(entry)

    data: dict[str, Any] = {
        "width": config.width,
        "height": config.height,
        "fontFamily": config.font_family,
        "fontSize": config.font_size,
        "charWidth": config.char_width,
        "loop": config.loop,
        "embed": config.embed,
        "name": config.name,
        "outputTypes": list(config.output_types),
        "colors": colors,
        "steps": steps,
    }
    if config.output_directory is not None:
        data["outputDirectory"] = config.output_directory
    return data


# ─────────────────────────────────────────────────────────────────────────────
# Loading
# ─────────────────────────────────────────────────────────────────────────────


def _load_python_config(path: Path) -> Any:
    spec = importlib.util.spec_from_file_location(f"termanim_config_{path.stem}", path)
    if spec is None or spec.loader is None:
        raise ConfigurationError(f"cannot import {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    if not hasattr(module, "config"):
        raise ConfigurationError(f"{path.name} must define a module-level 'config'")
    return module.config


def coerce_config(value: Any) -> Config:
    """Accept a Config, a raw mapping, or anything with a build() method."""
    if isinstance(value, Config):
        return value
    if isinstance(value, dict):
        return config_from_dict(value)
    if hasattr(value, "build"):
        return value.build()
    raise ConfigurationError(f"unsupported configuration object {type(value).__name__}")


def load_config(config_path: str | os.PathLike[str]) -> Config:
    """Load a .json, .jsonc or .py configuration file."""
    path = Path(config_path)
    ext = path.suffix.lower()
    if ext not in CONFIG_SUFFIXES:
        raise ConfigurationError(
            f"unsupported config file type {ext or '(none)'!r}; use .json, .jsonc or .py"
        )
    if not path.is_file():
        raise ConfigurationError(f"config file not found: {path}")

    if ext == ".py":
        config = coerce_config(_load_python_config(path))
    elif ext == ".jsonc":
        # Comments and trailing commas
        try:
            raw = json5.loads(path.read_text(encoding="utf-8"))
        except ValueError as e:
            raise ConfigurationError(f"invalid JSONC in {path}: {e}") from e
        config = config_from_dict(raw)
    else:
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"invalid JSON in {path}: {e}") from e
        config = config_from_dict(raw)

    logger.debug(f"Loaded {len(config.steps)} steps from {path}")
    return config


def default_output_directory(config: Config, override: str | None = None) -> Path:
    """CLI flag, then the config file, then $TERMANIM_OUTPUT_DIRECTORY, then cwd."""
    chosen = override or config.output_directory or os.getenv(OUTPUT_DIRECTORY_ENV)
    return Path(chosen) if chosen else Path.cwd()
