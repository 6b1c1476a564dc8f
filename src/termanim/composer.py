"""
Fluent builder for animation configurations.

    config = (
        Composer(width=800, height=200, loop=True)
        .step.terminal_lines(["file1.txt", "file2.txt"])
        .shell_prompt(user="zack", host="machine", symbol=":~$")
        .timing(start=1, per_char=0.2, hold=2)
        .command("ls")
        .done
        .build()
    )

The builder collects plain dictionaries in the config file format, so
``to_dict()`` output can be written straight to JSON and read back with
``termanim.config.load_config``.
"""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any

from termanim.config import DEFAULT_CONFIG, DEFAULT_STEP, config_from_dict
from termanim.models import Config

# Python keyword arguments -> config file keys
_CONFIG_KEYS = {
    "font_family": "fontFamily",
    "font_size": "fontSize",
    "char_width": "charWidth",
    "output_directory": "outputDirectory",
    "output_types": "outputTypes",
}

_COLOR_KEYS = {"terminal_lines": "terminalLines"}


class StepBuilder:
    """Builds one step; ``.done`` hands it back to the Composer."""

    def __init__(self, composer: Composer):
        self._composer = composer
        self._step: dict[str, Any] = copy.deepcopy(DEFAULT_STEP)

    def terminal_lines(self, lines: list[str]) -> StepBuilder:
        self._step["terminalLines"] = list(lines)
        return self

    def shell_prompt(self, user: str, host: str, symbol: str,
                     path: str | None = None) -> StepBuilder:
        prompt = {"user": user, "host": host, "symbol": symbol}
        if path is not None:
            prompt["path"] = path
        self._step["shellPrompt"] = prompt
        return self

    def command(self, cmd: str) -> StepBuilder:
        self._step["command"] = cmd
        return self

    def timing(self, start: float | None = None, per_char: float | None = None,
               hold: float | None = None) -> StepBuilder:
        timing = self._step["timing"]
        if start is not None:
            timing["start"] = start
        if per_char is not None:
            timing["perChar"] = per_char
        if hold is not None:
            timing["hold"] = hold
        return self

    def position(self, prompt_x: float | None = None,
                 command_x: float | None = None) -> StepBuilder:
        position = {}
        if prompt_x is not None:
            position["promptX"] = prompt_x
        if command_x is not None:
            position["commandX"] = command_x
        self._step["position"] = position
        return self

    @property
    def done(self) -> Composer:
        return self._composer.add_step(self._step)


class Composer:
    """Chainable configuration builder."""

    def __init__(self, colors: dict[str, str] | None = None, **settings: Any):
        self._config: dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        for key, value in settings.items():
            self._config[_CONFIG_KEYS.get(key, key)] = value
        for key, value in (colors or {}).items():
            self._config["colors"][_COLOR_KEYS.get(key, key)] = value
        self._config["steps"] = []

    def add_step(self, step: dict[str, Any]) -> Composer:
        self._config["steps"].append(copy.deepcopy(step))
        return self

    @property
    def step(self) -> StepBuilder:
        return StepBuilder(self)

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._config)

    def build(self) -> Config:
        return config_from_dict(self.to_dict())

    def save_to_file(self, path: str | os.PathLike[str]) -> Path:
        target = Path(path)
        target.write_text(json.dumps(self._config, indent=2) + "\n", encoding="utf-8")
        return target
