"""Horizontal layout of prompt and command text (monospace, fixed char width)."""

from __future__ import annotations

from termanim.models import PromptLayout, ShellPrompt, Step

PROMPT_X = 20
COMMAND_GAP = 5

# Typed characters sit slightly tighter than the prompt glyphs
COMMAND_PADDING = -5
CHAR_WIDTH_FACTOR = 0.8

LINE_X = 20
LINE_TOP = 40
LINE_HEIGHT = 20
BASELINE_OFFSET = 5


def prompt_width(prompt: ShellPrompt, char_width: float) -> float:
    return len(prompt.text) * char_width


def resolve_layout(step: Step, char_width: float) -> PromptLayout:
    """Prompt origin, prompt width and command origin for one step.

    Explicit overrides in ``step.position`` win over computed values.
    """
    position = step.position
    prompt_x = PROMPT_X
    if position is not None and position.prompt_x is not None:
        prompt_x = position.prompt_x

    width = prompt_width(step.shell_prompt, char_width)

    command_x = prompt_x + width + COMMAND_GAP
    if position is not None and position.command_x is not None:
        command_x = position.command_x

    return PromptLayout(prompt_x=prompt_x, prompt_width=width, command_x=command_x)


def char_x(layout: PromptLayout, index: int, char_width: float) -> float:
    return layout.command_x + COMMAND_PADDING + index * char_width * CHAR_WIDTH_FACTOR


def line_y(index: int) -> int:
    return LINE_TOP + index * LINE_HEIGHT


def baseline_y(height: float) -> float:
    return height - BASELINE_OFFSET
