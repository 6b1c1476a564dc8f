"""
Data model for terminal animations.

Configuration records (ShellPrompt, Timing, Position, Step, Colors, Config)
are immutable: the compiler derives new values with dataclasses.replace and
never writes to what the caller passed in. Compiler output (ResolvedStep,
KeyframeSpec, VisualElement, Timeline) is immutable as well.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from termanim import timings

# ─────────────────────────────────────────────────────────────────────────────
# Configuration
# ─────────────────────────────────────────────────────────────────────────────

OUTPUT_TYPES = ("html", "svg")


@dataclass(frozen=True)
class ShellPrompt:
    """The familiar user@host:path$ prompt shown on the input line."""

    user: str = "user"
    host: str = "host"
    symbol: str = ":~$"
    path: str | None = None

    @property
    def text(self) -> str:
        path = f":{self.path}" if self.path else ""
        return f"{self.user}@{self.host}{path}{self.symbol}"


@dataclass(frozen=True)
class Timing:
    start: float = 0.0     # seconds from cycle start when typing begins
    per_char: float = 0.2  # seconds per typed character
    hold: float = 5.0      # seconds to stay static after typing


@dataclass(frozen=True)
class Position:
    """Explicit pixel overrides for the prompt and command origins."""

    prompt_x: float | None = None
    command_x: float | None = None


@dataclass(frozen=True)
class Step:
    terminal_lines: tuple[str, ...] = ()
    shell_prompt: ShellPrompt = field(default_factory=ShellPrompt)
    command: str = ""
    timing: Timing = field(default_factory=Timing)
    position: Position | None = None

    @property
    def typing_duration(self) -> float:
        return len(self.command) * self.timing.per_char


@dataclass(frozen=True)
class Colors:
    bg: str = "black"
    terminal_lines: str = "#00FF00"
    user: str = "#00ffff"
    host: str = "#ffaa00"
    symbol: str = "#fff"
    command: str = "#fff"
    path: str | None = None


@dataclass(frozen=True)
class Config:
    width: int = 800
    height: int = 200
    font_family: str = "Courier New"
    font_size: float = 18
    char_width: float = 11
    loop: bool = False
    embed: bool = False
    name: str = "animation"
    output_directory: str | None = None
    output_types: tuple[str, ...] = OUTPUT_TYPES
    colors: Colors = field(default_factory=Colors)
    steps: tuple[Step, ...] = ()


# ─────────────────────────────────────────────────────────────────────────────
# Compiler output
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ResolvedStep:
    """A step whose start has been pushed clear of the previous step.

    ``step`` is a copy carrying the resolved start; ``requested_start`` keeps
    the value the caller asked for.
    """

    index: int
    step: Step
    requested_start: float
    is_last: bool

    @property
    def start(self) -> float:
        return self.step.timing.start

    @property
    def typing_end(self) -> float:
        return self.start + self.step.typing_duration

    @property
    def end(self) -> float:
        """End of typing plus hold, without any loop dwell."""
        return self.typing_end + self.step.timing.hold

    def fade_out_at(self, loop: bool) -> float:
        """When this step's content starts disappearing."""
        if self.is_last and loop:
            return self.end + timings.LAST_STEP_EXTRA_TIME
        return self.end


class ElementKind(str, Enum):
    LINES = "lines"
    PROMPT = "prompt"
    COMMAND = "command"
    CHAR = "char"


@dataclass(frozen=True)
class ElementRef:
    """Identity of one animated element, threaded through every stage."""

    kind: ElementKind
    step_index: int
    char_index: int | None = None

    @property
    def css_class(self) -> str:
        if self.kind is ElementKind.LINES:
            return f"line-{self.step_index}"
        if self.kind is ElementKind.PROMPT:
            return f"prompt-{self.step_index}"
        if self.kind is ElementKind.COMMAND:
            return f"cmd-group-{self.step_index}"
        return f"cmd-{self.step_index}-{self.char_index}"

    @property
    def keyframes_name(self) -> str:
        if self.kind is ElementKind.LINES:
            return f"fade-{self.step_index}"
        if self.kind is ElementKind.PROMPT:
            return f"prompt-{self.step_index}"
        if self.kind is ElementKind.COMMAND:
            return f"fade-cmd-{self.step_index}"
        return f"type-{self.step_index}-{self.char_index}"

    def __str__(self) -> str:
        return self.css_class


@dataclass(frozen=True)
class Keyframe:
    pct: float
    opacity: int

    @property
    def props(self) -> str:
        return f"opacity: {self.opacity};"


@dataclass(frozen=True)
class KeyframeSpec:
    """Ordered percentage-of-cycle -> state mapping, bounded by 0% and 100%."""

    name: str
    frames: tuple[Keyframe, ...]

    @property
    def percentages(self) -> tuple[float, ...]:
        return tuple(frame.pct for frame in self.frames)


@dataclass(frozen=True)
class AnimationRule:
    """Binds one element's CSS class to its keyframes on the shared cycle."""

    selector: str
    animation_name: str
    duration_ms: float
    timing_function: str = "linear"
    iteration_count: str = "infinite"
    delay_ms: float = 0.0
    fill_mode: str | None = None


@dataclass(frozen=True)
class VisualElement:
    ref: ElementRef
    keyframes: KeyframeSpec
    rule: AnimationRule


@dataclass(frozen=True)
class CommandCharacter:
    """A single typed character together with its absolute reveal time."""

    element: VisualElement
    char: str
    reveal_at: float
    reveal_pct: float


@dataclass(frozen=True)
class PromptLayout:
    prompt_x: float
    prompt_width: float
    command_x: float


@dataclass(frozen=True)
class StepTimeline:
    resolved: ResolvedStep
    layout: PromptLayout
    appear_at: float
    fade_out_at: float | None
    lines: VisualElement | None = None
    prompt: VisualElement | None = None
    command: VisualElement | None = None
    characters: tuple[CommandCharacter, ...] = ()

    @property
    def elements(self) -> tuple[VisualElement, ...]:
        found = [e for e in (self.lines, self.command, self.prompt) if e is not None]
        found.extend(c.element for c in self.characters)
        return tuple(found)


@dataclass(frozen=True)
class Timeline:
    """Everything one compile call produces."""

    total_duration: float
    loop: bool
    steps: tuple[StepTimeline, ...]

    @property
    def cycle_ms(self) -> float:
        return self.total_duration * 1000

    @property
    def elements(self) -> tuple[VisualElement, ...]:
        return tuple(e for step in self.steps for e in step.elements)

    @property
    def keyframes(self) -> tuple[KeyframeSpec, ...]:
        return tuple(e.keyframes for e in self.elements)
