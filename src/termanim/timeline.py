"""
Timeline compiler.

Turns a sequence of steps into one Timeline in which every animated element
is bound to a keyframe spec expressed as percentages of a single shared
cycle. Replaying the cycle from 0% restarts every fade and typing reveal in
lock-step, so no per-element reset is ever needed.

Stages, each a pure function of the previous one's output:
  1. resolve_overlaps        - push step starts clear of the previous step
  2. compute_total_duration  - the cycle length everything is normalised to
  3. synthesize_step         - keyframes + rules for lines, prompt, command
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import replace

from termanim import timings
from termanim.errors import DegenerateTimingError, InvalidStepError
from termanim.layout import resolve_layout
from termanim.models import (
    AnimationRule,
    CommandCharacter,
    Config,
    ElementKind,
    ElementRef,
    Keyframe,
    KeyframeSpec,
    ResolvedStep,
    Step,
    StepTimeline,
    Timeline,
    VisualElement,
)

logger = logging.getLogger("termanim.timeline")

TIMING_FIELDS = ("start", "per_char", "hold")

HIDDEN = 0
VISIBLE = 1

# ─────────────────────────────────────────────────────────────────────────────
# Validation
# ─────────────────────────────────────────────────────────────────────────────


def validate_steps(steps: Sequence[Step]) -> None:
    """Reject inputs the compiler cannot schedule. Fails on the first fault."""
    if not steps:
        raise InvalidStepError("animation needs at least one step")

    for index, step in enumerate(steps):
        for name in TIMING_FIELDS:
            value = getattr(step.timing, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidStepError(f"expected a number, got {value!r}", index, name)
            if not math.isfinite(value):
                raise InvalidStepError(f"must be finite, got {value}", index, name)
            if value < 0:
                raise InvalidStepError(f"must be >= 0, got {value}", index, name)


# ─────────────────────────────────────────────────────────────────────────────
# Overlap Resolver & Duration Aggregator
# ─────────────────────────────────────────────────────────────────────────────


def resolve_overlaps(steps: Sequence[Step]) -> tuple[ResolvedStep, ...]:
    """Push each step's start to at least the previous end + STEP_TRANSITION.

    Starts only ever move forward. The first step is left alone, and the
    caller's Step objects are copied, never modified.
    """
    resolved: list[ResolvedStep] = []
    last_index = len(steps) - 1
    previous: ResolvedStep | None = None

    for index, step in enumerate(steps):
        requested = step.timing.start
        start = requested
        if previous is not None:
            earliest = previous.end + timings.STEP_TRANSITION
            if start < earliest:
                logger.debug(f"step {index}: start moved {requested}s -> {earliest}s")
                start = earliest

        current = ResolvedStep(
            index=index,
            step=replace(step, timing=replace(step.timing, start=start)),
            requested_start=requested,
            is_last=index == last_index,
        )
        resolved.append(current)
        previous = current

    return tuple(resolved)


def compute_total_duration(resolved: Sequence[ResolvedStep], loop: bool) -> float:
    """Smallest cycle that holds every step, plus the trailing constant.

    The final step's end includes LAST_STEP_EXTRA_TIME when looping.
    """
    total = 0.0
    for step in resolved:
        total = max(total, step.fade_out_at(loop))
    return total + (timings.LOOP_EXTRA_TIME if loop else timings.NON_LOOP_EXTRA_TIME)


# ─────────────────────────────────────────────────────────────────────────────
# Keyframe Synthesizer
# ─────────────────────────────────────────────────────────────────────────────


def to_pct(seconds: float, total_duration: float) -> float:
    """Absolute seconds -> percentage of the cycle, rounded and clamped."""
    pct = round(seconds / total_duration * 100, timings.PERCENT_PRECISION)
    return min(100.0, max(0.0, pct))


def _nudge(pct: float) -> float:
    return round(pct + timings.PERCENT_EPSILON, timings.PERCENT_PRECISION)


def build_keyframes(
    ref: ElementRef,
    initial: int,
    events: Sequence[tuple[float, int]],
) -> KeyframeSpec:
    """Assemble a strictly increasing keyframe spec bounded by 0% and 100%.

    Events that repeat the current state at or before the current percentage
    are dropped. Any other event that does not move forward is pushed one
    epsilon past its predecessor.
    """
    frames = [Keyframe(0.0, initial)]
    for pct, opacity in events:
        pct = min(100.0, max(0.0, pct))
        prev = frames[-1]
        if opacity == prev.opacity and pct <= prev.pct:
            continue
        if pct <= prev.pct:
            pct = _nudge(prev.pct)
            if pct > 100:
                raise DegenerateTimingError(
                    f"event at {prev.pct}% cannot be separated from the one before it",
                    ref.step_index, str(ref),
                )
        frames.append(Keyframe(pct, opacity))

    if frames[-1].pct < 100:
        frames.append(Keyframe(100.0, frames[-1].opacity))
    return KeyframeSpec(ref.keyframes_name, tuple(frames))


def _fade_window(
    ref: ElementRef,
    appear_at: float,
    fade_out_at: float | None,
    total_duration: float,
) -> KeyframeSpec:
    events = [
        (to_pct(appear_at, total_duration), HIDDEN),
        (to_pct(appear_at + timings.FADE_DURATION, total_duration), VISIBLE),
    ]
    if fade_out_at is not None:
        events.append((to_pct(fade_out_at, total_duration), VISIBLE))
        events.append((to_pct(fade_out_at + timings.FADE_DURATION, total_duration), HIDDEN))
    return build_keyframes(ref, HIDDEN, events)


def _rule(ref: ElementRef, total_duration: float, loop: bool,
          timing_function: str = "linear") -> AnimationRule:
    return AnimationRule(
        selector=f".{ref.css_class}",
        animation_name=ref.keyframes_name,
        duration_ms=total_duration * 1000,
        timing_function=timing_function,
        iteration_count="infinite" if loop else "1",
        fill_mode=None if loop else "forwards",
    )


def _element(ref: ElementRef, spec: KeyframeSpec, total_duration: float, loop: bool,
             timing_function: str = "linear") -> VisualElement:
    return VisualElement(ref, spec, _rule(ref, total_duration, loop, timing_function))


def synthesize_characters(
    resolved: ResolvedStep,
    total_duration: float,
    loop: bool,
) -> tuple[CommandCharacter, ...]:
    """One step-function reveal per typed character.

    Character i appears at start + i * per_char. With a non-zero per_char no
    two characters share a reveal percentage.
    """
    per_char = resolved.step.timing.per_char
    characters: list[CommandCharacter] = []
    previous_pct: float | None = None

    for i, char in enumerate(resolved.step.command):
        ref = ElementRef(ElementKind.CHAR, resolved.index, i)
        reveal_at = resolved.start + i * per_char
        pct = to_pct(reveal_at, total_duration)
        if per_char > 0 and previous_pct is not None and pct <= previous_pct:
            pct = _nudge(previous_pct)
            if pct > 100:
                raise DegenerateTimingError(
                    "typing is too fast to distinguish characters at this cycle length",
                    resolved.index, str(ref),
                )

        spec = build_keyframes(ref, HIDDEN, [(pct, VISIBLE)])
        reveal_pct = spec.frames[1].pct
        characters.append(CommandCharacter(
            element=_element(ref, spec, total_duration, loop, "steps(1, end)"),
            char=char,
            reveal_at=reveal_at,
            reveal_pct=reveal_pct,
        ))
        previous_pct = reveal_pct

    return tuple(characters)


def synthesize_step(
    resolved: ResolvedStep,
    previous: ResolvedStep | None,
    total_duration: float,
    loop: bool,
    char_width: float,
) -> StepTimeline:
    """Keyframes and rules for every element of one resolved step."""
    index = resolved.index
    step = resolved.step
    layout = resolve_layout(step, char_width)

    appear_at = 0.0 if previous is None else previous.end + timings.STEP_TRANSITION
    # The last frame of a one-shot animation stays on screen
    fade_out_at = None if resolved.is_last and not loop else resolved.fade_out_at(loop)

    lines = None
    if step.terminal_lines:
        ref = ElementRef(ElementKind.LINES, index)
        lines = _element(ref, _fade_window(ref, appear_at, fade_out_at, total_duration),
                         total_duration, loop)

    if resolved.is_last and not loop:
        return StepTimeline(resolved, layout, appear_at, fade_out_at, lines=lines)

    prompt_ref = ElementRef(ElementKind.PROMPT, index)
    prompt = _element(prompt_ref, build_keyframes(prompt_ref, VISIBLE, []),
                      total_duration, loop)

    command_ref = ElementRef(ElementKind.COMMAND, index)
    command = _element(command_ref,
                       _fade_window(command_ref, appear_at, fade_out_at, total_duration),
                       total_duration, loop)

    return StepTimeline(
        resolved=resolved,
        layout=layout,
        appear_at=appear_at,
        fade_out_at=fade_out_at,
        lines=lines,
        prompt=prompt,
        command=command,
        characters=synthesize_characters(resolved, total_duration, loop),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Entry point
# ─────────────────────────────────────────────────────────────────────────────


def compile_timeline(config: Config, force_loop: bool = False) -> Timeline:
    """Compile a configuration into a Timeline.

    ``force_loop`` compiles as though ``config.loop`` were true without
    touching the configuration.
    """
    loop = force_loop or config.loop
    validate_steps(config.steps)

    resolved = resolve_overlaps(config.steps)
    total_duration = compute_total_duration(resolved, loop)
    logger.debug(f"cycle: {total_duration}s over {len(resolved)} steps (loop={loop})")

    steps: list[StepTimeline] = []
    previous: ResolvedStep | None = None
    for current in resolved:
        steps.append(synthesize_step(current, previous, total_duration, loop,
                                     config.char_width))
        previous = current

    return Timeline(total_duration=total_duration, loop=loop, steps=tuple(steps))
