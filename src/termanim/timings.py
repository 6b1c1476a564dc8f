"""Animation timing constants - internal engine values, not user configurable."""

# Gap between the end of one step (typing + hold) and the start of the next.
# Interacts with each step's hold: raising it lengthens the whole cycle.
STEP_TRANSITION = 0.5

# Extra dwell on the final step before a looping animation restarts
LAST_STEP_EXTRA_TIME = 1.0

# Trailing time after the last step ends
LOOP_EXTRA_TIME = 1.0
NON_LOOP_EXTRA_TIME = 0.5

# Length of a group fade-in / fade-out
FADE_DURATION = 0.2

# Keyframe percentages are rounded to this many decimal places
PERCENT_PRECISION = 4
PERCENT_EPSILON = 10 ** -PERCENT_PRECISION


def as_dict() -> dict[str, float]:
    """All engine constants, keyed by name."""
    return {
        "step_transition": STEP_TRANSITION,
        "last_step_extra_time": LAST_STEP_EXTRA_TIME,
        "loop_extra_time": LOOP_EXTRA_TIME,
        "non_loop_extra_time": NON_LOOP_EXTRA_TIME,
        "fade_duration": FADE_DURATION,
        "percent_precision": PERCENT_PRECISION,
        "percent_epsilon": PERCENT_EPSILON,
    }
