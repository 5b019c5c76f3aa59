"""Input shaping and arcade mixing for a differential drive."""

from __future__ import annotations


def _sign(value: float) -> float:
    if value > 0:
        return 1.0
    if value < 0:
        return -1.0
    return 0.0


def modify_inputs(value: float, power: int = 2) -> float:
    """Raise a -1..1 stick value to ``power`` while keeping its sign.

    Squaring or cubing the input gives finer control at low speeds.
    """
    return _sign(value) * abs(value) ** power


def arcade_to_tank(forward_back: float, left_right: float, power: int = 2) -> tuple[float, float]:
    """Mix arcade controls into ``(left, right)`` tank outputs.

    Both inputs are shaped with :func:`modify_inputs` before mixing; the
    results are not clamped.
    """
    forward_back = modify_inputs(forward_back, power)
    left_right = modify_inputs(left_right, power)
    return forward_back + left_right, forward_back - left_right