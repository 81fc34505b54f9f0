"""
Easing functions and the per-frame progress schedule for growth videos.
"""

import math
from typing import Callable, Dict, Iterator


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(value, hi))


def smoothstep(t: float) -> float:
    return t * t * (3 - 2 * t)


def linear(t: float) -> float:
    return t


def ease_out_cubic(t: float) -> float:
    return 1 - (1 - t) ** 3


def ease_in_out_sine(t: float) -> float:
    return -(math.cos(math.pi * t) - 1) / 2


PROGRESS_CURVES: Dict[str, Callable[[float], float]] = {
    'linear': linear,
    'smoothstep': smoothstep,
    'ease_out_cubic': ease_out_cubic,
    'ease_in_out_sine': ease_in_out_sine,
}


def get_curve(name: str) -> Callable[[float], float]:
    try:
        return PROGRESS_CURVES[name]
    except KeyError:
        raise KeyError(f"Unknown progress curve '{name}'. "
                       f"Available: {', '.join(sorted(PROGRESS_CURVES))}") from None


def progress_schedule(total_frames: int, full_distance: float,
                      curve: Callable[[float], float] = ease_out_cubic) -> Iterator[float]:
    """
    Yield the growth distance of each frame.

    The first frame is at 0 and the last exactly at ``full_distance`` so the
    video ends on the fully grown plant. A single frame shows the final state.
    """
    if total_frames <= 0:
        return
    if total_frames == 1:
        yield full_distance
        return
    last = total_frames - 1
    for frame in range(total_frames):
        if frame == last:
            yield full_distance
        else:
            yield curve(frame / last) * full_distance
