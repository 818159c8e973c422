"""
Game Loop Driver
=================
Fixed sequence per frame: advance the simulation, render, schedule the
next frame. A terminal phase halts the loop.
"""

import time
from typing import Callable, Optional

from .simulation import Phase, Simulation


TARGET_FPS = 60
FRAME_TIME = 1.0 / TARGET_FPS


def run_loop(
    simulation: Simulation,
    render: Callable[[Simulation], None],
    poll_input: Optional[Callable[[Simulation], bool]] = None,
    clock: Callable[[], float] = time.perf_counter,
    sleep: Callable[[float], None] = time.sleep,
    frame_time: float = FRAME_TIME,
    max_frames: Optional[int] = None,
) -> Optional[Phase]:
    """
    Drive ``simulation`` until it reaches a terminal phase.

    ``poll_input`` drains pending input into ``simulation.input`` and
    returns False to abort (quit). The clock is in seconds; the
    simulation receives milliseconds. Returns the final phase, or None
    when the loop was aborted or ran out of frames first.
    """
    frames = 0
    while max_frames is None or frames < max_frames:
        started = clock()

        if poll_input is not None and not poll_input(simulation):
            return None

        simulation.step(started * 1000.0)
        render(simulation)
        frames += 1

        if simulation.is_over:
            return simulation.phase

        # Sleep for remaining frame time
        remaining = frame_time - (clock() - started)
        if remaining > 0.001:
            sleep(remaining)

    return None
