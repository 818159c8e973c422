#!/usr/bin/env python3
"""
SWARM_SIEGE - Terminal Arena Shooter
=====================================
Survive the swarm, break the boss, outlast the clock.

Controls:
    WASD    - Move
    IJKL    - Aim and fire (I=up, K=down, J=left, L=right, hold to keep firing)
    SPACE   - Missile (when charged)
    F       - Toggle FPS display
    R       - Restart after the session ends
    Q/ESC   - Quit
"""

import logging
import math
import sys
import time

try:
    from blessed import Terminal
except ImportError:
    print("ERROR: 'blessed' library required. Install with: pip install blessed")
    sys.exit(1)

from .engine import GameRenderer
from .loop import FRAME_TIME, run_loop
from .simulation import GameHooks, Phase, Simulation


# =============================================================================
# CONSTANTS
# =============================================================================

MIN_WIDTH = 80
MIN_HEIGHT = 24
SESSION_SECONDS = 180.0  # Survive this long to win
LOG_FILE = 'swarm_siege.log'

MOVE_KEYS = {'w': 'up', 's': 'down', 'a': 'left', 'd': 'right'}
AIM_KEYS = {
    'i': -math.pi / 2,
    'k': math.pi / 2,
    'j': math.pi,
    'l': 0.0,
}


logger = logging.getLogger(__name__)


def setup_logging(level: int = logging.INFO) -> None:
    """Log to a file; stdout belongs to the fullscreen renderer."""
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=level,
            format='%(asctime)s %(name)s %(levelname)s %(message)s',
            handlers=[logging.FileHandler(LOG_FILE)],
        )


class KeyboardInput:
    """
    Translates terminal key presses into simulation input.

    Terminals report no key-up events, so every held key is emulated by
    a frame timer that each repeat refreshes.
    """

    def __init__(self, hold_duration: int = 12):
        self.keys_held: dict = {}  # key -> frames remaining
        self.hold_duration = hold_duration

        self._missile = False
        self._quit = False
        self._restart = False
        self._toggle_fps = False

    def process_key(self, key) -> None:
        """Process a single key press from blessed's inkey()."""
        if key is None or not key:
            return

        key_str = key.lower() if not key.is_sequence else ''

        if key_str == 'q' or key.name == 'KEY_ESCAPE':
            self._quit = True
        elif key_str in MOVE_KEYS or key_str in AIM_KEYS:
            self.keys_held[key_str] = self.hold_duration
        elif key_str == ' ':
            self._missile = True
        elif key_str == 'r':
            self._restart = True
        elif key_str == 'f' or key.name == 'KEY_F1':
            self._toggle_fps = True

    def update(self) -> None:
        """Update key hold timers (call once per frame)."""
        expired = []
        for key, frames in self.keys_held.items():
            self.keys_held[key] = frames - 1
            if self.keys_held[key] <= 0:
                expired.append(key)
        for key in expired:
            del self.keys_held[key]

    def apply(self, simulation: Simulation) -> None:
        """Push the latest key state into the simulation's input."""
        state = simulation.input
        for key, direction in MOVE_KEYS.items():
            state.set_direction(direction, key in self.keys_held)

        # Most recently pressed aim key wins
        aiming = [k for k in self.keys_held if k in AIM_KEYS]
        if aiming:
            latest = max(aiming, key=lambda k: self.keys_held[k])
            state.set_aim(AIM_KEYS[latest])
        state.set_fire_held(bool(aiming))

        if self._missile:
            state.request_missile()
            self._missile = False

    def consume_quit(self) -> bool:
        triggered = self._quit
        self._quit = False
        return triggered

    def consume_restart(self) -> bool:
        triggered = self._restart
        self._restart = False
        return triggered

    def consume_toggle_fps(self) -> bool:
        triggered = self._toggle_fps
        self._toggle_fps = False
        return triggered


class GameApp:
    """Owns the terminal, the renderer and the current session."""

    def __init__(self, term: Terminal):
        self.term = term
        self.renderer = GameRenderer(term)
        self.keyboard = KeyboardInput()
        self.running = True
        self.simulation = None
        self.session_started = 0.0
        self.last_frame = time.perf_counter()

    def new_session(self) -> Simulation:
        now = time.perf_counter()
        self.session_started = now
        self.keyboard = KeyboardInput()
        self.simulation = Simulation(
            hooks=GameHooks(
                on_missile_hit=lambda: logger.debug('missile hit'),
                on_session_end=self._on_session_end,
            ),
            start_time=now * 1000.0,
        )
        return self.simulation

    def _on_session_end(self, phase: Phase) -> None:
        logger.info('session ended in %s after %.1fs', phase.value,
                    time.perf_counter() - self.session_started)

    def drain_keys(self) -> None:
        key = self.term.inkey(timeout=0)
        while key:
            self.keyboard.process_key(key)
            key = self.term.inkey(timeout=0)

    def poll(self, simulation: Simulation) -> bool:
        """Input step for the loop driver. False aborts the loop."""
        self.drain_keys()
        if self.keyboard.consume_quit():
            self.running = False
            return False
        if self.keyboard.consume_toggle_fps():
            self.renderer.show_fps = not self.renderer.show_fps

        self.keyboard.apply(simulation)
        self.keyboard.update()

        # The session clock running out is the victory signal
        if time.perf_counter() - self.session_started >= SESSION_SECONDS:
            simulation.end_session()
        return True

    def render(self, simulation: Simulation) -> None:
        now = time.perf_counter()
        self.renderer.tick_fps(now - self.last_frame)
        self.last_frame = now

        output = self.renderer.render(simulation.snapshot())
        if output:
            print(output, end='', flush=True)

    def wait_for_restart(self) -> bool:
        """Hold the final frame until R (True) or Q (False)."""
        while True:
            key = self.term.inkey(timeout=0.1)
            if not key:
                continue
            self.keyboard.process_key(key)
            if self.keyboard.consume_quit():
                return False
            if self.keyboard.consume_restart():
                return True


# =============================================================================
# MAIN LOOP
# =============================================================================

def main():
    """Entry point. Sets up the terminal and runs sessions until quit."""
    setup_logging()
    term = Terminal()

    if term.width < MIN_WIDTH or term.height < MIN_HEIGHT:
        print(
            f'Terminal too small: {term.width}x{term.height}. '
            f'Minimum: {MIN_WIDTH}x{MIN_HEIGHT}'
        )
        sys.exit(1)

    with term.fullscreen(), term.cbreak(), term.hidden_cursor():
        app = GameApp(term)
        print(term.home + term.clear, end='', flush=True)

        while app.running:
            phase = run_loop(app.new_session(), app.render, app.poll,
                             frame_time=FRAME_TIME)
            if phase is None or not app.wait_for_restart():
                break

        print(term.normal, end='', flush=True)


if __name__ == '__main__':
    main()
