"""
Rendering Engine
=================
Double-buffered terminal renderer for simulation snapshots.

The simulation works in field pixels; the renderer scales the field into
the terminal grid, above a 3-row HUD.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

try:
    from blessed import Terminal
except ImportError:
    raise ImportError("'blessed' library required. Install with: pip install blessed")

from .simulation import FrameSnapshot, Phase, SpriteView


# ANSI 256 color constants
NEON_CYAN = 51
NEON_MAGENTA = 201
NEON_YELLOW = 226
NEON_GREEN = 46
NEON_RED = 196
NEON_ORANGE = 208

GRAY_MED = 245
GRAY_DARK = 238
GRAY_DARKER = 235

HUD_ROWS = 3

# kind -> (char, color)
SPRITE_STYLE = {
    'player': ('@', NEON_GREEN),
    'enemy': ('&', NEON_RED),
    'boss': ('#', NEON_MAGENTA),
    'bullet': ('*', NEON_YELLOW),
    'missile': ('!', NEON_ORANGE),
    'pickup': ('+', NEON_GREEN),
}

# Drawn last on top
SPRITE_ORDER = ('pickup', 'enemy', 'boss', 'player', 'bullet', 'missile')


@dataclass
class Cell:
    """A single cell in the render buffer."""
    char: str = ' '
    fg_color: int = 7
    bg_color: int = -1  # -1 = transparent/default

    def matches(self, other: 'Cell') -> bool:
        return (
            self.char == other.char and
            self.fg_color == other.fg_color and
            self.bg_color == other.bg_color
        )

    def reset(self):
        self.char = ' '
        self.fg_color = 7
        self.bg_color = -1


class DoubleBuffer:
    """
    Back buffer written each frame, presented as a diff against the
    front buffer. Only changed cells produce output.
    """

    def __init__(self, term: Terminal):
        self.term = term
        self.width = term.width
        self.height = term.height
        self.front: List[List[Cell]] = []
        self.back: List[List[Cell]] = []
        self._init_buffers()
        self._normal = term.normal

    def _init_buffers(self):
        self.front = [[Cell() for _ in range(self.width)] for _ in range(self.height)]
        self.back = [[Cell() for _ in range(self.width)] for _ in range(self.height)]

    def clear_back(self):
        for row in self.back:
            for cell in row:
                cell.reset()

    def put(self, x: int, y: int, char: str, fg_color: int = 7, bg_color: int = -1):
        if 0 <= x < self.width and 0 <= y < self.height:
            cell = self.back[y][x]
            cell.char = char
            cell.fg_color = fg_color
            cell.bg_color = bg_color

    def put_string(self, x: int, y: int, text: str, fg_color: int = 7, bg_color: int = -1):
        for i, char in enumerate(text):
            self.put(x + i, y, char, fg_color, bg_color)

    def fill(self, x: int, y: int, w: int, h: int, char: str, fg_color: int = 7):
        for j in range(y, y + h):
            for i in range(x, x + w):
                self.put(i, j, char, fg_color)

    def present(self) -> str:
        """Swap buffers and return escape output for changed cells."""
        output_parts = []
        normal = self._normal

        for y in range(self.height):
            for x in range(self.width):
                back_cell = self.back[y][x]
                if back_cell.matches(self.front[y][x]):
                    continue
                output_parts.append(self.term.move_xy(x, y))
                output_parts.append(normal)
                if back_cell.bg_color >= 0:
                    output_parts.append(self.term.on_color(back_cell.bg_color))
                output_parts.append(self.term.color(back_cell.fg_color))
                output_parts.append(back_cell.char or ' ')

        self.front, self.back = self.back, self.front
        return ''.join(output_parts)


# =============================================================================
# SCALING HELPERS
# =============================================================================

def scale_rect(sprite: SpriteView, field_size: Tuple[float, float],
               cols: int, rows: int) -> Tuple[int, int, int, int]:
    """
    Map a field-pixel box to terminal cells.

    Every visible box covers at least one cell.
    """
    sx = cols / field_size[0]
    sy = rows / field_size[1]
    x = int(sprite.x * sx)
    y = int(sprite.y * sy)
    w = max(1, int(round(sprite.width * sx)))
    h = max(1, int(round(sprite.height * sy)))
    return x, y, w, h


def missile_label(cooldown: float) -> str:
    """HUD text for the missile charge."""
    if cooldown <= 0:
        return 'MISSILE READY (SPACE)'
    return f'MISSILE {cooldown / 1000:.1f}s'


def bar(fraction: float, width: int, full: str = '|', empty: str = '.') -> str:
    fraction = min(max(fraction, 0.0), 1.0)
    filled = int(fraction * width)
    return full * filled + empty * (width - filled)


@dataclass
class GameRenderer:
    """Draws snapshots: playfield on top, HUD in the bottom rows."""
    term: Terminal
    buffer: DoubleBuffer = field(init=False)

    show_fps: bool = False
    current_fps: float = 60.0
    fps_timer: float = 0.0
    fps_frame_count: int = 0

    def __post_init__(self):
        self.buffer = DoubleBuffer(self.term)

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height

    @property
    def game_height(self) -> int:
        """Height of the playable area (excluding HUD rows)."""
        return self.buffer.height - HUD_ROWS

    def tick_fps(self, delta: float) -> None:
        """Count one presented frame. The rate is refreshed every half second."""
        self.fps_frame_count += 1
        self.fps_timer += delta
        if self.fps_timer >= 0.5:
            self.current_fps = self.fps_frame_count / self.fps_timer
            self.fps_frame_count = 0
            self.fps_timer = 0.0

    def render(self, snap: FrameSnapshot) -> str:
        """Draw one frame and return the terminal output for it."""
        self.buffer.clear_back()
        self._render_field(snap)
        self._render_hud(snap)
        if snap.phase is Phase.DEFEAT:
            self._render_banner('GAME OVER', NEON_RED, snap)
        elif snap.phase is Phase.VICTORY:
            self._render_banner('VICTORY', NEON_GREEN, snap)
        return self.buffer.present()

    def _render_field(self, snap: FrameSnapshot):
        cols, rows = self.width, self.game_height
        by_kind = {kind: [] for kind in SPRITE_ORDER}
        for sprite in snap.sprites:
            by_kind.setdefault(sprite.kind, []).append(sprite)

        for kind in SPRITE_ORDER:
            char, color = SPRITE_STYLE[kind]
            for sprite in by_kind[kind]:
                # Blink every 4 frames while invincible
                if kind == 'player' and snap.invincible and (snap.frame // 4) % 2:
                    continue
                x, y, w, h = scale_rect(sprite, snap.field_size, cols, rows)
                self.buffer.fill(x, y, w, h, char, color)

    def _render_hud(self, snap: FrameSnapshot):
        ui_y = self.game_height
        width = self.width

        self.buffer.put_string(0, ui_y, '=' * width, GRAY_DARK)
        self.buffer.put_string(2, ui_y, ' SWARM_SIEGE ', NEON_MAGENTA)
        status = f' SCORE:{snap.score}  KILLS:{snap.kill_count}/{snap.next_boss_kill} '
        self.buffer.put_string(width - len(status) - 1, ui_y, status, NEON_YELLOW)

        # Row 1: health + missile charge
        row1_y = ui_y + 1
        hp_color = NEON_CYAN if snap.health > snap.max_health * 0.3 else NEON_RED
        self.buffer.put_string(2, row1_y, 'HP:', GRAY_MED)
        self.buffer.put_string(6, row1_y, f'[{bar(snap.health / snap.max_health, 20)}]', hp_color)
        self.buffer.put_string(29, row1_y, f'{snap.health:>3}', hp_color)

        charge = 1 - snap.missile_cooldown / snap.missile_cooldown_max
        m_color = NEON_GREEN if snap.missile_ready else NEON_ORANGE
        self.buffer.put_string(36, row1_y, f'[{bar(charge, 12, "#")}] ', m_color)
        self.buffer.put_string(51, row1_y, missile_label(snap.missile_cooldown), m_color)

        # Row 2: boss health or controls
        row2_y = ui_y + 2
        if snap.boss_health is not None:
            self.buffer.put_string(2, row2_y, 'BOSS:', NEON_MAGENTA)
            self.buffer.put_string(
                8, row2_y,
                f'[{bar(snap.boss_health / snap.boss_max_health, 30)}] {snap.boss_health}',
                NEON_MAGENTA
            )
        else:
            controls = 'WASD:Move  IJKL:Aim+Fire  SPACE:Missile  Q:Quit'
            self.buffer.put_string(2, row2_y, controls, GRAY_DARKER)

        if self.show_fps:
            fps_text = f'FPS:{self.current_fps:.0f}'
            self.buffer.put_string(width - len(fps_text) - 2, 0, fps_text, GRAY_MED)

    def _render_banner(self, text: str, color: int, snap: FrameSnapshot):
        cy = self.game_height // 2
        self.buffer.put_string(self.width // 2 - len(text) // 2, cy, text, color)
        stats = f'SCORE {snap.score}'
        self.buffer.put_string(self.width // 2 - len(stats) // 2, cy + 2, stats, NEON_YELLOW)
        prompt = '[ R - RESTART ]    [ Q - QUIT ]'
        self.buffer.put_string(self.width // 2 - len(prompt) // 2, cy + 4, prompt, NEON_CYAN)
