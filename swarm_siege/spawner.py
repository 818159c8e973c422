"""
Spawn Policy
=============
When and where things appear: enemy cadence on the field perimeter,
the kill-count boss trigger, and pickup drops.

All randomness goes through the injected ``random.Random`` so a seeded
session replays exactly.
"""

import logging
import random
from typing import Optional, Tuple

from .config import GameConfig


logger = logging.getLogger(__name__)


# Perimeter sides, chosen uniformly
SIDE_TOP = 0
SIDE_RIGHT = 1
SIDE_BOTTOM = 2
SIDE_LEFT = 3


class SpawnPolicy:
    """
    Timers and randomized placement rules.

    The enemy timer is wall-clock based: it compares the step timestamp
    with the last spawn, so cadence does not depend on frame rate.
    """

    def __init__(self, config: GameConfig, rng: Optional[random.Random] = None,
                 start_time: float = 0.0):
        self.config = config
        self.rng = rng or random.Random()
        self.last_enemy_spawn = start_time
        self.next_boss_kill = self.draw_boss_threshold()

    # =========================================================================
    # ENEMIES
    # =========================================================================

    def should_spawn_enemy(self, now: float, boss_active: bool) -> bool:
        """Check the spawn timer. Ordinary spawning stops while a boss lives."""
        if boss_active:
            return False
        return now - self.last_enemy_spawn > self.config.enemy_spawn_interval_ms

    def mark_enemy_spawned(self, now: float) -> None:
        self.last_enemy_spawn = now

    def perimeter_position(self) -> Tuple[float, float]:
        """
        Pick a side uniformly, then a point just outside it.

        The coordinate along the side is uniform over the field extent.
        """
        width = self.config.field_width
        height = self.config.field_height
        offset = self.config.enemy_spawn_offset

        side = self.rng.randrange(4)
        if side == SIDE_TOP:
            return self.rng.random() * width, -offset
        if side == SIDE_RIGHT:
            return width + offset, self.rng.random() * height
        if side == SIDE_BOTTOM:
            return self.rng.random() * width, height + offset
        return -offset, self.rng.random() * height

    # =========================================================================
    # BOSS
    # =========================================================================

    def draw_boss_threshold(self) -> int:
        """Uniform integer kill count, bounds inclusive."""
        low, high = self.config.boss_threshold
        threshold = self.rng.randint(low, high)
        logger.debug('next boss after %d kills', threshold)
        return threshold

    def redraw_boss_threshold(self) -> int:
        self.next_boss_kill = self.draw_boss_threshold()
        return self.next_boss_kill

    def should_spawn_boss(self, kill_count: int, boss_active: bool) -> bool:
        return not boss_active and kill_count >= self.next_boss_kill

    def boss_position(self) -> Tuple[float, float]:
        """Random interior point keeping the spawn margin from every edge."""
        margin = self.config.boss_spawn_margin
        x = self.rng.random() * (self.config.field_width - 2 * margin) + margin
        y = self.rng.random() * (self.config.field_height - 2 * margin) + margin
        return x, y

    # =========================================================================
    # PICKUPS
    # =========================================================================

    def roll_pickup_drop(self) -> bool:
        """Independent Bernoulli trial per bullet kill."""
        return self.rng.random() < self.config.pickup_drop_chance

    def roll_contact_damage(self) -> int:
        low, high = self.config.contact_damage
        return self.rng.randint(low, high)
