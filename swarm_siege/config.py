"""
Game Configuration
===================
Every tunable of the simulation in one dataclass.

Defaults reproduce the 800x600 arcade configuration. Values are checked
when the config is built so a bad field size never reaches the geometry.
"""

from dataclasses import dataclass, fields
from typing import Tuple


class ConfigError(ValueError):
    """Raised for configuration values that cannot produce a valid field."""


@dataclass
class GameConfig:
    """Simulation constants. Sizes in pixels, times in milliseconds."""

    # Field
    field_width: float = 800.0
    field_height: float = 600.0

    # Player
    player_size: float = 40.0
    player_speed: float = 8.0
    player_max_health: int = 100
    invincible_ms: float = 1000.0

    # Primary fire
    shoot_interval_ms: float = 150.0
    bullet_size: float = 5.0
    bullet_speed: float = 12.0
    bullet_lifetime_ms: float = 1000.0
    bullet_damage: int = 10

    # Secondary fire
    missile_size: float = 10.0
    missile_speed: float = 9.0
    missile_lifetime_ms: float = 2000.0
    missile_damage: int = 100
    missile_cooldown_ms: float = 10000.0
    missile_cooldown_step_ms: float = 16.0

    # Enemies
    enemy_size: float = 30.0
    enemy_speed: float = 3.0
    enemy_spawn_interval_ms: float = 1000.0
    enemy_spawn_offset: float = 30.0
    enemy_score: int = 10
    contact_damage: Tuple[int, int] = (1, 5)
    cull_margin: float = 50.0

    # Boss
    boss_size: float = 80.0
    boss_speed: float = 2.0
    boss_health: int = 450
    boss_contact_damage: int = 15
    boss_spawn_margin: float = 50.0
    boss_threshold: Tuple[int, int] = (10, 25)

    # Pickups
    pickup_drop_chance: float = 0.05
    pickup_size: float = 20.0
    pickup_heal: int = 10

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Reject values that would produce undefined geometry or timing."""
        for name in ('field_width', 'field_height', 'player_size', 'enemy_size',
                     'boss_size', 'bullet_size', 'missile_size', 'pickup_size',
                     'player_max_health', 'boss_health', 'missile_cooldown_ms'):
            if getattr(self, name) <= 0:
                raise ConfigError(f'{name} must be positive, got {getattr(self, name)!r}')

        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, (int, float)) and value < 0:
                raise ConfigError(f'{f.name} must not be negative, got {value!r}')

        if self.player_size > min(self.field_width, self.field_height):
            raise ConfigError('player_size does not fit inside the field')

        if 2 * self.boss_spawn_margin > min(self.field_width, self.field_height):
            raise ConfigError('boss_spawn_margin leaves no room inside the field')

        for name in ('contact_damage', 'boss_threshold'):
            low, high = getattr(self, name)
            if low < 0 or high < low:
                raise ConfigError(f'{name} must be an ascending non-negative range, got {(low, high)!r}')

        if not 0.0 <= self.pickup_drop_chance <= 1.0:
            raise ConfigError(
                f'pickup_drop_chance must be within [0, 1], got {self.pickup_drop_chance!r}'
            )
