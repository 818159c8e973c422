"""
Component Definitions
======================
All components are plain dataclasses with no behavior.

Coordinates are field pixels with a top-left origin. Times are
milliseconds on the clock passed to ``Simulation.step``.
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# PHYSICS COMPONENTS
# =============================================================================

@dataclass
class Position:
    """Top-left corner of the entity's box."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Velocity:
    """Movement velocity in pixels per step."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class CollisionBox:
    """Axis-aligned bounding box anchored at Position."""
    width: float = 1.0
    height: float = 1.0


# =============================================================================
# COMBAT COMPONENTS
# =============================================================================

@dataclass
class Health:
    """Entity health pool. Never below zero, never above maximum."""
    current: int = 100
    maximum: int = 100


@dataclass
class Invulnerable:
    """Damage immunity until the given timestamp."""
    expires_at: float = 0.0


@dataclass
class Lifetime:
    """Entity deactivates once the clock passes expires_at."""
    expires_at: float = 0.0


# =============================================================================
# PLAYER COMPONENTS
# =============================================================================

@dataclass
class PlayerControlled:
    """Marks an entity as driven by the input state."""
    speed: float = 8.0
    angle: float = 0.0  # Facing, radians; new projectiles inherit it


@dataclass
class WeaponState:
    """Primary fire gate and secondary missile charge."""
    shoot_interval: float = 150.0
    last_shot: Optional[float] = None
    missile_cooldown: float = 0.0
    missile_cooldown_max: float = 10000.0

    @property
    def missile_ready(self) -> bool:
        return self.missile_cooldown <= 0


# =============================================================================
# AI COMPONENTS
# =============================================================================

@dataclass
class Pursuit:
    """Pure pursuit steering toward a target entity (non-owning)."""
    speed: float = 3.0
    target_entity: Optional[int] = None


# =============================================================================
# PROJECTILE / PICKUP COMPONENTS
# =============================================================================

@dataclass
class Projectile:
    """Damage dealt on hit. Flight is a fixed Velocity set at creation."""
    damage: int = 10


@dataclass
class HealthPickup:
    """Restores health on contact with the player."""
    heal: int = 10


# =============================================================================
# TAG COMPONENTS (empty, used for queries)
# =============================================================================

@dataclass
class PlayerTag:
    """Marks the player entity."""
    pass


@dataclass
class EnemyTag:
    """Marks an ordinary enemy. Dies to a single bullet."""
    pass


@dataclass
class BossTag:
    """Marks the boss. At most one exists."""
    pass


@dataclass
class BulletTag:
    """Marks a primary-fire projectile."""
    pass


@dataclass
class MissileTag:
    """Marks a secondary-fire projectile."""
    pass
