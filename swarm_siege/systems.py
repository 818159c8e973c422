"""
ECS Systems
============
Functions that operate on entities with matching components.
Each system queries the World for entities with required components
and updates them in place.
"""

import math

from .ecs import World
from .components import (
    Position, Velocity, CollisionBox, Invulnerable, WeaponState,
    Pursuit, Projectile, PlayerControlled
)
from .geometry import angle_between, center_of


# =============================================================================
# STEERING
# =============================================================================

def pursuit_system(world: World) -> None:
    """
    Point every pursuer's velocity at its target's current center.

    Recomputed from scratch each step: no prediction, no smoothing.
    Pursuers whose target is gone keep their last velocity.
    """
    for entity_id, pos, vel, box, pursuit in world.query(
        Position, Velocity, CollisionBox, Pursuit
    ):
        if pursuit.target_entity is None or not world.is_alive(pursuit.target_entity):
            continue

        t_pos = world.get_component(pursuit.target_entity, Position)
        t_box = world.get_component(pursuit.target_entity, CollisionBox)
        if t_pos is None or t_box is None:
            continue

        tx, ty = center_of(t_pos, t_box)
        cx, cy = center_of(pos, box)
        angle = angle_between(cx, cy, tx, ty)
        vel.x = math.cos(angle) * pursuit.speed
        vel.y = math.sin(angle) * pursuit.speed


# =============================================================================
# PHYSICS
# =============================================================================

def movement_system(world: World) -> None:
    """
    Integrate positions from velocities.

    The player and projectiles integrate in their own systems.
    """
    for entity_id, pos, vel in world.query(Position, Velocity):
        if world.has_component(entity_id, Projectile):
            continue
        if world.has_component(entity_id, PlayerControlled):
            continue
        pos.x += vel.x
        pos.y += vel.y


# =============================================================================
# TIMERS
# =============================================================================

def invulnerability_system(world: World, now: float) -> None:
    """Drop invulnerability windows that have run out."""
    expired = [
        entity_id for entity_id, invuln in world.query(Invulnerable)
        if now >= invuln.expires_at
    ]
    for entity_id in expired:
        world.remove_component(entity_id, Invulnerable)


def missile_cooldown_system(world: World, step_ms: float) -> None:
    """Recharge the missile by a fixed amount per step, floored at zero."""
    for entity_id, weapons in world.query(WeaponState):
        if weapons.missile_cooldown > 0:
            weapons.missile_cooldown = max(0.0, weapons.missile_cooldown - step_ms)
