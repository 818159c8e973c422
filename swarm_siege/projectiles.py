"""
Projectile System
==================
Bullet and missile lifecycle: spawn, integrate, expire.

Hits are resolved in combat.py. This module only moves projectiles and
marks them dead when their lifetime runs out or they leave the field.
"""

import math

from .ecs import World
from .config import GameConfig
from .components import (
    Position, Velocity, CollisionBox, Lifetime,
    Projectile, BulletTag, MissileTag
)
from .geometry import is_outside


def spawn_projectile(
    world: World,
    x: float, y: float,
    angle: float,
    speed: float,
    size: float,
    damage: int,
    lifetime_ms: float,
    now: float,
) -> int:
    """Spawn a single projectile flying along a fixed angle."""
    eid = world.create_entity()

    world.add_component(eid, Position(x, y))
    world.add_component(eid, Velocity(math.cos(angle) * speed, math.sin(angle) * speed))
    world.add_component(eid, CollisionBox(size, size))
    world.add_component(eid, Lifetime(expires_at=now + lifetime_ms))
    world.add_component(eid, Projectile(damage=damage))

    return eid


def spawn_bullet(world: World, x: float, y: float, angle: float,
                 config: GameConfig, now: float) -> int:
    eid = spawn_projectile(
        world, x, y, angle,
        speed=config.bullet_speed,
        size=config.bullet_size,
        damage=config.bullet_damage,
        lifetime_ms=config.bullet_lifetime_ms,
        now=now,
    )
    world.add_component(eid, BulletTag())
    return eid


def spawn_missile(world: World, x: float, y: float, angle: float,
                  config: GameConfig, now: float) -> int:
    eid = spawn_projectile(
        world, x, y, angle,
        speed=config.missile_speed,
        size=config.missile_size,
        damage=config.missile_damage,
        lifetime_ms=config.missile_lifetime_ms,
        now=now,
    )
    world.add_component(eid, MissileTag())
    return eid


def projectile_system(world: World, now: float, width: float, height: float,
                      margin: float) -> int:
    """
    Integrate every projectile, then expire it.

    The move always happens before the lifetime and bounds checks, so a
    projectile that expires this step still advanced once.
    Returns the number of projectiles marked dead.
    """
    expired = 0
    for proj_id, pos, vel, proj in world.query(Position, Velocity, Projectile):
        pos.x += vel.x
        pos.y += vel.y

        lifetime = world.get_component(proj_id, Lifetime)
        if lifetime is not None and now >= lifetime.expires_at:
            world.destroy_entity(proj_id)
            expired += 1
            continue

        if is_outside(pos, width, height, margin):
            world.destroy_entity(proj_id)
            expired += 1

    return expired
