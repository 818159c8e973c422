"""
Enemy Archetypes
=================
Factories for the hostile entities and the health pickup.

Enemies and the boss share one steering law (pure pursuit); they
differ in size, speed and whether they carry a health pool.
"""

from typing import Optional

from .ecs import World
from .config import GameConfig
from .components import (
    Position, Velocity, CollisionBox, Health, Pursuit,
    EnemyTag, BossTag, HealthPickup
)


# =============================================================================
# ENEMY
# =============================================================================
# Fast, fragile. Dies to one bullet, spends itself on contact with the player.

def create_enemy(world: World, x: float, y: float, config: GameConfig,
                 target: Optional[int] = None) -> int:
    """Create an ordinary enemy chasing the target entity."""
    entity_id = world.create_entity()

    world.add_component(entity_id, Position(x, y))
    world.add_component(entity_id, Velocity(0, 0))
    world.add_component(entity_id, CollisionBox(config.enemy_size, config.enemy_size))
    world.add_component(entity_id, Pursuit(speed=config.enemy_speed, target_entity=target))
    world.add_component(entity_id, EnemyTag())

    return entity_id


# =============================================================================
# BOSS
# =============================================================================
# Slow, large, high health. Survives contact with the player.

def create_boss(world: World, x: float, y: float, config: GameConfig,
                target: Optional[int] = None) -> int:
    """Create the boss chasing the target entity."""
    entity_id = world.create_entity()

    world.add_component(entity_id, Position(x, y))
    world.add_component(entity_id, Velocity(0, 0))
    world.add_component(entity_id, CollisionBox(config.boss_size, config.boss_size))
    world.add_component(entity_id, Pursuit(speed=config.boss_speed, target_entity=target))
    world.add_component(entity_id, Health(config.boss_health, config.boss_health))
    world.add_component(entity_id, BossTag())

    return entity_id


# =============================================================================
# HEALTH PICKUP
# =============================================================================

def create_health_pickup(world: World, x: float, y: float, config: GameConfig) -> int:
    """Drop a health pickup. It stays until the player touches it."""
    entity_id = world.create_entity()

    world.add_component(entity_id, Position(x, y))
    world.add_component(entity_id, CollisionBox(config.pickup_size, config.pickup_size))
    world.add_component(entity_id, HealthPickup(heal=config.pickup_heal))

    return entity_id
