"""
Collision Resolution & Scoring
===============================
Applies the outcome of every overlap found in a step.

Resolution order is fixed:
  1. bullets vs enemies (first overlapping bullet kills)
  2. enemy vs player contact
  3. off-bounds cull of enemies
  4. boss: bullets, missiles, contact, defeat
  5. health pickups vs player

Each enemy is resolved once per step, so an enemy removed for one reason
is never also scored or culled for another.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from .ecs import World
from .config import GameConfig
from .components import (
    Position, Health, HealthPickup, Projectile,
    EnemyTag, BulletTag, MissileTag
)
from .enemies import create_health_pickup
from .geometry import collision_check, is_outside
from .player import heal, is_invincible, take_damage
from .spawner import SpawnPolicy


logger = logging.getLogger(__name__)


@dataclass
class Scoreboard:
    """Score and the kill count toward the next boss."""
    score: int = 0
    kill_count: int = 0


def _first_bullet_hit(world: World, target_id: int) -> Optional[int]:
    for bullet_id, _ in world.query(BulletTag):
        if collision_check(world, bullet_id, target_id):
            return bullet_id
    return None


def resolve_enemies(world: World, player_id: int, board: Scoreboard,
                    policy: SpawnPolicy, config: GameConfig, now: float,
                    boss_active: bool) -> List[dict]:
    """Steps 1-3: bullet kills, player contact, off-bounds cull."""
    events = []

    for enemy_id, pos, _ in world.query(Position, EnemyTag):
        bullet_id = _first_bullet_hit(world, enemy_id)
        if bullet_id is not None:
            world.destroy_entity(bullet_id)
            world.destroy_entity(enemy_id)
            board.score += config.enemy_score
            if not boss_active:
                board.kill_count += 1
            events.append({'type': 'enemy_killed', 'entity': enemy_id,
                           'x': pos.x, 'y': pos.y})

            if policy.roll_pickup_drop():
                pickup_id = create_health_pickup(world, pos.x, pos.y, config)
                events.append({'type': 'pickup_dropped', 'entity': pickup_id,
                               'x': pos.x, 'y': pos.y})
            continue

        if (collision_check(world, enemy_id, player_id)
                and not is_invincible(world, player_id)):
            amount = policy.roll_contact_damage()
            dealt = take_damage(world, player_id, amount, now, config.invincible_ms)
            world.destroy_entity(enemy_id)
            events.append({'type': 'player_hit', 'source': 'enemy',
                           'entity': enemy_id, 'damage': dealt})
            continue

        if is_outside(pos, config.field_width, config.field_height, config.cull_margin):
            world.destroy_entity(enemy_id)
            events.append({'type': 'enemy_culled', 'entity': enemy_id})

    return events


def resolve_boss(world: World, boss_id: int, player_id: int, board: Scoreboard,
                 policy: SpawnPolicy, config: GameConfig, now: float) -> List[dict]:
    """Step 4: projectile hits on the boss, boss contact, boss defeat."""
    events = []
    health = world.get_component(boss_id, Health)

    for bullet_id, proj, _ in world.query(Projectile, BulletTag):
        if collision_check(world, bullet_id, boss_id):
            health.current = max(0, health.current - proj.damage)
            world.destroy_entity(bullet_id)
            events.append({'type': 'boss_hit', 'weapon': 'bullet',
                           'damage': proj.damage, 'health': health.current})

    for missile_id, proj, _ in world.query(Projectile, MissileTag):
        if collision_check(world, missile_id, boss_id):
            health.current = max(0, health.current - proj.damage)
            world.destroy_entity(missile_id)
            events.append({'type': 'missile_hit', 'entity': missile_id,
                           'damage': proj.damage, 'health': health.current})

    if (collision_check(world, boss_id, player_id)
            and not is_invincible(world, player_id)):
        dealt = take_damage(world, player_id, config.boss_contact_damage,
                            now, config.invincible_ms)
        events.append({'type': 'player_hit', 'source': 'boss',
                       'entity': boss_id, 'damage': dealt})

    if health.current <= 0:
        world.destroy_entity(boss_id)
        board.kill_count = 0
        threshold = policy.redraw_boss_threshold()
        logger.debug('boss %d defeated, next threshold %d', boss_id, threshold)
        events.append({'type': 'boss_defeated', 'entity': boss_id,
                       'next_threshold': threshold})

    return events


def resolve_pickups(world: World, player_id: int) -> List[dict]:
    """Step 5: heal on contact, consume the pickup."""
    events = []
    for pickup_id, pickup in world.query(HealthPickup):
        if collision_check(world, pickup_id, player_id):
            healed = heal(world, player_id, pickup.heal)
            world.destroy_entity(pickup_id)
            events.append({'type': 'pickup_collected', 'entity': pickup_id,
                           'healed': healed})
    return events


def resolve_collisions(world: World, player_id: int, boss_id: Optional[int],
                       board: Scoreboard, policy: SpawnPolicy,
                       config: GameConfig, now: float) -> List[dict]:
    """Run every resolution stage in order. Returns the combined events."""
    boss_active = boss_id is not None and world.is_alive(boss_id)

    events = resolve_enemies(world, player_id, board, policy, config, now, boss_active)
    if boss_active:
        events.extend(resolve_boss(world, boss_id, player_id, board, policy, config, now))
    events.extend(resolve_pickups(world, player_id))
    return events
