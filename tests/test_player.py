import math
import random

import pytest

from swarm_siege.components import (
    Position, Health, Invulnerable, PlayerControlled, WeaponState,
    BulletTag, MissileTag, PlayerTag, Projectile, Velocity
)
from swarm_siege.config import GameConfig
from swarm_siege.ecs import World
from swarm_siege.player import (
    InputState, create_player, player_movement_system, update_aim,
    take_damage, heal, weapon_system, is_invincible
)


def test_player_starts_centered(world, player):
    pos = world.get_component(player, Position)
    assert (pos.x, pos.y) == (380, 280)
    assert world.get_component(player, Health).current == 100
    assert world.has_component(player, PlayerTag)
    assert world.count(PlayerTag) == 1


def test_movement_clamps_to_field():
    config = GameConfig(player_speed=9)
    world = World()
    player = create_player(world, config)
    state = InputState()
    state.set_direction('up', True)
    state.set_direction('left', True)

    for _ in range(100):
        player_movement_system(world, state, 800, 600)

    pos = world.get_component(player, Position)
    assert (pos.x, pos.y) == (0, 0)

    state.release_all()
    state.set_direction('down', True)
    state.set_direction('right', True)
    for _ in range(100):
        player_movement_system(world, state, 800, 600)

    assert (pos.x, pos.y) == (760, 560)


def test_random_input_never_leaves_field(world, player):
    state = InputState()
    rng = random.Random(7)
    pos = world.get_component(player, Position)

    for _ in range(2000):
        state.set_direction(rng.choice(['up', 'down', 'left', 'right']), rng.random() < 0.6)
        player_movement_system(world, state, 800, 600)
        assert 0 <= pos.x <= 800 - 40
        assert 0 <= pos.y <= 600 - 40


def test_unknown_direction_rejected():
    with pytest.raises(ValueError):
        InputState().set_direction('sideways', True)


def test_aim_at_pointer_uses_player_center(world, player):
    state = InputState()
    ctrl = world.get_component(player, PlayerControlled)

    state.aim_at(500, 300)
    update_aim(world, player, state)
    assert ctrl.angle == pytest.approx(0.0)

    state.aim_at(400, 400)
    update_aim(world, player, state)
    assert ctrl.angle == pytest.approx(math.pi / 2)

    # Consumed: no pending aim leaves the angle alone
    update_aim(world, player, state)
    assert ctrl.angle == pytest.approx(math.pi / 2)


def test_set_aim_last_event_wins(world, player):
    state = InputState()
    state.aim_at(0, 0)
    state.set_aim(1.25)
    update_aim(world, player, state)
    assert world.get_component(player, PlayerControlled).angle == 1.25


def test_damage_floors_at_zero_and_starts_invincibility(world, player):
    world.get_component(player, Health).current = 3

    dealt = take_damage(world, player, 5, now=100, invincible_ms=1000)

    assert dealt == 3
    assert world.get_component(player, Health).current == 0
    assert is_invincible(world, player)
    assert world.get_component(player, Invulnerable).expires_at == 1100


def test_damage_ignored_while_invincible(world, player):
    take_damage(world, player, 5, now=0, invincible_ms=1000)
    assert take_damage(world, player, 5, now=10, invincible_ms=1000) == 0
    assert world.get_component(player, Health).current == 95


def test_heal_caps_at_maximum(world, player):
    health = world.get_component(player, Health)
    health.current = 95
    assert heal(world, player, 10) == 5
    assert health.current == 100


def test_primary_fire_is_time_gated(world, player, config):
    state = InputState()
    state.set_fire_held(True)

    assert [e['type'] for e in weapon_system(world, player, state, config, now=0)] == ['shoot']
    assert weapon_system(world, player, state, config, now=100) == []
    assert weapon_system(world, player, state, config, now=150) == []
    assert len(weapon_system(world, player, state, config, now=151)) == 1
    assert world.count(BulletTag) == 2


def test_bullet_spawns_at_player_center_with_facing(world, player, config):
    state = InputState()
    state.set_fire_held(True)
    world.get_component(player, PlayerControlled).angle = 0.5

    event = weapon_system(world, player, state, config, now=0)[0]

    pos = world.get_component(event['entity'], Position)
    vel = world.get_component(event['entity'], Velocity)
    assert (pos.x, pos.y) == (400, 300)
    assert math.atan2(vel.y, vel.x) == pytest.approx(0.5)
    assert math.hypot(vel.x, vel.y) == pytest.approx(config.bullet_speed)
    assert world.get_component(event['entity'], Projectile).damage == config.bullet_damage


def test_no_fire_without_trigger(world, player, config):
    assert weapon_system(world, player, InputState(), config, now=5000) == []


def test_missile_needs_full_charge(world, player, config):
    state = InputState()
    state.request_missile()

    events = weapon_system(world, player, state, config, now=0)
    assert [e['type'] for e in events] == ['missile_launch']
    weapons = world.get_component(player, WeaponState)
    assert weapons.missile_cooldown == 10000
    assert not weapons.missile_ready

    state.request_missile()
    assert weapon_system(world, player, state, config, now=10) == []
    # The request was consumed even though it could not fire
    weapons.missile_cooldown = 0
    assert weapon_system(world, player, state, config, now=20) == []
    assert world.count(MissileTag) == 1
