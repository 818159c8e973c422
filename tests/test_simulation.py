import random

from swarm_siege.components import (
    Health, Position, EnemyTag, BossTag, WeaponState, MissileTag, BulletTag
)
from swarm_siege.config import GameConfig
from swarm_siege.enemies import create_enemy
from swarm_siege.projectiles import spawn_bullet, spawn_missile
from swarm_siege.simulation import GameHooks, Phase, Simulation


class Recorder:
    def __init__(self):
        self.calls = []

    def __getattr__(self, name):
        if not name.startswith('on_'):
            raise AttributeError(name)
        return lambda *args: self.calls.append((name,) + args)

    def hooks(self):
        return GameHooks(**{name: getattr(self, name) for name in (
            'on_score', 'on_health', 'on_shoot', 'on_missile_launch',
            'on_missile_hit', 'on_session_end'
        )})

    def named(self, name):
        return [c[1:] for c in self.calls if c[0] == name]


def test_enemy_spawn_cadence():
    sim = Simulation(GameConfig(), rng=random.Random(3), start_time=0.0)

    sim.step(500)
    assert sim.world.count(EnemyTag) == 0
    sim.step(1001)
    assert sim.world.count(EnemyTag) == 1
    sim.step(1500)
    assert sim.world.count(EnemyTag) == 1
    sim.step(2002)
    assert sim.world.count(EnemyTag) == 2


def test_spawned_enemy_culled_off_bounds_without_side_effects():
    sim = Simulation(GameConfig(), rng=random.Random(3), start_time=0.0)
    events = sim.step(1001)
    enemy = [e for e in events if e['type'] == 'enemy_spawned'][0]['entity']

    pos = sim.world.get_component(enemy, Position)
    pos.x, pos.y = -500, -500
    events = sim.step(1100)

    assert 'enemy_culled' in [e['type'] for e in events]
    assert not sim.world.is_alive(enemy)
    assert (sim.score, sim.kill_count) == (0, 0)


def test_enemy_contact_scenario(sim):
    enemy = create_enemy(sim.world, 385, 285, sim.config, target=sim.player_id)

    sim.step(16)

    assert 95 <= sim.health <= 99
    assert not sim.world.is_alive(enemy)
    assert sim.snapshot().invincible


def test_invincibility_expires_after_window(sim):
    sim.damage_player(5, now=0)
    sim.step(999)
    assert sim.snapshot().invincible
    sim.step(1000)
    assert not sim.snapshot().invincible


def test_boss_spawns_at_threshold_and_blocks_spawning():
    sim = Simulation(GameConfig(), rng=random.Random(5), start_time=0.0)
    sim.policy.next_boss_kill = 10
    sim.board.kill_count = 10

    events = sim.step(5000)

    bosses = list(sim.world.query(BossTag))
    assert len(bosses) == 1
    assert sim.world.get_component(sim.boss_id, Health).current == 450
    assert 'enemy_spawned' not in [e['type'] for e in events]

    for now in range(6000, 20000, 1000):
        sim.step(now)
    assert sim.world.count(BossTag) == 1
    assert sim.world.count(EnemyTag) == 0


def test_missile_defeats_boss_and_resets_cycle():
    recorder = Recorder()
    sim = Simulation(GameConfig(enemy_spawn_interval_ms=1e9), hooks=recorder.hooks(),
                     rng=random.Random(5))
    sim.board.kill_count = sim.policy.next_boss_kill
    sim.step(16)
    boss = sim.boss_id
    sim.world.get_component(boss, Health).current = 100
    b_pos = sim.world.get_component(boss, Position)
    spawn_missile(sim.world, b_pos.x + 35, b_pos.y + 35, 0.0, sim.config, now=16)

    events = sim.step(32)

    assert 'boss_defeated' in [e['type'] for e in events]
    assert sim.boss_id is None
    assert not sim.world.is_alive(boss)
    assert sim.kill_count == 0
    assert 10 <= sim.next_boss_kill <= 25
    assert recorder.named('on_missile_hit') == [()]


def test_spawning_resumes_after_boss_defeat():
    sim = Simulation(GameConfig(), rng=random.Random(5))
    sim.board.kill_count = sim.policy.next_boss_kill
    sim.step(16)
    sim.world.get_component(sim.boss_id, Health).current = 0
    sim.step(32)
    assert sim.boss_id is None

    events = sim.step(1100)
    assert 'enemy_spawned' in [e['type'] for e in events]


def test_defeat_halts_before_update():
    recorder = Recorder()
    sim = Simulation(GameConfig(), hooks=recorder.hooks(), rng=random.Random(1))
    sim.world.get_component(sim.player_id, Health).current = 0

    assert sim.step(5000) == []

    assert sim.phase is Phase.DEFEAT
    assert sim.frame == 0
    assert sim.world.count(EnemyTag) == 0
    assert recorder.named('on_session_end') == [(Phase.DEFEAT,)]


def test_terminal_session_ignores_mutations(sim):
    sim.end_session()
    assert sim.phase is Phase.VICTORY
    assert sim.is_over

    sim.input.set_fire_held(True)
    assert sim.step(1000) == []
    assert sim.damage_player(50, now=0) == 0
    assert sim.heal_player(5) == 0
    assert sim.health == 100

    # A second terminal signal does not change the outcome
    sim.end_session()
    assert sim.phase is Phase.VICTORY


def test_hooks_report_score_health_and_shots():
    recorder = Recorder()
    sim = Simulation(GameConfig(enemy_spawn_interval_ms=1e9),
                     hooks=recorder.hooks(), rng=random.Random(2))
    create_enemy(sim.world, 600, 300, sim.config, target=sim.player_id)
    spawn_bullet(sim.world, 605, 310, 0.0, sim.config, now=0)
    # Touches the player's corner, clear of the upward bullet
    create_enemy(sim.world, 355, 255, sim.config, target=sim.player_id)
    sim.input.set_fire_held(True)
    sim.input.aim_at(400, 0)

    sim.step(16)

    assert recorder.named('on_score') == [(10, 10)]
    assert recorder.named('on_shoot') == [()]
    (current, maximum), = recorder.named('on_health')
    assert 95 <= current <= 99 and maximum == 100

    # Unchanged values are not re-reported
    sim.input.set_fire_held(False)
    sim.step(32)
    assert len(recorder.named('on_score')) == 1
    assert len(recorder.named('on_health')) == 1


def test_health_hook_reports_net_change_since_last_report():
    recorder = Recorder()
    sim = Simulation(GameConfig(enemy_spawn_interval_ms=1e9),
                     hooks=recorder.hooks(), rng=random.Random(2))

    sim.damage_player(10, now=0)
    sim.heal_player(10)
    sim.step(16)
    assert recorder.named('on_health') == []

    # Outlast the invincibility window opened by the first hit
    sim.step(1016)
    sim.damage_player(5, now=1016)
    sim.step(1032)
    sim.step(1048)
    assert recorder.named('on_health') == [(95, 100)]


def test_missile_launch_and_cooldown_decay(sim):
    recorder = Recorder()
    sim.hooks = recorder.hooks()
    sim.input.request_missile()

    sim.step(16)

    weapons = sim.world.get_component(sim.player_id, WeaponState)
    assert sim.world.count(MissileTag) == 1
    assert weapons.missile_cooldown == 10000 - 16
    assert recorder.named('on_missile_launch') == [()]

    sim.input.request_missile()
    sim.step(32)
    assert sim.world.count(MissileTag) == 1
    assert not sim.snapshot().missile_ready


def test_no_stale_entities_after_step(sim):
    sim.input.set_fire_held(True)
    for now in range(0, 3000, 16):
        sim.step(now)
        assert sim.world.pending_removals() == 0
    # Bullets leave the field well before their lifetime runs out
    assert 0 < sim.world.count(BulletTag) <= 5


def test_snapshot_lists_every_sprite(sim):
    create_enemy(sim.world, 10, 10, sim.config, target=sim.player_id)
    snap = sim.snapshot()

    kinds = sorted(s.kind for s in snap.sprites)
    assert kinds == ['enemy', 'player']
    assert snap.phase is Phase.RUNNING
    assert snap.field_size == (800, 600)
    assert snap.boss_health is None
    assert snap.missile_ready


def test_seeded_sessions_replay():
    def play(seed):
        sim = Simulation(GameConfig(), rng=random.Random(seed))
        sim.input.set_fire_held(True)
        for now in range(0, 10000, 16):
            sim.input.aim_at(0, 0)
            sim.step(now)
        return sim.score, sim.health, sim.world.entity_count()

    assert play(11) == play(11)
