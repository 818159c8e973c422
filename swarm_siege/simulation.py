"""
Simulation
===========
One session of the game: owns the World, the spawn policy and the score,
and advances everything by one step per frame.

The presentation layer talks to it through three seams:
  - ``Simulation.input``: latest-known input state
  - ``GameHooks``: optional callbacks for score, health and sound cues
  - ``Simulation.snapshot()``: read-only view for rendering
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

from .ecs import World
from .config import GameConfig
from .components import (
    Position, CollisionBox, Health, Invulnerable, PlayerControlled,
    WeaponState, EnemyTag, BossTag, BulletTag, MissileTag, HealthPickup
)
from .combat import Scoreboard, resolve_collisions
from .enemies import create_enemy, create_boss
from .player import (
    InputState, create_player, player_movement_system, update_aim,
    weapon_system, take_damage, heal
)
from .projectiles import projectile_system
from .spawner import SpawnPolicy
from .systems import (
    pursuit_system, movement_system, invulnerability_system,
    missile_cooldown_system
)


logger = logging.getLogger(__name__)


class Phase(Enum):
    RUNNING = 'running'
    DEFEAT = 'defeat'
    VICTORY = 'victory'


@dataclass
class GameHooks:
    """
    Callbacks into the presentation layer. Every hook is optional.

    on_score(delta, total) and on_health(current, maximum) are change
    notifications. They are reported after each step's collision
    resolution, and only when the value differs from the last report, so
    a step that leaves score or health untouched emits nothing for it.
    Several changes inside one step arrive as a single call carrying the
    net result. The rest are fire-and-forget cues, one call per event.
    """
    on_score: Optional[Callable[[int, int], None]] = None
    on_health: Optional[Callable[[int, int], None]] = None
    on_shoot: Optional[Callable[[], None]] = None
    on_missile_launch: Optional[Callable[[], None]] = None
    on_missile_hit: Optional[Callable[[], None]] = None
    on_session_end: Optional[Callable[[Phase], None]] = None

    def emit(self, name: str, *args) -> None:
        hook = getattr(self, name)
        if hook is not None:
            hook(*args)


@dataclass
class SpriteView:
    """Collision box of one entity, for drawing."""
    kind: str
    x: float
    y: float
    width: float
    height: float


@dataclass
class FrameSnapshot:
    """Authoritative state after a step."""
    phase: Phase
    frame: int
    score: int
    health: int
    max_health: int
    invincible: bool
    aim_angle: float
    missile_cooldown: float
    missile_cooldown_max: float
    kill_count: int
    next_boss_kill: int
    boss_health: Optional[int]
    boss_max_health: Optional[int]
    field_size: Tuple[float, float]
    sprites: List[SpriteView] = field(default_factory=list)

    @property
    def missile_ready(self) -> bool:
        return self.missile_cooldown <= 0


class Simulation:
    """
    Central game state container.

    Construction validates the config and creates the player. Once a
    terminal phase is reached every mutation is an inert no-op; restart
    by building a new Simulation.
    """

    def __init__(self, config: Optional[GameConfig] = None,
                 hooks: Optional[GameHooks] = None,
                 rng: Optional[random.Random] = None,
                 start_time: float = 0.0):
        self.config = config or GameConfig()
        self.config.validate()
        self.hooks = hooks or GameHooks()
        self.rng = rng or random.Random()

        self.world = World()
        self.input = InputState()
        self.policy = SpawnPolicy(self.config, self.rng, start_time)
        self.board = Scoreboard()

        self.phase = Phase.RUNNING
        self.frame = 0
        self.boss_id: Optional[int] = None
        self.player_id = create_player(self.world, self.config)

        self._reported_health = self.health
        logger.debug('session started, first boss after %d kills',
                     self.policy.next_boss_kill)

    # =========================================================================
    # STATE ACCESSORS
    # =========================================================================

    @property
    def score(self) -> int:
        return self.board.score

    @property
    def kill_count(self) -> int:
        return self.board.kill_count

    @property
    def next_boss_kill(self) -> int:
        return self.policy.next_boss_kill

    @property
    def health(self) -> int:
        return self.world.get_component(self.player_id, Health).current

    @property
    def is_over(self) -> bool:
        return self.phase is not Phase.RUNNING

    @property
    def boss_active(self) -> bool:
        return self.boss_id is not None and self.world.is_alive(self.boss_id)

    # =========================================================================
    # TERMINAL STATES
    # =========================================================================

    def end_session(self) -> None:
        """External session-end signal: the player survived."""
        if self.is_over:
            return
        self._finish(Phase.VICTORY)

    def damage_player(self, amount: int, now: float) -> int:
        """Damage the player from outside the step. Inert once the session is over."""
        if self.is_over:
            return 0
        return take_damage(self.world, self.player_id, amount, now,
                           self.config.invincible_ms)

    def heal_player(self, amount: int) -> int:
        if self.is_over:
            return 0
        return heal(self.world, self.player_id, amount)

    def _finish(self, phase: Phase) -> None:
        self.phase = phase
        self.input.release_all()
        logger.info('session over: %s, score %d', phase.value, self.score)
        self.hooks.emit('on_session_end', phase)

    # =========================================================================
    # STEP
    # =========================================================================

    def step(self, now: float) -> List[dict]:
        """
        Advance the simulation by one frame at timestamp ``now`` (ms).

        Returns the events produced by this step.
        """
        if self.is_over:
            return []

        if self.health <= 0:
            self._finish(Phase.DEFEAT)
            return []

        self.frame += 1
        world = self.world
        config = self.config
        score_before = self.board.score
        events = []

        invulnerability_system(world, now)

        # Player
        update_aim(world, self.player_id, self.input)
        player_movement_system(world, self.input, config.field_width, config.field_height)
        events.extend(weapon_system(world, self.player_id, self.input, config, now))

        # Spawning
        if self.policy.should_spawn_boss(self.board.kill_count, self.boss_active):
            x, y = self.policy.boss_position()
            self.boss_id = create_boss(world, x, y, config, target=self.player_id)
            logger.debug('boss %d spawned at (%.0f, %.0f)', self.boss_id, x, y)
            events.append({'type': 'boss_spawned', 'entity': self.boss_id})

        if self.policy.should_spawn_enemy(now, self.boss_active):
            x, y = self.policy.perimeter_position()
            enemy_id = create_enemy(world, x, y, config, target=self.player_id)
            self.policy.mark_enemy_spawned(now)
            events.append({'type': 'enemy_spawned', 'entity': enemy_id})

        # Motion
        projectile_system(world, now, config.field_width, config.field_height,
                          config.cull_margin)
        pursuit_system(world)
        movement_system(world)

        # Resolution
        events.extend(resolve_collisions(
            world, self.player_id, self.boss_id if self.boss_active else None,
            self.board, self.policy, config, now
        ))

        missile_cooldown_system(world, config.missile_cooldown_step_ms)

        world.process_dead_entities()
        if self.boss_id is not None and not world.is_alive(self.boss_id):
            self.boss_id = None

        self._report(events, score_before)
        return events

    def _report(self, events: List[dict], score_before: int) -> None:
        for event in events:
            if event['type'] == 'shoot':
                self.hooks.emit('on_shoot')
            elif event['type'] == 'missile_launch':
                self.hooks.emit('on_missile_launch')
            elif event['type'] == 'missile_hit':
                self.hooks.emit('on_missile_hit')

        delta = self.board.score - score_before
        if delta:
            self.hooks.emit('on_score', delta, self.board.score)

        health = self.world.get_component(self.player_id, Health)
        if health.current != self._reported_health:
            self._reported_health = health.current
            self.hooks.emit('on_health', health.current, health.maximum)

    # =========================================================================
    # SNAPSHOT
    # =========================================================================

    def snapshot(self) -> FrameSnapshot:
        """Build a render-ready view of the current state."""
        world = self.world
        health = world.get_component(self.player_id, Health)
        weapons = world.get_component(self.player_id, WeaponState)
        ctrl = world.get_component(self.player_id, PlayerControlled)

        boss_health = None
        boss_max = None
        if self.boss_active:
            b_health = world.get_component(self.boss_id, Health)
            boss_health, boss_max = b_health.current, b_health.maximum

        sprites = []
        for kind, tag in (('pickup', HealthPickup), ('enemy', EnemyTag),
                          ('boss', BossTag), ('bullet', BulletTag),
                          ('missile', MissileTag)):
            for entity_id, pos, box, _ in world.query(Position, CollisionBox, tag):
                sprites.append(SpriteView(kind, pos.x, pos.y, box.width, box.height))

        p_pos = world.get_component(self.player_id, Position)
        p_box = world.get_component(self.player_id, CollisionBox)
        sprites.append(SpriteView('player', p_pos.x, p_pos.y, p_box.width, p_box.height))

        return FrameSnapshot(
            phase=self.phase,
            frame=self.frame,
            score=self.board.score,
            health=health.current,
            max_health=health.maximum,
            invincible=world.has_component(self.player_id, Invulnerable),
            aim_angle=ctrl.angle,
            missile_cooldown=weapons.missile_cooldown,
            missile_cooldown_max=weapons.missile_cooldown_max,
            kill_count=self.board.kill_count,
            next_boss_kill=self.policy.next_boss_kill,
            boss_health=boss_health,
            boss_max_health=boss_max,
            field_size=(self.config.field_width, self.config.field_height),
            sprites=sprites,
        )
