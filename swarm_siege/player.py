"""
Player Module
==============
Player entity creation, input state and the player-side systems:
movement, aiming, damage/healing and both weapons.
"""

from typing import Dict, List, Optional, Tuple

from .ecs import World
from .config import GameConfig
from .components import (
    Position, Velocity, CollisionBox, Health, Invulnerable,
    PlayerControlled, WeaponState, PlayerTag
)
from .geometry import angle_between, center_of
from .projectiles import spawn_bullet, spawn_missile


DIRECTIONS = ('up', 'down', 'left', 'right')


def create_player(world: World, config: GameConfig) -> int:
    """Create the player at the center of the field."""
    entity_id = world.create_entity()
    size = config.player_size

    world.add_component(entity_id, Position(
        config.field_width / 2 - size / 2,
        config.field_height / 2 - size / 2
    ))
    world.add_component(entity_id, Velocity(0, 0))
    world.add_component(entity_id, CollisionBox(size, size))

    world.add_component(entity_id, PlayerControlled(speed=config.player_speed))
    world.add_component(entity_id, WeaponState(
        shoot_interval=config.shoot_interval_ms,
        missile_cooldown_max=config.missile_cooldown_ms
    ))

    world.add_component(entity_id, Health(
        config.player_max_health, config.player_max_health
    ))
    world.add_component(entity_id, PlayerTag())

    return entity_id


class InputState:
    """
    Latest-known input, sampled once per step.

    Direction and fire flags are levels: they stay set until released.
    Aim and missile requests are events: last one wins, and they are
    consumed by the step that reads them.
    """

    def __init__(self):
        self.held: Dict[str, bool] = {d: False for d in DIRECTIONS}
        self.fire_held = False

        self._aim_angle: Optional[float] = None
        self._pointer: Optional[Tuple[float, float]] = None
        self._missile_requested = False

    def set_direction(self, direction: str, pressed: bool) -> None:
        if direction not in self.held:
            raise ValueError(f'unknown direction {direction!r}')
        self.held[direction] = bool(pressed)

    def set_fire_held(self, held: bool) -> None:
        self.fire_held = bool(held)

    def set_aim(self, angle: float) -> None:
        """Aim at an absolute angle in radians."""
        self._aim_angle = angle
        self._pointer = None

    def aim_at(self, x: float, y: float) -> None:
        """Aim at a pointer position; resolved against the player's center."""
        self._pointer = (x, y)
        self._aim_angle = None

    def request_missile(self) -> None:
        self._missile_requested = True

    def release_all(self) -> None:
        for direction in self.held:
            self.held[direction] = False
        self.fire_held = False

    def consume_aim(self) -> Tuple[Optional[float], Optional[Tuple[float, float]]]:
        """Check and consume the pending aim event."""
        aim = (self._aim_angle, self._pointer)
        self._aim_angle = None
        self._pointer = None
        return aim

    def consume_missile(self) -> bool:
        """Check and consume the missile trigger."""
        triggered = self._missile_requested
        self._missile_requested = False
        return triggered


def player_movement_system(world: World, input_state: InputState,
                           width: float, height: float) -> None:
    """
    Move the player along held directions, one axis step per direction.

    A step toward an edge is only taken while the box is still inside it,
    then the box is clamped so it never leaves the field.
    """
    for entity_id, pos, vel, box, ctrl in world.query(
        Position, Velocity, CollisionBox, PlayerControlled
    ):
        vel.x = 0.0
        vel.y = 0.0
        held = input_state.held

        if held['up'] and pos.y > 0:
            vel.y -= ctrl.speed
        if held['down'] and pos.y < height - box.height:
            vel.y += ctrl.speed
        if held['left'] and pos.x > 0:
            vel.x -= ctrl.speed
        if held['right'] and pos.x < width - box.width:
            vel.x += ctrl.speed

        pos.x = min(max(pos.x + vel.x, 0.0), width - box.width)
        pos.y = min(max(pos.y + vel.y, 0.0), height - box.height)


def update_aim(world: World, player_id: int, input_state: InputState) -> None:
    """Apply the pending aim event to the player's facing angle."""
    angle, pointer = input_state.consume_aim()
    ctrl = world.get_component(player_id, PlayerControlled)
    if ctrl is None:
        return

    if angle is not None:
        ctrl.angle = angle
    elif pointer is not None:
        pos = world.get_component(player_id, Position)
        box = world.get_component(player_id, CollisionBox)
        cx, cy = center_of(pos, box)
        ctrl.angle = angle_between(cx, cy, pointer[0], pointer[1])


def is_invincible(world: World, player_id: int) -> bool:
    return world.has_component(player_id, Invulnerable)


def take_damage(world: World, player_id: int, amount: int, now: float,
                invincible_ms: float) -> int:
    """
    Apply damage unless the player is invincible.

    Health is floored at zero and the invincibility window starts.
    Returns the damage actually dealt.
    """
    health = world.get_component(player_id, Health)
    if health is None or is_invincible(world, player_id):
        return 0

    before = health.current
    health.current = max(0, health.current - amount)
    world.add_component(player_id, Invulnerable(expires_at=now + invincible_ms))
    return before - health.current


def heal(world: World, player_id: int, amount: int) -> int:
    """Restore health up to the maximum. Returns the amount restored."""
    health = world.get_component(player_id, Health)
    if health is None:
        return 0
    before = health.current
    health.current = min(health.current + amount, health.maximum)
    return health.current - before


def weapon_system(world: World, player_id: int, input_state: InputState,
                  config: GameConfig, now: float) -> List[dict]:
    """
    Fire the primary and secondary weapons.

    Primary fire is gated by wall-clock time since the last shot.
    The missile fires only with a full charge and empties it.
    Returns shoot / missile_launch events.
    """
    events = []
    weapons = world.get_component(player_id, WeaponState)
    ctrl = world.get_component(player_id, PlayerControlled)
    pos = world.get_component(player_id, Position)
    box = world.get_component(player_id, CollisionBox)
    if weapons is None or ctrl is None:
        return events

    cx, cy = center_of(pos, box)

    if input_state.fire_held and (
        weapons.last_shot is None or now - weapons.last_shot > weapons.shoot_interval
    ):
        bullet_id = spawn_bullet(world, cx, cy, ctrl.angle, config, now)
        weapons.last_shot = now
        events.append({'type': 'shoot', 'entity': bullet_id})

    if input_state.consume_missile() and weapons.missile_ready:
        missile_id = spawn_missile(world, cx, cy, ctrl.angle, config, now)
        weapons.missile_cooldown = weapons.missile_cooldown_max
        events.append({'type': 'missile_launch', 'entity': missile_id})

    return events

