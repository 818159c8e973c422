"""
Geometry and Collision
=======================
Rectangle overlap and direction helpers shared by every system.
"""

from typing import NamedTuple, Optional, Tuple
import math

from .ecs import World
from .components import Position, CollisionBox


class Rect(NamedTuple):
    x: float
    y: float
    w: float
    h: float

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.w / 2, self.y + self.h / 2


def rects_overlap(a: Rect, b: Rect) -> bool:
    """Strict AABB overlap. Touching edges do not count."""
    return (
        a.x < b.x + b.w and
        a.x + a.w > b.x and
        a.y < b.y + b.h and
        a.y + a.h > b.y
    )


def entity_rect(world: World, entity_id: int) -> Optional[Rect]:
    """Collision rectangle of an entity, or None if it has no box."""
    pos = world.get_component(entity_id, Position)
    box = world.get_component(entity_id, CollisionBox)
    if pos is None or box is None:
        return None
    return Rect(pos.x, pos.y, box.width, box.height)


def collision_check(world: World, first: int, second: int) -> bool:
    """Check AABB overlap between two entities."""
    a = entity_rect(world, first)
    b = entity_rect(world, second)
    if a is None or b is None:
        return False
    return rects_overlap(a, b)


def center_of(pos: Position, box: CollisionBox) -> Tuple[float, float]:
    return pos.x + box.width / 2, pos.y + box.height / 2


def angle_between(from_x: float, from_y: float, to_x: float, to_y: float) -> float:
    """Heading in radians from one point to another."""
    return math.atan2(to_y - from_y, to_x - from_x)


def is_outside(pos: Position, width: float, height: float, margin: float) -> bool:
    """True when the position lies beyond the field extended by margin."""
    return (
        pos.x < -margin or pos.x > width + margin or
        pos.y < -margin or pos.y > height + margin
    )
