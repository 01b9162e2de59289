"""Pure kinematics helpers shared by every controller variant."""
from __future__ import annotations

from tick_character.types import ControllerConfig, InputSnapshot, KinematicState, Projectile


def walk(body: KinematicState, inputs: InputSnapshot, speed: float) -> None:
    """Apply one tick of horizontal movement. Both keys held cancel out."""
    if inputs.move_left:
        body.x -= speed
    if inputs.move_right:
        body.x += speed


def take_off(body: KinematicState, config: ControllerConfig) -> None:
    body.vertical_velocity = config.jump_force


def fall(body: KinematicState, config: ControllerConfig) -> bool:
    """Semi-implicit Euler step under gravity. Returns True on landing.

    Landing clamps ``y`` to the ground and zeroes the vertical velocity.
    """
    body.vertical_velocity += config.gravity
    body.y += body.vertical_velocity
    if body.y >= config.ground_level:
        body.y = config.ground_level
        body.vertical_velocity = 0.0
        return True
    return False


def spawn_projectile(body: KinematicState, config: ControllerConfig) -> Projectile:
    return Projectile(
        x=body.x + config.projectile_offset,
        y=body.y,
        speed=config.projectile_speed,
    )


def advance_projectiles(projectiles: list[Projectile]) -> None:
    # No culling: projectiles live for the whole playthrough.
    for projectile in projectiles:
        projectile.x += projectile.speed
