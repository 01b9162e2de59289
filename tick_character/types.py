"""Shared data types for the character controllers."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Protocol

if TYPE_CHECKING:
    from tick_character.bus import SignalBus


@dataclass(frozen=True, slots=True)
class InputSnapshot:
    """Held keys for one tick. Read-only for the duration of ``tick``."""

    move_left: bool = False
    move_right: bool = False
    jump: bool = False
    fire: bool = False

    @property
    def horizontal(self) -> bool:
        return self.move_left or self.move_right

    @classmethod
    def from_keys(cls, held: Iterable[str]) -> InputSnapshot:
        """Build a snapshot from action names (``left``, ``right``, ``jump``, ``fire``).

        >>> InputSnapshot.from_keys({"left", "jump"})
        InputSnapshot(move_left=True, move_right=False, jump=True, fire=False)
        """
        keys = set(held)
        unknown = keys - _ACTIONS
        if unknown:
            raise KeyError(f"Unknown input action(s): {sorted(unknown)}")
        return cls(
            move_left="left" in keys,
            move_right="right" in keys,
            jump="jump" in keys,
            fire="fire" in keys,
        )


_ACTIONS = frozenset({"left", "right", "jump", "fire"})

IDLE_INPUT = InputSnapshot()


@dataclass
class KinematicState:
    """Position and vertical velocity owned by a single controller."""

    x: float
    y: float
    vertical_velocity: float = 0.0

    def on_ground(self, ground_level: float) -> bool:
        return self.y == ground_level


@dataclass
class Projectile:
    """Spawned by a fire action. Moves horizontally by ``speed`` every tick."""

    x: float
    y: float
    speed: float


@dataclass(frozen=True)
class ControllerConfig:
    """Tuning constants shared by every controller variant.

    Attributes:
        gravity: Added to vertical velocity each airborne tick (px/tick^2).
        jump_force: Vertical velocity applied on take-off. Negative is up.
        speed: Horizontal movement per walking tick (px/tick).
        ground_level: Y coordinate of the floor. Landing clamps to it.
        start_x: Initial horizontal position.
        projectile_offset: Horizontal spawn offset of projectiles.
        projectile_speed: Horizontal speed of spawned projectiles.
    """

    gravity: float = 0.5
    jump_force: float = -12.0
    speed: float = 4.0
    ground_level: float = 300.0
    start_x: float = 100.0
    projectile_offset: float = 50.0
    projectile_speed: float = 5.0

    def __post_init__(self) -> None:
        if self.gravity <= 0:
            raise ValueError(f"gravity must be > 0, got {self.gravity}")
        if self.jump_force >= 0:
            raise ValueError(f"jump_force must be < 0, got {self.jump_force}")
        if self.speed < 0:
            raise ValueError(f"speed must be >= 0, got {self.speed}")

    def spawn_body(self) -> KinematicState:
        return KinematicState(x=self.start_x, y=self.ground_level)


class StackUnderflowError(RuntimeError):
    """Raised when a pushdown automaton would pop its bottom sentinel."""


class Controller(Protocol):
    """What the game loop and render collaborator rely on."""

    config: ControllerConfig
    body: KinematicState
    projectiles: list[Projectile]
    bus: SignalBus | None

    def tick(self, inputs: InputSnapshot) -> None: ...
