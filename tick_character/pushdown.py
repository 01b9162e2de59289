"""Pushdown automaton: a stack of states where only the top is live."""
from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Callable

from tick_character import motion
from tick_character.base import ControllerBase
from tick_character.types import ControllerConfig, InputSnapshot, Projectile, StackUnderflowError

if TYPE_CHECKING:
    from tick_character.bus import SignalBus


class StackState(str, Enum):
    STANDING = "standing"
    WALKING_LEFT = "walking_left"
    WALKING_RIGHT = "walking_right"
    JUMPING = "jumping"
    FIRING = "firing"


class PushdownAutomaton(ControllerBase):
    """Entering a state pushes it, leaving pops it.

    Popping resumes whatever was underneath, so a jump started mid-walk
    lands back in the walk without any saved return state. ``STANDING`` sits
    at the bottom and is never popped.

    ``STANDING`` and the walking states check the walk, jump and fire
    conditions independently, so one tick can push more than one state
    (e.g. jump and fire held together push ``JUMPING`` then ``FIRING``).

    ``on_fire(projectile)`` is called once per ``FIRING`` frame, after the
    projectile has been added to ``projectiles``.
    """

    kind = "pda"

    def __init__(
        self,
        config: ControllerConfig | None = None,
        bus: SignalBus | None = None,
        on_fire: Callable[[Projectile], None] | None = None,
    ) -> None:
        super().__init__(config, bus)
        self.on_fire = on_fire
        self._stack: list[StackState] = [StackState.STANDING]
        self._handlers: dict[StackState, Callable[[InputSnapshot], None]] = {
            StackState.STANDING: self._standing,
            StackState.WALKING_LEFT: self._walking_left,
            StackState.WALKING_RIGHT: self._walking_right,
            StackState.JUMPING: self._jumping,
            StackState.FIRING: self._firing,
        }

    @property
    def top(self) -> StackState:
        return self._stack[-1]

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def stack(self) -> tuple[StackState, ...]:
        """Bottom-to-top copy of the state stack."""
        return tuple(self._stack)

    def push(self, state: StackState) -> None:
        old = self.top
        self._stack.append(state)
        self._transition(old.value, state.value)

    def pop(self) -> StackState:
        """Leave the top state. Raises StackUnderflowError on the sentinel."""
        if len(self._stack) == 1:
            raise StackUnderflowError(
                f"Cannot pop {self._stack[0].value!r}: it is the bottom of the stack"
            )
        state = self._stack.pop()
        self._transition(state.value, self.top.value)
        return state

    def tick(self, inputs: InputSnapshot) -> None:
        self._handlers[self.top](inputs)
        motion.advance_projectiles(self.projectiles)

    def fire(self) -> Projectile:
        """The one-shot action performed by a ``FIRING`` frame."""
        projectile = motion.spawn_projectile(self.body, self.config)
        self._fired(projectile)
        if self.on_fire is not None:
            self.on_fire(projectile)
        return projectile

    # -- State handlers --

    def _push_interrupts(self, inputs: InputSnapshot) -> None:
        if inputs.jump and self.body.on_ground(self.config.ground_level):
            self.push(StackState.JUMPING)
            motion.take_off(self.body, self.config)
        if inputs.fire:
            self.push(StackState.FIRING)

    def _standing(self, inputs: InputSnapshot) -> None:
        if inputs.move_left:
            self.push(StackState.WALKING_LEFT)
        elif inputs.move_right:
            self.push(StackState.WALKING_RIGHT)
        self._push_interrupts(inputs)

    def _walking_left(self, inputs: InputSnapshot) -> None:
        self.body.x -= self.config.speed
        if not inputs.move_left:
            self.pop()
        self._push_interrupts(inputs)

    def _walking_right(self, inputs: InputSnapshot) -> None:
        self.body.x += self.config.speed
        if not inputs.move_right:
            self.pop()
        self._push_interrupts(inputs)

    def _jumping(self, inputs: InputSnapshot) -> None:
        if motion.fall(self.body, self.config):
            self._landed()
            self.pop()

    def _firing(self, inputs: InputSnapshot) -> None:
        self.fire()
        self.pop()
