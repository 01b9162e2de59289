"""Flat finite state machine: one active state, switch-style transitions."""
from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from tick_character import motion
from tick_character.base import ControllerBase
from tick_character.types import ControllerConfig, InputSnapshot

if TYPE_CHECKING:
    from tick_character.bus import SignalBus


class FlatState(str, Enum):
    IDLE = "idle"
    WALKING = "walking"
    JUMPING = "jumping"


class FlatStateMachine(ControllerBase):
    """Exactly one of idle, walking or jumping is active at any time.

    Jumping ignores input entirely until the character lands, then returns
    to idle. A jump requested in the same tick as a walk transition wins.
    """

    kind = "fsm"

    def __init__(
        self,
        config: ControllerConfig | None = None,
        bus: SignalBus | None = None,
    ) -> None:
        super().__init__(config, bus)
        self.state = FlatState.IDLE

    @property
    def is_jumping(self) -> bool:
        return self.state is FlatState.JUMPING

    def tick(self, inputs: InputSnapshot) -> None:
        if self.state is FlatState.IDLE:
            target = FlatState.WALKING if inputs.horizontal else None
            if inputs.jump:
                target = FlatState.JUMPING
        elif self.state is FlatState.WALKING:
            motion.walk(self.body, inputs, self.config.speed)
            if inputs.jump:
                target = FlatState.JUMPING
            elif not inputs.horizontal:
                target = FlatState.IDLE
            else:
                target = None
        else:
            target = FlatState.IDLE if motion.fall(self.body, self.config) else None
            if target is not None:
                self._landed()

        if target is None:
            return
        if target is FlatState.JUMPING:
            motion.take_off(self.body, self.config)
        old, self.state = self.state, target
        self._transition(old.value, target.value)
