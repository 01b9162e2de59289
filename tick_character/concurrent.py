"""Concurrent state machine: independent walking and jumping flags."""
from __future__ import annotations

from typing import TYPE_CHECKING

from tick_character import motion
from tick_character.base import ControllerBase
from tick_character.types import ControllerConfig, InputSnapshot

if TYPE_CHECKING:
    from tick_character.bus import SignalBus


class ConcurrentStateMachine(ControllerBase):
    """Both regions are evaluated every tick with no priority between them.

    Nothing links the flags: the character can walk and jump at once, and
    both the horizontal and vertical updates land in the same tick.
    """

    kind = "csm"
    walking_path = "walking"
    can_shoot = False

    def __init__(
        self,
        config: ControllerConfig | None = None,
        bus: SignalBus | None = None,
    ) -> None:
        super().__init__(config, bus)
        self.states: dict[str, bool] = {"walking": False, "jumping": False}

    def is_active(self, name: str) -> bool:
        return self.states[name]

    def _set(self, name: str, value: bool) -> None:
        if self.states[name] == value:
            return
        self.states[name] = value
        if value:
            self._entered(name)
        else:
            self._exited(name)

    def start_walking(self) -> None:
        self._set("walking", True)

    def stop_walking(self) -> None:
        self._set("walking", False)

    def start_jumping(self) -> None:
        if self.states["jumping"]:
            return
        self._set("jumping", True)
        motion.take_off(self.body, self.config)

    def tick(self, inputs: InputSnapshot) -> None:
        if self.states["walking"]:
            motion.walk(self.body, inputs, self.config.speed)

        if self.states["jumping"] and motion.fall(self.body, self.config):
            self._set("jumping", False)
            self._landed()
