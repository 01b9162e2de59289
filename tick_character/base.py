"""State shared by all controllers: config, body, projectiles and signal output."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from tick_character.types import ControllerConfig, Projectile

if TYPE_CHECKING:
    from tick_character.bus import SignalBus

logger = logging.getLogger(__name__)


class ControllerBase:
    """Owns the kinematic state of one character.

    Subclasses implement ``tick``. The bus is optional; when given, signals
    are queued on it and delivered on the next ``flush``.
    """

    kind = "controller"

    def __init__(
        self,
        config: ControllerConfig | None = None,
        bus: SignalBus | None = None,
    ) -> None:
        self.config = config if config is not None else ControllerConfig()
        self.body = self.config.spawn_body()
        self.projectiles: list[Projectile] = []
        self.bus = bus

    @property
    def x(self) -> float:
        return self.body.x

    @property
    def y(self) -> float:
        return self.body.y

    @property
    def vertical_velocity(self) -> float:
        return self.body.vertical_velocity

    def _publish(self, signal_name: str, **data: Any) -> None:
        if self.bus is not None:
            self.bus.publish(signal_name, controller=self.kind, **data)

    def _transition(self, old: str, new: str) -> None:
        logger.debug("%s: %s -> %s", self.kind, old, new)
        self._publish("transition", old=old, new=new)

    def _entered(self, state: str) -> None:
        logger.debug("%s: entered %s", self.kind, state)
        self._publish("entered", state=state)

    def _exited(self, state: str) -> None:
        logger.debug("%s: exited %s", self.kind, state)
        self._publish("exited", state=state)

    def _landed(self) -> None:
        logger.debug("%s: landed at y=%s", self.kind, self.body.y)
        self._publish("landed", y=self.body.y)

    def _fired(self, projectile: Projectile) -> None:
        self.projectiles.append(projectile)
        logger.debug("%s: fired from (%s, %s)", self.kind, projectile.x, projectile.y)
        self._publish("fired", projectile=projectile)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(x={self.body.x}, y={self.body.y}, "
            f"vertical_velocity={self.body.vertical_velocity})"
        )
