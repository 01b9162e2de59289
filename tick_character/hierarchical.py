"""Hierarchical state machine with orthogonal jumping and shooting regions."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator

from tick_character import motion
from tick_character.base import ControllerBase
from tick_character.types import ControllerConfig, InputSnapshot

if TYPE_CHECKING:
    from tick_character.bus import SignalBus


@dataclass
class StateNode:
    """A state with an active flag and named substates.

    Paths use dot-notation relative to this node (e.g. ``"idle.walking"``).
    A substate may only be active while its parent is: ``activate`` turns on
    every ancestor along the path, ``deactivate`` turns off the whole subtree.
    """

    name: str
    active: bool = False
    substates: dict[str, StateNode] = field(default_factory=dict)

    def find(self, path: str) -> StateNode:
        """Resolve a dotted path. Raises KeyError for unknown states."""
        node = self
        for part in path.split("."):
            try:
                node = node.substates[part]
            except KeyError:
                raise KeyError(f"Unknown state {path!r} under {self.name!r}") from None
        return node

    def activate(self, path: str) -> None:
        self.find(path)
        node = self
        for part in path.split("."):
            node = node.substates[part]
            node.active = True

    def deactivate(self, path: str) -> None:
        for node in self.find(path).walk():
            node.active = False

    def walk(self) -> Iterator[StateNode]:
        """Yield this node and every descendant, depth first."""
        yield self
        for child in self.substates.values():
            yield from child.walk()

    def active_paths(self, prefix: str = "") -> list[str]:
        paths: list[str] = []
        for name, child in self.substates.items():
            path = f"{prefix}{name}"
            if child.active:
                paths.append(path)
                paths.extend(child.active_paths(path + "."))
        return paths


def default_tree() -> StateNode:
    return StateNode(
        "root",
        active=True,
        substates={
            "idle": StateNode("idle", active=True, substates={"walking": StateNode("walking")}),
            "jumping": StateNode("jumping"),
            "shooting": StateNode("shooting"),
        },
    )


class HierarchicalStateMachine(ControllerBase):
    """Walking nests under idle; jumping and shooting are orthogonal regions.

    Region changes are requested from outside through ``start_walking``,
    ``stop_walking``, ``start_jumping`` and ``start_shooting``; ``tick`` only
    applies physics for the regions currently active.

    Shooting is a one-shot inside a persistent region: ``start_shooting``
    arms a single shot that the next ``tick`` fires, but the ``shooting``
    state itself stays active afterwards.
    """

    kind = "hsm"
    walking_path = "idle.walking"
    can_shoot = True

    def __init__(
        self,
        config: ControllerConfig | None = None,
        bus: SignalBus | None = None,
    ) -> None:
        super().__init__(config, bus)
        self.states = default_tree()
        self.shot_armed = False

    def is_active(self, path: str) -> bool:
        return self.states.find(path).active

    def active_paths(self) -> list[str]:
        return self.states.active_paths()

    def activate(self, path: str) -> None:
        before = set(self.active_paths())
        self.states.activate(path)
        for entered in (p for p in self.active_paths() if p not in before):
            self._entered(entered)

    def deactivate(self, path: str) -> None:
        before = self.active_paths()
        self.states.deactivate(path)
        after = set(self.active_paths())
        for exited in (p for p in reversed(before) if p not in after):
            self._exited(exited)

    # -- Transition requests --

    def start_walking(self) -> None:
        if not self.is_active("idle.walking"):
            self.activate("idle.walking")

    def stop_walking(self) -> None:
        if self.is_active("idle.walking"):
            self.deactivate("idle.walking")
        if not self.is_active("idle"):
            self.activate("idle")

    def start_jumping(self) -> None:
        if self.is_active("jumping"):
            return
        self.activate("jumping")
        motion.take_off(self.body, self.config)

    def start_shooting(self) -> None:
        if not self.is_active("shooting"):
            self.activate("shooting")
        self.shot_armed = True

    # -- Per-tick update --

    def tick(self, inputs: InputSnapshot) -> None:
        if self.is_active("idle.walking"):
            motion.walk(self.body, inputs, self.config.speed)

        if self.is_active("jumping") and motion.fall(self.body, self.config):
            self.deactivate("jumping")
            self._landed()

        if self.is_active("shooting") and self.shot_armed:
            self._fired(motion.spawn_projectile(self.body, self.config))
            self.shot_armed = False

        motion.advance_projectiles(self.projectiles)
