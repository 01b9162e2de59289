"""Build controllers by name."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from tick_character.commands import make_region_policy
from tick_character.concurrent import ConcurrentStateMachine
from tick_character.flat import FlatStateMachine
from tick_character.hierarchical import HierarchicalStateMachine
from tick_character.pushdown import PushdownAutomaton
from tick_character.types import Controller, ControllerConfig, InputSnapshot

if TYPE_CHECKING:
    from tick_character.bus import SignalBus

_CONTROLLERS: dict[str, type] = {
    "fsm": FlatStateMachine,
    "hsm": HierarchicalStateMachine,
    "csm": ConcurrentStateMachine,
    "pda": PushdownAutomaton,
}

CONTROLLER_KINDS: tuple[str, ...] = tuple(_CONTROLLERS)


def make_controller(
    kind: str,
    config: ControllerConfig | None = None,
    bus: SignalBus | None = None,
) -> Controller:
    """Instantiate a controller by kind. Raises KeyError for unknown kinds."""
    try:
        cls = _CONTROLLERS[kind]
    except KeyError:
        raise KeyError(
            f"Unknown controller kind {kind!r}, expected one of {CONTROLLER_KINDS}"
        ) from None
    return cls(config, bus)


def make_policy(controller: Controller) -> Callable[[InputSnapshot], Any] | None:
    """Input policy for region-based controllers; None for self-driven ones."""
    if isinstance(controller, (HierarchicalStateMachine, ConcurrentStateMachine)):
        return make_region_policy(controller)
    return None
