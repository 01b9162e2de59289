"""Transition-request commands for the region-based controllers (HSM, CSM)."""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from tick_character.types import InputSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StartWalking:
    pass


@dataclass(frozen=True)
class StopWalking:
    pass


@dataclass(frozen=True)
class StartJumping:
    pass


@dataclass(frozen=True)
class StartShooting:
    pass


class RegionMachine(Protocol):
    """A controller whose regions are toggled from outside.

    ``walking_path`` names the walking region for ``is_active``;
    ``can_shoot`` says whether there is a shooting region.
    """

    walking_path: str
    can_shoot: bool

    def is_active(self, name: str) -> bool: ...
    def start_walking(self) -> None: ...
    def stop_walking(self) -> None: ...
    def start_jumping(self) -> None: ...


class CommandQueue:
    """FIFO of commands dispatched by type to one handler each.

    Commands are plain frozen dataclasses. ``handler(cmd) -> bool`` returns
    True when the command changed the machine, False when it was a no-op.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[Any], Callable[[Any], bool]] = {}
        self._pending: deque[Any] = deque()

    def handle(self, cmd_type: type[Any], handler: Callable[[Any], bool]) -> None:
        """Register a handler for a command type. Later calls overwrite."""
        self._handlers[cmd_type] = handler

    def handles(self, cmd_type: type[Any]) -> bool:
        return cmd_type in self._handlers

    def enqueue(self, cmd: Any) -> None:
        self._pending.append(cmd)

    def pending(self) -> int:
        return len(self._pending)

    def drain(self) -> list[tuple[Any, bool]]:
        """Run every pending command in order. Returns ``[(cmd, accepted), ...]``.

        Raises ``TypeError`` if no handler is registered for a command's type.
        """
        results: list[tuple[Any, bool]] = []
        while self._pending:
            cmd = self._pending.popleft()
            handler = self._handlers.get(type(cmd))
            if handler is None:
                raise TypeError(f"No handler registered for {type(cmd).__qualname__}")
            results.append((cmd, handler(cmd)))
        return results


def bind_regions(queue: CommandQueue, machine: RegionMachine) -> None:
    """Register handlers that forward commands to the machine's transition requests.

    ``StartShooting`` is only bound when the machine has a shooting region.
    """
    walking = machine.walking_path

    def start_walking(cmd: StartWalking) -> bool:
        was = machine.is_active(walking)
        machine.start_walking()
        return not was

    def stop_walking(cmd: StopWalking) -> bool:
        was = machine.is_active(walking)
        machine.stop_walking()
        return was

    def start_jumping(cmd: StartJumping) -> bool:
        was = machine.is_active("jumping")
        machine.start_jumping()
        return not was

    queue.handle(StartWalking, start_walking)
    queue.handle(StopWalking, stop_walking)
    queue.handle(StartJumping, start_jumping)

    if machine.can_shoot:

        def shoot(cmd: StartShooting) -> bool:
            machine.start_shooting()
            return True

        queue.handle(StartShooting, shoot)


def region_commands(inputs: InputSnapshot, machine: RegionMachine) -> list[Any]:
    """Translate held keys into transition requests.

    Walking follows the horizontal keys every tick. Jumping and shooting are
    only requested while their region is inactive; because the shooting
    region stays active after its first shot, held fire keys request only
    that first shot.
    """
    commands: list[Any] = [StartWalking() if inputs.horizontal else StopWalking()]
    if inputs.jump and not machine.is_active("jumping"):
        commands.append(StartJumping())
    if inputs.fire and machine.can_shoot and not machine.is_active("shooting"):
        commands.append(StartShooting())
    return commands


def make_region_policy(
    machine: RegionMachine,
    on_accept: Callable[[Any], None] | None = None,
    on_reject: Callable[[Any], None] | None = None,
) -> Callable[[InputSnapshot], list[tuple[Any, bool]]]:
    """Return a per-frame policy that queues and runs the commands for a snapshot.

    ``on_accept(cmd)`` fires for commands that changed the machine,
    ``on_reject(cmd)`` for no-ops.
    """
    queue = CommandQueue()
    bind_regions(queue, machine)

    def policy(inputs: InputSnapshot) -> list[tuple[Any, bool]]:
        for cmd in region_commands(inputs, machine):
            queue.enqueue(cmd)
        results = queue.drain()
        for cmd, accepted in results:
            if accepted:
                logger.debug("accepted %s", type(cmd).__name__)
                if on_accept is not None:
                    on_accept(cmd)
            elif on_reject is not None:
                on_reject(cmd)
        return results

    return policy
