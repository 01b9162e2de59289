"""Fixed-timestep frame loop driving one controller."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from tick_character.types import IDLE_INPUT, Controller, InputSnapshot

if TYPE_CHECKING:
    from tick_character.bus import SignalBus
    from tick_character.macro import InputMacro, MacroPlayer

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FrameContext:
    frame_number: int
    dt: float
    elapsed: float
    request_stop: Callable[[], None]


InputSource = Callable[[FrameContext], InputSnapshot]
Policy = Callable[[InputSnapshot], Any]
FrameHook = Callable[[Controller, FrameContext], None]


class Clock:
    def __init__(self, tps: int) -> None:
        if tps <= 0:
            raise ValueError("tps must be positive")
        self._tps = tps
        self._dt = 1.0 / tps
        self._frame_number = 0

    @property
    def tps(self) -> int:
        return self._tps

    @property
    def dt(self) -> float:
        return self._dt

    @property
    def frame_number(self) -> int:
        return self._frame_number

    def advance(self) -> int:
        self._frame_number += 1
        return self._frame_number

    def context(self, stop_fn: Callable[[], None]) -> FrameContext:
        return FrameContext(
            frame_number=self._frame_number,
            dt=self._dt,
            elapsed=self._frame_number * self._dt,
            request_stop=stop_fn,
        )


class GameLoop:
    """Reads input, ticks the controller, flushes signals, then renders.

    Each ``step`` is one frame:

    1. poll ``input_source`` for a snapshot;
    2. while a macro is playing, the input it is replaying (or no input)
       replaces the live snapshot; otherwise live input is recorded if
       recording is on;
    3. run the command ``policy`` (region-based controllers only);
    4. ``controller.tick``;
    5. flush the signal bus;
    6. call every ``on_frame`` hook (the render collaborator).
    """

    def __init__(
        self,
        controller: Controller,
        input_source: InputSource,
        tps: int = 60,
        bus: SignalBus | None = None,
        policy: Policy | None = None,
    ) -> None:
        self._clock = Clock(tps)
        self._input_source = input_source
        self.controller = controller
        self.policy = policy
        self.bus = bus if bus is not None else controller.bus
        self.player: MacroPlayer | None = None
        self.recording: InputMacro | None = None
        self._frame_hooks: list[FrameHook] = []
        self._stop_requested = False

    @property
    def clock(self) -> Clock:
        return self._clock

    def set_controller(self, controller: Controller, policy: Policy | None = None) -> None:
        logger.info("switching controller to %s", type(controller).__name__)
        self.controller = controller
        self.policy = policy

    def on_frame(self, hook: FrameHook) -> None:
        self._frame_hooks.append(hook)

    def request_stop(self) -> None:
        self._stop_requested = True

    def step(self) -> InputSnapshot:
        """Run one frame. Returns the snapshot the controller actually saw."""
        self._clock.advance()
        ctx = self._clock.context(self.request_stop)
        inputs = self._input_source(ctx)

        if self.player is not None and self.player.playing:
            step = self.player.advance()
            inputs = step if step is not None else IDLE_INPUT
        elif self.recording is not None:
            self.recording.record(inputs)

        if self.policy is not None:
            self.policy(inputs)
        self.controller.tick(inputs)

        if self.bus is not None:
            self.bus.flush()
        for hook in self._frame_hooks:
            hook(self.controller, ctx)
        return inputs

    def run(self, n: int) -> int:
        """Run up to ``n`` frames. Returns how many ran before a stop request."""
        self._stop_requested = False
        ran = 0
        for _ in range(n):
            self.step()
            ran += 1
            if self._stop_requested:
                break
        return ran

    def run_forever(self) -> None:
        """Run paced at ``tps`` until a hook or input source requests a stop."""
        self._stop_requested = False
        dt = self._clock.dt
        while not self._stop_requested:
            start = time.monotonic()
            self.step()
            if self._stop_requested:
                break
            sleep_time = dt - (time.monotonic() - start)
            if sleep_time > 0:
                time.sleep(sleep_time)
