"""Input macros: record held input as runs, edit with undo/redo, replay on a frame delay."""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass

from tick_character.types import IDLE_INPUT, InputSnapshot

logger = logging.getLogger(__name__)

MIN_FRAME_DELAY = 5
MAX_FRAME_DELAY = 60
FRAME_DELAY_STEP = 5


def clamp_delay(frame_delay: int) -> int:
    return max(MIN_FRAME_DELAY, min(MAX_FRAME_DELAY, frame_delay))


@dataclass(frozen=True)
class MacroStep:
    """One key press: ``inputs`` held for ``frames`` consecutive frames."""

    inputs: InputSnapshot
    frames: int = 1

    def __post_init__(self) -> None:
        if self.frames < 1:
            raise ValueError(f"frames must be >= 1, got {self.frames}")


class InputMacro:
    """Ordered list of recorded steps with an undo/redo history.

    ``record`` is fed one snapshot per frame. Consecutive identical
    snapshots extend the open step; an idle snapshot closes it and is not
    stored. Undo and redo edit the macro only: they remove and restore whole
    steps and never touch a controller.
    """

    def __init__(self, steps: list[MacroStep] | None = None) -> None:
        self._steps: list[MacroStep] = list(steps) if steps else []
        self._redo: list[MacroStep] = []
        self._open = False

    def __len__(self) -> int:
        return len(self._steps)

    @property
    def steps(self) -> tuple[MacroStep, ...]:
        return tuple(self._steps)

    def record(self, inputs: InputSnapshot) -> None:
        """Record one frame of input. Recording discards anything that could be redone."""
        if inputs == IDLE_INPUT:
            self._open = False
            return
        self._redo.clear()
        if self._open and self._steps[-1].inputs == inputs:
            last = self._steps[-1]
            self._steps[-1] = MacroStep(inputs, last.frames + 1)
        else:
            self._steps.append(MacroStep(inputs))
            self._open = True

    def undo(self) -> MacroStep | None:
        """Remove the last step. Returns it, or None if the macro is empty."""
        self._open = False
        if not self._steps:
            return None
        step = self._steps.pop()
        self._redo.append(step)
        return step

    def redo(self) -> MacroStep | None:
        """Restore the most recently undone step. Returns it, or None."""
        self._open = False
        if not self._redo:
            return None
        step = self._redo.pop()
        self._steps.append(step)
        return step

    def can_undo(self) -> bool:
        return bool(self._steps)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def clear(self) -> None:
        self._steps.clear()
        self._redo.clear()
        self._open = False


class MacroPlayer:
    """Replays a macro, starting one step every ``frame_delay`` frames.

    A due step is returned for as many frames as it was held when recorded;
    the delay counts only the frames between steps. Playback works on a copy
    taken at ``start``, so the macro can be edited while it plays. Paused
    frames do not count.
    """

    def __init__(self, macro: InputMacro, frame_delay: int = 25) -> None:
        self.macro = macro
        self.frame_delay = clamp_delay(frame_delay)
        self.paused = False
        self._frame_counter = 0
        self._queue: deque[MacroStep] | None = None
        self._held: MacroStep | None = None
        self._held_frames = 0

    @property
    def playing(self) -> bool:
        return self._queue is not None

    @property
    def remaining(self) -> int:
        """Steps not yet finished, counting the one being held."""
        if self._queue is None:
            return 0
        return len(self._queue) + (1 if self._held is not None else 0)

    def start(self) -> bool:
        """Begin playback. Returns False (and does nothing) for an empty macro."""
        if not len(self.macro):
            return False
        self._queue = deque(self.macro.steps)
        self._held = None
        self._held_frames = 0
        self._frame_counter = 0
        self.paused = False
        logger.info("macro playback started: %d steps every %d frames",
                    len(self._queue), self.frame_delay)
        return True

    def stop(self) -> None:
        if self._queue is not None:
            logger.info("macro playback stopped with %d steps left", self.remaining)
        self._queue = None
        self._held = None
        self._frame_counter = 0

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def toggle_pause(self) -> None:
        if self.playing:
            self.paused = not self.paused

    def faster(self) -> int:
        self.frame_delay = clamp_delay(self.frame_delay - FRAME_DELAY_STEP)
        return self.frame_delay

    def slower(self) -> int:
        self.frame_delay = clamp_delay(self.frame_delay + FRAME_DELAY_STEP)
        return self.frame_delay

    def advance(self) -> InputSnapshot | None:
        """Count one frame. Returns the input to apply on this frame, if any."""
        if self._queue is None or self.paused:
            return None
        if self._held is None:
            self._frame_counter += 1
            if self._frame_counter < self.frame_delay:
                return None
            self._held = self._queue.popleft()
            self._held_frames = 0
            self._frame_counter = 0

        step = self._held
        self._held_frames += 1
        if self._held_frames >= step.frames:
            self._held = None
            if not self._queue:
                logger.info("macro playback finished")
                self._queue = None
        return step.inputs
