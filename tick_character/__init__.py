"""tick-character - Character controllers built on four state-machine designs."""
from __future__ import annotations

from tick_character.bus import SignalBus
from tick_character.commands import (
    CommandQueue,
    StartJumping,
    StartShooting,
    StartWalking,
    StopWalking,
    bind_regions,
    make_region_policy,
    region_commands,
)
from tick_character.concurrent import ConcurrentStateMachine
from tick_character.flat import FlatState, FlatStateMachine
from tick_character.hierarchical import HierarchicalStateMachine, StateNode
from tick_character.loop import Clock, FrameContext, GameLoop
from tick_character.macro import InputMacro, MacroPlayer, MacroStep
from tick_character.pushdown import PushdownAutomaton, StackState
from tick_character.registry import CONTROLLER_KINDS, make_controller, make_policy
from tick_character.types import (
    IDLE_INPUT,
    Controller,
    ControllerConfig,
    InputSnapshot,
    KinematicState,
    Projectile,
    StackUnderflowError,
)

__all__ = [
    "CONTROLLER_KINDS",
    "Clock",
    "CommandQueue",
    "ConcurrentStateMachine",
    "Controller",
    "ControllerConfig",
    "FlatState",
    "FlatStateMachine",
    "FrameContext",
    "GameLoop",
    "HierarchicalStateMachine",
    "IDLE_INPUT",
    "InputMacro",
    "InputSnapshot",
    "KinematicState",
    "MacroPlayer",
    "MacroStep",
    "Projectile",
    "PushdownAutomaton",
    "SignalBus",
    "StackState",
    "StackUnderflowError",
    "StartJumping",
    "StartShooting",
    "StartWalking",
    "StateNode",
    "StopWalking",
    "bind_regions",
    "make_controller",
    "make_policy",
    "make_region_policy",
    "region_commands",
]
