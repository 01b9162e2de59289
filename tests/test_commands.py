"""Tests for the command queue and region input policy."""
from dataclasses import dataclass

import pytest

from tick_character import (
    IDLE_INPUT,
    CommandQueue,
    ConcurrentStateMachine,
    HierarchicalStateMachine,
    InputSnapshot,
    StartJumping,
    StartShooting,
    StartWalking,
    StopWalking,
    bind_regions,
    make_region_policy,
    region_commands,
)


@dataclass(frozen=True)
class Crouch:
    pass


class Legs:
    """Minimal region machine that declares its regions explicitly."""

    walking_path = "legs.walking"
    can_shoot = False

    def __init__(self):
        self.active = set()

    def is_active(self, name):
        return name in self.active

    def start_walking(self):
        self.active.add(self.walking_path)

    def stop_walking(self):
        self.active.discard(self.walking_path)

    def start_jumping(self):
        self.active.add("jumping")

    # Present but not advertised: can_shoot decides binding.
    def start_shooting(self):
        raise AssertionError("not a shooting machine")


class TestCommandQueue:

    def test_drain_runs_in_fifo_order(self):
        queue = CommandQueue()
        seen = []
        queue.handle(StartWalking, lambda cmd: seen.append("walk") or True)
        queue.handle(StartJumping, lambda cmd: seen.append("jump") or False)

        queue.enqueue(StartJumping())
        queue.enqueue(StartWalking())
        assert queue.pending() == 2

        results = queue.drain()

        assert seen == ["jump", "walk"]
        assert results == [(StartJumping(), False), (StartWalking(), True)]
        assert queue.pending() == 0

    def test_unhandled_command_raises(self):
        queue = CommandQueue()
        queue.enqueue(Crouch())
        with pytest.raises(TypeError):
            queue.drain()

    def test_later_handler_overwrites(self):
        queue = CommandQueue()
        queue.handle(StartWalking, lambda cmd: False)
        queue.handle(StartWalking, lambda cmd: True)
        queue.enqueue(StartWalking())
        assert queue.drain() == [(StartWalking(), True)]


class TestBindRegions:

    def test_hsm_handlers(self):
        hsm = HierarchicalStateMachine()
        queue = CommandQueue()
        bind_regions(queue, hsm)

        for cmd in (StartWalking(), StartWalking(), StartJumping(), StopWalking(), StopWalking()):
            queue.enqueue(cmd)
        results = [accepted for _, accepted in queue.drain()]

        assert results == [True, False, True, True, False]
        assert hsm.active_paths() == ["idle", "jumping"]

    def test_csm_has_no_shooting(self):
        csm = ConcurrentStateMachine()
        queue = CommandQueue()
        bind_regions(queue, csm)
        assert queue.handles(StartWalking)
        assert not queue.handles(StartShooting)

    def test_hsm_shooting_arms(self):
        hsm = HierarchicalStateMachine()
        queue = CommandQueue()
        bind_regions(queue, hsm)
        queue.enqueue(StartShooting())
        assert queue.drain() == [(StartShooting(), True)]
        assert hsm.shot_armed

    def test_walking_path_comes_from_machine(self):
        legs = Legs()
        queue = CommandQueue()
        bind_regions(queue, legs)

        queue.enqueue(StartWalking())
        queue.enqueue(StartWalking())
        queue.enqueue(StopWalking())

        assert [accepted for _, accepted in queue.drain()] == [True, False, True]
        assert not queue.handles(StartShooting)

    def test_region_attributes(self):
        assert HierarchicalStateMachine.walking_path == "idle.walking"
        assert HierarchicalStateMachine.can_shoot
        assert ConcurrentStateMachine.walking_path == "walking"
        assert not ConcurrentStateMachine.can_shoot


class TestRegionCommands:

    def test_walk_keys(self):
        hsm = HierarchicalStateMachine()
        assert region_commands(InputSnapshot(move_left=True), hsm) == [StartWalking()]
        assert region_commands(IDLE_INPUT, hsm) == [StopWalking()]

    def test_jump_only_when_grounded_region(self):
        hsm = HierarchicalStateMachine()
        jump = InputSnapshot(jump=True)
        assert StartJumping() in region_commands(jump, hsm)

        hsm.start_jumping()
        assert StartJumping() not in region_commands(jump, hsm)

    def test_fire_only_for_machines_that_shoot(self):
        fire = InputSnapshot(fire=True)
        assert StartShooting() in region_commands(fire, HierarchicalStateMachine())
        assert StartShooting() not in region_commands(fire, ConcurrentStateMachine())
        assert StartShooting() not in region_commands(fire, Legs())


class TestRegionPolicy:

    def test_policy_drives_hsm(self):
        hsm = HierarchicalStateMachine()
        policy = make_region_policy(hsm)

        policy(InputSnapshot(move_right=True, jump=True))
        hsm.tick(InputSnapshot(move_right=True, jump=True))

        assert hsm.active_paths() == ["idle", "idle.walking", "jumping"]
        assert hsm.x == 104.0

    def test_held_fire_only_shoots_once(self):
        """The shooting region stays active, so input never re-arms it."""
        hsm = HierarchicalStateMachine()
        policy = make_region_policy(hsm)
        fire = InputSnapshot(fire=True)

        for _ in range(5):
            policy(fire)
            hsm.tick(fire)

        assert len(hsm.projectiles) == 1

    def test_accept_and_reject_callbacks(self):
        csm = ConcurrentStateMachine()
        accepted, rejected = [], []
        policy = make_region_policy(csm, on_accept=accepted.append, on_reject=rejected.append)

        policy(InputSnapshot(move_left=True))
        policy(InputSnapshot(move_left=True))
        policy(IDLE_INPUT)

        assert accepted == [StartWalking(), StopWalking()]
        assert rejected == [StartWalking()]
