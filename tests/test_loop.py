"""Tests for Clock and GameLoop."""
import pytest

from tick_character import (
    CONTROLLER_KINDS,
    IDLE_INPUT,
    Clock,
    FlatState,
    FlatStateMachine,
    GameLoop,
    HierarchicalStateMachine,
    InputMacro,
    InputSnapshot,
    MacroPlayer,
    MacroStep,
    SignalBus,
    make_controller,
    make_policy,
)

RIGHT = InputSnapshot(move_right=True)


def constant(snapshot):
    return lambda ctx: snapshot


class TestClock:

    def test_rejects_non_positive_tps(self):
        with pytest.raises(ValueError):
            Clock(0)

    def test_advance_and_context(self):
        clock = Clock(tps=20)
        clock.advance()
        clock.advance()
        ctx = clock.context(lambda: None)
        assert ctx.frame_number == 2
        assert ctx.dt == 0.05
        assert ctx.elapsed == pytest.approx(0.1)


class TestGameLoop:

    def test_step_ticks_controller_with_polled_input(self):
        fsm = FlatStateMachine()
        seen_frames = []

        def source(ctx):
            seen_frames.append(ctx.frame_number)
            return RIGHT

        loop = GameLoop(fsm, source)

        assert loop.step() == RIGHT
        loop.step()

        assert seen_frames == [1, 2]
        assert fsm.state is FlatState.WALKING
        assert fsm.x == 104.0

    def test_frame_hooks_run_after_tick(self):
        fsm = FlatStateMachine()
        loop = GameLoop(fsm, constant(RIGHT))
        rendered = []
        loop.on_frame(lambda controller, ctx: rendered.append((ctx.frame_number, controller.state)))

        loop.run(2)

        assert rendered == [(1, FlatState.WALKING), (2, FlatState.WALKING)]

    def test_bus_flushed_every_frame(self):
        bus = SignalBus()
        fsm = FlatStateMachine(bus=bus)
        loop = GameLoop(fsm, constant(RIGHT))
        seen_at_render = []
        bus.subscribe("transition", lambda name, data: seen_at_render.append(data["new"]))
        loop.on_frame(lambda controller, ctx: seen_at_render.append(f"frame {ctx.frame_number}"))

        loop.step()

        assert seen_at_render == ["walking", "frame 1"]
        assert bus.pending() == 0

    def test_policy_runs_before_tick(self):
        hsm = HierarchicalStateMachine()
        loop = GameLoop(hsm, constant(RIGHT), policy=make_policy(hsm))

        loop.step()

        assert hsm.is_active("idle.walking")
        assert hsm.x == 104.0

    def test_run_stops_on_request(self):
        loop = GameLoop(FlatStateMachine(), constant(IDLE_INPUT))
        loop.on_frame(lambda controller, ctx: ctx.frame_number == 3 and ctx.request_stop())

        assert loop.run(10) == 3
        assert loop.clock.frame_number == 3

    def test_run_forever_until_stopped(self):
        loop = GameLoop(FlatStateMachine(), constant(IDLE_INPUT), tps=1000)
        loop.on_frame(lambda controller, ctx: ctx.frame_number == 5 and ctx.request_stop())

        loop.run_forever()

        assert loop.clock.frame_number == 5

    def test_set_controller(self):
        loop = GameLoop(FlatStateMachine(), constant(RIGHT))
        hsm = HierarchicalStateMachine()

        loop.set_controller(hsm, make_policy(hsm))
        loop.step()

        assert loop.controller is hsm
        assert hsm.x == 104.0


class TestGameLoopMacros:

    def test_records_held_input_as_steps(self):
        inputs = iter([RIGHT, RIGHT, IDLE_INPUT, RIGHT])
        loop = GameLoop(FlatStateMachine(), lambda ctx: next(inputs))
        macro = InputMacro()
        loop.recording = macro

        loop.run(4)

        assert macro.steps == (MacroStep(RIGHT, 2), MacroStep(RIGHT, 1))

    def test_playback_overrides_live_input(self):
        fsm = FlatStateMachine()
        loop = GameLoop(fsm, constant(InputSnapshot(move_left=True)))
        loop.player = MacroPlayer(InputMacro([MacroStep(RIGHT, 2)]), frame_delay=5)
        loop.player.start()

        seen = [loop.step() for _ in range(6)]

        assert seen == [IDLE_INPUT] * 4 + [RIGHT, RIGHT]
        assert fsm.state is FlatState.WALKING
        assert fsm.x == 104.0
        assert not loop.player.playing

    def test_playback_is_not_recorded(self):
        macro = InputMacro([MacroStep(RIGHT)])
        loop = GameLoop(FlatStateMachine(), constant(RIGHT))
        loop.recording = macro
        loop.player = MacroPlayer(macro, frame_delay=5)
        loop.player.start()

        loop.run(5)

        assert macro.steps == (MacroStep(RIGHT),)

    @pytest.mark.parametrize("kind", CONTROLLER_KINDS)
    def test_replayed_walk_matches_live_walk(self, kind):
        """Half a second of held input replays to the same position."""
        script = iter([RIGHT] * 30)
        live = make_controller(kind)
        loop = GameLoop(live, lambda ctx: next(script, IDLE_INPUT), policy=make_policy(live))
        macro = InputMacro()
        loop.recording = macro
        loop.run(32)
        assert macro.steps == (MacroStep(RIGHT, 30),)

        replayed = make_controller(kind)
        loop = GameLoop(replayed, constant(IDLE_INPUT), policy=make_policy(replayed))
        loop.player = MacroPlayer(macro)
        loop.player.start()
        while loop.player.playing:
            loop.step()
        loop.run(2)

        assert live.x > 100.0
        assert replayed.x == live.x
