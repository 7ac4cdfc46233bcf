import pytest

from config import Settings
from errors import IndexOutOfRangeError, InvalidArgumentError, StateConflictError
from algorithms import generate_steps
from engine import Listeners, PlaybackController, PlayerState
from engine.player import estimate_playback_duration, format_playback_time
from ui import TextRenderer


def test_load_steps_rewinds_and_goes_idle(controller, three_steps):
    controller.load_steps(three_steps)
    assert controller.state is PlayerState.IDLE
    assert controller.current_index == 0
    assert controller.current_step is three_steps[0]


def test_load_steps_rejects_empty_list(controller):
    with pytest.raises(InvalidArgumentError):
        controller.load_steps([])


def test_next_step_completes_at_the_end(controller, three_steps):
    controller.load_steps(three_steps)
    controller.next_step()
    controller.next_step()
    assert controller.current_index == 2
    assert controller.state is not PlayerState.COMPLETED
    controller.next_step()
    assert controller.state is PlayerState.COMPLETED
    assert controller.current_index == 2


def test_previous_step_clamps_at_zero(controller, three_steps):
    controller.load_steps(three_steps)
    controller.previous_step()
    assert controller.current_index == 0


def test_leaving_the_last_step_after_completion_pauses(controller, three_steps):
    controller.load_steps(three_steps)
    controller.jump_to_step(2)
    controller.next_step()
    assert controller.is_completed
    controller.previous_step()
    assert controller.state is PlayerState.PAUSED
    assert controller.current_index == 1


def test_jump_outside_range_raises_and_keeps_state(controller, three_steps):
    controller.load_steps(three_steps)
    controller.jump_to_step(1)
    with pytest.raises(IndexOutOfRangeError):
        controller.jump_to_step(3)
    with pytest.raises(IndexOutOfRangeError):
        controller.jump_to_step(-1)
    assert controller.current_index == 1


def test_navigation_is_rejected_while_playing(controller, three_steps):
    controller.load_steps(three_steps)
    controller.play()
    for action in (controller.next_step, controller.previous_step, lambda: controller.jump_to_step(1)):
        with pytest.raises(StateConflictError):
            action()
    with pytest.raises(StateConflictError):
        controller.load_steps(three_steps)
    assert controller.current_index == 0


def test_play_without_steps_is_a_conflict(controller):
    with pytest.raises(StateConflictError):
        controller.play()


def test_playback_advances_on_the_timer(controller, scheduler, three_steps):
    controller.load_steps(three_steps)
    controller.play()
    assert controller.has_pending_advance
    scheduler.advance(599)
    assert controller.current_index == 0
    scheduler.advance(1)
    assert controller.current_index == 1
    scheduler.advance(600)
    assert controller.current_index == 2
    assert controller.state is PlayerState.COMPLETED
    assert not controller.has_pending_advance


def test_pause_cancels_the_pending_advance(controller, scheduler, three_steps):
    controller.load_steps(three_steps)
    controller.play()
    scheduler.advance(300)
    controller.pause()
    assert controller.state is PlayerState.PAUSED
    assert scheduler.pending == 0
    scheduler.advance(5000)
    assert controller.current_index == 0


def test_at_most_one_advance_is_ever_pending(controller, scheduler, three_steps):
    controller.load_steps(three_steps)
    controller.play()
    controller.play()
    controller.pause()
    controller.play()
    controller.set_speed(2.0)
    controller.set_speed(0.5)
    assert scheduler.pending == 1
    scheduler.advance(1199)
    assert controller.current_index == 0
    scheduler.advance(1)
    assert controller.current_index == 1


def test_stop_rewinds_and_cancels(controller, scheduler, three_steps):
    controller.load_steps(three_steps)
    controller.play()
    scheduler.advance(600)
    controller.stop()
    assert controller.state is PlayerState.IDLE
    assert controller.current_index == 0
    assert scheduler.pending == 0


def test_speed_outside_range_is_rejected(controller):
    with pytest.raises(InvalidArgumentError):
        controller.set_speed(10.0)
    with pytest.raises(InvalidArgumentError):
        controller.set_speed(0.05)
    assert controller.speed == 1.0


def test_speed_change_halves_the_delay(controller, scheduler, three_steps):
    controller.load_steps(three_steps)
    controller.set_speed(2.0)
    assert controller.delay_ms == 300
    controller.play()
    scheduler.advance(300)
    assert controller.current_index == 1


def test_speed_change_while_playing_reschedules_without_skipping(controller, scheduler, three_steps):
    controller.load_steps(three_steps)
    controller.play()
    scheduler.advance(100)
    controller.set_speed(2.0)
    assert controller.current_index == 0
    scheduler.advance(299)
    assert controller.current_index == 0
    scheduler.advance(1)
    assert controller.current_index == 1


def test_speed_presets(controller):
    controller.set_speed_preset("fast")
    assert controller.speed == 2.0
    with pytest.raises(InvalidArgumentError):
        controller.set_speed_preset("ludicrous")


def test_completed_without_loop_ignores_play(controller, three_steps):
    controller.load_steps(three_steps)
    controller.jump_to_step(2)
    controller.next_step()
    controller.play()
    assert controller.state is PlayerState.COMPLETED


def test_loop_restarts_after_one_extra_delay(controller, scheduler, three_steps):
    completed = []
    controller.listeners.on_complete = lambda: completed.append(True)
    controller.set_loop(True)
    controller.load_steps(three_steps)
    controller.play()
    scheduler.advance(1200)
    assert controller.state is PlayerState.COMPLETED
    assert completed == [True]
    assert controller.has_pending_advance

    scheduler.advance(999)
    assert controller.state is PlayerState.COMPLETED
    scheduler.advance(1)
    assert controller.state is PlayerState.PLAYING
    assert controller.current_index == 0
    scheduler.advance(600)
    assert controller.current_index == 1


def test_disabling_loop_cancels_the_restart(controller, scheduler, three_steps):
    controller.set_loop(True)
    controller.load_steps(three_steps)
    controller.play()
    scheduler.advance(1200)
    controller.set_loop(False)
    assert not controller.has_pending_advance
    scheduler.advance(5000)
    assert controller.state is PlayerState.COMPLETED


def test_play_from_completed_with_loop_starts_over(controller, scheduler, three_steps):
    controller.load_steps(three_steps)
    controller.jump_to_step(2)
    controller.next_step()
    controller.set_loop(True)
    controller.play()
    assert controller.state is PlayerState.PLAYING
    assert controller.current_index == 0
    assert scheduler.pending == 1


def test_auto_play_starts_on_load(scheduler, three_steps):
    ctl = PlaybackController(Settings(auto_play=True), scheduler)
    ctl.load_steps(three_steps)
    assert ctl.state is PlayerState.PLAYING


def test_listeners_and_renderer_see_every_displayed_step(settings, scheduler, three_steps):
    seen, states = [], []
    renderer = TextRenderer()
    renderer.initialize({})
    ctl = PlaybackController(
        settings, scheduler, renderer=renderer,
        listeners=Listeners(
            on_step=lambda i, total, step: seen.append((i, total)),
            on_state_change=states.append,
        ),
    )
    ctl.load_steps(three_steps)
    ctl.play()
    scheduler.run_until_idle()
    assert seen == [(0, 3), (1, 3), (2, 3)]
    assert states == [PlayerState.PLAYING, PlayerState.COMPLETED]
    assert len(renderer.frames) == 3


def test_invariant_holds_over_a_random_walk(controller, scheduler):
    steps = generate_steps("insertion_sort", [4, 3, 2, 1])
    controller.load_steps(steps)
    last = len(steps) - 1
    actions = [
        controller.next_step, controller.next_step, controller.previous_step,
        lambda: controller.jump_to_step(last), controller.next_step,
        controller.previous_step, controller.play, lambda: scheduler.advance(600),
        controller.pause, controller.next_step, controller.play,
        lambda: scheduler.run_until_idle(),
    ]
    for action in actions:
        action()
        assert 0 <= controller.current_index <= last
        if controller.state is PlayerState.COMPLETED:
            assert controller.current_index == last
    assert controller.state is PlayerState.COMPLETED


def test_restore_turns_playing_into_paused(controller, three_steps):
    controller.restore(three_steps, 1, PlayerState.PLAYING)
    assert controller.state is PlayerState.PAUSED
    assert controller.current_index == 1
    assert not controller.has_pending_advance


def test_dispose_releases_renderer(settings, scheduler, three_steps):
    renderer = TextRenderer()
    renderer.initialize({})
    ctl = PlaybackController(settings, scheduler, renderer=renderer)
    ctl.load_steps(three_steps)
    ctl.play()
    ctl.dispose()
    assert scheduler.pending == 0
    assert renderer.frames == []
    assert ctl.total_steps == 0


def test_step_info_and_playback_helpers(controller, three_steps):
    controller.load_steps(three_steps)
    controller.next_step()
    info = controller.step_info()
    assert info["currentStep"] == 1
    assert info["totalSteps"] == 3
    assert info["progress"] == pytest.approx(2 / 3)
    assert estimate_playback_duration(10, 2.0, 600) == 3000
    assert format_playback_time(3000) == "3s"
    assert format_playback_time(125_000) == "2:05"


@pytest.mark.parametrize("index", [1.5, "1", True, None])
def test_jump_requires_an_integer_index(controller, three_steps, index):
    controller.load_steps(three_steps)
    with pytest.raises(InvalidArgumentError):
        controller.jump_to_step(index)
    assert controller.current_index == 0
