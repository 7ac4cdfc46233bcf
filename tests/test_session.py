import pytest

from errors import InvalidArgumentError, InvalidInputError, StateConflictError
from engine import PlayerState


def test_session_starts_from_configured_defaults(session, settings):
    assert session.selected_algorithm == settings.default_algorithm
    assert session.original_data == settings.default_data
    assert len(session.store) == 0
    assert session.current_step is None


def test_each_user_action_records_a_snapshot(session, scheduler):
    session.set_data([3, 2, 1])
    session.select_algorithm("insertion_sort")
    session.start_sorting()
    session.pause()
    session.next_step()
    session.previous_step()
    session.jump_to_step(3)
    session.set_speed(2.0)
    session.set_loop(True)
    session.stop()
    descriptions = [s.description.split(":")[0] for s in session.store.snapshots]
    assert descriptions == [
        "Set data", "Select algorithm", "Start sorting", "Pause", "Next step",
        "Previous step", "Jump to step", "Change speed", "Loop", "Stop",
    ]


def test_timer_advances_update_data_without_snapshots(session, scheduler):
    session.set_data([3, 2, 1])
    session.start_sorting()
    count = len(session.store)
    scheduler.advance(600)
    assert session.controller.current_index == 1
    assert session.current_data == session.controller.steps[1].data
    assert len(session.store) == count


def test_empty_data_is_rejected(session):
    with pytest.raises(InvalidInputError):
        session.set_data([])
    assert len(session.store) == 0


def test_unknown_algorithm_is_rejected(session):
    with pytest.raises(InvalidArgumentError):
        session.select_algorithm("bogo_sort")
    assert session.selected_algorithm == "bubble_sort"


def test_configuration_changes_are_rejected_while_playing(session):
    session.start_sorting()
    with pytest.raises(StateConflictError):
        session.set_data([1, 2])
    with pytest.raises(StateConflictError):
        session.select_algorithm("selection_sort")
    with pytest.raises(StateConflictError):
        session.start_sorting()
    assert session.controller.state is PlayerState.PLAYING


def test_play_records_only_real_transitions(session):
    session.start_sorting()
    count = len(session.store)
    session.play()
    assert len(session.store) == count
    session.pause()
    session.resume()
    assert [s.description.split(":")[0] for s in session.store.snapshots[-2:]] == ["Pause", "Play"]


def test_restore_is_rejected_while_playing(session):
    session.set_data([3, 2, 1])
    first = session.store.snapshots[0]
    session.start_sorting()
    with pytest.raises(StateConflictError):
        session.restore_snapshot(first.id)
    assert session.controller.state is PlayerState.PLAYING


def test_restore_puts_every_field_back(session, scheduler):
    session.set_data([3, 2, 1])
    set_data_snapshot = session.store.snapshots[-1]
    session.start_sorting()
    scheduler.advance(1200)
    session.pause()
    paused = session.store.snapshots[-1]
    paused_data = session.current_data

    session.stop()
    session.select_algorithm("selection_sort")
    session.set_data([9, 8])

    session.restore_snapshot(paused.id)
    assert session.selected_algorithm == "bubble_sort"
    assert session.original_data == (3, 2, 1)
    assert session.current_data == paused_data
    assert session.controller.current_index == 2
    assert session.controller.state is PlayerState.PAUSED
    assert session.controller.total_steps == 9

    session.restore_snapshot(set_data_snapshot.id)
    assert session.controller.total_steps == 0
    assert session.controller.state is PlayerState.IDLE
    assert session.current_data == (3, 2, 1)


def test_restoring_a_playing_snapshot_comes_back_paused(session, scheduler):
    session.set_data([3, 2, 1])
    session.start_sorting()
    started = session.store.snapshots[-1]
    session.pause()
    session.restore_snapshot(started.id)
    assert session.controller.state is PlayerState.PAUSED
    assert not session.controller.has_pending_advance
    scheduler.advance(5000)
    assert session.controller.current_index == 0


def test_restore_does_not_grow_history(session):
    session.set_data([2, 1])
    session.set_data([3, 1])
    session.restore_snapshot(session.store.snapshots[0].id)
    assert len(session.store) == 2
    assert session.store.current_index == 0


def test_state_dict_is_json_ready(session):
    session.set_data([2, 1])
    session.start_sorting()
    state = session.state_dict()
    assert state["playerState"] == "playing"
    assert state["totalSteps"] == 4
    assert state["delayMs"] == 600
    assert state["estimatedPlaybackMs"] == 2400
    assert state["step"]["sequenceNumber"] == 1
    assert state["snapshotCount"] == 2


@pytest.mark.parametrize("data", [["x"], [1, 2.5], [True, 2]])
def test_non_integer_data_is_rejected(session, data):
    with pytest.raises(InvalidInputError):
        session.set_data(data)
    assert len(session.store) == 0
