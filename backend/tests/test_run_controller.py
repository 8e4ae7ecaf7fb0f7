import asyncio

import pytest

from conftest import LATIN_SQUARE, SOLVED, EventRecorder, swapped, with_cell
from sudoku_checker.models.puzzle import (
    GroupInvalid,
    GroupKind,
    HighlightState,
    MalformedPuzzleError,
    OutcomeStatus,
    RunOutcome,
)
from sudoku_checker.services.run_controller import RunController
from sudoku_checker.validation import ValidationSequencer


def _controller(recorder, step_delay=0.0):
    return RunController(
        "board_test",
        event_callback=recorder,
        sequencer=ValidationSequencer(step_delay=step_delay),
    )


async def test_select_resets_state_before_the_run_starts(recorder):
    controller = _controller(recorder)

    run_id = await controller.select(SOLVED, puzzle_index=0)

    state = controller.state
    assert state.run_id == run_id
    assert state.loading is True
    assert state.highlight is None
    assert state.error is None
    assert state.puzzle_index == 0
    assert [e["type"] for e in recorder.events] == [
        "run_started",
        "highlight_changed",
        "error_changed",
        "loading_changed",
    ]
    await controller.wait()


async def test_valid_run_settles_loading_and_reports_outcome(recorder):
    controller = _controller(recorder)
    await controller.select(SOLVED)

    outcome = await controller.wait()

    assert outcome == RunOutcome.valid()
    state = controller.state
    assert state.loading is False
    assert state.error is None
    assert state.highlight is None
    assert state.outcome == OutcomeStatus.VALID

    completed = recorder.of_type("run_completed")
    assert len(completed) == 1
    assert completed[0]["outcome"] == "valid"
    assert completed[0]["readout"] == "The sudoku is valid"
    assert [e["type"] for e in recorder.events[-2:]] == ["loading_changed", "run_completed"]


async def test_invalid_run_reports_error_then_clears_highlight(recorder):
    controller = _controller(recorder)
    await controller.select(with_cell(SOLVED, 0, 0, 9))

    outcome = await controller.wait()

    assert outcome == RunOutcome.invalid(GroupKind.ROW, 0)
    state = controller.state
    assert state.error == GroupInvalid(kind=GroupKind.ROW, index=0)
    assert state.highlight is None
    assert state.loading is False
    assert state.outcome == OutcomeStatus.INVALID

    tail = recorder.events[-5:]
    assert [e["type"] for e in tail] == [
        "highlight_changed",
        "error_changed",
        "highlight_changed",
        "loading_changed",
        "run_completed",
    ]
    assert tail[0]["kind"] == "row" and tail[0]["index"] == 0
    assert tail[2]["kind"] is None
    assert tail[-1]["readout"] == "Row 0 is invalid"


async def test_column_failure_never_reaches_regions(recorder):
    controller = _controller(recorder)
    await controller.select(swapped(SOLVED, 0, 0, 1))

    outcome = await controller.wait()

    assert outcome == RunOutcome.invalid(GroupKind.COLUMN, 0)
    kinds = {kind for kind, _ in recorder.highlights() if kind is not None}
    assert kinds == {"row", "column"}


async def test_selecting_mid_run_silences_the_previous_run():
    recorder = EventRecorder()
    switched = {}

    async def callback(event):
        await recorder(event)
        if (
            not switched
            and event["type"] == "highlight_changed"
            and (event["kind"], event["index"]) == ("column", 4)
        ):
            switched["run_id"] = await controller.select(LATIN_SQUARE, puzzle_index=4)

    controller = RunController(
        "board_test",
        event_callback=callback,
        sequencer=ValidationSequencer(step_delay=0),
    )
    run_a = await controller.select(SOLVED, puzzle_index=0)

    outcome_a = await controller.wait()
    outcome_b = await controller.wait()
    run_b = switched["run_id"]

    assert outcome_a.status == OutcomeStatus.CANCELLED
    assert outcome_b == RunOutcome.invalid(GroupKind.REGION, 0)

    # Run A's last word is the highlight that triggered the switch
    events_a = recorder.for_run(run_a)
    assert (events_a[-1]["kind"], events_a[-1]["index"]) == ("column", 4)
    assert not any(e["type"] in ("error_changed", "run_completed") for e in events_a[4:])

    # Everything after run B starts belongs to run B, beginning with a reset
    start_b = recorder.events.index(recorder.for_run(run_b)[0])
    after = recorder.events[start_b:]
    assert all(e["run_id"] == run_b for e in after)
    assert [e["type"] for e in after[:4]] == [
        "run_started", "highlight_changed", "error_changed", "loading_changed",
    ]
    assert after[1]["kind"] is None
    assert after[3]["loading"] is True
    assert (after[4]["kind"], after[4]["index"]) == ("row", 0)

    state = controller.state
    assert state.run_id == run_b
    assert state.puzzle_index == 4
    assert state.error == GroupInvalid(kind=GroupKind.REGION, index=0)


async def test_superseded_run_is_silent_under_real_scheduling(recorder):
    controller = _controller(recorder, step_delay=0.002)

    run_a = await controller.select(SOLVED)
    await asyncio.sleep(0.02)
    run_b = await controller.select(with_cell(SOLVED, 0, 0, 9))
    outcome_b = await controller.wait()
    await controller.close()

    assert run_a != run_b
    assert outcome_b == RunOutcome.invalid(GroupKind.ROW, 0)
    start_b = next(i for i, e in enumerate(recorder.events) if e["run_id"] == run_b)
    assert all(e["run_id"] == run_b for e in recorder.events[start_b:])
    assert recorder.of_type("run_completed")[0]["run_id"] == run_b
    assert len(recorder.of_type("run_completed")) == 1


async def test_malformed_select_leaves_the_live_run_alone(recorder):
    controller = _controller(recorder)
    run_id = await controller.select(SOLVED)

    with pytest.raises(MalformedPuzzleError):
        await controller.select(SOLVED[:8])

    outcome = await controller.wait()
    assert outcome.status == OutcomeStatus.VALID
    assert controller.state.run_id == run_id


async def test_reselecting_the_same_puzzle_starts_a_fresh_run(recorder):
    controller = _controller(recorder)
    first = await controller.select(SOLVED)
    await controller.wait()

    second = await controller.select(SOLVED)
    await controller.wait()

    assert first != second
    assert len(recorder.of_type("run_completed")) == 2


async def test_close_cancels_without_settling_loading(recorder):
    controller = _controller(recorder, step_delay=0.01)
    await controller.select(SOLVED)
    await asyncio.sleep(0)

    await controller.close()

    assert not controller.is_running
    assert controller.state.loading is True
    assert recorder.of_type("run_completed") == []
    assert recorder.of_type("error_changed")[-1]["error"] is None


async def test_wait_without_a_run_returns_none(recorder):
    controller = _controller(recorder)
    assert await controller.wait() is None
    assert controller.state.run_id is None


async def test_state_is_a_snapshot(recorder):
    controller = _controller(recorder)
    await controller.select(SOLVED)
    snapshot = controller.state

    await controller.wait()

    assert snapshot.loading is True
    assert controller.state.loading is False
    assert controller.state.highlight is None


async def test_highlight_state_tracks_the_group_under_inspection(recorder):
    seen = []

    async def callback(event):
        await recorder(event)
        if event["type"] == "highlight_changed" and event["kind"] == "region":
            seen.append(controller.state.highlight)

    controller = RunController("board_test", event_callback=callback, sequencer=ValidationSequencer(step_delay=0))
    await controller.select(SOLVED)
    await controller.wait()

    assert seen == [HighlightState(kind=GroupKind.REGION, index=i) for i in range(9)]


async def test_selecting_while_the_last_region_clears_cancels_the_previous_run():
    recorder = EventRecorder()
    switched = {}

    async def callback(event):
        await recorder(event)
        if (
            not switched
            and event["type"] == "highlight_changed"
            and event["kind"] is None
            and recorder.highlights()[-2:-1] == [("region", 8)]
        ):
            switched["run_id"] = await controller.select(with_cell(SOLVED, 0, 0, 9))

    controller = RunController(
        "board_test",
        event_callback=callback,
        sequencer=ValidationSequencer(step_delay=0),
    )
    run_a = await controller.select(SOLVED)

    outcome_a = await controller.wait()
    outcome_b = await controller.wait()

    assert outcome_a == RunOutcome.cancelled()
    assert outcome_b == RunOutcome.invalid(GroupKind.ROW, 0)
    assert not any(e["type"] == "run_completed" for e in recorder.for_run(run_a))
    completed = recorder.of_type("run_completed")
    assert [e["run_id"] for e in completed] == [switched["run_id"]]
    assert controller.state.outcome == OutcomeStatus.INVALID


async def test_selecting_while_loading_settles_cancels_the_previous_run():
    recorder = EventRecorder()
    switched = {}

    async def callback(event):
        await recorder(event)
        if not switched and event["type"] == "loading_changed" and event["loading"] is False:
            switched["run_id"] = await controller.select(SOLVED)

    controller = RunController(
        "board_test",
        event_callback=callback,
        sequencer=ValidationSequencer(step_delay=0),
    )
    run_a = await controller.select(LATIN_SQUARE)

    outcome_a = await controller.wait()
    outcome_b = await controller.wait()

    assert outcome_a == RunOutcome.cancelled()
    assert outcome_b == RunOutcome.valid()
    assert not any(e["type"] == "run_completed" for e in recorder.for_run(run_a))
    assert controller.state.run_id == switched["run_id"]
