import random
from collections import Counter

import pytest

from homeworkout_mcp.workout.exceptions import (
    EmptyPlanError, IndexOutOfRange, SessionAlreadyFinished,
)
from homeworkout_mcp.workout.session import (
    REST_SECONDS, ExerciseState, WorkoutSession, launch_plan,
)
from homeworkout_mcp.workout.store import HISTORY_KEY, PLAN_KEY, load_history


@pytest.fixture
def session(store, clock, make_item):
    plan = [make_item("a", sets=2), make_item("b", sets=3), make_item("c", sets=1)]
    return WorkoutSession(plan, store, clock)


def run_out_rest(session):
    while session.rest.active:
        session.tick()


def assert_invariants(session):
    plan, progress = session.plan, session.progress
    assert len(plan) == len(progress)
    assert 0 <= session.current_index < len(plan)
    for item, p in zip(plan, progress):
        assert p.exercise_id == item.id
        assert 0 <= p.completed_sets <= item.sets
        assert p.is_completed == (p.completed_sets == item.sets)
    rest = session.rest
    if rest.active:
        assert rest.remaining_seconds > 0


def test_new_session_starts_at_zero(session):
    assert session.current_index == 0
    assert not session.rest.active
    assert [p.completed_sets for p in session.progress] == [0, 0, 0]
    assert [session.state_of(i) for i in range(3)] == [ExerciseState.NOT_STARTED] * 3


def test_three_set_exercise_with_rests(store, clock, make_item):
    session = WorkoutSession([make_item("a", sets=3, reps=10)], store, clock)

    session.complete_set(0)
    assert session.rest.active
    assert session.rest.remaining_seconds == REST_SECONDS
    run_out_rest(session)

    session.complete_set(0)
    run_out_rest(session)

    session.complete_set(0)
    progress = session.progress[0]
    assert progress.completed_sets == 3
    assert progress.is_completed
    assert not session.rest.active
    assert session.state_of(0) == ExerciseState.COMPLETED


def test_rest_lasts_sixty_ticks(session):
    session.complete_set(0)
    for _ in range(REST_SECONDS - 1):
        session.tick()
    assert session.rest.active
    assert session.rest.remaining_seconds == 1
    assert session.state_of(0) == ExerciseState.RESTING

    session.tick()
    assert not session.rest.active
    assert session.rest.remaining_seconds == 0
    assert session.state_of(0) == ExerciseState.IN_PROGRESS


def test_tick_without_rest_is_noop(session):
    session.tick()
    assert not session.rest.active
    assert session.rest.remaining_seconds == 0


def test_completing_exercise_advances_cursor(session):
    session.complete_set(0)
    session.complete_set(0)

    assert session.progress[0].is_completed
    assert session.current_index == 1


def test_completing_last_position_keeps_cursor(session):
    session.complete_set(2)
    assert session.progress[2].is_completed
    assert session.current_index == 2


def test_complete_set_elsewhere_jumps_and_cancels_rest(session):
    session.complete_set(0)
    assert session.rest.active

    session.complete_set(1)
    assert session.current_index == 1
    # A fresh rest started for the new set.
    assert session.rest.remaining_seconds == REST_SECONDS

    session.skip_rest()
    session.complete_set(2)
    assert not session.rest.active


def test_completed_exercise_is_noop_but_cursor_moves(session):
    session.complete_set(2)
    session.complete_set(0)
    assert session.rest.active

    session.complete_set(2)
    assert session.current_index == 2
    assert not session.rest.active
    assert session.progress[2].completed_sets == 1


def test_uncomplete_reverts_complete(session):
    before = session.progress[1]
    session.complete_set(1)
    session.uncomplete_set(1)
    after = session.progress[1]

    assert after.completed_sets == before.completed_sets
    assert after.is_completed == before.is_completed


def test_uncomplete_clears_completion(session):
    session.complete_set(2)
    session.uncomplete_set(2)
    assert session.progress[2].completed_sets == 0
    assert not session.progress[2].is_completed


def test_uncomplete_at_zero_is_noop(session):
    session.uncomplete_set(0)
    assert session.progress[0].completed_sets == 0


def test_uncomplete_cancels_own_rest_only(session):
    session.complete_set(1)
    session.complete_set(0)
    assert session.rest.active

    session.uncomplete_set(1)
    assert session.rest.active
    assert session.progress[1].completed_sets == 0

    session.uncomplete_set(0)
    assert not session.rest.active


def test_skip_rest(session):
    session.skip_rest()
    session.complete_set(0)
    session.skip_rest()
    assert not session.rest.active
    assert session.rest.remaining_seconds == 0


def test_move_exercise_keeps_plan_and_progress_together(session):
    session.complete_set(1)
    before = Counter((i.id, i.sets, i.reps) for i in session.plan)

    session.move_exercise(1, 2)

    assert [i.id for i in session.plan] == ["a", "c", "b"]
    assert [p.exercise_id for p in session.progress] == ["a", "c", "b"]
    assert session.progress[2].completed_sets == 1
    assert Counter((i.id, i.sets, i.reps) for i in session.plan) == before
    assert session.current_index == 0


def test_rest_follows_moved_exercise(session):
    session.complete_set(1)
    session.move_exercise(1, 0)

    assert session.rest.active
    assert session.state_of(0) == ExerciseState.RESTING

    session.uncomplete_set(0)
    assert not session.rest.active


def test_index_checks(session):
    with pytest.raises(IndexOutOfRange):
        session.complete_set(3)
    with pytest.raises(IndexOutOfRange):
        session.uncomplete_set(-1)
    with pytest.raises(IndexOutOfRange):
        session.move_exercise(0, 3)
    with pytest.raises(IndexOutOfRange):
        session.state_of(5)


def test_random_operations_keep_invariants(session):
    rng = random.Random(42)
    for _ in range(500):
        op = rng.choice(["complete", "uncomplete", "move", "tick", "skip"])
        if op == "complete":
            session.complete_set(rng.randrange(3))
        elif op == "uncomplete":
            session.uncomplete_set(rng.randrange(3))
        elif op == "move":
            session.move_exercise(rng.randrange(3), rng.randrange(3))
        elif op == "tick":
            session.tick()
        else:
            session.skip_rest()
        assert_invariants(session)


def test_finish_records_summary(store, clock, session):
    launch_plan(store, session.plan)
    session.complete_set(0)
    session.complete_set(0)
    session.complete_set(2)
    clock.advance(minutes=30, seconds=20)

    summary = session.finish()

    assert summary.exercise_count == 3
    assert summary.completed_exercise_count == 2
    assert summary.completion_rate == pytest.approx(66.67, abs=0.01)
    assert summary.total_sets == 6
    assert summary.duration_minutes == 30
    assert [i.completed_sets for i in summary.workout] == [2, 0, 1]

    history = load_history(store)
    assert len(history) == 1
    assert history[0].completed_exercise_count == 2
    assert store.get(PLAN_KEY) is None
    assert session.is_finished


def test_finish_twice_fails(store, session):
    session.finish()
    with pytest.raises(SessionAlreadyFinished):
        session.finish()
    assert len(store.get(HISTORY_KEY)) == 1


@pytest.mark.parametrize("call", [
    lambda s: s.complete_set(0),
    lambda s: s.uncomplete_set(0),
    lambda s: s.skip_rest(),
    lambda s: s.tick(),
    lambda s: s.move_exercise(0, 1),
])
def test_mutators_fail_after_finish(session, call):
    session.finish()
    with pytest.raises(SessionAlreadyFinished):
        call(session)


def test_launch_reads_persisted_plan(store, clock, make_item):
    launch_plan(store, [make_item("a", sets=4), make_item("b")])
    session = WorkoutSession.launch(store, clock)

    assert [i.id for i in session.plan] == ["a", "b"]
    assert session.plan[0].sets == 4
    assert all(p.completed_sets == 0 for p in session.progress)
    assert session.started_at == clock.now


def test_launch_without_plan(store):
    with pytest.raises(EmptyPlanError):
        WorkoutSession.launch(store)
    with pytest.raises(EmptyPlanError):
        launch_plan(store, [])
