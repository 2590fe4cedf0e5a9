import threading
from datetime import timedelta

import pytest

from yoruba.core.exceptions import (
    NotFoundError,
    LevelLockedError,
    OutOfLivesError,
    ExerciseLevelMismatchError,
)
from yoruba.services.progression_service import UserLockRegistry


def _user(world):
    return world.store.get_user_resources(world.user.user_id)


class TestStartOrResumeLevel:

    def test_first_level_is_open_for_a_fresh_user(self, world):
        level = world.levels[(1, 1)]
        entry = world.engine.start_or_resume_level(world.user.user_id, level.id)

        first_exercise = world.content.get_exercises_by_level(level.id)[0]
        assert entry.exercise.id == first_exercise.id
        assert entry.attempted_count == 0
        assert entry.total_count == 5
        assert not entry.level_completed

        progress = world.store.get_user_level_progress(world.user.user_id, level.id)
        assert progress is not None
        assert progress.current
        assert not progress.completed

    def test_locked_when_previous_level_not_completed(self, world):
        level = world.levels[(1, 2)]
        with pytest.raises(LevelLockedError) as exc_info:
            world.engine.start_or_resume_level(world.user.user_id, level.id)

        assert exc_info.value.level_id == level.id
        assert world.store.get_user_level_progress(world.user.user_id, level.id) is None

    def test_first_level_of_second_trail_needs_last_level_of_first_trail(self, world, play_level):
        for level_order in (1, 2, 3):
            play_level(world, world.levels[(1, level_order)])

        with pytest.raises(LevelLockedError):
            world.engine.start_or_resume_level(world.user.user_id, world.levels[(2, 1)].id)

        play_level(world, world.levels[(1, 4)])
        entry = world.engine.start_or_resume_level(world.user.user_id, world.levels[(2, 1)].id)
        assert entry.exercise is not None

    def test_resume_skips_attempted_exercises(self, world):
        level = world.levels[(1, 1)]
        exercises = world.content.get_exercises_by_level(level.id)
        world.engine.start_or_resume_level(world.user.user_id, level.id)
        world.engine.submit_answer(world.user.user_id, level.id, exercises[0].id, True)
        world.engine.submit_answer(world.user.user_id, level.id, exercises[1].id, False)

        entry = world.engine.start_or_resume_level(world.user.user_id, level.id)
        assert entry.exercise.id == exercises[2].id
        assert entry.attempted_count == 2

    def test_blocked_without_lives(self, world):
        deadline = world.clock() + timedelta(minutes=12)
        world.store.update_user_resources(world.user.user_id, lives=0, next_life_at=deadline)

        with pytest.raises(OutOfLivesError) as exc_info:
            world.engine.start_or_resume_level(world.user.user_id, world.levels[(1, 1)].id)
        assert exc_info.value.next_life_at == deadline

    def test_unknown_level(self, world):
        with pytest.raises(NotFoundError):
            world.engine.start_or_resume_level(world.user.user_id, 9999)

    def test_level_without_exercises(self, world):
        empty = world.content.add_level(world.trails[2].id, 5, world.levels[(2, 4)].color, 5)
        with pytest.raises(NotFoundError):
            world.engine.start_or_resume_level(world.user.user_id, empty.id)

    def test_replay_of_completed_level_reports_all_done(self, world, play_level):
        level = world.levels[(1, 2)]
        play_level(world, world.levels[(1, 1)])
        play_level(world, level)
        xp_before = _user(world).xp

        entry = world.engine.start_or_resume_level(world.user.user_id, level.id)
        assert entry.exercise is None
        assert entry.all_exercises_done
        assert not entry.level_completed
        assert _user(world).xp == xp_before

    def test_start_completes_level_when_everything_was_attempted(self, world):
        level = world.levels[(1, 1)]
        world.engine.start_or_resume_level(world.user.user_id, level.id)
        for exercise in world.content.get_exercises_by_level(level.id):
            world.store.append_user_exercise_attempt(world.user.user_id, exercise.id, True, world.clock())

        entry = world.engine.start_or_resume_level(world.user.user_id, level.id)
        assert entry.level_completed
        assert entry.reward.xp_earned == level.xp
        assert world.store.get_user_level_progress(world.user.user_id, level.id).completed


class TestSubmitAnswer:

    def test_five_exercise_level_completes_on_last_answer(self, world):
        level = world.levels[(1, 1)]
        next_level = world.levels[(1, 2)]
        user_id = world.user.user_id
        exercises = world.content.get_exercises_by_level(level.id)
        world.engine.start_or_resume_level(user_id, level.id)

        for position, exercise in enumerate(exercises[:4], start=1):
            result = world.engine.submit_answer(user_id, level.id, exercise.id, True)
            assert not result.level_completed
            assert result.next_exercise.id == exercises[position].id
            assert result.attempted_count == position
            assert result.total_count == 5

        result = world.engine.submit_answer(user_id, level.id, exercises[4].id, True)
        assert result.level_completed
        assert result.reward.xp_earned == 10
        assert result.reward.diamonds_earned == 1
        assert result.reward.next_level_id == next_level.id

        user = _user(world)
        assert user.xp == 10
        assert user.diamonds == 1
        assert user.current_level_id == next_level.id

        completed = world.store.get_user_level_progress(user_id, level.id)
        assert completed.completed
        assert not completed.current
        assert completed.completed_at == world.clock()

        staged = world.store.get_user_level_progress(user_id, next_level.id)
        assert staged is not None
        assert staged.current
        assert not staged.completed

    def test_diamonds_follow_the_level_tier(self, world, play_level):
        earned = []
        for level_order in (1, 2, 3, 4):
            earned.append(play_level(world, world.levels[(1, level_order)]).reward.diamonds_earned)
        assert earned == [1, 2, 3, 5]
        assert _user(world).xp == 10 + 15 + 20 + 30

    def test_completion_rewards_are_granted_once(self, world, play_level):
        level = world.levels[(1, 1)]
        play_level(world, level)
        user = _user(world)
        last_exercise = world.content.get_exercises_by_level(level.id)[-1]

        result = world.engine.submit_answer(world.user.user_id, level.id, last_exercise.id, True)

        assert not result.level_completed
        assert result.all_exercises_done
        assert _user(world).xp == user.xp
        assert _user(world).diamonds == user.diamonds
        # The attempt itself is still recorded
        attempts = world.store.get_user_exercise_attempts(world.user.user_id, level.id)
        assert len(attempts) == 6

    def test_wrong_answer_costs_a_life(self, world):
        level = world.levels[(1, 1)]
        exercise = world.content.get_exercises_by_level(level.id)[0]
        world.engine.start_or_resume_level(world.user.user_id, level.id)

        result = world.engine.submit_answer(world.user.user_id, level.id, exercise.id, False)

        assert not result.correct
        assert result.lives == 4
        assert result.next_life_at == world.clock() + timedelta(minutes=30)
        assert not result.out_of_lives
        # Wrong answers still count as seen
        assert result.attempted_count == 1

    def test_losing_the_last_life_is_flagged(self, world):
        level = world.levels[(1, 1)]
        exercise = world.content.get_exercises_by_level(level.id)[0]
        deadline = world.clock() + timedelta(minutes=20)
        world.store.update_user_resources(world.user.user_id, lives=1, next_life_at=deadline)

        result = world.engine.submit_answer(world.user.user_id, level.id, exercise.id, False)

        assert result.out_of_lives
        assert result.lives == 0
        assert result.next_life_at == deadline

    def test_answer_with_no_lives_is_recorded_then_rejected(self, world):
        level = world.levels[(1, 1)]
        exercise = world.content.get_exercises_by_level(level.id)[0]
        deadline = world.clock() + timedelta(minutes=20)
        world.store.update_user_resources(world.user.user_id, lives=0, next_life_at=deadline)

        with pytest.raises(OutOfLivesError) as exc_info:
            world.engine.submit_answer(world.user.user_id, level.id, exercise.id, False)

        assert exc_info.value.next_life_at == deadline
        attempts = world.store.get_user_exercise_attempts(world.user.user_id, level.id)
        assert [attempt.exercise_id for attempt in attempts] == [exercise.id]
        user = _user(world)
        assert user.lives == 0
        assert user.next_life_at == deadline

    def test_exercise_from_another_level_is_rejected(self, world):
        level = world.levels[(1, 1)]
        foreign = world.content.get_exercises_by_level(world.levels[(1, 2)].id)[0]

        with pytest.raises(ExerciseLevelMismatchError):
            world.engine.submit_answer(world.user.user_id, level.id, foreign.id, True)
        assert world.store.get_user_exercise_attempts(world.user.user_id) == []

    def test_unknown_exercise(self, world):
        with pytest.raises(NotFoundError):
            world.engine.submit_answer(world.user.user_id, world.levels[(1, 1)].id, 9999, True)

    def test_answer_on_locked_level_is_rejected(self, world):
        level = world.levels[(1, 3)]
        exercise = world.content.get_exercises_by_level(level.id)[0]
        with pytest.raises(LevelLockedError):
            world.engine.submit_answer(world.user.user_id, level.id, exercise.id, True)
        assert world.store.get_user_exercise_attempts(world.user.user_id) == []

    def test_completing_a_trail_moves_pointer_to_next_trail(self, world, play_level):
        for level_order in (1, 2, 3):
            play_level(world, world.levels[(1, level_order)])
        result = play_level(world, world.levels[(1, 4)])

        first_of_trail_2 = world.levels[(2, 1)]
        assert result.reward.next_level_id == first_of_trail_2.id
        assert _user(world).current_level_id == first_of_trail_2.id
        # No progress row yet: the next trail shows as active, not in progress
        assert world.store.get_user_level_progress(world.user.user_id, first_of_trail_2.id) is None

    def test_last_level_of_last_trail_clears_pointer(self, world, play_level):
        for trail_order in (1, 2):
            for level_order in (1, 2, 3, 4):
                result = play_level(world, world.levels[(trail_order, level_order)])
        assert result.reward.next_level_id is None
        assert _user(world).current_level_id is None


class TestLivesRegeneration:

    def test_read_restores_a_due_life(self, world):
        world.store.update_user_resources(
            world.user.user_id, lives=3, next_life_at=world.clock() - timedelta(seconds=1)
        )

        user = world.engine.refresh_lives(world.user.user_id)

        assert user.lives == 4
        assert user.next_life_at == world.clock() + timedelta(minutes=30)
        assert _user(world).lives == 4

    def test_read_restoring_last_life_clears_deadline(self, world):
        world.store.update_user_resources(
            world.user.user_id, lives=4, next_life_at=world.clock() - timedelta(seconds=1)
        )
        user = world.engine.refresh_lives(world.user.user_id)
        assert user.lives == 5
        assert user.next_life_at is None

    def test_regenerated_life_unblocks_level(self, world):
        world.store.update_user_resources(
            world.user.user_id, lives=0, next_life_at=world.clock() + timedelta(minutes=30)
        )
        with pytest.raises(OutOfLivesError):
            world.engine.start_or_resume_level(world.user.user_id, world.levels[(1, 1)].id)

        world.clock.advance(minutes=30)
        entry = world.engine.start_or_resume_level(world.user.user_id, world.levels[(1, 1)].id)
        assert entry.exercise is not None
        assert _user(world).lives == 1


class TestInvariants:

    def test_lives_and_deadline_stay_consistent(self, world):
        level = world.levels[(1, 1)]
        user_id = world.user.user_id
        world.engine.start_or_resume_level(user_id, level.id)
        for exercise in world.content.get_exercises_by_level(level.id):
            world.engine.submit_answer(user_id, level.id, exercise.id, False)
            world.clock.advance(minutes=7)
            user = world.engine.refresh_lives(user_id)
            assert 0 <= user.lives <= 5
            assert (user.next_life_at is None) == (user.lives == 5)

    def test_completed_levels_have_every_exercise_attempted(self, world, play_level):
        play_level(world, world.levels[(1, 1)])
        play_level(world, world.levels[(1, 2)])
        user_id = world.user.user_id
        for progress in world.store.list_user_level_progress(user_id):
            if not progress.completed:
                continue
            attempted = {a.exercise_id for a in world.store.get_user_exercise_attempts(user_id, progress.level_id)}
            expected = {e.id for e in world.content.get_exercises_by_level(progress.level_id)}
            assert expected <= attempted

    def test_failed_sequence_leaves_no_partial_state(self, world, monkeypatch):
        level = world.levels[(1, 1)]
        user_id = world.user.user_id
        exercises = world.content.get_exercises_by_level(level.id)
        world.engine.start_or_resume_level(user_id, level.id)
        for exercise in exercises[:4]:
            world.engine.submit_answer(user_id, level.id, exercise.id, True)

        def broken_successor(level):
            raise RuntimeError("storage went away")

        monkeypatch.setattr(world.engine, "successor_of", broken_successor)
        with pytest.raises(RuntimeError):
            world.engine.submit_answer(user_id, level.id, exercises[4].id, True)

        assert _user(world).xp == 0
        assert not world.store.get_user_level_progress(user_id, level.id).completed
        assert len(world.store.get_user_exercise_attempts(user_id, level.id)) == 4


class TestUserLocks:

    def test_same_user_gets_same_lock(self):
        registry = UserLockRegistry()
        assert registry.lock_for(1) is registry.lock_for(1)
        assert registry.lock_for(1) is not registry.lock_for(2)

    def test_racing_final_answers_grant_one_reward(self, world):
        level = world.levels[(1, 1)]
        user_id = world.user.user_id
        exercises = world.content.get_exercises_by_level(level.id)
        world.engine.start_or_resume_level(user_id, level.id)
        for exercise in exercises[:4]:
            world.engine.submit_answer(user_id, level.id, exercise.id, True)

        results = []

        def submit():
            results.append(world.engine.submit_answer(user_id, level.id, exercises[4].id, True))

        threads = [threading.Thread(target=submit) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sum(1 for result in results if result.level_completed) == 1
        assert _user(world).xp == level.xp

    def test_write_sequences_lock_the_user_row_first(self, world, monkeypatch):
        user_id = world.user.user_id
        level = world.levels[(1, 1)]
        events = []
        append = world.store.append_user_exercise_attempt

        def recording_append(*args, **kwargs):
            events.append("append")
            return append(*args, **kwargs)

        monkeypatch.setattr(world.store, "lock_user", lambda locked_id: events.append(("lock", locked_id)))
        monkeypatch.setattr(world.store, "append_user_exercise_attempt", recording_append)

        entry = world.engine.start_or_resume_level(user_id, level.id)
        world.engine.submit_answer(user_id, level.id, entry.exercise.id, True)
        world.engine.refresh_lives(user_id)

        assert events == [("lock", user_id), ("lock", user_id), "append", ("lock", user_id)]
