from datetime import timedelta

from yoruba.models.enums import LeaderboardRange
from yoruba.services.leaderboard_service import get_leaderboard


def _exercise(world, key, index=0):
    return world.content.get_exercises_by_level(world.levels[key].id)[index]


class TestAllTime:

    def test_sorted_by_xp_with_positional_ranks(self, world):
        world.store.update_user_resources(world.user.user_id, xp_delta=40)
        bola = world.store.add_user("bola", xp=40)
        world.store.add_user("chidi", xp=90)
        world.store.add_user("dayo")

        entries = get_leaderboard(world.content, world.store, LeaderboardRange.ALL_TIME)

        assert [(e.username, e.xp, e.rank) for e in entries] == [
            ("chidi", 90, 1),
            ("ade", 40, 2),
            ("bola", 40, 3),
        ]
        assert entries[1].user_id < bola.user_id

    def test_limit(self, world):
        for index in range(5):
            world.store.add_user(f"user{index}", xp=index + 1)
        entries = get_leaderboard(world.content, world.store, "allTime", limit=2)
        assert [e.xp for e in entries] == [5, 4]


class TestWeekly:

    def test_sums_level_xp_per_correct_attempt(self, world):
        user_id = world.user.user_id
        now = world.clock()
        easy = _exercise(world, (1, 1))
        gold = _exercise(world, (1, 4))
        world.store.append_user_exercise_attempt(user_id, easy.id, True, now)
        world.store.append_user_exercise_attempt(user_id, easy.id, True, now)
        world.store.append_user_exercise_attempt(user_id, gold.id, True, now)
        world.store.append_user_exercise_attempt(user_id, gold.id, False, now)

        entries = get_leaderboard(world.content, world.store, LeaderboardRange.WEEKLY, clock=world.clock)

        assert len(entries) == 1
        assert entries[0].xp == 10 + 10 + 30
        assert entries[0].rank == 1

    def test_window_lower_bound_is_inclusive(self, world):
        user_id = world.user.user_id
        bola = world.store.add_user("bola")
        exercise = _exercise(world, (1, 2))
        week_ago = world.clock() - timedelta(days=7)
        world.store.append_user_exercise_attempt(user_id, exercise.id, True, week_ago)
        world.store.append_user_exercise_attempt(bola.user_id, exercise.id, True, week_ago - timedelta(seconds=1))

        entries = get_leaderboard(world.content, world.store, LeaderboardRange.WEEKLY, clock=world.clock)

        assert [(e.username, e.xp) for e in entries] == [("ade", 15)]

    def test_users_without_score_are_not_listed(self, world):
        world.store.add_user("bola", xp=500)
        assert get_leaderboard(world.content, world.store, LeaderboardRange.WEEKLY, clock=world.clock) == []
