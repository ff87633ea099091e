"""Unit tests for the User ledger transitions."""

import pytest

from domain.entities.task import TASKS, Task, TaskIds, get_task
from domain.entities.user import User, invalid_vibes, is_valid_display_name

REPEATABLE = [t for t in TASKS.values() if t.repeatable]
NON_REPEATABLE = [t for t in TASKS.values() if not t.repeatable]


@pytest.fixture
def user() -> User:
    return User(id="did:privy:alice")


class TestAward:
    @pytest.mark.parametrize("task", NON_REPEATABLE, ids=lambda t: t.id)
    def test_non_repeatable_second_award_is_noop(self, user: User, task: Task) -> None:
        first = user.award(task)
        second = user.award(task)

        assert first is not None
        assert second is None
        assert user.num_points == task.points
        assert user.completed_tasks == [task.id]

    @pytest.mark.parametrize("task", REPEATABLE, ids=lambda t: t.id)
    def test_repeatable_award_always_appends(self, user: User, task: Task) -> None:
        for n in range(1, 4):
            result = user.award(task)
            assert result is not None
            assert result.points_delta == task.points
            assert result.new_total == task.points * n

        assert user.completed_tasks == [task.id] * 3

    def test_bypassing_completion_check_awards_non_repeatable_again(self, user: User) -> None:
        task = get_task(TaskIds.SIGN_UP)
        user.award(task)

        result = user.award(task, check_completion=False)

        assert result is not None
        assert user.num_points == 2 * task.points
        assert user.completion_count(TaskIds.SIGN_UP) == 2

    def test_award_treats_missing_total_as_zero(self) -> None:
        user = User(id="u", num_points=None)  # type: ignore[arg-type]

        result = user.award(get_task(TaskIds.ATTEND_JAM))

        assert result is not None
        assert result.new_total == 10


class TestDeduct:
    def test_never_goes_below_zero(self) -> None:
        user = User(id="u", num_points=5, completed_tasks=[TaskIds.ATTEND_JAM])

        result = user.deduct(get_task(TaskIds.ATTEND_JAM))

        assert user.num_points == 0
        assert result.new_total == 0
        assert result.points_delta == -10

    def test_repeatable_removes_only_last_occurrence(self) -> None:
        user = User(
            id="u",
            num_points=30,
            completed_tasks=[
                TaskIds.ATTEND_JAM,
                TaskIds.SIGN_UP,
                TaskIds.ATTEND_JAM,
                TaskIds.CREATE_JAM,
            ],
        )

        user.deduct(get_task(TaskIds.ATTEND_JAM))

        assert user.completed_tasks == [
            TaskIds.ATTEND_JAM,
            TaskIds.SIGN_UP,
            TaskIds.CREATE_JAM,
        ]
        assert user.num_points == 20

    def test_non_repeatable_removes_all_occurrences(self) -> None:
        user = User(
            id="u",
            num_points=20,
            completed_tasks=[TaskIds.SIGN_UP, TaskIds.ATTEND_JAM, TaskIds.SIGN_UP],
        )

        user.deduct(get_task(TaskIds.SIGN_UP))

        assert user.completed_tasks == [TaskIds.ATTEND_JAM]

    def test_deduct_without_prior_completion_keeps_list(self) -> None:
        user = User(id="u", num_points=10, completed_tasks=[TaskIds.SIGN_UP])

        user.deduct(get_task(TaskIds.ATTEND_JAM))

        assert user.completed_tasks == [TaskIds.SIGN_UP]
        assert user.num_points == 0

    def test_award_then_deduct_restores_state(self, user: User) -> None:
        task = get_task(TaskIds.ATTEND_JAM)
        user.award(task)
        user.deduct(task)

        assert user.num_points == 0
        assert user.completed_tasks == []


class TestProfileRules:
    @pytest.mark.parametrize("name", ["alice", "a_1", "x" * 32, "0"])
    def test_valid_display_names(self, name: str) -> None:
        assert is_valid_display_name(name)

    @pytest.mark.parametrize("name", ["", "Alice", "al ice", "al-ice", "x" * 33, "émile"])
    def test_invalid_display_names(self, name: str) -> None:
        assert not is_valid_display_name(name)

    def test_invalid_vibes_lists_unknown_entries(self) -> None:
        assert invalid_vibes(["🎉", "🦄", "🍜", "x"]) == ["🦄", "x"]

    def test_onboarded_once_display_name_is_set(self, user: User) -> None:
        assert not user.is_onboarded
        user.display_name = "alice"
        assert user.is_onboarded


class TestCatalog:
    def test_only_ride_toktok_requires_proof(self) -> None:
        assert [t.id for t in TASKS.values() if t.require_proof] == [TaskIds.RIDE_TOKTOK]

    def test_repeatable_tasks(self) -> None:
        assert {t.id for t in REPEATABLE} == {TaskIds.CREATE_JAM, TaskIds.ATTEND_JAM}

    def test_all_points_non_negative(self) -> None:
        assert all(t.points >= 0 for t in TASKS.values())

    def test_unknown_task_raises_key_error(self) -> None:
        with pytest.raises(KeyError):
            get_task("FLY_TO_MOON")

    def test_catalog_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            TASKS["NEW"] = get_task(TaskIds.SIGN_UP)  # type: ignore[index]
