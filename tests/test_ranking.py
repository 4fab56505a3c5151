# tests/test_ranking.py
import random

import pytest

from src.core.ranking import RegionRecord, UserRecord, rank, sort_population


def _population(values, prefix="R"):
    return [
        RegionRecord(code=f"{prefix}{i}", display_name=f"Region {i:02d}", value=v)
        for i, v in enumerate(values)
    ]


def _user(value) -> UserRecord:
    return UserRecord(code="YOU", display_name="You", value=value)


def test_user_between_two_regions():
    # Rank is 1 + regions placed ahead of the user, so 50, 40, 30 ahead gives #4.
    ranking = rank(_population([10, 20, 30, 40, 50]), _user(25), direction="desc")

    assert [e.value for e in ranking.all] == [50, 40, 30, 25, 20, 10]
    assert ranking.user_rank.rank == 4
    assert ranking.position.kind == "between"
    assert ranking.position.label == "between #3-#4"
    assert (ranking.position.rank_above, ranking.position.rank_below) == (3, 4)


def test_window_top_n_and_neighbourhood():
    ranking = rank(_population([10, 20, 30, 40, 50]), _user(25), direction="desc")
    window = ranking.window(top_n=2, radius=1)

    assert [e.value for e in window] == [50, 40, 30, 25, 20]
    assert [e.is_user for e in window] == [False, False, False, True, False]


def test_user_equal_to_minimum_ranks_last():
    ranking = rank(_population([10, 20, 30, 40, 50]), _user(10), direction="desc")

    assert ranking.user_rank.rank == 6
    assert ranking.position.kind == "tied"
    assert ranking.position.label == "tied with #5"
    # The tied region keeps its own rank.
    assert ranking.regions[-1].rank == 5


def test_tie_does_not_displace_region_rank():
    ranking = rank(_population([10, 30, 50]), _user(30), direction="desc")
    assert [e.rank for e in ranking.regions] == [1, 2, 3]
    assert ranking.user_rank.rank == 3
    assert ranking.position.label == "tied with #2"


def test_user_better_than_all():
    ranking = rank(_population([10, 20, 30]), _user(99), direction="desc")
    assert ranking.user_rank.rank == 1
    assert ranking.position.label == "above #1"
    assert ranking.all[0].is_user


def test_user_worse_than_all():
    ranking = rank(_population([10, 20, 30]), _user(1), direction="desc")
    assert ranking.user_rank.rank == 4
    assert ranking.position.label == "below #3"
    assert ranking.all[-1].is_user


def test_ascending_direction():
    ranking = rank(_population([10, 20, 30, 40]), _user(25), direction="asc")
    assert [e.value for e in ranking.all] == [10, 20, 25, 30, 40]
    assert ranking.user_rank.rank == 3
    assert ranking.position.label == "between #2-#3"


def test_empty_population_sentinel():
    ranking = rank([], _user(42))
    assert ranking.user_rank.rank == 1
    assert ranking.position.label == "#1 of 1"
    assert ranking.all == (ranking.user_rank,)
    assert ranking.window() == [ranking.user_rank]


def test_infinite_values_sort_above_finite():
    inf = float("inf")
    ranking = rank(_population([5, inf, 1e12]), _user(1e15), direction="desc")
    assert [e.value for e in ranking.all] == [inf, 1e15, 1e12, 5]
    assert ranking.user_rank.rank == 2


def test_infinite_user_ties_infinite_region():
    inf = float("inf")
    ranking = rank(_population([inf, 3]), _user(inf), direction="desc")
    assert ranking.user_rank.rank == 2
    assert ranking.position.label == "tied with #1"


def test_nan_sorts_last():
    nan = float("nan")
    ordered = sort_population(_population([nan, 3, 7]), "desc")
    assert [r.value for r in ordered[:2]] == [7, 3]
    assert ordered[-1].code == "R0"


def test_ties_broken_by_display_name():
    population = [
        RegionRecord(code="B", display_name="Beta", value=30),
        RegionRecord(code="A", display_name="Alpha", value=30),
        RegionRecord(code="C", display_name="Gamma", value=40),
    ]
    ranking = rank(population, _user(0))
    assert [e.region.display_name for e in ranking.regions] == ["Gamma", "Alpha", "Beta"]


def test_tolerance_treats_close_values_as_tied():
    ranking = rank(_population([10, 30, 50]), _user(30 + 1e-12), tolerance=1e-9)
    assert ranking.position.kind == "tied"
    assert ranking.user_rank.rank == 3


def test_rank_is_idempotent_and_order_independent():
    values = [float(v) for v in range(50)]
    population = _population(values)
    first = rank(population, _user(17.5))
    second = rank(population, _user(17.5))
    shuffled = list(population)
    random.Random(7).shuffle(shuffled)
    third = rank(shuffled, _user(17.5))
    assert first == second == third


@pytest.mark.parametrize("user_value", [-1, 0, 12.5, 24, 25, 49, 100])
def test_rank_within_bounds_and_window_has_user_once(user_value):
    population = _population([float(v) for v in range(50)])
    ranking = rank(population, _user(user_value))

    assert 1 <= ranking.user_rank.rank <= len(population) + 1
    window = ranking.window(top_n=5, radius=2)
    assert sum(1 for e in window if e.is_user) == 1
    codes = [e.region.code for e in window]
    assert len(codes) == len(set(codes))
    ranks = [e.rank for e in window]
    assert ranks == sorted(ranks)
    assert len(window) <= 5 + 2 + 2 + 1


def test_window_clipped_at_boundaries():
    ranking = rank(_population([10, 20, 30, 40, 50, 60, 70, 80]), _user(1))
    window = ranking.window(top_n=5, radius=2)
    assert [e.value for e in window] == [80, 70, 60, 50, 40, 20, 10, 1]


def test_window_overlapping_top_is_deduplicated():
    ranking = rank(_population([10, 20, 30, 40, 50, 60, 70, 80]), _user(65))
    window = ranking.window(top_n=5, radius=2)
    assert [e.value for e in window] == [80, 70, 65, 60, 50, 40]


def test_invalid_arguments_raise():
    population = _population([1, 2])
    with pytest.raises(ValueError):
        rank(population, _user(1), direction="up")
    with pytest.raises(ValueError):
        rank(population, _user(1), tolerance=-1)
    duplicate = population + [RegionRecord(code="R0", display_name="Again", value=3)]
    with pytest.raises(ValueError):
        rank(duplicate, _user(1))
