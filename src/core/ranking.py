# src/core/ranking.py
"""
Rank a user's metric against a reference population of regions.

The population (US states, Canadian provinces) is sorted best-first, the
user's value is slotted in after every region that is at least as good, and
the result can be cut down to a compact "mini ranking" window for tables.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Literal, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

Direction = Literal["asc", "desc"]


@dataclass(frozen=True)
class RegionRecord:
    code: str
    display_name: str
    value: float
    is_user: bool = False


@dataclass(frozen=True)
class UserRecord:
    code: str
    display_name: str
    value: float
    is_user: bool = True


Record = Union[RegionRecord, UserRecord]


@dataclass(frozen=True)
class RankedEntry:
    rank: int
    region: Record

    @property
    def is_user(self) -> bool:
        return self.region.is_user

    @property
    def value(self) -> float:
        return self.region.value


@dataclass(frozen=True)
class PositionDescription:
    """
    Where the user sits relative to the ranked regions.

    kind is one of ``above``, ``below``, ``between``, ``tied`` or ``only``
    (empty population). ``rank_above`` is the rank of the region just
    better than the user, ``rank_below`` the one just worse.
    """

    kind: str
    rank_above: Optional[int]
    rank_below: Optional[int]
    label: str


def _sort_key(value: float, direction: Direction) -> Tuple[int, float]:
    # NaN always sorts last; +inf is simply larger than every finite value.
    if math.isnan(value):
        return (1, 0.0)
    return (0, -value if direction == "desc" else value)


def _is_tied(a: float, b: float, tolerance: float) -> bool:
    if a == b:
        return True
    if math.isnan(a) or math.isnan(b) or math.isinf(a) or math.isinf(b):
        return False
    return abs(a - b) <= tolerance


def _is_better(a: float, b: float, direction: Direction) -> bool:
    """True when ``a`` ranks strictly ahead of ``b``."""
    if math.isnan(a):
        return False
    if math.isnan(b):
        return True
    return a > b if direction == "desc" else a < b


def sort_population(
    population: Iterable[RegionRecord], direction: Direction = "desc"
) -> List[RegionRecord]:
    """Best-first order; ties are broken by display name ascending."""
    return sorted(
        population,
        key=lambda r: (_sort_key(float(r.value), direction), r.display_name),
    )


@dataclass(frozen=True)
class Ranking:
    regions: Tuple[RankedEntry, ...]  # population only, ranks 1..N
    user_rank: RankedEntry
    insert_index: int  # number of regions placed before the user
    position: PositionDescription

    @property
    def all(self) -> Tuple[RankedEntry, ...]:
        """Full ranking with the user inserted at its position."""
        return (
            self.regions[: self.insert_index]
            + (self.user_rank,)
            + self.regions[self.insert_index :]
        )

    @property
    def population_size(self) -> int:
        return len(self.regions)

    def window(self, top_n: int = 5, radius: int = 2) -> List[RankedEntry]:
        """
        Compact view for report tables.

        The first ``top_n`` regions, plus up to ``radius`` regions directly
        better and directly worse than the user (clipped at the ends of the
        ranking), with the user exactly once. Entries keep ranking order and
        are never repeated.
        """
        top_n = max(0, top_n)
        radius = max(0, radius)
        keep = set(range(min(top_n, len(self.regions))))
        keep.update(range(max(0, self.insert_index - radius), self.insert_index))
        keep.update(
            range(
                self.insert_index,
                min(len(self.regions), self.insert_index + radius),
            )
        )

        entries: List[RankedEntry] = []
        for i, entry in enumerate(self.regions):
            if i == self.insert_index:
                entries.append(self.user_rank)
            if i in keep:
                entries.append(entry)
        if self.insert_index >= len(self.regions):
            entries.append(self.user_rank)
        return entries


def describe_position(
    sorted_regions: Sequence[RegionRecord],
    insert_index: int,
    user_value: float,
    tolerance: float = 0.0,
) -> PositionDescription:
    n = len(sorted_regions)
    if n == 0:
        return PositionDescription("only", None, None, "#1 of 1")
    if insert_index == 0:
        return PositionDescription("above", None, 1, "above #1")
    if _is_tied(float(sorted_regions[insert_index - 1].value), user_value, tolerance):
        rank_below = insert_index + 1 if insert_index < n else None
        return PositionDescription(
            "tied", insert_index, rank_below, f"tied with #{insert_index}"
        )
    if insert_index >= n:
        return PositionDescription("below", n, None, f"below #{n}")
    return PositionDescription(
        "between",
        insert_index,
        insert_index + 1,
        f"between #{insert_index}-#{insert_index + 1}",
    )


def rank(
    population: Iterable[RegionRecord],
    user: UserRecord,
    direction: Direction = "desc",
    tolerance: float = 0.0,
) -> Ranking:
    """
    Rank ``user`` against ``population``.

    The user goes directly after every region that is better than or tied
    with it, so its rank is in ``[1, N + 1]`` and a tie never pushes a
    region down. An empty population yields the "#1 of 1" sentinel.
    """
    if direction not in ("asc", "desc"):
        raise ValueError(f"direction must be 'asc' or 'desc', got {direction!r}")
    if tolerance < 0:
        raise ValueError("tolerance must be >= 0")

    ordered = sort_population(population, direction)
    codes = [r.code for r in ordered]
    if len(set(codes)) != len(codes):
        raise ValueError("Region codes must be unique within a population")

    user_value = float(user.value)
    insert_index = 0
    for region in ordered:
        value = float(region.value)
        if _is_better(value, user_value, direction) or _is_tied(
            value, user_value, tolerance
        ):
            insert_index += 1
        else:
            break

    regions = tuple(RankedEntry(rank=i + 1, region=r) for i, r in enumerate(ordered))
    user_entry = RankedEntry(rank=insert_index + 1, region=user)
    position = describe_position(ordered, insert_index, user_value, tolerance)
    logger.debug(
        "Ranked user value %s against %d regions (%s): %s",
        user_value,
        len(ordered),
        direction,
        position.label,
    )
    return Ranking(
        regions=regions,
        user_rank=user_entry,
        insert_index=insert_index,
        position=position,
    )
