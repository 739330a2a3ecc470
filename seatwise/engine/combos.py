"""Enumeration of combinable table subsets"""

from typing import List, Sequence

from seatwise.models import Table

DEFAULT_MAX_TABLES_PER_COMBO = 4


def generate_combos(
    tables: Sequence[Table],
    max_size: int = DEFAULT_MAX_TABLES_PER_COMBO,
) -> List[List[Table]]:
    """
    Every non-empty subset of ``tables`` (up to ``max_size`` members) whose
    members can all be pushed together pairwise.

    Walks the id-sorted tables depth-first, only ever extending a combo with
    ids after its last member, and drops a branch as soon as the new table
    fails to combine with any member already in it.
    """
    ordered = sorted(tables, key=lambda table: table.id)
    combos: List[List[Table]] = []
    current: List[Table] = []

    def extend(start: int) -> None:
        if current:
            combos.append(list(current))
        if len(current) >= max_size:
            return
        for index in range(start, len(ordered)):
            candidate = ordered[index]
            if not all(member.can_combine_with(candidate) for member in current):
                continue
            current.append(candidate)
            extend(index + 1)
            current.pop()

    if max_size > 0:
        extend(0)
    return combos
