from __future__ import annotations

from typing import Iterable

from .errors import require_positive_cuts


def distinct_sorted(coordinates: Iterable[float]) -> list[float]:
    return sorted(set(float(c) for c in coordinates))


def compute_gaps(sorted_coordinates: list[float]) -> list[float]:
    """
    gaps[i] = S[i + 1] - S[i] over distinct, ascending coordinates.
    len(gaps) == len(S) - 1 (empty for fewer than two points).
    """
    return [b - a for a, b in zip(sorted_coordinates, sorted_coordinates[1:])]


def _first_max_index(values: list[float]) -> int:
    # First occurrence wins on ties (ascending index), keeps output deterministic.
    best = 0
    for i in range(1, len(values)):
        if values[i] > values[best]:
            best = i
    return best


def select_cuts(coordinates: Iterable[float], cuts: int) -> list[float]:
    """
    Pick the `cuts` largest whitespace gaps between consecutive distinct
    coordinates and return the coordinate that follows each gap.

    - Duplicates and input order do not affect the result.
    - Fewer than two distinct coordinates -> [] (no gap to rank).
    - Asking for more cuts than there are gaps returns one boundary per gap.

    Result is sorted ascending; every value is a member of the input.
    """

    require_positive_cuts(cuts)

    s = distinct_sorted(coordinates)
    if len(s) < 2:
        return []

    gaps = compute_gaps(s)
    boundaries: list[float] = []
    for _ in range(min(cuts, len(gaps))):
        idx = _first_max_index(gaps)
        boundaries.append(s[idx + 1])
        gaps[idx] = 0.0  # mark as taken

    return sorted(boundaries)
