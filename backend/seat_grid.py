# backend/seat_grid.py

from __future__ import annotations

from typing import List, Sequence


def seat_cells(
    award_sequence: Sequence[str],
    total_seats: int,
    placeholder: str,
) -> List[str]:
    """
    Labels for a grid of `total_seats` cells.

    Cell i shows the party that won seat i + 1, or the placeholder
    (Settings.seat_placeholder in the API) when the award sequence is
    shorter than the grid (e.g. while recalculating).
    """
    return [
        award_sequence[i] if i < len(award_sequence) else placeholder
        for i in range(total_seats)
    ]


def seat_rows(cells: Sequence[str], columns: int) -> List[List[str]]:
    """Split the cells into rows of `columns` cells (the last row may be shorter)."""
    if columns < 1:
        raise ValueError("columns must be at least 1")
    return [list(cells[i:i + columns]) for i in range(0, len(cells), columns)]
