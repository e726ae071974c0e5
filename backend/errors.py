# backend/errors.py

from __future__ import annotations

from typing import Any, Iterable


class AllocationError(ValueError):
    """Base error for inputs the D'Hondt allocation refuses to process."""


class InvalidSeatBudgetError(AllocationError):
    """The number of seats is negative or not an integer."""

    def __init__(self, seat_budget: Any):
        self.seat_budget = seat_budget
        super().__init__(f"Seat count must be a non-negative integer, got {seat_budget!r}")


class InvalidVoteCountError(AllocationError):
    """A candidate's votes are negative or not a finite number."""

    def __init__(self, name: Any, votes: Any):
        self.name = name
        self.votes = votes
        super().__init__(f"Votes for {name!r} must be a finite non-negative number, got {votes!r}")


class InvalidCandidateNameError(AllocationError):
    """A candidate has an empty (or non-string) name."""

    def __init__(self, name: Any):
        self.name = name
        super().__init__(f"Candidate name must be a non-empty string, got {name!r}")


class DuplicateCandidateError(AllocationError):
    """Two or more candidates share a name."""

    def __init__(self, names: Iterable[str]):
        self.names = sorted(set(names))
        super().__init__(f"Duplicate candidate names: {', '.join(self.names)}")


class NoCandidatesError(AllocationError):
    """Seats were requested but there is nobody to give them to."""

    def __init__(self, seat_budget: int):
        self.seat_budget = seat_budget
        super().__init__(f"Cannot allocate {seat_budget} seat(s) without any candidate")
