# backend/dhondt.py

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from numbers import Integral, Real
from typing import Dict, Iterable, List, Mapping, NamedTuple, Sequence, Tuple, Union

from errors import (
    DuplicateCandidateError,
    InvalidCandidateNameError,
    InvalidSeatBudgetError,
    InvalidVoteCountError,
    NoCandidatesError,
)

logger = logging.getLogger(__name__)

# Any real number: int, float, Fraction or Decimal
Votes = Union[int, float, Fraction, Decimal]


@dataclass(frozen=True)
class Candidate:
    """A party (or list) competing for seats: a unique name and its vote count."""
    name: str
    votes: Votes


class Allocation(NamedTuple):
    """
    Result of one allocation run.

    seats: {name: seats won}, in the same order the candidates were given.
    award_sequence: names in the order the seats were awarded
                    (award_sequence[i] won seat i + 1).
    """
    seats: Dict[str, int]
    award_sequence: List[str]


CandidateLike = Union[Candidate, Tuple[str, Votes]]


def _as_candidate(item: CandidateLike) -> Candidate:
    if isinstance(item, Candidate):
        return item
    name, votes = item
    return Candidate(name=name, votes=votes)


def _check_seat_budget(seat_budget) -> int:
    if isinstance(seat_budget, bool) or not isinstance(seat_budget, Integral):
        raise InvalidSeatBudgetError(seat_budget)
    if seat_budget < 0:
        raise InvalidSeatBudgetError(seat_budget)
    return int(seat_budget)


def _check_candidate(candidate: Candidate) -> None:
    if not isinstance(candidate.name, str) or not candidate.name.strip():
        raise InvalidCandidateNameError(candidate.name)

    votes = candidate.votes
    if isinstance(votes, Decimal):
        if not votes.is_finite() or votes < 0:
            raise InvalidVoteCountError(candidate.name, votes)
        return
    if isinstance(votes, bool) or not isinstance(votes, Real):
        raise InvalidVoteCountError(candidate.name, votes)
    # Integers are always finite, and may be too large to convert to float
    if not isinstance(votes, Integral) and not math.isfinite(votes):
        raise InvalidVoteCountError(candidate.name, votes)
    if votes < 0:
        raise InvalidVoteCountError(candidate.name, votes)


def validate(seat_budget, candidates: Sequence[Candidate]) -> int:
    """
    Check every precondition of `allocate` up front, so that an invalid input
    never produces a partially filled result.

    Returns the seat budget as a plain int.
    """
    seats = _check_seat_budget(seat_budget)

    for candidate in candidates:
        _check_candidate(candidate)

    counts = Counter(c.name for c in candidates)
    duplicated = [name for name, n in counts.items() if n > 1]
    if duplicated:
        raise DuplicateCandidateError(duplicated)

    if seats > 0 and not candidates:
        raise NoCandidatesError(seats)

    return seats


def allocate(seat_budget: int, candidates: Iterable[CandidateLike]) -> Allocation:
    """
    Distribute `seat_budget` seats with the D'Hondt (highest averages) method.

    Each round every candidate's quotient votes / (seats won + 1) is computed
    and the seat goes to the greatest one. On a tie the candidate listed
    first wins, so the same input always yields the same award order.

    Parameters:
        seat_budget: total number of seats (non-negative int, no upper bound)
        candidates: ordered Candidate objects or (name, votes) pairs
                    (votes: int, float, Fraction or Decimal)

    Returns:
        Allocation(seats, award_sequence)

    Raises:
        InvalidSeatBudgetError, InvalidVoteCountError, InvalidCandidateNameError,
        DuplicateCandidateError, NoCandidatesError
    """
    entries = [_as_candidate(c) for c in candidates]
    total_seats = validate(seat_budget, entries)

    # Everybody starts with 0 seats
    seats_by_party: Dict[str, int] = {c.name: 0 for c in entries}
    award_sequence: List[str] = []

    # Quotients are compared as exact fractions
    exact_votes = [Fraction(c.votes) for c in entries]

    for _ in range(total_seats):
        greatest = None
        winner = None

        # Strict ">" keeps the earliest candidate on ties
        for c, votes in zip(entries, exact_votes):
            quotient = votes / (seats_by_party[c.name] + 1)
            if greatest is None or quotient > greatest:
                greatest = quotient
                winner = c.name

        seats_by_party[winner] += 1
        award_sequence.append(winner)

    logger.debug(
        "allocated %d seat(s) among %d candidate(s): %s",
        total_seats, len(entries), seats_by_party,
    )
    return Allocation(seats=seats_by_party, award_sequence=award_sequence)


def dhondt(votes_by_party: Mapping[str, Votes], num_seats: int) -> Dict[str, int]:
    """
    Seats per party for a {party: votes} mapping.

    The mapping's iteration order is the tie-break order.
    """
    return allocate(num_seats, votes_by_party.items()).seats
