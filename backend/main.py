# backend/main.py

import logging
from fractions import Fraction
from typing import Dict, List

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

# The D'Hondt allocation itself
from dhondt import Candidate, allocate, validate
from errors import AllocationError
from logging_utils import configure_logging
from seat_grid import seat_cells, seat_rows
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


# ============================================================
# PYDANTIC MODELS (request/response schemas)
# ============================================================

class CandidateInput(BaseModel):
    """A party as typed in the "add votes" dialog. Votes may arrive as text."""
    name: str
    votes: int | float


class AllocationRequest(BaseModel):
    """Body of POST /allocate."""
    seats: int
    candidates: List[CandidateInput] = []
    blank_votes: int = 0
    null_votes: int = 0
    threshold_percent: float = 0.0
    # Columns of the seat grid in the UI
    columns: int = 4


class CandidateResult(BaseModel):
    """Final result for one party (shown next to its vote count)."""
    name: str
    votes: int | float
    seats: int
    above_threshold: bool = True


class AllocationResponse(BaseModel):
    """What the UI needs to draw the chamber and the party list."""
    seats: int
    blank_votes: int = 0
    null_votes: int = 0
    total_valid: int | float
    total_cast: int | float
    threshold_percent: float = 0.0
    minimum_votes: int = 0
    seats_per_candidate: Dict[str, int]
    award_sequence: List[str]
    grid: List[List[str]]
    results: List[CandidateResult]


class SeatConfig(BaseModel):
    """Bounds for the seat slider."""
    min_seats: int = 0
    max_seats: int
    default_seats: int
    seat_placeholder: str


# ============================================================
# BUSINESS LOGIC
# ============================================================

def run_simulation(
    seats: int,
    candidates: List[CandidateInput],
    blank_votes: int = 0,
    null_votes: int = 0,
    threshold_percent: float = 0.0,
    columns: int = 4,
    settings: Settings | None = None,
) -> AllocationResponse:
    """
    Central function:
    - checks the request against the UI bounds
    - validates the parties (AllocationError on bad input)
    - computes totals and the electoral threshold
    - runs D'Hondt among the parties above the threshold
    - lays the awarded seats out as a grid
    """
    settings = settings or get_settings()

    # -----------------------------
    # Parameter checks
    # -----------------------------
    if seats > settings.max_seats:
        raise HTTPException(
            status_code=400,
            detail=f"The number of seats cannot exceed {settings.max_seats}",
        )

    if blank_votes < 0 or null_votes < 0:
        raise HTTPException(status_code=400, detail="Blank and null votes cannot be negative")

    threshold = threshold_percent or 0.0
    if threshold < 0 or threshold > 100:
        raise HTTPException(status_code=400, detail="The threshold must be between 0 and 100")

    if columns < 1:
        raise HTTPException(status_code=400, detail="The grid needs at least one column")

    entries = [Candidate(name=c.name, votes=c.votes) for c in candidates]
    validate(seats, entries)

    # -----------------------------
    # Totals and threshold
    # -----------------------------
    total_parties = sum(c.votes for c in entries)
    total_valid = total_parties + blank_votes
    total_cast = total_valid + null_votes

    # Exact arithmetic, vote totals can exceed the float range
    minimum_votes = int(Fraction(total_valid) * Fraction(threshold) / 100) if threshold > 0 else 0

    if threshold > 0:
        eligible = [c for c in entries if c.votes >= minimum_votes]
        if entries and not eligible and seats > 0:
            raise HTTPException(
                status_code=400,
                detail=f"No party reaches the {threshold}% threshold. Lower it or check the votes.",
            )
    else:
        eligible = entries

    # -----------------------------
    # D'Hondt allocation
    # -----------------------------
    seats_by_party, award_sequence = allocate(seats, eligible)

    results: List[CandidateResult] = []
    for c in entries:
        results.append(
            CandidateResult(
                name=c.name,
                votes=c.votes,
                seats=seats_by_party.get(c.name, 0),
                above_threshold=c.votes >= minimum_votes if threshold > 0 else True,
            )
        )

    cells = seat_cells(award_sequence, seats, settings.seat_placeholder)

    return AllocationResponse(
        seats=seats,
        blank_votes=blank_votes,
        null_votes=null_votes,
        total_valid=total_valid,
        total_cast=total_cast,
        threshold_percent=threshold,
        minimum_votes=minimum_votes,
        seats_per_candidate={c.name: seats_by_party.get(c.name, 0) for c in entries},
        award_sequence=award_sequence,
        grid=seat_rows(cells, columns),
        results=results,
    )


# ============================================================
# FASTAPI APPLICATION
# ============================================================

def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="D'Hondt seat calculator",
        description="Seat allocation with the D'Hondt method, seat by seat",
        version="0.1.0",
    )

    # The UI is served from another origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AllocationError)
    async def allocation_error_handler(request: Request, exc: AllocationError):
        logger.info("rejected %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=400,
            content={"detail": str(exc), "error": type(exc).__name__},
        )

    @app.get("/")
    def read_root():
        """Basic endpoint to check the API is up."""
        return {"message": "D'Hondt API running. See /docs to try it."}

    @app.get("/config", response_model=SeatConfig)
    def read_config():
        """Slider bounds and placeholder glyph for the UI."""
        return SeatConfig(
            max_seats=settings.max_seats,
            default_seats=settings.default_seats,
            seat_placeholder=settings.seat_placeholder,
        )

    @app.post("/allocate", response_model=AllocationResponse)
    def allocate_seats(request: AllocationRequest):
        """
        Receives the seat count and parties from the UI and returns
        seats per party plus the award order. The UI calls it again
        every time the slider or the party list changes.
        """
        return run_simulation(
            seats=request.seats,
            candidates=request.candidates,
            blank_votes=request.blank_votes,
            null_votes=request.null_votes,
            threshold_percent=request.threshold_percent,
            columns=request.columns,
            settings=settings,
        )

    return app


app = create_app()
