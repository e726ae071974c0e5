"""Tests for the HTTP API in front of the allocation."""

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from main import CandidateInput, create_app, run_simulation
from settings import Settings


@pytest.fixture
def settings():
    return Settings(max_seats=60, default_seats=16, seat_placeholder="_")


@pytest.fixture
def client(settings):
    return TestClient(create_app(settings))


def _body(seats, **extra):
    body = {"seats": seats, "candidates": [{"name": "A", "votes": 100}, {"name": "B", "votes": 50}]}
    body.update(extra)
    return body


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "message" in response.json()


def test_config(client):
    assert client.get("/config").json() == {
        "min_seats": 0,
        "max_seats": 60,
        "default_seats": 16,
        "seat_placeholder": "_",
    }


def test_allocate(client):
    response = client.post("/allocate", json=_body(4, columns=3))
    assert response.status_code == 200
    data = response.json()
    assert data["seats_per_candidate"] == {"A": 3, "B": 1}
    assert data["award_sequence"] == ["A", "A", "B", "A"]
    assert data["grid"] == [["A", "A", "B"], ["A"]]
    assert data["total_valid"] == 150
    assert data["total_cast"] == 150
    assert [r["seats"] for r in data["results"]] == [3, 1]


def test_votes_are_coerced_from_text(client):
    body = {"seats": 3, "candidates": [{"name": "A", "votes": "120"}, {"name": "B", "votes": "60.5"}]}
    data = client.post("/allocate", json=body).json()
    assert data["results"][0]["votes"] == 120
    assert data["results"][1]["votes"] == 60.5
    assert data["award_sequence"] == ["A", "B", "A"]


def test_zero_seats(client):
    data = client.post("/allocate", json=_body(0)).json()
    assert data["seats_per_candidate"] == {"A": 0, "B": 0}
    assert data["award_sequence"] == []
    assert data["grid"] == []


def test_blank_and_null_votes_count_in_totals(client):
    data = client.post("/allocate", json=_body(4, blank_votes=10, null_votes=5)).json()
    assert data["total_valid"] == 160
    assert data["total_cast"] == 165


def test_threshold_excludes_small_parties(client):
    body = {
        "seats": 10,
        "threshold_percent": 5,
        "candidates": [
            {"name": "A", "votes": 600},
            {"name": "B", "votes": 360},
            {"name": "C", "votes": 40},
        ],
    }
    data = client.post("/allocate", json=body).json()
    assert data["minimum_votes"] == 50
    assert data["seats_per_candidate"]["C"] == 0
    assert sum(data["seats_per_candidate"].values()) == 10
    assert data["results"][2]["above_threshold"] is False
    assert "C" not in data["award_sequence"]


def test_nobody_above_threshold(client):
    body = _body(4, blank_votes=10_000, threshold_percent=50)
    response = client.post("/allocate", json=body)
    assert response.status_code == 400
    assert "threshold" in response.json()["detail"]


@pytest.mark.parametrize("body, error", [
    ({"seats": 3, "candidates": []}, "NoCandidatesError"),
    ({"seats": -1, "candidates": [{"name": "A", "votes": 1}]}, "InvalidSeatBudgetError"),
    ({"seats": 3, "candidates": [{"name": "A", "votes": -1}]}, "InvalidVoteCountError"),
    ({"seats": 3, "candidates": [{"name": " ", "votes": 1}]}, "InvalidCandidateNameError"),
    (
        {"seats": 3, "candidates": [{"name": "A", "votes": 1}, {"name": "A", "votes": 2}]},
        "DuplicateCandidateError",
    ),
])
def test_allocation_errors_become_400(client, body, error):
    response = client.post("/allocate", json=body)
    assert response.status_code == 400
    assert response.json()["error"] == error


@pytest.mark.parametrize("extra", [
    {"blank_votes": -1},
    {"threshold_percent": 101},
    {"columns": 0},
])
def test_invalid_parameters(client, extra):
    assert client.post("/allocate", json=_body(4, **extra)).status_code == 400


def test_seat_bound_comes_from_settings(client):
    assert client.post("/allocate", json=_body(61)).status_code == 400
    assert client.post("/allocate", json=_body(60)).status_code == 200


def test_run_simulation_directly(settings):
    candidates = [CandidateInput(name="A", votes=0), CandidateInput(name="B", votes=0)]
    result = run_simulation(3, candidates, settings=settings)
    assert result.award_sequence == ["A", "A", "A"]
    assert result.grid == [["A", "A", "A"]]

    with pytest.raises(HTTPException) as excinfo:
        run_simulation(61, candidates, settings=settings)
    assert excinfo.value.status_code == 400


def test_grid_placeholder_never_shows_after_full_allocation(client):
    data = client.post("/allocate", json=_body(5, columns=5)).json()
    assert "_" not in data["grid"][0]


def test_votes_beyond_float_range(client):
    body = {
        "seats": 3,
        "threshold_percent": 5,
        "candidates": [{"name": "A", "votes": 10**400}, {"name": "B", "votes": 1}],
    }
    response = client.post("/allocate", json=body)
    assert response.status_code == 200
    data = response.json()
    assert data["award_sequence"] == ["A", "A", "A"]
    assert data["total_valid"] == 10**400 + 1
    assert data["results"][1]["above_threshold"] is False


def test_large_votes_differing_by_one(client):
    body = {"seats": 1, "candidates": [{"name": "A", "votes": 2**53}, {"name": "B", "votes": 2**53 + 1}]}
    assert client.post("/allocate", json=body).json()["award_sequence"] == ["B"]
