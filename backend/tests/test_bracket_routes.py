"""Bracket endpoints: read, simulate-all, simulate-one (with redirect fallback), reset."""
import logging
import random
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, select

from clashzone.models.match_result import MatchResult
from clashzone.models.team import Team
from clashzone.models.tournament import Tournament
from clashzone.routes import bracket as bracket_routes
from clashzone.routes.bracket import get_rng, parse_rng_seed


def _tournament_with_teams(session: Session, names) -> int:
    tournament = Tournament(
        name="Route Cup", game_title="Valorant", start_date=datetime(2026, 5, 2, tzinfo=timezone.utc), format="5v5"
    )
    session.add(tournament)
    session.commit()
    session.refresh(tournament)
    for name in names:
        session.add(Team(tournament_id=tournament.id, name=name))
    session.commit()
    return tournament.id


@pytest.fixture
def three_team_id(session: Session) -> int:
    return _tournament_with_teams(session, ["Alpha", "Bravo", "Charlie"])


def test_health(client: TestClient):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_bracket_not_found(client: TestClient):
    resp = client.get("/api/tournaments/9999/bracket")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Tournament not found"


def test_results_not_found(client: TestClient):
    assert client.get("/api/tournaments/9999/bracket/results").status_code == 404


def test_bracket_shape_and_lock(client: TestClient, three_team_id: int):
    resp = client.get(f"/api/tournaments/{three_team_id}/bracket")
    assert resp.status_code == 200
    data = resp.json()
    assert data["tournament"]["name"] == "Route Cup"
    assert data["locked"] is True
    assert [len(r) for r in data["rounds"]] == [2, 1]
    assert sum(1 for m in data["rounds"][0] if m["is_bye"]) == 1
    assert [(m["round"], m["match_num"]) for m in data["rounds"][0]] == [(1, 1), (1, 2)]

    final = data["rounds"][1][0]
    assert final["team1_state"] == "pending"
    assert final["team2_state"] == "team"

    again = client.get(f"/api/tournaments/{three_team_id}/bracket").json()
    assert again["rounds"] == data["rounds"]


def test_bracket_with_one_team_is_empty(client: TestClient, session: Session):
    tid = _tournament_with_teams(session, ["OnlyOne"])
    resp = client.get(f"/api/tournaments/{tid}/bracket")
    assert resp.status_code == 200
    assert resp.json()["rounds"] == []
    assert resp.json()["locked"] is False


def test_results_fully_scored(client: TestClient, session: Session):
    tid = _tournament_with_teams(session, ["A", "B", "C", "D", "E"])
    data = client.get(f"/api/tournaments/{tid}/bracket/results").json()
    assert [len(r) for r in data["rounds"]] == [4, 2, 1]
    for matches in data["rounds"]:
        for m in matches:
            if m["team1_state"] == "team" and m["team2_state"] == "team":
                assert m["team1_score"] != m["team2_score"]
    assert data["rounds"][-1][0]["winner_name"] in {"A", "B", "C", "D", "E"}
    assert data["locked"] is False


def test_simulate_match_records_result(client: TestClient, session: Session):
    tid = _tournament_with_teams(session, ["Red", "Blue"])
    resp = client.post(f"/api/tournaments/{tid}/bracket/rounds/1/matches/1/simulate")
    assert resp.status_code == 200
    final = resp.json()["rounds"][0][0]
    assert final["team1_score"] != final["team2_score"]
    assert final["winner_name"] in {"Red", "Blue"}

    results = session.exec(select(MatchResult).where(MatchResult.tournament_id == tid)).all()
    assert len(results) == 1

    shown = client.get(f"/api/tournaments/{tid}/bracket").json()["rounds"][0][0]
    assert shown["winner_name"] == final["winner_name"]


def test_simulate_unplayable_redirects(client: TestClient, three_team_id: int):
    resp = client.post(
        f"/api/tournaments/{three_team_id}/bracket/rounds/2/matches/1/simulate",
        follow_redirects=False,
    )
    assert resp.status_code == 303
    assert resp.headers["location"] == f"/api/tournaments/{three_team_id}/bracket"


def test_simulate_unknown_tournament_redirects(client: TestClient):
    resp = client.post("/api/tournaments/9999/bracket/rounds/1/matches/1/simulate", follow_redirects=False)
    assert resp.status_code == 303


def test_simulate_redirect_lands_on_bracket(client: TestClient, three_team_id: int):
    resp = client.post(f"/api/tournaments/{three_team_id}/bracket/rounds/5/matches/1/simulate")
    assert resp.status_code == 200
    assert [len(r) for r in resp.json()["rounds"]] == [2, 1]


def test_reset_bracket(client: TestClient, session: Session, three_team_id: int):
    client.post(f"/api/tournaments/{three_team_id}/bracket/rounds/1/matches/1/simulate")
    resp = client.delete(f"/api/tournaments/{three_team_id}/bracket")
    assert resp.status_code == 204
    assert session.exec(select(MatchResult)).all() == []

    assert client.delete("/api/tournaments/9999/bracket").status_code == 404


def test_rng_seed_parsing(caplog):
    assert parse_rng_seed(None) is None
    assert parse_rng_seed("  ") is None
    assert parse_rng_seed("42") == 42
    with caplog.at_level(logging.WARNING, logger="clashzone.routes.bracket"):
        assert parse_rng_seed("not-a-seed") is None
    assert "BRACKET_RNG_SEED" in caplog.text


def test_get_rng_uses_parsed_seed(monkeypatch):
    monkeypatch.setattr(bracket_routes, "_RNG_SEED", 7)
    assert get_rng().random() == random.Random(7).random()

    monkeypatch.setattr(bracket_routes, "_RNG_SEED", None)
    assert isinstance(get_rng(), random.Random)
