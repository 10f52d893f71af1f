"""
Bracket orchestration: team name resolution, the locked draw, and the three
bracket read operations plus single-match simulation.

The draw (team-to-slot assignment) is shuffled once per tournament and stored
as BracketSlot rows; simulated scores are stored per (round, match) as
MatchResult rows. Every read replays the draw plus the recorded scores, so a
match coordinate means the same pairing across requests.

Expected states never raise:
- unknown tournament          -> None
- fewer than two teams        -> BracketView with no rounds
- unplayable match coordinate -> None (simulate_match only)
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from clashzone.models.bracket_slot import BracketSlot
from clashzone.models.match_result import MatchResult
from clashzone.models.team import Team
from clashzone.models.tournament import Tournament
from clashzone.models.user import ClashUser
from clashzone.services.bracket_builder import BYE, MatchInfo, Slot, bracket_size, shuffle_seed_order
from clashzone.services.match_simulator import (
    Coordinate,
    Scores,
    find_match,
    replay_bracket,
    simulate_single_match,
)
from clashzone.services.result_simulator import generate_bracket_with_results

logger = logging.getLogger(__name__)


@dataclass
class BracketView:
    tournament: Tournament
    rounds: List[List[MatchInfo]] = field(default_factory=list)
    locked: bool = False  # True when rounds come from the persisted draw


# ============================================================================
# Name resolution
# ============================================================================


def resolve_team_name(session: Session, team: Team) -> str:
    """Explicit team name, else "team_<captain username>", else "Team_<id>"."""
    if team.name:
        return team.name
    captain = session.get(ClashUser, team.captain_id) if team.captain_id is not None else None
    if captain is not None and captain.username:
        return f"team_{captain.username}"
    logger.debug("Captain %s of team %s not found; using placeholder name", team.captain_id, team.id)
    return f"Team_{team.id}"


def resolve_team_names(session: Session, teams: Sequence[Team]) -> List[str]:
    return [resolve_team_name(session, team) for team in teams]


def _get_teams(session: Session, tournament_id: int) -> List[Team]:
    return list(session.exec(select(Team).where(Team.tournament_id == tournament_id).order_by(Team.id)).all())


# ============================================================================
# Locked draw and recorded results
# ============================================================================


def _load_draw(session: Session, tournament_id: int) -> List[BracketSlot]:
    return list(
        session.exec(
            select(BracketSlot).where(BracketSlot.tournament_id == tournament_id).order_by(BracketSlot.slot_index)
        ).all()
    )


def _clear_draw(session: Session, tournament_id: int) -> None:
    for result in session.exec(select(MatchResult).where(MatchResult.tournament_id == tournament_id)).all():
        session.delete(result)
    for row in _load_draw(session, tournament_id):
        session.delete(row)


def _draw_matches_teams(rows: Sequence[BracketSlot], team_ids: Sequence[int]) -> bool:
    seeded = [row.team_id for row in rows if row.team_id is not None]
    return len(rows) == bracket_size(len(team_ids)) and sorted(seeded) == sorted(team_ids)


def _lock_draw(session: Session, tournament_id: int, teams: Sequence[Team], rng: random.Random) -> List[Optional[int]]:
    """Team id per round-1 slot (None = bye), creating the draw on first use.

    A draw whose teams no longer match the registered teams is discarded
    together with its results. The discard is committed on its own, so a
    request that loses the race to lock the replacement reloads the winner's
    draw rather than the stale one.
    """
    team_ids = [team.id for team in teams]
    rows = _load_draw(session, tournament_id)
    if rows:
        if _draw_matches_teams(rows, team_ids):
            return [row.team_id for row in rows]
        logger.warning("Registered teams changed for tournament %d; discarding draw and results", tournament_id)
        _clear_draw(session, tournament_id)
        session.commit()

    seed_order = shuffle_seed_order(team_ids, rng)
    for index, team_id in enumerate(seed_order):
        session.add(BracketSlot(tournament_id=tournament_id, slot_index=index, team_id=team_id))
    try:
        session.commit()
    except IntegrityError:
        # Another request locked the draw first
        session.rollback()
        return [row.team_id for row in _load_draw(session, tournament_id)]

    logger.info("Locked draw for tournament %d: %d teams, %d slots", tournament_id, len(team_ids), len(seed_order))
    return seed_order


def _load_recorded(session: Session, tournament_id: int) -> Dict[Coordinate, Scores]:
    results = session.exec(select(MatchResult).where(MatchResult.tournament_id == tournament_id)).all()
    return {(r.round_number, r.match_number): (r.team1_score, r.team2_score) for r in results}


def _slots_for(seed_order: Sequence[Optional[int]], names_by_id: Dict[int, str]) -> List[Slot]:
    return [
        BYE if team_id is None else Slot.team(names_by_id.get(team_id, f"Team_{team_id}")) for team_id in seed_order
    ]


def _locked_slots(session: Session, tournament_id: int, teams: Sequence[Team], rng: random.Random) -> List[Slot]:
    names_by_id = dict(zip((team.id for team in teams), resolve_team_names(session, teams)))
    return _slots_for(_lock_draw(session, tournament_id, teams, rng), names_by_id)


# ============================================================================
# Public operations
# ============================================================================


def get_bracket(session: Session, tournament_id: int, rng: Optional[random.Random] = None) -> Optional[BracketView]:
    """The tournament's bracket: its locked draw with any recorded results applied."""
    tournament = session.get(Tournament, tournament_id)
    if tournament is None:
        return None

    teams = _get_teams(session, tournament_id)
    if len(teams) < 2:
        return BracketView(tournament=tournament)

    slots = _locked_slots(session, tournament_id, teams, rng or random.Random())
    rounds = replay_bracket(slots, _load_recorded(session, tournament_id))
    return BracketView(tournament=tournament, rounds=rounds, locked=True)


def get_bracket_with_results(
    session: Session, tournament_id: int, rng: Optional[random.Random] = None
) -> Optional[BracketView]:
    """A freshly shuffled, fully simulated bracket. Nothing is persisted."""
    tournament = session.get(Tournament, tournament_id)
    if tournament is None:
        return None

    teams = _get_teams(session, tournament_id)
    if len(teams) < 2:
        return BracketView(tournament=tournament)

    rounds = generate_bracket_with_results(resolve_team_names(session, teams), rng)
    return BracketView(tournament=tournament, rounds=rounds)


def simulate_match(
    session: Session,
    tournament_id: int,
    round_number: int,
    match_number: int,
    rng: Optional[random.Random] = None,
) -> Optional[BracketView]:
    """Simulate one match of the locked draw and record its score.

    Returns None when the tournament is unknown, has fewer than two teams, or
    the coordinate is not a playable match. Simulating a match that already
    has a recorded score returns the bracket unchanged.
    """
    tournament = session.get(Tournament, tournament_id)
    if tournament is None:
        return None

    teams = _get_teams(session, tournament_id)
    if len(teams) < 2:
        return None

    rng = rng or random.Random()
    slots = _locked_slots(session, tournament_id, teams, rng)
    recorded = _load_recorded(session, tournament_id)
    rounds = simulate_single_match(replay_bracket(slots, recorded), round_number, match_number, rng)
    if rounds is None:
        logger.debug(
            "Match R%d/M%d of tournament %d is not playable", round_number, match_number, tournament_id
        )
        return None

    if (round_number, match_number) not in recorded:
        match = find_match(rounds, round_number, match_number)
        session.add(
            MatchResult(
                tournament_id=tournament_id,
                round_number=round_number,
                match_number=match_number,
                team1_name=match.team1_name,
                team2_name=match.team2_name,
                team1_score=match.team1_score,
                team2_score=match.team2_score,
            )
        )
        try:
            session.commit()
        except IntegrityError:
            # A concurrent request recorded this match first; show its result
            session.rollback()
            rounds = replay_bracket(slots, _load_recorded(session, tournament_id))
        else:
            logger.info(
                "Simulated R%d/M%d of tournament %d: %s %d-%d %s",
                round_number,
                match_number,
                tournament_id,
                match.team1_name,
                match.team1_score,
                match.team2_score,
                match.team2_name,
            )

    return BracketView(tournament=tournament, rounds=rounds, locked=True)


def reset_bracket(session: Session, tournament_id: int) -> bool:
    """Discard the locked draw and all recorded results. False if the tournament is unknown."""
    tournament = session.get(Tournament, tournament_id)
    if tournament is None:
        return False
    _clear_draw(session, tournament_id)
    session.commit()
    logger.info("Reset bracket for tournament %d", tournament_id)
    return True
