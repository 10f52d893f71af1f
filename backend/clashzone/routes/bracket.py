"""
Bracket API Routes
Read the tournament bracket, generate a simulated bracket, and simulate single matches.
"""

import logging
import os
import random
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import RedirectResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from clashzone.database import get_session
from clashzone.services.bracket_builder import MatchInfo, SlotState
from clashzone.services.bracket_service import (
    BracketView,
    get_bracket,
    get_bracket_with_results,
    reset_bracket,
    simulate_match,
)

logger = logging.getLogger(__name__)

router = APIRouter()

def parse_rng_seed(raw: Optional[str]) -> Optional[int]:
    """Integer seed from BRACKET_RNG_SEED; unset, blank or invalid means unseeded."""
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring BRACKET_RNG_SEED=%r: not an integer; draws will be unseeded", raw)
        return None


_RNG_SEED = parse_rng_seed(os.getenv("BRACKET_RNG_SEED"))


def get_rng() -> random.Random:
    """Random source for one request; seeded when BRACKET_RNG_SEED is set."""
    if _RNG_SEED is not None:
        return random.Random(_RNG_SEED)
    return random.Random()


# ============================================================================
# Response Models
# ============================================================================


class MatchInfoResponse(BaseModel):
    round: int
    match_num: int
    team1_name: Optional[str] = None
    team2_name: Optional[str] = None
    team1_state: SlotState
    team2_state: SlotState
    team1_score: Optional[int] = None
    team2_score: Optional[int] = None
    winner_name: Optional[str] = None
    is_bye: bool = False


class TournamentSummary(BaseModel):
    id: int
    name: str
    game_title: str
    format: str


class BracketResponse(BaseModel):
    tournament: TournamentSummary
    locked: bool
    rounds: List[List[MatchInfoResponse]]


def _match_to_response(m: MatchInfo) -> MatchInfoResponse:
    return MatchInfoResponse(
        round=m.round,
        match_num=m.match_num,
        team1_name=m.team1_name,
        team2_name=m.team2_name,
        team1_state=m.team1.state,
        team2_state=m.team2.state,
        team1_score=m.team1_score,
        team2_score=m.team2_score,
        winner_name=m.winner_name,
        is_bye=m.is_bye,
    )


def _bracket_to_response(view: BracketView) -> BracketResponse:
    t = view.tournament
    return BracketResponse(
        tournament=TournamentSummary(id=t.id, name=t.name, game_title=t.game_title, format=t.format),
        locked=view.locked,
        rounds=[[_match_to_response(m) for m in matches] for matches in view.rounds],
    )


# ============================================================================
# Bracket Endpoints
# ============================================================================


@router.get("/tournaments/{tournament_id}/bracket", response_model=BracketResponse)
def read_bracket(
    tournament_id: int,
    session: Session = Depends(get_session),
    rng: random.Random = Depends(get_rng),
):
    """
    Get the tournament bracket.

    The draw is locked on first request; recorded match results are applied.
    Fewer than two registered teams gives an empty round list.
    """
    view = get_bracket(session, tournament_id, rng)
    if view is None:
        raise HTTPException(status_code=404, detail="Tournament not found")
    return _bracket_to_response(view)


@router.get("/tournaments/{tournament_id}/bracket/results", response_model=BracketResponse)
def read_bracket_with_results(
    tournament_id: int,
    session: Session = Depends(get_session),
    rng: random.Random = Depends(get_rng),
):
    """Generate a freshly shuffled, fully simulated bracket (not persisted)."""
    view = get_bracket_with_results(session, tournament_id, rng)
    if view is None:
        raise HTTPException(status_code=404, detail="Tournament not found")
    return _bracket_to_response(view)


@router.post(
    "/tournaments/{tournament_id}/bracket/rounds/{round_number}/matches/{match_number}/simulate",
    response_model=BracketResponse,
)
def simulate_bracket_match(
    tournament_id: int,
    round_number: int,
    match_number: int,
    session: Session = Depends(get_session),
    rng: random.Random = Depends(get_rng),
):
    """
    Simulate a single match and return the updated bracket.

    When the match cannot be simulated (unknown tournament, fewer than two
    teams, or a match whose participants are not both known) the caller is
    redirected to the bracket unchanged.
    """
    try:
        view = simulate_match(session, tournament_id, round_number, match_number, rng)
    except SQLAlchemyError as e:
        logger.exception("Simulating R%d/M%d of tournament %d failed", round_number, match_number, tournament_id)
        raise HTTPException(status_code=500, detail=f"Simulation failed: {type(e).__name__}")

    if view is None:
        return RedirectResponse(url=f"/api/tournaments/{tournament_id}/bracket", status_code=303)
    return _bracket_to_response(view)


@router.delete("/tournaments/{tournament_id}/bracket", status_code=204)
def delete_bracket(tournament_id: int, session: Session = Depends(get_session)):
    """Discard the locked draw and all recorded results so the next read draws again."""
    if not reset_bracket(session, tournament_id):
        raise HTTPException(status_code=404, detail="Tournament not found")
    return None
