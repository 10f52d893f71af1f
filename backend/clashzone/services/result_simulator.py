"""
Random score simulation for a whole bracket.

Scores are drawn uniformly from [SCORE_MIN, SCORE_MAX] for team 1 then team 2.
A level draw is broken by adding one point: to team 2 in round 1 and to team 1
in every later round, so no match ever reports a draw. A team with a bye is
shown as a BYE_WIN_SCORE-0 win.
"""

from __future__ import annotations

import random
from typing import List, Optional, Sequence, Tuple

from clashzone.services.bracket_builder import (
    MatchInfo,
    ScoreStrategy,
    build_rounds,
    shuffle_seed_order,
    slots_from_seed_order,
)

SCORE_MIN = 0
SCORE_MAX = 10
BYE_WIN_SCORE = 1


def draw_scores(rng: random.Random, round_number: int) -> Tuple[int, int]:
    """Draw a decisive (team1_score, team2_score) pair."""
    score1 = rng.randint(SCORE_MIN, SCORE_MAX)
    score2 = rng.randint(SCORE_MIN, SCORE_MAX)
    if score1 == score2:
        if round_number == 1:
            score2 += 1
        else:
            score1 += 1
    return score1, score2


def random_scores(rng: random.Random) -> ScoreStrategy:
    """Score strategy: random for real pairings, fixed for byes, none for empty matches."""

    def score(match: MatchInfo) -> Optional[Tuple[int, int]]:
        if match.is_playable:
            return draw_scores(rng, match.round or 1)
        if match.is_bye:
            return (BYE_WIN_SCORE, 0) if match.team1.is_team else (0, BYE_WIN_SCORE)
        return None

    return score


def generate_bracket_with_results(
    team_names: Sequence[str], rng: Optional[random.Random] = None
) -> List[List[MatchInfo]]:
    """Fully scored bracket, leaves to final, in a fresh random seed order."""
    if len(team_names) < 2:
        return []
    rng = rng or random.Random()
    slots = slots_from_seed_order(shuffle_seed_order(team_names, rng))
    return build_rounds(slots, random_scores(rng))
