"""
Single-match simulation inside an existing bracket.

A bracket is fully determined by its round-1 slots plus the recorded scores of
played matches, so simulating one match means drawing its score and replaying
the bracket with that result added. Nothing outside the target match and the
slots its winner feeds into changes.
"""

from __future__ import annotations

import random
from typing import Dict, List, Optional, Sequence, Tuple

from clashzone.services.bracket_builder import MatchInfo, Slot, build_rounds
from clashzone.services.result_simulator import draw_scores

Coordinate = Tuple[int, int]  # (round_number, match_number), both 1-based
Scores = Tuple[int, int]


def find_match(rounds: Sequence[Sequence[MatchInfo]], round_number: int, match_number: int) -> Optional[MatchInfo]:
    if not 1 <= round_number <= len(rounds):
        return None
    matches = rounds[round_number - 1]
    if not 1 <= match_number <= len(matches):
        return None
    return matches[match_number - 1]


def first_round_slots(rounds: Sequence[Sequence[MatchInfo]]) -> List[Slot]:
    slots: List[Slot] = []
    for match in rounds[0] if rounds else []:
        slots.extend((match.team1, match.team2))
    return slots


def recorded_scores(rounds: Sequence[Sequence[MatchInfo]]) -> Dict[Coordinate, Scores]:
    """Scores of every played pairing, keyed by coordinate. Bye scores are not results."""
    recorded: Dict[Coordinate, Scores] = {}
    for matches in rounds:
        for match in matches:
            if match.is_playable and match.has_result:
                recorded[(match.round, match.match_num)] = (match.team1_score, match.team2_score)
    return recorded


def replay_bracket(slots: Sequence[Slot], recorded: Dict[Coordinate, Scores]) -> List[List[MatchInfo]]:
    """Rebuild a bracket from round-1 slots, applying recorded scores where the match is playable."""

    def score(match: MatchInfo) -> Optional[Scores]:
        if not match.is_playable:
            return None
        return recorded.get((match.round, match.match_num))

    return build_rounds(slots, score)


def simulate_single_match(
    rounds: Sequence[Sequence[MatchInfo]],
    round_number: int,
    match_number: int,
    rng: Optional[random.Random] = None,
) -> Optional[List[List[MatchInfo]]]:
    """Play the match at (round_number, match_number) and return the updated bracket.

    Returns None when the coordinate does not exist or the match cannot be
    played (a bye, an empty match, or a side still waiting on an earlier
    match). A match that already has a result is left as is.
    """
    target = find_match(rounds, round_number, match_number)
    if target is None or not target.is_playable:
        return None

    recorded = recorded_scores(rounds)
    if (round_number, match_number) not in recorded:
        rng = rng or random.Random()
        recorded[(round_number, match_number)] = draw_scores(rng, round_number)
    return replay_bracket(first_round_slots(rounds), recorded)
