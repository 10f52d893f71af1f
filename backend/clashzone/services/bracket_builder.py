"""
Single-elimination bracket construction.

Entrants are shuffled into a random seed order and padded with byes up to the
next power of two. Round 1 pairs consecutive slots (0,1), (2,3), ...; every
later round pairs the winners of the previous one the same way until a single
final match remains.

Each side of a match is a tagged Slot:
  TEAM     a known entrant
  BYE      structurally empty; the opponent advances without playing
  PENDING  filled by the winner of a match that has not been decided yet

Scores are optional. build_rounds() takes a score strategy (None for a plain
skeleton) so the skeleton, the fully simulated bracket and single-match
replays all resolve winners through the same resolve_winner().
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")


class SlotState(str, Enum):
    TEAM = "team"
    BYE = "bye"
    PENDING = "pending"


@dataclass(frozen=True)
class Slot:
    state: SlotState
    name: Optional[str] = None

    @classmethod
    def team(cls, name: str) -> "Slot":
        return cls(SlotState.TEAM, name)

    @property
    def is_team(self) -> bool:
        return self.state == SlotState.TEAM

    @property
    def is_bye(self) -> bool:
        return self.state == SlotState.BYE

    @property
    def is_pending(self) -> bool:
        return self.state == SlotState.PENDING


BYE = Slot(SlotState.BYE)
PENDING = Slot(SlotState.PENDING)


@dataclass
class MatchInfo:
    """A pairing of two slots with optional scores and its bracket position."""

    team1: Slot
    team2: Slot
    team1_score: Optional[int] = None
    team2_score: Optional[int] = None
    round: Optional[int] = None  # 1-based
    match_num: Optional[int] = None  # 1-based within round

    @property
    def team1_name(self) -> Optional[str]:
        return self.team1.name if self.team1.is_team else None

    @property
    def team2_name(self) -> Optional[str]:
        return self.team2.name if self.team2.is_team else None

    @property
    def is_playable(self) -> bool:
        return self.team1.is_team and self.team2.is_team

    @property
    def is_bye(self) -> bool:
        return (self.team1.is_team and self.team2.is_bye) or (self.team1.is_bye and self.team2.is_team)

    @property
    def is_empty(self) -> bool:
        return self.team1.is_bye and self.team2.is_bye

    @property
    def has_result(self) -> bool:
        return self.team1_score is not None and self.team2_score is not None

    @property
    def winner_name(self) -> Optional[str]:
        winner = resolve_winner(self)
        return winner.name if winner.is_team else None


# Returns (team1_score, team2_score) for a match, or None to leave it unscored
ScoreStrategy = Callable[[MatchInfo], Optional[Tuple[int, int]]]


def resolve_winner(match: MatchInfo) -> Slot:
    """Slot that advances from *match* into the next round.

    A scored pairing advances the higher score; an unscored (or level) pairing
    advances PENDING. A team facing a bye advances outright, two byes advance
    a bye, and anything facing a PENDING slot stays PENDING.

    A PENDING opponent is an undecided match, not a bye: with 7 teams the
    team drawn against the padding bye meets a first-round winner in the
    semifinal and does not reach the final until that semifinal is played.
    """
    t1, t2 = match.team1, match.team2
    if t1.is_pending or t2.is_pending:
        return PENDING
    if t1.is_team and t2.is_team:
        if not match.has_result or match.team1_score == match.team2_score:
            return PENDING
        return t1 if match.team1_score > match.team2_score else t2
    if t1.is_team:
        return t1
    if t2.is_team:
        return t2
    return BYE


def round_count(num_entrants: int) -> int:
    """ceil(log2(n)) rounds for n >= 2 entrants, 0 otherwise."""
    if num_entrants < 2:
        return 0
    return math.ceil(math.log2(num_entrants))


def bracket_size(num_entrants: int) -> int:
    """Number of round-1 slots (next power of two)."""
    if num_entrants < 2:
        return 0
    return 2 ** round_count(num_entrants)


def shuffle_seed_order(entrants: Sequence[T], rng: random.Random) -> List[Optional[T]]:
    """Random seed order padded with None (byes) to the bracket size.

    Entrants fill the first len(entrants) positions; byes trail.
    """
    shuffled: List[Optional[T]] = list(entrants)
    rng.shuffle(shuffled)
    shuffled.extend([None] * (bracket_size(len(entrants)) - len(entrants)))
    return shuffled


def slots_from_seed_order(seed_order: Sequence[Optional[str]]) -> List[Slot]:
    return [BYE if name is None else Slot.team(name) for name in seed_order]


def build_rounds(slots: Sequence[Slot], score: Optional[ScoreStrategy] = None) -> List[List[MatchInfo]]:
    """Build every round from the round-1 slots down to the final.

    *score* is consulted once per match, in round order, after the match's
    position is known; its result decides who advances.
    """
    rounds: List[List[MatchInfo]] = []
    current = list(slots)
    round_number = 1
    while len(current) > 1:
        matches: List[MatchInfo] = []
        for i in range(0, len(current), 2):
            match = MatchInfo(
                team1=current[i],
                team2=current[i + 1] if i + 1 < len(current) else BYE,
                round=round_number,
                match_num=i // 2 + 1,
            )
            if score is not None:
                result = score(match)
                if result is not None:
                    match.team1_score, match.team2_score = result
            matches.append(match)
        rounds.append(matches)
        current = [resolve_winner(m) for m in matches]
        round_number += 1
    return rounds


def generate_bracket(team_names: Sequence[str], rng: Optional[random.Random] = None) -> List[List[MatchInfo]]:
    """Unscored bracket skeleton for *team_names* in a fresh random seed order.

    Fewer than two entrants produce no rounds at all.
    """
    if len(team_names) < 2:
        return []
    rng = rng or random.Random()
    return build_rounds(slots_from_seed_order(shuffle_seed_order(team_names, rng)))
