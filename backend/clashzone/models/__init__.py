from clashzone.models.bracket_slot import BracketSlot
from clashzone.models.match_result import MatchResult
from clashzone.models.team import Team
from clashzone.models.tournament import Tournament
from clashzone.models.user import ClashUser

__all__ = [
    "Tournament",
    "Team",
    "ClashUser",
    "BracketSlot",
    "MatchResult",
]
