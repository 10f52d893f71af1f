# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test database creation
from clashzone.models.bracket_slot import BracketSlot  # noqa: F401
from clashzone.models.match_result import MatchResult  # noqa: F401
from clashzone.models.team import Team  # noqa: F401
from clashzone.models.tournament import Tournament  # noqa: F401
from clashzone.models.user import ClashUser  # noqa: F401
