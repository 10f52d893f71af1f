from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, SQLModel


class MatchResult(SQLModel, table=True):
    """Simulated score of one bracket match, keyed by its (round, match) coordinate."""

    __table_args__ = (
        SAUniqueConstraint("tournament_id", "round_number", "match_number", name="uq_matchresult_coordinate"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    round_number: int  # 1-based
    match_number: int  # 1-based within round

    # Names as displayed when the match was played
    team1_name: str
    team2_name: str
    team1_score: int
    team2_score: int
    played_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
