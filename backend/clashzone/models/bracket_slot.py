from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, SQLModel


class BracketSlot(SQLModel, table=True):
    """One position of a tournament's locked draw (round 1, left to right)."""

    __table_args__ = (SAUniqueConstraint("tournament_id", "slot_index", name="uq_bracketslot_tournament_slot"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    slot_index: int  # 0-based
    team_id: Optional[int] = Field(default=None, foreign_key="team.id")  # None = bye
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
