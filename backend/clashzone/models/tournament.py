from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from clashzone.models.team import Team


class Tournament(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    game_title: str = Field(default="")
    start_date: datetime
    max_participants: int = Field(default=0)  # 0 = unlimited
    format: str = Field(default="")  # "1v1" | "2v2" | "5v5" ...
    prize: str = Field(default="")
    is_public: bool = Field(default=True)
    join_code: Optional[str] = None  # required to join when is_public is False
    is_premium: bool = Field(default=False)
    created_by_user_id: Optional[int] = Field(default=None)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    teams: List["Team"] = Relationship(back_populates="tournament")
