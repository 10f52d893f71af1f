from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from clashzone.models.tournament import Tournament


class Team(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    # Plain column: captain accounts live with the identity service and may disappear
    captain_id: Optional[int] = Field(default=None, index=True)
    name: Optional[str] = Field(default=None)  # Display name falls back to the captain when empty
    join_code: str = Field(default="")

    # Relationships
    tournament: "Tournament" = Relationship(back_populates="teams")
