from typing import Optional

from sqlmodel import Field, SQLModel


class ClashUser(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True)
    display_name: Optional[str] = None
    email: Optional[str] = None
