from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

from places_api.models.user import utc_now

if TYPE_CHECKING:
    from places_api.models.user import User


class Place(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    description: str
    address: str
    lat: float
    lng: float
    image: str  # path of the stored upload, relative to the working directory
    creator_id: int = Field(foreign_key="user.id", index=True)  # immutable after creation
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    # Relationships
    creator: "User" = Relationship()
