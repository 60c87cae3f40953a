from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from places_api.models.place import Place


def utc_now() -> datetime:
    """Timezone-aware UTC timestamp; naive datetimes are rejected on write."""
    return datetime.now(timezone.utc)


class UserPlace(SQLModel, table=True):
    """Membership row of a user's place-set. Written only by the place service."""

    user_id: Optional[int] = Field(default=None, foreign_key="user.id", primary_key=True)
    place_id: Optional[int] = Field(default=None, foreign_key="place.id", primary_key=True)
    added_at: datetime = Field(default_factory=utc_now)


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    email: str = Field(unique=True, index=True)  # stored normalized (stripped, lower-case)
    password: str  # scrypt hash, never plaintext
    image: str
    created_at: datetime = Field(default_factory=utc_now)

    # Relationships
    places: List["Place"] = Relationship(link_model=UserPlace)

    @property
    def place_ids(self) -> List[int]:
        return [place.id for place in self.places]
