from places_api.models.place import Place
from places_api.models.user import User, UserPlace

__all__ = [
    "Place",
    "User",
    "UserPlace",
]
