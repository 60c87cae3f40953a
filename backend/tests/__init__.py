# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test database creation
from places_api.models.place import Place  # noqa: F401
from places_api.models.user import User, UserPlace  # noqa: F401
