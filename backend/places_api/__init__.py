"""Places API: users, geocoded places and the place/owner linkage."""

__version__ = "1.0.0"
