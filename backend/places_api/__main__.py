"""Run the API with uvicorn: ``python -m places_api``."""

import uvicorn

from places_api.config import settings


def main() -> None:
    uvicorn.run("places_api.main:app", host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
