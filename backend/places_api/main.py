import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from places_api import __version__
from places_api.config import settings
from places_api.database import init_db
from places_api.errors import PlacesError, Unauthenticated
from places_api.routes import places, users

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    """Configure the root logger once; repeated calls are no-ops."""
    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


setup_logging(settings.log_level)

app = FastAPI(title=settings.project_name, version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["Origin", "X-Requested-With", "Accept", "Content-Type", "Authorization"],
)


# ============================================================================
# Error responses: always {"message": ...}
# ============================================================================


@app.exception_handler(PlacesError)
async def handle_places_error(request: Request, exc: PlacesError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message}, headers=headers)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    fields = [".".join(str(part) for part in err.get("loc", ()) if part != "body") for err in exc.errors()]
    return JSONResponse(
        status_code=422,
        content={"message": "Invalid inputs passed, please check your data.", "errors": fields},
    )


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(request: Request, exc: StarletteHTTPException):
    message = "Could not find this route." if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"message": message}, headers=exc.headers)


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "An unknown error occurred!"})


# Include routers
app.include_router(users.router, prefix="/api", tags=["users"])
app.include_router(places.router, prefix="/api", tags=["places"])

# Uploaded images are served back as static files
app.mount(
    "/" + Path(settings.upload_dir).as_posix().strip("/"),
    StaticFiles(directory=settings.upload_dir, check_dir=False),
    name="uploads",
)


@app.on_event("startup")
def on_startup():
    init_db()
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    logger.info("Places API %s started", __version__)


@app.get("/api/health")
def health_check():
    """Liveness probe"""
    return {"app_name": settings.project_name, "version": __version__, "status": "healthy"}
