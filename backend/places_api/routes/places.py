"""
Place API Routes

Reads are public.  Creating, editing and deleting a place require a
bearer token; the caller's identity is handed to the place service,
which enforces that only the creator may change a place.
"""

from typing import List

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import BaseModel, field_validator
from sqlmodel import Session

from places_api.auth import require_identity
from places_api.database import get_session
from places_api.errors import InvalidInput
from places_api.models.place import Place
from places_api.services import place_service
from places_api.services.geocoder import Geocoder, get_geocoder
from places_api.services.identity import Identity
from places_api.services.uploads import store_image

router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class Location(BaseModel):
    lat: float
    lng: float


class PlaceResponse(BaseModel):
    id: int
    title: str
    description: str
    address: str
    location: Location
    image: str
    creator: int

    @classmethod
    def from_place(cls, place: Place) -> "PlaceResponse":
        return cls(
            id=place.id,
            title=place.title,
            description=place.description,
            address=place.address,
            location=Location(lat=place.lat, lng=place.lng),
            image=place.image,
            creator=place.creator_id,
        )


class PlaceEnvelope(BaseModel):
    place: PlaceResponse


class PlaceListEnvelope(BaseModel):
    places: List[PlaceResponse]


class MessageResponse(BaseModel):
    message: str


class PlaceUpdateRequest(BaseModel):
    title: str
    description: str

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if not v or not v.strip():
            raise ValueError("title is required")
        return v.strip()

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        if len(v.strip()) < 5:
            raise ValueError("description must be at least 5 characters")
        return v.strip()


def _require_text(value: str, min_length: int = 1) -> str:
    value = value.strip()
    if len(value) < min_length:
        raise InvalidInput()
    return value


# ============================================================================
# Endpoints
# ============================================================================


@router.get("/places/{place_id}", response_model=PlaceEnvelope)
def get_place(place_id: str, session: Session = Depends(get_session)):
    """Get a place by ID"""
    place = place_service.get_place(session, place_id)
    return PlaceEnvelope(place=PlaceResponse.from_place(place))


@router.get("/places/user/{user_id}", response_model=PlaceListEnvelope)
def get_places_by_user(user_id: str, session: Session = Depends(get_session)):
    """List the places created by a user (404 when there are none)"""
    places = place_service.get_places_by_user(session, user_id)
    return PlaceListEnvelope(places=[PlaceResponse.from_place(p) for p in places])


@router.post("/places", response_model=PlaceEnvelope, status_code=201)
def create_place(
    title: str = Form(...),
    description: str = Form(...),
    address: str = Form(...),
    image: UploadFile = File(...),
    identity: Identity = Depends(require_identity),
    session: Session = Depends(get_session),
    geocoder: Geocoder = Depends(get_geocoder),
):
    """
    Create a place owned by the caller.

    Multipart form: title, description (>= 5 chars), address, image
    (png/jpg/jpeg).  The address is geocoded; an unknown address is a 422.
    """
    title = _require_text(title)
    description = _require_text(description, min_length=5)
    address = _require_text(address)

    image_path = store_image(image)
    place = place_service.create_place(
        session,
        geocoder,
        identity,
        title=title,
        description=description,
        address=address,
        image_path=image_path,
    )
    return PlaceEnvelope(place=PlaceResponse.from_place(place))


@router.patch("/places/{place_id}", response_model=PlaceEnvelope)
def update_place(
    place_id: str,
    request: PlaceUpdateRequest,
    identity: Identity = Depends(require_identity),
    session: Session = Depends(get_session),
):
    """Update a place's title and description (creator only)"""
    place = place_service.update_place(
        session, place_id, identity, title=request.title, description=request.description
    )
    return PlaceEnvelope(place=PlaceResponse.from_place(place))


@router.delete("/places/{place_id}", response_model=MessageResponse)
def delete_place(
    place_id: str,
    identity: Identity = Depends(require_identity),
    session: Session = Depends(get_session),
):
    """Delete a place (creator only) and its image"""
    place_service.delete_place(session, place_id, identity)
    return MessageResponse(message="Deleted place.")
