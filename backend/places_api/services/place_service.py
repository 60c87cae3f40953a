"""
Place lifecycle and the place/owner linkage.

A place and its membership in the creator's place-set are always
written in the same transaction:

- create: insert the place row, then add it to the owner's place-set
- delete: remove it from the owner's place-set, then delete the row

Either both writes commit or neither is visible.  The uploaded image
follows the outcome: it is removed on every failed create, and removed
(best effort) only after a delete has committed.

Ownership is checked with ``identity.is_owner`` on both the update and
delete paths.
"""

import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from places_api.errors import (
    Forbidden,
    GeocodeFailed,
    InvalidAddress,
    NotFound,
    PersistenceFailed,
    UserNotFound,
)
from places_api.models.place import Place
from places_api.models.user import User, utc_now
from places_api.services.geocoder import Geocoder
from places_api.services.identity import Identity, canonical_id, is_owner
from places_api.services.unit_of_work import unit_of_work
from places_api.services.uploads import discard_file, discard_on_error

logger = logging.getLogger(__name__)


def get_place(session: Session, place_id) -> Place:
    key = canonical_id(place_id)
    place = session.get(Place, key) if key is not None else None
    if place is None:
        raise NotFound("Could not find a place for the provided id.")
    return place


def get_places_by_user(session: Session, user_id) -> List[Place]:
    """Places created by ``user_id``; an empty result is reported as ``NotFound``."""
    key = canonical_id(user_id)
    places = []
    if key is not None:
        places = session.exec(select(Place).where(Place.creator_id == key).order_by(Place.id)).all()
    if not places:
        raise NotFound("Could not find places for the provided user id.")
    return list(places)


def _load_owner(session: Session, identity: Identity) -> User:
    try:
        owner = session.get(User, identity.user_id)
    except SQLAlchemyError as e:
        logger.exception("User lookup failed for %s", identity.user_id)
        raise PersistenceFailed("Something went wrong, creating place failed, please try again.") from e
    if owner is None:
        raise UserNotFound()
    return owner


def _attach_to_owner(session: Session, owner: User, place: Place) -> None:
    owner.places.append(place)
    session.flush()


def _detach_from_owner(session: Session, owner: User, place: Place) -> None:
    if place in owner.places:
        owner.places.remove(place)
    else:
        logger.warning("Place %s was missing from the place-set of user %s", place.id, owner.id)
    session.flush()


def _remove_place(session: Session, place: Place) -> None:
    session.delete(place)
    session.flush()


def create_place(
    session: Session,
    geocoder: Geocoder,
    identity: Identity,
    title: str,
    description: str,
    address: str,
    image_path: str,
) -> Place:
    """
    Geocode ``address`` and create a place owned by the caller.

    Raises:
        InvalidAddress: the geocoder could not resolve the address
        UserNotFound: the caller no longer exists
        PersistenceFailed: the transaction could not be committed

    The file at ``image_path`` is deleted whenever this raises.
    """
    with discard_on_error(image_path):
        try:
            coordinates = geocoder.geocode(address)
        except GeocodeFailed as e:
            logger.info("Geocoding failed for %r: %s", address, e)
            raise InvalidAddress() from e

        owner = _load_owner(session, identity)

        place = Place(
            title=title,
            description=description,
            address=address,
            lat=coordinates.lat,
            lng=coordinates.lng,
            image=image_path,
            creator_id=owner.id,
        )
        with unit_of_work(session, "creating place"):
            session.add(place)
            session.flush()
            _attach_to_owner(session, owner, place)

    session.refresh(place)
    logger.info("User %s created place %s", owner.id, place.id)
    return place


def update_place(session: Session, place_id, identity: Identity, title: str, description: str) -> Place:
    """Change title and description. Only the creator may do this."""
    place = get_place(session, place_id)
    if not is_owner(place.creator_id, identity):
        raise Forbidden("You are not allowed to edit this place.")

    with unit_of_work(session, "updating place"):
        place.title = title
        place.description = description
        place.updated_at = utc_now()
        session.add(place)

    session.refresh(place)
    return place


def delete_place(session: Session, place_id, identity: Identity) -> None:
    """
    Delete a place and remove it from its creator's place-set.

    The image is removed only after the transaction commits; a failure to
    remove it is logged and does not fail the delete.  If the transaction
    fails the image is kept, since the place still references it.
    """
    place = get_place(session, place_id)
    owner = place.creator
    if not is_owner(owner, identity):
        raise Forbidden("You are not allowed to delete this place.")

    image_path = place.image
    deleted_id = place.id

    with unit_of_work(session, "deleting place"):
        _detach_from_owner(session, owner, place)
        _remove_place(session, place)

    discard_file(image_path)
    logger.info("User %s deleted place %s", identity.user_id, deleted_id)
