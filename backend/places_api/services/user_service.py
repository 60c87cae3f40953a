"""
User accounts: signup, login and lookup.

Emails are compared in normalized form (stripped, lower-cased), so
``a@x.com`` and ``A@X.com`` are the same account.  Login failures never
reveal whether the email is registered.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from places_api.errors import EmailExists, InvalidCredentials, InvalidInput
from places_api.models.user import User
from places_api.services.credentials import hash_password, issue_token, verify_password
from places_api.services.identity import canonical_id
from places_api.services.unit_of_work import unit_of_work
from places_api.services.uploads import discard_on_error

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user(session: Session, user_id) -> Optional[User]:
    key = canonical_id(user_id)
    if key is None:
        return None
    return session.get(User, key)


def find_user_by_email(session: Session, email: str) -> Optional[User]:
    return session.exec(select(User).where(User.email == normalize_email(email))).first()


def list_users(session: Session) -> List[User]:
    return list(session.exec(select(User).order_by(User.id)).all())


def signup(session: Session, name: str, email: str, password: str, image_path: Optional[str]) -> User:
    """
    Register a new user with an empty place-set.

    The uploaded avatar at ``image_path`` is deleted if signup fails for
    any reason, including a duplicate email.

    Raises:
        EmailExists: the normalized email is already registered
        InvalidInput: the password is blank
        PersistenceFailed: the insert could not be committed
    """
    with discard_on_error(image_path):
        normalized = normalize_email(email)
        if find_user_by_email(session, normalized) is not None:
            raise EmailExists()

        try:
            hashed = hash_password(password)
        except ValueError as e:
            raise InvalidInput(str(e)) from e

        user = User(name=name.strip(), email=normalized, password=hashed, image=image_path or "")
        with unit_of_work(session, "signing up"):
            session.add(user)
            try:
                session.flush()
            except IntegrityError as e:
                # Lost a race with a concurrent signup for the same email
                raise EmailExists() from e

        session.refresh(user)
        logger.info("Registered user %s (%s)", user.id, user.email)
        return user


def login(session: Session, email: str, password: str) -> Tuple[User, str]:
    """Return the user and a fresh session token, or raise ``InvalidCredentials``."""
    user = find_user_by_email(session, email)
    if user is None or not verify_password(password, user.password):
        logger.info("Rejected login for %s", normalize_email(email))
        raise InvalidCredentials()
    return user, issue_token(user.id, user.email)
