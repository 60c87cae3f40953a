"""
Canonical identifiers and the ownership check.

Identifiers reach the services in several shapes: integer primary keys,
digit strings from path parameters or token claims, and model instances
whose ``id`` is the key.  Every ownership decision goes through
``is_owner`` so both sides are normalized the same way before they are
compared.
"""

from dataclasses import dataclass
from typing import Any, Optional

# Largest key a signed 64-bit INTEGER column can hold
MAX_ID = 2**63 - 1


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, attached to a request by ``require_identity``."""

    user_id: int
    email: str = ""


def canonical_id(value: Any) -> Optional[int]:
    """
    Normalize an identifier to ``int``.

    - int -> itself (bools and values outside 0..MAX_ID are rejected)
    - "42" / " 42 " -> 42 (ASCII digits only)
    - object with ``id`` (model instance, Identity-like) -> canonical_id(value.id)
    - anything else -> None
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if 0 <= value <= MAX_ID else None
    if isinstance(value, str):
        s = value.strip()
        if s.isascii() and s.isdigit():
            return canonical_id(int(s))
        return None
    if isinstance(value, Identity):
        return canonical_id(value.user_id)
    if hasattr(value, "id"):
        return canonical_id(value.id)
    return None


def same_id(left: Any, right: Any) -> bool:
    """True only when both sides normalize to the same identifier."""
    a = canonical_id(left)
    b = canonical_id(right)
    return a is not None and b is not None and a == b


def is_owner(creator: Any, identity: Identity) -> bool:
    """Return True if ``identity`` is the creator (an id or a resolved user)."""
    return same_id(creator, identity.user_id)
