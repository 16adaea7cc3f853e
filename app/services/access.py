"""Ownership scoping shared by every task and category lookup."""

from typing import Protocol, TypeVar

from app.schemas.auth import TokenClaims


class Owned(Protocol):
    user_id: int


T = TypeVar("T", bound=Owned)


def owner_id_of(caller: TokenClaims | int) -> int:
    """Account id of the caller, from verified claims or an already-resolved id."""
    if isinstance(caller, TokenClaims):
        return caller.user_id
    return caller


def ensure_owned(caller: TokenClaims | int, resource: T | None) -> T | None:
    """
    Return resource only if it belongs to caller; otherwise None.

    Foreign rows come back exactly like missing ones, so callers cannot tell
    whether another account's resource exists.
    """
    if resource is None:
        return None
    if resource.user_id != owner_id_of(caller):
        return None
    return resource
