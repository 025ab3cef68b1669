# ============================================================================
# FILE: videotube/services/guard.py
# ============================================================================
"""
Ownership-gated access to stored resources.

Every update or delete of an owned resource runs the same sequence: validate
the identifier, load the resource, check the acting user owns it, and only then
mutate it. `guarded_mutation` is that sequence; services pass in how to load
the resource and what to do to it.
"""
import re
from typing import Callable, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from videotube.core.exceptions import ForbiddenError, InvalidInputError, NotFoundError
from videotube.db.models.user import User
import logging

logger = logging.getLogger(__name__)

R = TypeVar("R")

Loader = Callable[[Session, str], Optional[R]]
Mutator = Callable[[Session, R], Optional[R]]

_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def is_valid_id(value: Optional[str]) -> bool:
    return bool(value) and bool(_ID_PATTERN.match(value))


def validate_id(value: Optional[str], label: str = "resource") -> str:
    if not is_valid_id(value):
        raise InvalidInputError(f"Invalid {label} id")
    return value


def loader_for(model: Type[R]) -> Loader:
    """Default loader: primary-key lookup"""
    def load(db: Session, resource_id: str) -> Optional[R]:
        return db.get(model, resource_id)
    return load


def load_or_404(db: Session, load: Loader, resource_id: str, label: str) -> R:
    validate_id(resource_id, label)
    resource = load(db, resource_id)
    if resource is None:
        raise NotFoundError(f"{label.capitalize()} not found")
    return resource


def load_owned(db: Session, load: Loader, resource_id: str, actor: User, label: str) -> R:
    resource = load_or_404(db, load, resource_id, label)
    if resource.owner_id != actor.id:
        logger.warning(f"User {actor.id} denied access to {label} {resource_id}")
        raise ForbiddenError(f"You are not the owner of this {label}")
    return resource


def ensure_visible(video, viewer: Optional[User]):
    """Unpublished videos exist only for their owner"""
    if not video.is_published and (viewer is None or viewer.id != video.owner_id):
        raise NotFoundError("Video not found")
    return video


def guarded_mutation(
    db: Session,
    load: Loader,
    resource_id: str,
    actor: User,
    mutate: Mutator,
    label: str,
) -> Optional[R]:
    """
    Validate -> load (404) -> owner check (403) -> mutate -> commit.

    Returns whatever the mutator returns (normally the updated resource, or
    the removed one for deletes), refreshed when it is still persistent.
    """
    resource = load_owned(db, load, resource_id, actor, label)
    try:
        result = mutate(db, resource)
        db.commit()
    except Exception:
        db.rollback()
        raise
    if result is not None and result in db:
        db.refresh(result)
    logger.info(f"{label.capitalize()} {resource_id} mutated by {actor.id}")
    return result
