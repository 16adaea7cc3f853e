"""Category CRUD, scoped to the owning account."""

import logging

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.models import Category, Task
from app.schemas.category import CategoryCreate, CategoryUpdate
from app.services.access import ensure_owned

logger = logging.getLogger(__name__)

CATEGORY_NOT_FOUND_MESSAGE = "Category not found"


def get_category(db: Session, owner_id: int, category_id: int) -> Category | None:
    """The category, or None when absent or owned by another account."""
    category = db.query(Category).filter(Category.id == category_id).first()
    return ensure_owned(owner_id, category)


def _get_owned_or_404(db: Session, owner_id: int, category_id: int) -> Category:
    category = get_category(db, owner_id, category_id)
    if category is None:
        raise NotFoundError(CATEGORY_NOT_FOUND_MESSAGE)
    return category


def list_categories(db: Session, owner_id: int) -> list[Category]:
    return (
        db.query(Category)
        .filter(Category.user_id == owner_id)
        .order_by(Category.name, Category.id)
        .all()
    )


def create_category(db: Session, owner_id: int, data: CategoryCreate) -> Category:
    category = Category(
        user_id=owner_id,
        name=data.name,
        description=data.description,
        color=data.color,
    )
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def update_category(
    db: Session, owner_id: int, category_id: int, patch: CategoryUpdate
) -> Category:
    category = _get_owned_or_404(db, owner_id, category_id)
    for field, value in patch.changes().items():
        setattr(category, field, value)
    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, owner_id: int, category_id: int) -> None:
    """Delete the category and detach it from the owner's tasks."""
    category = _get_owned_or_404(db, owner_id, category_id)
    detached = (
        db.query(Task)
        .filter(Task.user_id == owner_id, Task.category_id == category.id)
        .update({Task.category_id: None}, synchronize_session=False)
    )
    db.delete(category)
    db.commit()
    if detached:
        logger.info(
            "Deleted category id=%s; detached %s task(s)", category_id, detached
        )
