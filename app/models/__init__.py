"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.category import Category
from app.models.task import Task
from app.models.user import User

__all__ = ["Base", "Category", "Task", "User"]
