"""Task CRUD and filtered queries, scoped to the owning account."""

from sqlalchemy.orm import Session

from app.core.errors import (
    CategoryNotFoundError,
    InvalidPriorityError,
    NotFoundError,
    ValidationFailedError,
)
from app.models import Task
from app.schemas.task import (
    COMPLETED_TASK_STATUS,
    DEFAULT_TASK_STATUS,
    TaskCreate,
    TaskUpdate,
    is_valid_priority,
)
from app.services.access import ensure_owned
from app.services.categories import get_category

TASK_NOT_FOUND_MESSAGE = "Task not found"
COMPLETION_CONFLICT_MESSAGE = "status and completed disagree"


def _check_category(db: Session, owner_id: int, category_id: int | None) -> None:
    """A referenced category must exist and belong to the same owner."""
    if category_id is None:
        return
    if get_category(db, owner_id, category_id) is None:
        raise CategoryNotFoundError()


def _sync_completion(
    fields: dict[str, object], current_status: str | None = None
) -> dict[str, object]:
    """
    Keep status and completed in step for the fields being written.

    A lone status implies completed (True only for 'completed'). A lone
    completed=True moves status to 'completed'; completed=False moves a
    'completed' task back to 'todo' and leaves other statuses alone. Both
    present and contradicting each other raises ValidationFailedError.
    """
    has_status = "status" in fields
    has_completed = "completed" in fields
    if has_status and has_completed:
        if fields["completed"] != (fields["status"] == COMPLETED_TASK_STATUS):
            raise ValidationFailedError(COMPLETION_CONFLICT_MESSAGE)
    elif has_status:
        fields["completed"] = fields["status"] == COMPLETED_TASK_STATUS
    elif has_completed:
        if fields["completed"]:
            fields["status"] = COMPLETED_TASK_STATUS
        elif current_status == COMPLETED_TASK_STATUS:
            fields["status"] = DEFAULT_TASK_STATUS
    return fields


def _owner_tasks(db: Session, owner_id: int):
    return db.query(Task).filter(Task.user_id == owner_id)


def get_task(db: Session, owner_id: int, task_id: int) -> Task | None:
    """The task, or None when absent or owned by another account."""
    task = db.query(Task).filter(Task.id == task_id).first()
    return ensure_owned(owner_id, task)


def _get_owned_or_404(db: Session, owner_id: int, task_id: int) -> Task:
    task = get_task(db, owner_id, task_id)
    if task is None:
        raise NotFoundError(TASK_NOT_FOUND_MESSAGE)
    return task


def list_tasks(db: Session, owner_id: int) -> list[Task]:
    return _owner_tasks(db, owner_id).order_by(Task.created_at.desc(), Task.id.desc()).all()


def list_by_status(db: Session, owner_id: int, status: str) -> list[Task]:
    """Tasks with the given status. Unknown statuses simply match nothing."""
    return (
        _owner_tasks(db, owner_id)
        .filter(Task.status == status.strip().lower())
        .order_by(Task.id)
        .all()
    )


def list_by_priority(db: Session, owner_id: int, priority: str) -> list[Task]:
    """Tasks with the given priority. Raises InvalidPriorityError outside LOW/MEDIUM/HIGH."""
    if not is_valid_priority(priority):
        raise InvalidPriorityError()
    return (
        _owner_tasks(db, owner_id)
        .filter(Task.priority == priority)
        .order_by(Task.id)
        .all()
    )


def create_task(db: Session, owner_id: int, data: TaskCreate) -> Task:
    """Create a task for owner_id. Raises CategoryNotFoundError for a foreign or missing category."""
    sent = {f: getattr(data, f) for f in ("status", "completed") if f in data.model_fields_set}
    completion = {"status": data.status, "completed": data.completed}
    completion.update(_sync_completion(sent))
    _check_category(db, owner_id, data.category_id)
    task = Task(
        user_id=owner_id,
        category_id=data.category_id,
        title=data.title,
        description=data.description,
        priority=data.priority,
        due_date=data.due_date,
        **completion,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def update_task(db: Session, owner_id: int, task_id: int, patch: TaskUpdate) -> Task:
    """Apply the fields present in patch. user_id is never touched."""
    task = _get_owned_or_404(db, owner_id, task_id)
    changes = _sync_completion(patch.changes(), task.status)
    if "category_id" in changes:
        _check_category(db, owner_id, changes["category_id"])
    for field, value in changes.items():
        setattr(task, field, value)
    db.commit()
    db.refresh(task)
    return task


def delete_task(db: Session, owner_id: int, task_id: int) -> None:
    task = _get_owned_or_404(db, owner_id, task_id)
    db.delete(task)
    db.commit()


def toggle_completion(db: Session, owner_id: int, task_id: int, completed: bool) -> Task:
    """
    Set the completed flag, keeping status in step.

    Completing moves status to 'completed'; reopening a completed task moves it
    back to 'todo'. Other statuses are left alone when reopening.
    """
    task = _get_owned_or_404(db, owner_id, task_id)
    for field, value in _sync_completion({"completed": completed}, task.status).items():
        setattr(task, field, value)
    db.commit()
    db.refresh(task)
    return task
