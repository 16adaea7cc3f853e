"""Task endpoints. Every route requires a bearer token and only sees the caller's tasks."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.database import get_db
from app.core.errors import NotFoundError
from app.schemas.auth import TokenClaims
from app.schemas.task import (
    CompletionRequest,
    CompletionResponse,
    MessageResponse,
    TaskCreate,
    TaskMutationResponse,
    TaskResponse,
    TaskUpdate,
)
from app.services import tasks as task_service

router = APIRouter()

CurrentUser = Annotated[TokenClaims, Depends(get_current_user)]
DbSession = Annotated[Session, Depends(get_db)]


@router.get("", response_model=list[TaskResponse])
def list_tasks(user: CurrentUser, db: DbSession) -> list[TaskResponse]:
    """All tasks of the authenticated account, newest first."""
    return [TaskResponse.model_validate(t) for t in task_service.list_tasks(db, user.user_id)]


@router.post("", response_model=TaskMutationResponse, status_code=201)
def create_task(body: TaskCreate, user: CurrentUser, db: DbSession) -> TaskMutationResponse:
    """
    Create a task owned by the caller.

    status defaults to 'todo' and priority to 'MEDIUM'. categoryId, when given,
    must be one of the caller's categories (400 otherwise).
    """
    task = task_service.create_task(db, user.user_id, body)
    return TaskMutationResponse(
        message="Task created successfully",
        task=TaskResponse.model_validate(task),
    )


@router.get("/status/{status}", response_model=list[TaskResponse])
def list_tasks_by_status(status: str, user: CurrentUser, db: DbSession) -> list[TaskResponse]:
    tasks = task_service.list_by_status(db, user.user_id, status)
    return [TaskResponse.model_validate(t) for t in tasks]


@router.get("/priority/{priority}", response_model=list[TaskResponse])
def list_tasks_by_priority(
    priority: str, user: CurrentUser, db: DbSession
) -> list[TaskResponse]:
    """Tasks with priority LOW, MEDIUM or HIGH; any other value is a 400."""
    tasks = task_service.list_by_priority(db, user.user_id, priority)
    return [TaskResponse.model_validate(t) for t in tasks]


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(task_id: int, user: CurrentUser, db: DbSession) -> TaskResponse:
    task = task_service.get_task(db, user.user_id, task_id)
    if task is None:
        raise NotFoundError(task_service.TASK_NOT_FOUND_MESSAGE)
    return TaskResponse.model_validate(task)


@router.put("/{task_id}", response_model=TaskMutationResponse)
def update_task(
    task_id: int, body: TaskUpdate, user: CurrentUser, db: DbSession
) -> TaskMutationResponse:
    """Partial update: only fields present in the body change."""
    task = task_service.update_task(db, user.user_id, task_id, body)
    return TaskMutationResponse(
        message="Task updated successfully",
        task=TaskResponse.model_validate(task),
    )


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(task_id: int, user: CurrentUser, db: DbSession) -> MessageResponse:
    task_service.delete_task(db, user.user_id, task_id)
    return MessageResponse(message="Task deleted successfully")


@router.patch("/{task_id}/completion", response_model=CompletionResponse)
def toggle_task_completion(
    task_id: int, body: CompletionRequest, user: CurrentUser, db: DbSession
) -> CompletionResponse:
    task = task_service.toggle_completion(db, user.user_id, task_id, body.completed)
    return CompletionResponse(completed=task.completed)
