"""Category endpoints, scoped to the authenticated account."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.database import get_db
from app.core.errors import NotFoundError
from app.schemas.auth import TokenClaims
from app.schemas.category import (
    CategoryCreate,
    CategoryMutationResponse,
    CategoryResponse,
    CategoryUpdate,
)
from app.schemas.task import MessageResponse
from app.services import categories as category_service

router = APIRouter()

CurrentUser = Annotated[TokenClaims, Depends(get_current_user)]
DbSession = Annotated[Session, Depends(get_db)]


@router.get("", response_model=list[CategoryResponse])
def list_categories(user: CurrentUser, db: DbSession) -> list[CategoryResponse]:
    categories = category_service.list_categories(db, user.user_id)
    return [CategoryResponse.model_validate(c) for c in categories]


@router.post("", response_model=CategoryMutationResponse, status_code=201)
def create_category(
    body: CategoryCreate, user: CurrentUser, db: DbSession
) -> CategoryMutationResponse:
    category = category_service.create_category(db, user.user_id, body)
    return CategoryMutationResponse(
        message="Category created successfully",
        category=CategoryResponse.model_validate(category),
    )


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(category_id: int, user: CurrentUser, db: DbSession) -> CategoryResponse:
    category = category_service.get_category(db, user.user_id, category_id)
    if category is None:
        raise NotFoundError(category_service.CATEGORY_NOT_FOUND_MESSAGE)
    return CategoryResponse.model_validate(category)


@router.put("/{category_id}", response_model=CategoryMutationResponse)
def update_category(
    category_id: int, body: CategoryUpdate, user: CurrentUser, db: DbSession
) -> CategoryMutationResponse:
    category = category_service.update_category(db, user.user_id, category_id, body)
    return CategoryMutationResponse(
        message="Category updated successfully",
        category=CategoryResponse.model_validate(category),
    )


@router.delete("/{category_id}", response_model=MessageResponse)
def delete_category(category_id: int, user: CurrentUser, db: DbSession) -> MessageResponse:
    """Delete a category; its tasks are kept and lose their categoryId."""
    category_service.delete_category(db, user.user_id, category_id)
    return MessageResponse(message="Category deleted successfully")
