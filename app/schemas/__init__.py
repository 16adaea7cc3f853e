"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AccountResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    TokenClaims,
)
from app.schemas.category import (
    CategoryCreate,
    CategoryMutationResponse,
    CategoryResponse,
    CategoryUpdate,
)
from app.schemas.health import HealthResponse
from app.schemas.task import (
    CompletionRequest,
    CompletionResponse,
    MessageResponse,
    Priority,
    TaskCreate,
    TaskMutationResponse,
    TaskResponse,
    TaskUpdate,
)

__all__ = [
    "AccountResponse",
    "CategoryCreate",
    "CategoryMutationResponse",
    "CategoryResponse",
    "CategoryUpdate",
    "CompletionRequest",
    "CompletionResponse",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "Priority",
    "RegisterRequest",
    "RegisterResponse",
    "TaskCreate",
    "TaskMutationResponse",
    "TaskResponse",
    "TaskUpdate",
    "TokenClaims",
]
