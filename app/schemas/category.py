"""Pydantic schemas for task categories."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.schemas.task import CamelModel

NAME_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 2_000
# Hex colour like #FF5733.
COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


def _validate_name(value: str) -> str:
    if not value.strip():
        raise ValueError("name must be non-empty")
    return value.strip()


class CategoryCreate(CamelModel):
    """Body for POST /categories."""

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    color: str | None = Field(default=None, pattern=COLOR_PATTERN)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _validate_name(v)


class CategoryUpdate(CamelModel):
    """Body for PUT /categories/{id}; only fields present are applied."""

    name: str | None = Field(default=None, min_length=1, max_length=NAME_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    color: str | None = Field(default=None, pattern=COLOR_PATTERN)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("name cannot be null")
        return _validate_name(v)

    def changes(self) -> dict[str, object]:
        return self.model_dump(exclude_unset=True)


class CategoryResponse(CamelModel):
    id: int
    user_id: int
    name: str
    description: str | None = None
    color: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CategoryMutationResponse(BaseModel):
    message: str
    category: CategoryResponse
