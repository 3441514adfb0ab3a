"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable and provide validation for
controller handlers and tests. JSON keys are camelCase; Python code uses
the snake_case field names.
"""

import uuid
from datetime import datetime
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from .models import DifficultyLevel, TechnologyType

ItemT = TypeVar("ItemT")


class CamelModel(BaseModel):
    """Base schema: camelCase aliases, accepts snake_case names and ORM rows."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# Request bodies


class TechnologyIn(CamelModel):
    """Payload for creating or replacing a technology."""
    name: str = Field(min_length=1)
    description: Optional[str] = None
    technology_type: TechnologyType = TechnologyType.LANGUAGE


class QuestionIn(CamelModel):
    """Payload for creating or replacing a question."""
    title: str = Field(min_length=1)
    description: Optional[str] = None
    technology_id: uuid.UUID
    difficulty_level: DifficultyLevel = DifficultyLevel.EASY


class AnswerIn(CamelModel):
    question_id: uuid.UUID
    content: Optional[str] = None


class AssetIn(CamelModel):
    parent_id: uuid.UUID
    file_name: Optional[str] = None
    file_type: Optional[str] = None
    file_url: Optional[str] = None


class Filter(CamelModel):
    """Paging and search options for the `/list` endpoints.

    `query` is a substring match on the entity's searched text column and
    `date` keeps records created at or after the given moment.
    """
    page_index: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1, le=100)
    query: Optional[str] = None
    date: Optional[datetime] = None

    @property
    def offset(self) -> int:
        return (self.page_index - 1) * self.page_size


class QuestionFilter(Filter):
    """Question list filter with technology and difficulty equality."""
    technology_id: Optional[uuid.UUID] = None
    difficulty_level: Optional[DifficultyLevel] = None


# Read models


class EntityRead(CamelModel):
    id: uuid.UUID
    is_deleted: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


class TechnologyRead(EntityRead):
    name: str
    description: Optional[str] = None
    technology_type: TechnologyType


class QuestionRead(EntityRead):
    title: str
    description: Optional[str] = None
    technology_id: uuid.UUID
    difficulty_level: DifficultyLevel


class AnswerRead(EntityRead):
    question_id: uuid.UUID
    content: Optional[str] = None


class AssetRead(EntityRead):
    parent_id: uuid.UUID
    file_name: Optional[str] = None
    file_type: Optional[str] = None
    file_url: Optional[str] = None


class TechnologyListItem(CamelModel):
    """Technology row on a list page with its live question count."""
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    technology_type: TechnologyType
    question_count: int = 0
    created_at: datetime


class QuestionListItem(CamelModel):
    """Question row on a list page, flattened with its technology name."""
    id: uuid.UUID
    title: str
    technology_id: uuid.UUID
    technology_name: Optional[str] = None
    difficulty_level: DifficultyLevel
    created_at: datetime


class QuestionDetail(CamelModel):
    """A question joined with its technology and companion answer.

    `technology_name`, `answer_id` and `answer_content` are None when the
    referenced row is missing or soft-deleted.
    """
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    technology_id: uuid.UUID
    technology_name: Optional[str] = None
    difficulty_level: DifficultyLevel
    answer_id: Optional[uuid.UUID] = None
    answer_content: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


# Paging and envelope


class Page(BaseModel, Generic[ItemT]):
    """One page of a filtered list plus the size of the whole filtered set."""
    items: List[ItemT]
    total_count: int
    page_index: int
    page_size: int


class PaginationMeta(CamelModel):
    page_index: int
    page_size: int
    total_count: int

    @computed_field(alias="totalPages")
    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return -(-self.total_count // self.page_size)

    @computed_field(alias="hasNextPage")
    @property
    def has_next_page(self) -> bool:
        return self.page_index < self.total_pages

    @computed_field(alias="hasPreviousPage")
    @property
    def has_previous_page(self) -> bool:
        return self.page_index > 1


class ApiResponse(CamelModel):
    """Uniform envelope returned by every `/api` endpoint."""
    status: str
    is_success: bool
    status_code: int
    message: Optional[str] = None
    data: Any = None
    pagination: Optional[PaginationMeta] = None
