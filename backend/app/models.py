"""SQLModel data models.

This module defines the question bank tables using SQLModel. Every table
shares the `BaseField` columns (id, soft-delete flag and timestamps).
Cross-entity references (question -> technology, answer -> question,
asset -> parent) are plain UUID columns without foreign keys; joins are
done by the services.
"""

import enum
import uuid
from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TechnologyType(str, enum.Enum):
    LANGUAGE = "Language"
    FRAMEWORK = "Framework"
    LIBRARY = "Library"
    DATABASE = "Database"
    TOOL = "Tool"


class DifficultyLevel(str, enum.Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class BaseField(SQLModel):
    """Columns shared by every table.

    Fields:
    - `id`: primary key, assigned by the service on create
    - `is_deleted`: soft-delete marker; deleted rows stay in the table
    - `created_at`: set once on create
    - `updated_at`: set on every mutation, including soft-delete
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    is_deleted: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: Optional[datetime] = None


class Technology(BaseField, table=True):
    """A language, framework or tool that questions are grouped under."""
    name: str = Field(index=True)
    description: Optional[str] = None
    technology_type: TechnologyType = TechnologyType.LANGUAGE


class Question(BaseField, table=True):
    """An interview question belonging to a `Technology`."""
    title: str = Field(index=True)
    description: Optional[str] = None
    technology_id: uuid.UUID = Field(index=True)
    difficulty_level: DifficultyLevel = DifficultyLevel.EASY


class Answer(BaseField, table=True):
    """The reference answer for a `Question`.

    One empty answer is created together with every question.
    """
    question_id: uuid.UUID = Field(index=True)
    content: Optional[str] = None


class Asset(BaseField, table=True):
    """A file attached to any other record through `parent_id`."""
    parent_id: uuid.UUID = Field(index=True)
    file_name: Optional[str] = None
    file_type: Optional[str] = None
    file_url: Optional[str] = None
