"""Business logic services used by HTTP controllers.

Each service wraps one repository and owns the rules the repository does
not know about: soft-delete filtering, id/timestamp assignment, search
and paging, and projection to the read schemas. The question service
also joins technologies and answers through the other services.
"""

import abc
import logging
import uuid
from typing import Dict, Generic, List, Optional, Type

from sqlalchemy import func, or_
from sqlmodel import Session, col, select

from . import models, repositories, schemas
from .repositories import ModelT

logger = logging.getLogger("app.services")


class NotFoundError(LookupError):
    """Raised when a record does not exist or has been soft-deleted."""


class BaseService(abc.ABC, Generic[ModelT]):
    """Soft-delete aware CRUD shared by every entity service.

    Subclasses bind `repository_class` and `read_schema`, implement
    `_search`, and may override `_apply_filter` and `_project` to
    customise `get_list`.
    """
    repository_class: Type[repositories.BaseRepository]
    read_schema: Type[schemas.CamelModel]
    entity_name: str = "Record"

    def __init__(self, session: Session):
        self.session = session
        self.repo = self.repository_class(session)

    @property
    def model(self) -> Type[ModelT]:
        return self.repo.model

    def where(self, *conditions):
        """Deferred query over all rows, see `BaseRepository.where`."""
        return self.repo.where(*conditions)

    def active(self, *conditions):
        """Deferred query over rows that are not soft-deleted."""
        return self.where(col(self.model.is_deleted).is_(False), *conditions)

    def all(self, stmt) -> List[ModelT]:
        return self.repo.all(stmt)

    def first(self, stmt) -> Optional[ModelT]:
        return self.repo.first(stmt)

    def get_all(self) -> List[ModelT]:
        """Return every row that is not soft-deleted."""
        return self.all(self.active())

    def get_list(self, filter: schemas.Filter) -> schemas.Page:
        """Return one page of filtered rows, newest first.

        `total_count` is computed on the filtered set before paging.
        """
        stmt = self.active()
        if filter.query:
            stmt = stmt.where(self._search(filter.query))
        if filter.date is not None:
            stmt = stmt.where(col(self.model.created_at) >= filter.date)
        stmt = self._apply_filter(stmt, filter)
        total = self.repo.count(stmt)
        stmt = (
            stmt.order_by(col(self.model.created_at).desc(), col(self.model.id))
            .offset(filter.offset)
            .limit(filter.page_size)
        )
        rows = self.all(stmt)
        return schemas.Page(
            items=self._project(rows),
            total_count=total,
            page_index=filter.page_index,
            page_size=filter.page_size,
        )

    def get_by_id(self, entity_id: uuid.UUID):
        return self.read_schema.model_validate(self._get_active(entity_id))

    def create(self, entity: ModelT, commit: bool = True) -> ModelT:
        """Assign a fresh id and creation time, then persist `entity`.

        With `commit=False` the row is only staged and the caller logs
        once its transaction commits.
        """
        self._stamp(entity)
        created = self.repo.create(entity, commit=commit)
        if commit:
            logger.info("created %s %s", self.entity_name.lower(), created.id)
        return created

    def update(self, entity_id: uuid.UUID, entity: ModelT) -> ModelT:
        """Replace the mutable fields of a live record.

        The stored id and creation time are kept; `updated_at` is set to
        now. Raises `NotFoundError` for missing or deleted records.
        """
        existing = self._get_active(entity_id)
        entity.id = entity_id
        entity.created_at = existing.created_at
        entity.is_deleted = False
        entity.updated_at = models.utcnow()
        updated = self.repo.update(entity_id, entity)
        logger.info("updated %s %s", self.entity_name.lower(), entity_id)
        return updated

    def delete(self, entity_id: uuid.UUID) -> bool:
        """Soft-delete a record. Returns False if it is missing or already deleted."""
        existing = self.repo.get(entity_id)
        if existing is None or existing.is_deleted:
            return False
        existing.is_deleted = True
        existing.updated_at = models.utcnow()
        self.repo.update(entity_id, existing)
        logger.info("deleted %s %s", self.entity_name.lower(), entity_id)
        return True

    def _stamp(self, entity: ModelT):
        entity.id = uuid.uuid4()
        entity.created_at = models.utcnow()
        entity.updated_at = None
        entity.is_deleted = False

    def _get_active(self, entity_id: uuid.UUID) -> ModelT:
        existing = self.repo.get(entity_id)
        if existing is None or existing.is_deleted:
            raise NotFoundError(f"{self.entity_name} not found")
        return existing

    @abc.abstractmethod
    def _search(self, query: str):
        """Return the text-search condition for a non-empty `query`."""

    def _apply_filter(self, stmt, filter: schemas.Filter):
        return stmt

    def _project(self, rows: List[ModelT]) -> list:
        return [self.read_schema.model_validate(r) for r in rows]


class TechnologyService(BaseService[models.Technology]):
    """Technologies; list pages carry the number of live questions."""
    repository_class = repositories.TechnologyRepository
    read_schema = schemas.TechnologyRead
    entity_name = "Technology"

    def _search(self, query: str):
        return or_(
            col(models.Technology.name).contains(query, autoescape=True),
            col(models.Technology.description).contains(query, autoescape=True),
        )

    def _project(self, rows: List[models.Technology]) -> List[schemas.TechnologyListItem]:
        counts = self.question_counts([t.id for t in rows])
        return [
            schemas.TechnologyListItem(
                id=t.id,
                name=t.name,
                description=t.description,
                technology_type=t.technology_type,
                question_count=counts.get(t.id, 0),
                created_at=t.created_at,
            )
            for t in rows
        ]

    def question_counts(self, technology_ids: List[uuid.UUID]) -> Dict[uuid.UUID, int]:
        """Count live questions per technology in one grouped query."""
        if not technology_ids:
            return {}
        stmt = (
            select(models.Question.technology_id, func.count())
            .where(
                col(models.Question.technology_id).in_(technology_ids),
                col(models.Question.is_deleted).is_(False),
            )
            .group_by(models.Question.technology_id)
        )
        return {tech_id: n for tech_id, n in self.session.exec(stmt).all()}


class AnswerService(BaseService[models.Answer]):
    repository_class = repositories.AnswerRepository
    read_schema = schemas.AnswerRead
    entity_name = "Answer"

    def _search(self, query: str):
        return col(models.Answer.content).contains(query, autoescape=True)


class AssetService(BaseService[models.Asset]):
    repository_class = repositories.AssetRepository
    read_schema = schemas.AssetRead
    entity_name = "Asset"

    def _search(self, query: str):
        return col(models.Asset.file_name).contains(query, autoescape=True)


class QuestionService(BaseService[models.Question]):
    """Questions, joined with their technology and companion answer."""
    repository_class = repositories.QuestionRepository
    read_schema = schemas.QuestionRead
    entity_name = "Question"

    def __init__(self, session: Session):
        super().__init__(session)
        self.answers = AnswerService(session)
        self.technologies = TechnologyService(session)

    def _search(self, query: str):
        return col(models.Question.title).contains(query, autoescape=True)

    def _apply_filter(self, stmt, filter: schemas.Filter):
        technology_id = getattr(filter, "technology_id", None)
        if technology_id is not None:
            stmt = stmt.where(models.Question.technology_id == technology_id)
        difficulty = getattr(filter, "difficulty_level", None)
        if difficulty is not None:
            stmt = stmt.where(models.Question.difficulty_level == difficulty)
        return stmt

    def _project(self, rows: List[models.Question]) -> List[schemas.QuestionListItem]:
        """Flatten each question with its technology name.

        Only the technologies referenced by this page are loaded. A
        question whose technology is missing keeps its place with a
        null name, so page sizes stay consistent with `total_count`.
        """
        names: Dict[uuid.UUID, str] = {}
        technology_ids = {q.technology_id for q in rows}
        if technology_ids:
            technologies = self.technologies.all(
                self.technologies.active(col(models.Technology.id).in_(technology_ids))
            )
            names = {t.id: t.name for t in technologies}
        return [
            schemas.QuestionListItem(
                id=q.id,
                title=q.title,
                technology_id=q.technology_id,
                technology_name=names.get(q.technology_id),
                difficulty_level=q.difficulty_level,
                created_at=q.created_at,
            )
            for q in rows
        ]

    def get_by_id(self, entity_id: uuid.UUID) -> schemas.QuestionDetail:
        question = self._get_active(entity_id)
        answer = self.answers.first(
            self.answers.active(models.Answer.question_id == entity_id)
            .order_by(col(models.Answer.created_at).asc())
        )
        technology = self.technologies.first(
            self.technologies.active(models.Technology.id == question.technology_id)
        )
        return schemas.QuestionDetail(
            id=question.id,
            title=question.title,
            description=question.description,
            technology_id=question.technology_id,
            technology_name=technology.name if technology else None,
            difficulty_level=question.difficulty_level,
            answer_id=answer.id if answer else None,
            answer_content=answer.content if answer else None,
            created_at=question.created_at,
            updated_at=question.updated_at,
        )

    def create(self, entity: models.Question, commit: bool = True) -> models.Question:
        """Create a question together with its empty companion answer.

        Both rows are written in one transaction.
        """
        self._stamp(entity)
        try:
            self.answers.create(models.Answer(question_id=entity.id, content=""), commit=False)
            created = self.repo.create(entity, commit=commit)
        except Exception:
            self.session.rollback()
            raise
        if commit:
            logger.info("created question %s with its answer", created.id)
        return created
