"""Repository classes encapsulating database operations.

`BaseRepository` implements the data access every table needs; the
per-entity subclasses only bind the model. Repositories return SQLModel
objects and perform commits/refreshes where appropriate. They do not
apply the soft-delete filter: that is the services' job.
"""

import uuid
from typing import Generic, List, Optional, Type, TypeVar
from sqlmodel import Session, select
from sqlmodel.sql.expression import SelectOfScalar
from sqlalchemy import func
from . import models

ModelT = TypeVar("ModelT", bound=models.BaseField)

# columns never overwritten by `update`
IMMUTABLE_FIELDS = ("id", "created_at")


class BaseRepository(Generic[ModelT]):
    """CRUD operations for one table."""
    model: Type[ModelT]

    def __init__(self, session: Session):
        self.session = session

    def get_all(self) -> List[ModelT]:
        """Return every row, soft-deleted ones included."""
        return list(self.session.exec(select(self.model)).all())

    def where(self, *conditions) -> SelectOfScalar[ModelT]:
        """Return a deferred select restricted by `conditions`.

        Nothing is executed; chain further `.where`, `.order_by`,
        `.offset` or `.limit` calls and run it with `all`, `first`
        or `count`.
        """
        stmt = select(self.model)
        if conditions:
            stmt = stmt.where(*conditions)
        return stmt

    def all(self, stmt: SelectOfScalar[ModelT]) -> List[ModelT]:
        return list(self.session.exec(stmt).all())

    def first(self, stmt: SelectOfScalar[ModelT]) -> Optional[ModelT]:
        return self.session.exec(stmt).first()

    def count(self, stmt: SelectOfScalar[ModelT]) -> int:
        """Count the rows `stmt` would return, ignoring its ordering."""
        subquery = stmt.order_by(None).subquery()
        return self.session.exec(select(func.count()).select_from(subquery)).one()

    def get(self, entity_id: uuid.UUID) -> Optional[ModelT]:
        """Fetch a row by primary key."""
        return self.session.get(self.model, entity_id)

    def create(self, entity: ModelT, commit: bool = True) -> ModelT:
        """Persist a new row and return the managed instance.

        With `commit=False` the row is only flushed so the caller can
        commit several writes as one transaction.
        """
        self.session.add(entity)
        if not commit:
            self.session.flush()
            return entity
        self._commit()
        self.session.refresh(entity)
        return entity

    def update(self, entity_id: uuid.UUID, entity: ModelT) -> Optional[ModelT]:
        """Overwrite the stored row's mutable columns with `entity`'s values.

        Returns `None` when no row has `entity_id`.
        """
        existing = self.get(entity_id)
        if existing is None:
            return None
        if entity is not existing:
            for name in self.model.model_fields:
                if name in IMMUTABLE_FIELDS:
                    continue
                setattr(existing, name, getattr(entity, name))
        self.session.add(existing)
        self._commit()
        self.session.refresh(existing)
        return existing

    def delete(self, entity_id: uuid.UUID) -> bool:
        """Physically remove a row. Returns False if it did not exist."""
        existing = self.get(entity_id)
        if existing is None:
            return False
        self.session.delete(existing)
        self._commit()
        return True

    def _commit(self):
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise


class TechnologyRepository(BaseRepository[models.Technology]):
    model = models.Technology


class QuestionRepository(BaseRepository[models.Question]):
    model = models.Question


class AnswerRepository(BaseRepository[models.Answer]):
    model = models.Answer


class AssetRepository(BaseRepository[models.Asset]):
    model = models.Asset
