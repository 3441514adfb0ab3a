"""HTTP controllers for the question bank entities.

All four entities expose the same six endpoints, so the routers are
produced by `build_crud_router`. Handlers are thin: they call the
service, project the result and wrap it in the response envelope.
Failures are converted at this boundary and never propagate:

- `NotFoundError` -> 404 with the service's message
- anything else  -> logged, 500 with a generic message
"""

import logging
import uuid
from typing import Optional, Type

from fastapi import APIRouter, Depends
from sqlmodel import Session

from . import responses, schemas, services
from .database import get_session
from .responses import Message

logger = logging.getLogger("app.api")


def build_crud_router(prefix: str, service_class: Type[services.BaseService],
                      in_schema: Type[schemas.CamelModel],
                      filter_schema: Type[schemas.Filter] = schemas.Filter) -> APIRouter:
    """Create the list/get/create/update/delete router for one entity."""
    router = APIRouter(prefix=prefix, tags=[service_class.entity_name])
    name = service_class.entity_name.lower()

    def to_entity(service: services.BaseService, payload: schemas.CamelModel):
        return service.model(**payload.model_dump())

    @router.get("")
    def get_all(db: Session = Depends(get_session)):
        """Return every record that is not soft-deleted."""
        try:
            service = service_class(db)
            rows = service.get_all()
            return responses.succeeded([service.read_schema.model_validate(r) for r in rows])
        except Exception:
            logger.exception("listing all %s records failed", name)
            return responses.failed()

    @router.post("/list")
    def get_list(filter: Optional[filter_schema] = None, db: Session = Depends(get_session)):
        """Return one page of records matching the filter body."""
        filter = filter or filter_schema()
        try:
            page = service_class(db).get_list(filter)
            meta = schemas.PaginationMeta(
                page_index=page.page_index,
                page_size=page.page_size,
                total_count=page.total_count,
            )
            return responses.succeeded(page.items, pagination=meta)
        except Exception:
            logger.exception("listing %s page failed", name)
            return responses.failed()

    @router.get("/{entity_id}")
    def get_by_id(entity_id: uuid.UUID, db: Session = Depends(get_session)):
        try:
            return responses.succeeded(service_class(db).get_by_id(entity_id))
        except services.NotFoundError as exc:
            return responses.not_found(str(exc))
        except Exception:
            logger.exception("fetching %s %s failed", name, entity_id)
            return responses.failed()

    @router.post("")
    def create(payload: in_schema, db: Session = Depends(get_session)):
        try:
            service = service_class(db)
            created = service.create(to_entity(service, payload))
            return responses.succeeded(service.read_schema.model_validate(created), Message.ADD_SUCCESS)
        except Exception:
            logger.exception("creating %s failed", name)
            return responses.failed()

    @router.put("/{entity_id}")
    def update(entity_id: uuid.UUID, payload: in_schema, db: Session = Depends(get_session)):
        try:
            service = service_class(db)
            updated = service.update(entity_id, to_entity(service, payload))
            return responses.succeeded(service.read_schema.model_validate(updated), Message.UPDATE_SUCCESS)
        except services.NotFoundError as exc:
            return responses.not_found(str(exc))
        except Exception:
            logger.exception("updating %s %s failed", name, entity_id)
            return responses.failed()

    @router.delete("/{entity_id}")
    def delete(entity_id: uuid.UUID, db: Session = Depends(get_session)):
        """Soft-delete a record; 404 with `data: false` when there is nothing to delete."""
        try:
            if service_class(db).delete(entity_id):
                return responses.succeeded(True, Message.DELETE_SUCCESS)
            return responses.not_found(data=False)
        except Exception:
            logger.exception("deleting %s %s failed", name, entity_id)
            return responses.failed()

    return router


technology_router = build_crud_router("/api/technology", services.TechnologyService, schemas.TechnologyIn)
question_router = build_crud_router(
    "/api/question", services.QuestionService, schemas.QuestionIn, schemas.QuestionFilter
)
answer_router = build_crud_router("/api/answer", services.AnswerService, schemas.AnswerIn)
asset_router = build_crud_router("/api/asset", services.AssetService, schemas.AssetIn)
