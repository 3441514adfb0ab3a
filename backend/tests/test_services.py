import logging
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from app import models, repositories, schemas, services


def _naive_now():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _make_tech(session, name="Go", description=None):
    return services.TechnologyService(session).create(
        models.Technology(name=name, description=description, technology_type=models.TechnologyType.LANGUAGE)
    )


def _make_question(session, title, technology_id, difficulty=models.DifficultyLevel.EASY):
    return services.QuestionService(session).create(
        models.Question(title=title, technology_id=technology_id, difficulty_level=difficulty)
    )


def test_create_assigns_identity_and_timestamps(session):
    svc = services.AssetService(session)
    incoming_id = uuid.uuid4()
    asset = svc.create(models.Asset(id=incoming_id, parent_id=uuid.uuid4(), file_name="diagram.png", is_deleted=True))
    assert asset.id != incoming_id
    assert asset.is_deleted is False
    assert asset.updated_at is None
    assert asset.created_at.replace(tzinfo=None) <= _naive_now()
    fetched = svc.get_by_id(asset.id)
    assert fetched.file_name == "diagram.png"
    assert fetched.parent_id == asset.parent_id


def test_get_by_id_missing_raises(session):
    with pytest.raises(services.NotFoundError, match="Technology not found"):
        services.TechnologyService(session).get_by_id(uuid.uuid4())


def test_soft_delete_hides_record_but_keeps_row(session):
    svc = services.TechnologyService(session)
    tech = _make_tech(session)
    assert svc.delete(tech.id) is True
    with pytest.raises(services.NotFoundError):
        svc.get_by_id(tech.id)
    assert svc.get_all() == []
    assert svc.get_list(schemas.Filter()).total_count == 0
    rows = repositories.TechnologyRepository(session).get_all()
    assert len(rows) == 1
    assert rows[0].is_deleted is True
    assert rows[0].updated_at is not None


def test_delete_twice_or_missing_returns_false(session):
    svc = services.AnswerService(session)
    answer = svc.create(models.Answer(question_id=uuid.uuid4(), content="text"))
    assert svc.delete(answer.id) is True
    stamp = repositories.AnswerRepository(session).get(answer.id).updated_at
    assert svc.delete(answer.id) is False
    assert repositories.AnswerRepository(session).get(answer.id).updated_at == stamp
    assert svc.delete(uuid.uuid4()) is False


def test_update_preserves_id_and_created_at(session):
    svc = services.TechnologyService(session)
    tech = _make_tech(session, "Go")
    created_at = tech.created_at
    updated = svc.update(
        tech.id,
        models.Technology(name="Golang", description="compiled", technology_type=models.TechnologyType.LANGUAGE),
    )
    assert updated.id == tech.id
    assert updated.name == "Golang"
    assert updated.description == "compiled"
    assert updated.created_at == created_at
    assert updated.updated_at is not None
    assert updated.updated_at.replace(tzinfo=None) >= created_at.replace(tzinfo=None)


def test_update_deleted_record_raises(session):
    svc = services.TechnologyService(session)
    tech = _make_tech(session)
    svc.delete(tech.id)
    with pytest.raises(services.NotFoundError):
        svc.update(tech.id, models.Technology(name="Again"))


def test_question_create_adds_one_empty_answer(session):
    tech = _make_tech(session)
    question = _make_question(session, "What is a goroutine?", tech.id)
    answers = repositories.AnswerRepository(session).get_all()
    assert len(answers) == 1
    assert answers[0].question_id == question.id
    assert answers[0].content == ""


def test_question_create_rolls_back_answer_on_failure(session, monkeypatch):
    def fail(self, entity, commit=True):
        raise RuntimeError("insert failed")

    monkeypatch.setattr(repositories.QuestionRepository, "create", fail)
    with pytest.raises(RuntimeError):
        _make_question(session, "orphan?", uuid.uuid4())
    assert repositories.AnswerRepository(session).get_all() == []


def test_question_detail_joins_technology_and_answer(session):
    go = _make_tech(session, "Go")
    question = _make_question(session, "What is a goroutine?", go.id)
    detail = services.QuestionService(session).get_by_id(question.id)
    assert detail.title == "What is a goroutine?"
    assert detail.technology_id == go.id
    assert detail.technology_name == "Go"
    assert detail.answer_content == ""
    assert detail.answer_id is not None


def test_question_detail_tolerates_missing_joins(session):
    question = _make_question(session, "Dangling?", uuid.uuid4())
    answer = repositories.AnswerRepository(session).get_all()[0]
    services.AnswerService(session).delete(answer.id)
    detail = services.QuestionService(session).get_by_id(question.id)
    assert detail.technology_name is None
    assert detail.answer_id is None
    assert detail.answer_content is None


def test_question_list_search_scenario(session):
    go = _make_tech(session, "Go")
    _make_question(session, "What is a goroutine?", go.id)
    page = services.QuestionService(session).get_list(
        schemas.QuestionFilter(query="go", page_index=1, page_size=10)
    )
    assert page.total_count == 1
    assert page.items[0].title == "What is a goroutine?"
    assert page.items[0].technology_name == "Go"


def test_question_list_keeps_dangling_technology(session):
    go = _make_tech(session, "Go")
    _make_question(session, "Known", go.id)
    _make_question(session, "Unknown", uuid.uuid4())
    page = services.QuestionService(session).get_list(schemas.QuestionFilter(page_size=10))
    assert page.total_count == 2
    by_title = {item.title: item for item in page.items}
    assert by_title["Known"].technology_name == "Go"
    assert by_title["Unknown"].technology_name is None


def test_question_list_filters_by_technology_and_difficulty(session):
    go = _make_tech(session, "Go")
    rust = _make_tech(session, "Rust")
    _make_question(session, "channels", go.id, models.DifficultyLevel.EASY)
    _make_question(session, "select", go.id, models.DifficultyLevel.HARD)
    _make_question(session, "borrowing", rust.id, models.DifficultyLevel.HARD)
    svc = services.QuestionService(session)
    by_tech = svc.get_list(schemas.QuestionFilter(technology_id=go.id))
    assert by_tech.total_count == 2
    hard_go = svc.get_list(schemas.QuestionFilter(technology_id=go.id, difficulty_level=models.DifficultyLevel.HARD))
    assert [q.title for q in hard_go.items] == ["select"]


def test_pagination_remainder_and_past_the_end(session, ticking_clock):
    svc = services.TechnologyService(session)
    for i in range(7):
        _make_tech(session, f"tech-{i}")
    first = svc.get_list(schemas.Filter(page_index=1, page_size=3))
    assert [t.name for t in first.items] == ["tech-6", "tech-5", "tech-4"]
    last = svc.get_list(schemas.Filter(page_index=3, page_size=3))
    assert [t.name for t in last.items] == ["tech-0"]
    assert last.total_count == 7
    beyond = svc.get_list(schemas.Filter(page_index=4, page_size=3))
    assert beyond.items == []
    assert beyond.total_count == 7
    assert beyond.page_index == 4


def test_technology_search_matches_name_or_description(session):
    _make_tech(session, "PostgreSQL", "relational database")
    _make_tech(session, "Redis", "in-memory store")
    _make_tech(session, "Go", None)
    svc = services.TechnologyService(session)
    assert [t.name for t in svc.get_list(schemas.Filter(query="Postgre")).items] == ["PostgreSQL"]
    assert [t.name for t in svc.get_list(schemas.Filter(query="memory")).items] == ["Redis"]


def test_technology_list_counts_live_questions(session):
    go = _make_tech(session, "Go")
    _make_tech(session, "Rust")
    q1 = _make_question(session, "one", go.id)
    _make_question(session, "two", go.id)
    services.QuestionService(session).delete(q1.id)
    page = services.TechnologyService(session).get_list(schemas.Filter())
    counts = {t.name: t.question_count for t in page.items}
    assert counts == {"Go": 1, "Rust": 0}


def test_date_filter_keeps_newer_records(session):
    _make_tech(session, "Go")
    svc = services.TechnologyService(session)
    past = datetime.now(timezone.utc) - timedelta(days=1)
    future = datetime.now(timezone.utc) + timedelta(days=1)
    assert svc.get_list(schemas.Filter(date=past)).total_count == 1
    assert svc.get_list(schemas.Filter(date=future)).total_count == 0


def test_answer_and_asset_search_fields(session):
    answers = services.AnswerService(session)
    answers.create(models.Answer(question_id=uuid.uuid4(), content="Goroutines are green threads"))
    answers.create(models.Answer(question_id=uuid.uuid4(), content="Ownership rules"))
    assert answers.get_list(schemas.Filter(query="green")).total_count == 1
    assets = services.AssetService(session)
    assets.create(models.Asset(parent_id=uuid.uuid4(), file_name="scheduler.png", file_type="image/png"))
    assets.create(models.Asset(parent_id=uuid.uuid4(), file_name=None))
    assert [a.file_name for a in assets.get_list(schemas.Filter(query="sched")).items] == ["scheduler.png"]


def test_search_treats_like_wildcards_literally(session):
    _make_tech(session, "axb")
    _make_tech(session, "1000 ideas")
    _make_tech(session, "a_b tooling")
    _make_tech(session, "100% coverage")
    svc = services.TechnologyService(session)
    assert [t.name for t in svc.get_list(schemas.Filter(query="a_b")).items] == ["a_b tooling"]
    assert [t.name for t in svc.get_list(schemas.Filter(query="100%")).items] == ["100% coverage"]
    questions = services.QuestionService(session)
    _make_question(session, "what does 50% mean", uuid.uuid4())
    _make_question(session, "what does 500 mean", uuid.uuid4())
    assert [q.title for q in questions.get_list(schemas.QuestionFilter(query="50%")).items] == ["what does 50% mean"]


def test_service_without_search_cannot_be_built(session):
    class IncompleteService(services.BaseService[models.Asset]):
        repository_class = repositories.AssetRepository
        read_schema = schemas.AssetRead

    with pytest.raises(TypeError):
        IncompleteService(session)


def test_failed_question_create_logs_no_answer(session, monkeypatch, caplog):
    def fail(self, entity, commit=True):
        raise RuntimeError("insert failed")

    monkeypatch.setattr(repositories.QuestionRepository, "create", fail)
    caplog.set_level(logging.INFO, logger="app.services")
    with pytest.raises(RuntimeError):
        _make_question(session, "orphan?", uuid.uuid4())
    assert not [r for r in caplog.records if r.getMessage().startswith("created")]


def test_question_create_logs_once_after_commit(session, caplog):
    caplog.set_level(logging.INFO, logger="app.services")
    question = _make_question(session, "logged?", uuid.uuid4())
    created = [r.getMessage() for r in caplog.records if r.getMessage().startswith("created")]
    assert created == [f"created question {question.id} with its answer"]
