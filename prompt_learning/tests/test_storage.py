"""Test the SQLite prompt store and similarity search."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from prompt_learning.storage import PromptRecordRepository
from prompt_learning.storage.models import PromptRecordRow
from prompt_learning.types import PromptMetrics


@pytest.fixture
def repo(test_database):
    session = test_database.get_session()
    yield PromptRecordRepository(session)
    session.close()


def test_save_and_get_round_trip(repo, make_record):
    record = make_record("abc", tags=["coding", "python"])

    repo.save(record, [1.0, 0.0, 0.0])
    loaded = repo.get_by_id("abc")

    assert loaded is not None
    assert loaded.prompt_text == record.prompt_text
    assert loaded.contextualized_text == record.contextualized_text
    assert loaded.tags == ["coding", "python"]
    assert loaded.metrics.success_rate == 0.9
    assert loaded.created_at.tzinfo is not None


def test_get_missing_returns_none(repo):
    assert repo.get_by_id("missing") is None


def test_save_replaces_existing_record(repo, make_record):
    repo.save(make_record("abc", prompt_text="old"), [1.0, 0.0])
    repo.save(make_record("abc", prompt_text="new"), [0.0, 1.0])

    assert repo.count() == 1
    assert repo.get_by_id("abc").prompt_text == "new"


def test_update_metrics(repo, make_record):
    repo.save(make_record("abc"), [1.0, 0.0])
    metrics = PromptMetrics(success_rate=0.5, avg_latency_ms=120.0, observation_count=4)

    assert repo.update_metrics("abc", metrics) is True
    assert repo.update_metrics("missing", metrics) is False

    loaded = repo.get_by_id("abc").metrics
    assert loaded.success_rate == 0.5
    assert loaded.avg_latency_ms == 120.0
    assert loaded.observation_count == 4


def test_delete(repo, make_record):
    repo.save(make_record("abc"), [1.0, 0.0])

    assert repo.delete("abc") is True
    assert repo.delete("abc") is False
    assert repo.count() == 0


def test_list_all_filters_by_domain_and_time(repo, make_record):
    now = datetime.now(UTC)
    repo.save(make_record("old", created_at=now - timedelta(days=40)), [1.0, 0.0])
    repo.save(make_record("recent", created_at=now - timedelta(days=1)), [1.0, 0.0])
    repo.save(make_record("legal", domain="legal"), [1.0, 0.0])

    assert {r.id for r in repo.list_all()} == {"old", "recent", "legal"}
    assert [r.id for r in repo.list_all(domain="legal")] == ["legal"]
    assert {r.id for r in repo.list_all(since=now - timedelta(days=30))} == {"recent", "legal"}


def test_search_ranks_by_similarity(repo, make_record):
    repo.save(make_record("close"), [1.0, 0.1])
    repo.save(make_record("exact"), [1.0, 0.0])
    repo.save(make_record("far"), [0.2, 1.0])

    results = repo.search([1.0, 0.0], top_k=2)

    assert [r.id for r in results] == ["exact", "close"]
    assert results[0].similarity_score == pytest.approx(1.0)
    assert all(0 < r.similarity_score <= 1 for r in results)
    assert results[0].record.id == "exact"


def test_search_drops_non_positive_similarity(repo, make_record):
    repo.save(make_record("orthogonal"), [0.0, 1.0])
    repo.save(make_record("opposite"), [-1.0, 0.0])

    assert repo.search([1.0, 0.0]) == []


def test_search_filters_by_performance_and_domain(repo, make_record):
    repo.save(make_record("weak", success_rate=0.4), [1.0, 0.0])
    repo.save(make_record("strong", success_rate=0.9), [1.0, 0.0])
    repo.save(make_record("legal", success_rate=0.9, domain="legal"), [1.0, 0.0])

    assert {r.id for r in repo.search([1.0, 0.0], min_performance=0.7)} == {"strong", "legal"}
    assert [r.id for r in repo.search([1.0, 0.0], domain="legal")] == ["legal"]


def test_search_dimension_mismatch_returns_empty(repo, make_record):
    repo.save(make_record("abc"), [1.0, 0.0, 0.0])

    assert repo.search([1.0, 0.0]) == []


def test_search_database_error_returns_empty(repo, monkeypatch):
    def broken_query(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(repo.session, "query", broken_query)

    assert repo.search([1.0, 0.0]) == []


def test_rows_store_flattened_metrics(test_database, make_record):
    with test_database.session_scope() as session:
        PromptRecordRepository(session).save(make_record("abc", success_rate=0.8), [1.0])

    with test_database.session_scope() as session:
        row = session.get(PromptRecordRow, "abc")
        assert row.success_rate == 0.8
        assert row.embedding == [1.0]
