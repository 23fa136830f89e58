# tests/conftest.py
from datetime import datetime, timezone
import pytest

from progress_tracker.core.errors import NotFoundError
from progress_tracker.core.models import AllRecords, ProgressRecord, SingleStudent


def _ts(day: str) -> datetime:
    return datetime.fromisoformat(day).replace(tzinfo=timezone.utc)


class InMemoryStore:
    """Stockage factice : mêmes opérations que ProgressAPI, en mémoire."""

    def __init__(self, records=None):
        self.rows = {r.id: r for r in (records or [])}
        self.fetches = []
        self.created = []
        self.updated = []
        self.deleted = []
        self.fail_next = None
        self._next_id = 1000

    def _maybe_fail(self):
        if self.fail_next is not None:
            error, self.fail_next = self.fail_next, None
            raise error

    def fetch(self, scope):
        self.fetches.append(scope)
        self._maybe_fail()
        if isinstance(scope, SingleStudent):
            return [r for r in self.rows.values() if r.student_id == scope.student_id]
        assert isinstance(scope, AllRecords)
        return list(self.rows.values())

    def create(self, record):
        self._maybe_fail()
        self._next_id += 1
        created = record.copy(id=f"p-{self._next_id}", recorded_by="teacher-1")
        self.rows[created.id] = created
        self.created.append(created)
        return created

    def update(self, record_id, fields):
        self._maybe_fail()
        if record_id not in self.rows:
            raise NotFoundError("Progress entry not found")
        changes = {
            attr: fields[wire]
            for attr, wire in (
                ("topic", "topic"),
                ("assessment_type", "assessmentType"),
                ("score", "score"),
                ("notes", "notes"),
                ("student_name", "studentName"),
                ("class_name", "className"),
            )
            if wire in fields
        }
        self.rows[record_id] = self.rows[record_id].copy(**changes)
        self.updated.append((record_id, dict(fields)))
        return None

    def delete(self, record_id):
        self._maybe_fail()
        if record_id not in self.rows:
            raise NotFoundError("Progress entry not found")
        del self.rows[record_id]
        self.deleted.append(record_id)


@pytest.fixture
def make_record():
    """Fabrique de relevés avec des valeurs par défaut raisonnables."""
    counter = {"n": 0}

    def factory(**overrides):
        counter["n"] += 1
        values = {
            "id": f"p{counter['n']}",
            "student_id": "s1",
            "topic": "Algebra",
            "score": 80,
            "assessment_type": "general",
        }
        if "recorded_at" in overrides and isinstance(overrides["recorded_at"], str):
            overrides["recorded_at"] = _ts(overrides["recorded_at"])
        values.update(overrides)
        return ProgressRecord(**values)

    return factory


@pytest.fixture
def sample_records(make_record):
    """Deux classes, trois étudiants, trois thèmes."""
    return [
        make_record(student_id="s1", student_name="Alice", class_name="CM1", topic="Algebra",
                    score=80, assessment_type="general", recorded_at="2024-06-01"),
        make_record(student_id="s2", student_name="Bruno", class_name="CM2", topic="Geometry",
                    score=55, assessment_type="exam", recorded_at="2024-06-03"),
        make_record(student_id="s1", student_name="Alice", class_name="CM1", topic="Algebra",
                    score=90, assessment_type="exam", recorded_at="2024-06-10"),
        make_record(student_id="s3", student_name="Chloé", topic="Reading",
                    score=70, assessment_type="essay", recorded_at="2024-05-20"),
        make_record(student_id="s2", student_name="Bruno", class_name="CM2", topic="Algebra",
                    score=62, assessment_type=None, recorded_at="2024-06-20"),
    ]


@pytest.fixture
def store(sample_records):
    return InMemoryStore(sample_records)
