# tests/test_scope.py
import pytest

from progress_tracker.core.errors import AuthorizationError
from progress_tracker.core.models import AllRecords, Role, SingleStudent
from progress_tracker.core.scope import AccessScopeResolver
from progress_tracker.core.view import ProgressView


@pytest.fixture
def resolver():
    return AccessScopeResolver()


class TestResolve:
    def test_teacher_without_request_sees_all(self, resolver):
        assert resolver.resolve("teacher", "t1") == AllRecords()

    def test_teacher_can_target_any_student(self, resolver):
        assert resolver.resolve(Role.TEACHER, "t1", "s2") == SingleStudent("s2")

    def test_student_is_self_scoped(self, resolver):
        assert resolver.resolve("student", "s1") == SingleStudent("s1", self_scoped=True)
        assert resolver.resolve("student", "s1", "s1") == SingleStudent("s1", self_scoped=True)

    def test_student_requesting_someone_else(self, resolver):
        with pytest.raises(AuthorizationError):
            resolver.resolve("student", "s1", "s2")

    def test_student_without_identity(self, resolver):
        with pytest.raises(AuthorizationError):
            resolver.resolve("student", None)

    def test_unknown_role(self, resolver):
        with pytest.raises(AuthorizationError):
            resolver.resolve("admin", "x1")


class TestAuthorizeMutation:
    def test_teacher_allowed(self, resolver):
        resolver.authorize_mutation("teacher")

    def test_student_refused(self, resolver):
        with pytest.raises(AuthorizationError):
            resolver.authorize_mutation(Role.STUDENT)


class TestRestrict:
    def test_foreign_records_dropped_for_self_scope(self, sample_records):
        kept = AccessScopeResolver.restrict(SingleStudent("s1", self_scoped=True), sample_records)
        assert kept
        assert all(r.student_id == "s1" for r in kept)

    def test_teacher_scopes_untouched(self, sample_records):
        assert AccessScopeResolver.restrict(AllRecords(), sample_records) == sample_records
        assert AccessScopeResolver.restrict(SingleStudent("s1"), sample_records) == sample_records


class TestStudentFetch:
    def test_foreign_request_makes_no_network_call(self, store):
        view = ProgressView(store, "student", "s1")

        with pytest.raises(AuthorizationError):
            view.load("s2")
        assert store.fetches == []
        assert view.scope is None

    def test_student_never_receives_foreign_records(self, store):
        # Un stockage défaillant renvoie tout, quel que soit le périmètre
        store.fetch = lambda scope: list(store.rows.values())
        view = ProgressView(store, "student", "s2")

        records = view.load()
        assert records
        assert {r.student_id for r in records} == {"s2"}
