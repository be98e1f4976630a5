import pytest

from src.internship_tracker.internship_tracker.core.enums import Role
from src.internship_tracker.internship_tracker.core.exceptions import AuthorizationError, NotFoundError
from src.internship_tracker.internship_tracker.identity.model import Caller
from src.internship_tracker.internship_tracker.scoping.sql import scope_clauses
from src.internship_tracker.internship_tracker.scoping.visibility import (
    ScopeFilter,
    check_reviewer,
    check_row_access,
    hidden_error,
    scope_for,
)

ADMIN = Caller(user_id=1, identifier="admin", role=Role.ADMIN)
MENTOR = Caller(user_id=2, identifier="mentor", role=Role.SUPERVISOR)
STUDENT = Caller(user_id=3, identifier="s001", role=Role.STUDENT)


def test_scope_for_each_role():
    assert scope_for(ADMIN).unrestricted
    assert scope_for(MENTOR) == ScopeFilter(supervisor_id=2)
    assert scope_for(STUDENT) == ScopeFilter(user_id=3)


def test_student_scope_only_allows_own_rows():
    scope = scope_for(STUDENT)

    assert scope.allows(3, None)
    assert not scope.allows(4, None)
    assert not scope.allows(4, 2)


def test_supervisor_scope_follows_link():
    scope = scope_for(MENTOR)

    assert scope.allows(3, 2)
    assert not scope.allows(3, None)
    assert not scope.allows(3, 9)


def test_hidden_error_depends_on_role():
    assert isinstance(hidden_error(STUDENT), NotFoundError)
    assert isinstance(hidden_error(MENTOR), AuthorizationError)


def test_check_reviewer():
    check_reviewer(ADMIN, owner_id=3, owner_supervisor_id=None)
    check_reviewer(MENTOR, owner_id=3, owner_supervisor_id=2)

    with pytest.raises(AuthorizationError):
        check_reviewer(MENTOR, owner_id=3, owner_supervisor_id=5)
    with pytest.raises(AuthorizationError):
        check_reviewer(STUDENT, owner_id=4, owner_supervisor_id=None)


def test_nobody_reviews_own_row():
    with pytest.raises(AuthorizationError):
        check_reviewer(MENTOR, owner_id=2, owner_supervisor_id=2)
    with pytest.raises(AuthorizationError):
        check_reviewer(ADMIN, owner_id=1, owner_supervisor_id=None)


def test_own_row_is_always_readable():
    check_row_access(MENTOR, owner_id=2, owner_supervisor_id=None)
    check_row_access(STUDENT, owner_id=3, owner_supervisor_id=2)

    with pytest.raises(AuthorizationError):
        check_row_access(MENTOR, owner_id=4, owner_supervisor_id=None)
    with pytest.raises(NotFoundError):
        check_row_access(STUDENT, owner_id=4, owner_supervisor_id=2)


def test_scope_clauses():
    assert scope_clauses(ScopeFilter(), owner_column="u.user_id", supervisor_column="p.supervisor_id") == ([], [])
    assert scope_clauses(ScopeFilter(user_id=3), owner_column="u.user_id", supervisor_column="p.supervisor_id") == (
        ["u.user_id=%s"],
        [3],
    )
    assert scope_clauses(ScopeFilter(supervisor_id=2), owner_column="u.user_id", supervisor_column="p.supervisor_id") == (
        ["p.supervisor_id=%s"],
        [2],
    )
