"""Tests for ownership scoping strategies."""
import pytest

from taskmanager.core.exceptions import UnauthorizedError
from taskmanager.models.task import Task
from taskmanager.models.user import User
from taskmanager.services.scoping import OwnerScope, SharedScope, scope_for_mode


def test_scope_for_mode():
    assert isinstance(scope_for_mode("multi"), OwnerScope)
    assert isinstance(scope_for_mode("SINGLE"), SharedScope)
    with pytest.raises(ValueError):
        scope_for_mode("both")


def test_owner_scope_compares_ids():
    scope = OwnerScope()
    alice, bob = User(id=1, username="alice"), User(id=2, username="bob")
    task = Task(title="t")

    scope.bind(task, alice)
    assert task.owner_id == 1
    assert scope.owns(task, alice)
    assert not scope.owns(task, bob)
    assert len(scope.restrict(alice)) == 1


def test_owner_scope_requires_identity():
    scope = OwnerScope()
    with pytest.raises(UnauthorizedError):
        scope.restrict(None)
    with pytest.raises(UnauthorizedError):
        scope.bind(Task(title="t"), None)


def test_shared_scope_ignores_identity():
    scope = SharedScope()
    task = Task(title="t", owner_id=7)

    scope.bind(task, None)
    assert task.owner_id is None
    assert scope.owns(task, None)
    assert scope.restrict(None) == []
    assert scope.purge_on_delete_all is True
    assert OwnerScope.purge_on_delete_all is False
