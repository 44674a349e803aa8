"""Ownership scoping strategies for the task lifecycle service.

A scope decides which tasks a requester may see and how a new task is bound
to its creator. ``OwnerScope`` backs the multi-tenant deployment,
``SharedScope`` the single-tenant one.
"""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy.sql.elements import ColumnElement

from taskmanager.core.exceptions import UnauthorizedError
from taskmanager.models.task import Task
from taskmanager.models.user import User


class OwnershipScope:
    """Base scope. Subclasses set the class flags and override the hooks."""

    name = "base"
    # Keyword search also matches the description
    search_description = False
    # Delete-all removes rows instead of stamping deleted_at
    purge_on_delete_all = False

    def restrict(self, owner: Optional[User]) -> List[ColumnElement]:
        """Predicates limiting a query to what ``owner`` may access."""
        raise NotImplementedError

    def owns(self, task: Task, owner: Optional[User]) -> bool:
        """Whether ``owner`` may act on an already loaded task."""
        raise NotImplementedError

    def bind(self, task: Task, owner: Optional[User]) -> None:
        """Attach a new task to its creator."""
        raise NotImplementedError


class OwnerScope(OwnershipScope):
    """Every task belongs to exactly one user; others cannot touch it."""

    name = "multi"
    search_description = True
    purge_on_delete_all = False

    def _require(self, owner: Optional[User]) -> User:
        if owner is None or owner.id is None:
            raise UnauthorizedError("Authentication required")
        return owner

    def restrict(self, owner: Optional[User]) -> List[ColumnElement]:
        return [Task.owner_id == self._require(owner).id]

    def owns(self, task: Task, owner: Optional[User]) -> bool:
        return task.owner_id == self._require(owner).id

    def bind(self, task: Task, owner: Optional[User]) -> None:
        task.owner_id = self._require(owner).id


class SharedScope(OwnershipScope):
    """One shared task list; identity is ignored."""

    name = "single"
    search_description = False
    purge_on_delete_all = True

    def restrict(self, owner: Optional[User]) -> List[ColumnElement]:
        return []

    def owns(self, task: Task, owner: Optional[User]) -> bool:
        return True

    def bind(self, task: Task, owner: Optional[User]) -> None:
        task.owner_id = None


def scope_for_mode(mode: str) -> OwnershipScope:
    """Scope matching a ``TENANCY_MODE`` setting value."""
    if mode.lower() == "single":
        return SharedScope()
    if mode.lower() == "multi":
        return OwnerScope()
    raise ValueError(f"Unknown tenancy mode: {mode!r}")
